"""LLM-based quality validator for amenity translations."""

import logging
import random
import re
import time
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from ..config import Config
from ..errors import CompletionError
from ..models.amenity import AmenityRecord
from ..models.quality_report import LanguageQualityReport, ValidationRecord
from ..pipeline.throttle import FixedIntervalThrottle
from ..translation.clients import CompletionClient
from ..translation.retry import complete_with_retry
from .quality_scorer import aggregate, quality_level_for

logger = logging.getLogger(__name__)

# Bullets, numbering and markdown emphasis allowed before a label
LABEL_PREFIX = r"^[ \t\-*\u2022\d.)#]*"

SCORE_PATTERN = re.compile(
    LABEL_PREFIX + r"(?:overall\s+)?score\b[^:\n]{0,20}?:\s*\**\s*(\d+(?:[.,]\d+)?)",
    re.IGNORECASE | re.MULTILINE,
)

FIELD_DEFAULTS = {
    "accuracy": "No accuracy assessment",
    "cultural": "No cultural assessment",
    "natural": "No natural flow assessment",
    "technical": "No technical assessment",
    "issues": "No issues listed",
    "recommendation": "No recommendation provided",
}

VALIDATION_FAILED = "Validation failed"


def _field_pattern(label: str) -> re.Pattern:
    return re.compile(
        LABEL_PREFIX + rf"{label}\b[^:\n]{{0,30}}?:\s*\**\s*(.+?)\s*$",
        re.IGNORECASE | re.MULTILINE,
    )


FIELD_PATTERNS = {name: _field_pattern(name) for name in FIELD_DEFAULTS}


@dataclass
class ParsedValidation:
    """Labelled fields pulled out of a reviewer response."""

    score: float
    accuracy: str
    cultural: str
    natural: str
    technical: str
    issues: str
    recommendation: str


def parse_validation_response(text: str) -> ParsedValidation:
    """
    Extract the labelled fields from a reviewer response.

    Missing labels fall back to neutral placeholders; a missing score is 0.
    Scores are clamped to 0-10.
    """
    text = text or ""
    match = SCORE_PATTERN.search(text)
    score = float(match.group(1).replace(",", ".")) if match else 0.0
    score = min(10.0, max(0.0, score))

    values = {}
    for name, pattern in FIELD_PATTERNS.items():
        found = pattern.search(text)
        value = found.group(1).strip() if found else ""
        values[name] = value or FIELD_DEFAULTS[name]

    return ParsedValidation(score=score, **values)


class QualityValidator:
    """Samples translations for a language and asks the model to score them."""

    def __init__(
        self,
        client: CompletionClient,
        config: Config,
        rng: Optional[random.Random] = None,
        sleep: Callable[[float], None] = time.sleep,
        throttle: Optional[FixedIntervalThrottle] = None,
    ):
        """
        Initialize the quality validator.

        Args:
            client: Completion capability used for scoring
            config: Pipeline configuration (sample size, temperature, delays)
            rng: Random source for sampling
            sleep: Sleep function for backoff and throttling
            throttle: Scheduler spacing scoring calls
        """
        self.client = client
        self.config = config
        self.rng = rng or random.Random()
        self.sleep = sleep
        self.throttle = throttle or FixedIntervalThrottle(config.validation_delay, sleep=sleep)

    def validate_language(
        self,
        records: Sequence[AmenityRecord],
        language_code: str,
        language_name: str,
        sample_size: Optional[int] = None,
    ) -> LanguageQualityReport:
        """
        Score a random sample of a language's translations.

        Args:
            records: The full record set
            language_code: Language to validate
            language_name: Display name used in the prompt
            sample_size: Records to sample (defaults to config.sample_size)

        Returns:
            LanguageQualityReport; the zero report when nothing is translated
        """
        size = self.config.sample_size if sample_size is None else sample_size
        translated = [record for record in records if record.has_translation(language_code)]

        if not translated:
            logger.warning("No %s translations found for validation", language_name)
            return LanguageQualityReport.empty(language_code, language_name)

        sample = self.rng.sample(translated, min(max(size, 0), len(translated)))
        logger.info(
            "Validating %d random samples out of %d %s translations",
            len(sample), len(translated), language_name,
        )

        validation_records: List[ValidationRecord] = []
        for i, record in enumerate(sample, start=1):
            translation = record.translations[language_code]
            logger.debug("  %d/%d: %r -> %r", i, len(sample), record.english_text, translation)
            validation_records.append(
                self.validate_single(record, translation, language_code, language_name)
            )

        average, breakdown = aggregate(validation_records)
        report = LanguageQualityReport(
            language_code=language_code,
            language_name=language_name,
            sample_size=len(sample),
            total_translated=len(translated),
            average_score=average,
            quality_level=quality_level_for(average),
            breakdown=breakdown,
            validation_records=validation_records,
        )
        logger.info(
            "%s validation complete - average score: %.2f/10 (%s)",
            language_name, report.average_score, report.quality_level.value,
        )
        return report

    def validate_single(
        self,
        record: AmenityRecord,
        translation: str,
        language_code: str,
        language_name: str,
    ) -> ValidationRecord:
        """Score one translation pair; a failed call yields a zero-score record."""
        prompt = self._build_validation_prompt(record.english_text, translation, language_name)

        self.throttle.wait()
        try:
            text, _ = complete_with_retry(
                self.client,
                prompt,
                self.config.validation_temperature,
                self.config.validation_max_tokens,
                self.config,
                sleep=self.sleep,
            )
        except CompletionError as e:
            logger.error("Validation error for %r (%s): %s", record.english_text, language_code, e)
            return ValidationRecord(
                record_id=record.id,
                english_text=record.english_text,
                translated_text=translation,
                score=0.0,
                accuracy=VALIDATION_FAILED,
                cultural=VALIDATION_FAILED,
                natural=VALIDATION_FAILED,
                technical=VALIDATION_FAILED,
                issues=str(e),
                recommendation="Check API configuration",
            )

        parsed = parse_validation_response(text)
        return ValidationRecord(
            record_id=record.id,
            english_text=record.english_text,
            translated_text=translation,
            score=parsed.score,
            accuracy=parsed.accuracy,
            cultural=parsed.cultural,
            natural=parsed.natural,
            technical=parsed.technical,
            issues=parsed.issues,
            recommendation=parsed.recommendation,
        )

    def _build_validation_prompt(self, english_text: str, translation: str, language_name: str) -> str:
        """Build the labelled-format scoring prompt."""
        return f"""You are a professional translation validator specializing in hotel and hospitality terminology.

Please validate the following translation for a hotel booking website:

ORIGINAL ENGLISH: "{english_text}"
TRANSLATED {language_name.upper()}: "{translation}"

VALIDATION CRITERIA:
1. Accuracy (30%): Does the translation convey the same meaning as the original?
2. Cultural Appropriateness (25%): Is the translation suitable for hotel amenities and culturally appropriate?
3. Natural Flow (25%): Does the translation sound natural and native in the target language?
4. Technical Correctness (20%): Are grammar, spelling, and terminology correct?

Please provide your assessment in this exact format:
Score: [1-10] (where 10 is perfect)
Accuracy: [brief assessment]
Cultural: [brief assessment]
Natural: [brief assessment]
Technical: [brief assessment]
Issues: [list any specific issues found, or "None" if perfect]
Recommendation: [specific improvement suggestion, or "Excellent" if perfect]

Guidelines:
- Score 9-10: Excellent translation, minor issues at most
- Score 7-8: Good translation with some room for improvement
- Score 5-6: Acceptable but needs improvement
- Score 1-4: Poor translation with significant issues"""
