"""Validate-then-retranslate feedback loop for one language."""

import logging
from typing import List, Sequence, Tuple

from ..config import Config
from ..models.amenity import AmenityRecord
from ..models.quality_report import (
    LanguageQualityReport,
    RetranslationOutcome,
    RetranslationStatus,
)
from ..translation.translator import BatchTranslator
from .quality_validator import VALIDATION_FAILED, QualityValidator

logger = logging.getLogger(__name__)

# Reviewer answers meaning "nothing wrong"
NO_ISSUE_MARKERS = {"none", "none.", "n/a", "na", "no issues", "no issues.", "no issues listed", "-", ""}


def collect_issues(report: LanguageQualityReport, threshold: float) -> List[str]:
    """Issue texts of sampled records scoring below the threshold, deduplicated.

    Records whose scoring call failed carry an error, not a review, and are skipped.
    """
    issues: List[str] = []
    for record in report.low_scoring(threshold):
        if record.accuracy == VALIDATION_FAILED:
            continue
        text = (record.issues or "").strip()
        if text.lower() in NO_ISSUE_MARKERS or text in issues:
            continue
        issues.append(text)
    return issues


class RetranslationController:
    """
    Runs the quality loop for a language.

    States:
        ACCEPTABLE              average >= threshold, nothing to do
        BELOW_THRESHOLD         issues gathered from low-scoring samples
        RETRANSLATING           every translation in the language regenerated
        IMPROVED                re-validation reached the threshold
        FAILED_KEPT_ORIGINAL    re-validation still below; snapshot restored

    The loop runs at most once per call.
    """

    def __init__(
        self,
        translator: BatchTranslator,
        validator: QualityValidator,
        config: Config,
        restore_on_failure: bool = True,
    ):
        """
        Initialize the controller.

        Args:
            translator: Used for the corrective retranslation
            validator: Used for both validation passes
            config: Pipeline configuration (quality threshold, sample size)
            restore_on_failure: Put the pre-retranslation text back when the
                retry does not reach the threshold
        """
        self.translator = translator
        self.validator = validator
        self.threshold = config.quality_threshold
        self.sample_size = config.sample_size
        self.restore_on_failure = restore_on_failure

    def needs_retranslation(self, report: LanguageQualityReport) -> bool:
        """Strictly below the threshold; a score equal to it is acceptable."""
        return report.sample_size > 0 and report.average_score < self.threshold

    def run(
        self,
        records: Sequence[AmenityRecord],
        language_code: str,
        language_name: str,
    ) -> RetranslationOutcome:
        """
        Validate a language and retranslate it once if it scores too low.

        Args:
            records: The full record set (mutated in place)
            language_code: Language to check
            language_name: Display name for prompts

        Returns:
            RetranslationOutcome in a terminal state
        """
        original = self.validator.validate_language(
            records, language_code, language_name, self.sample_size
        )

        if original.sample_size == 0:
            return RetranslationOutcome(
                language_code=language_code,
                status=RetranslationStatus.SKIPPED,
                original_report=original,
            )

        if not self.needs_retranslation(original):
            logger.info(
                "%s: %.2f >= %.2f, no retranslation needed",
                language_code, original.average_score, self.threshold,
            )
            return RetranslationOutcome(
                language_code=language_code,
                status=RetranslationStatus.ACCEPTABLE,
                original_report=original,
            )

        issues = collect_issues(original, self.threshold)
        logger.warning(
            "%s: %s (%.2f < %.2f), %d issue(s) collected",
            language_code, RetranslationStatus.BELOW_THRESHOLD.value,
            original.average_score, self.threshold, len(issues),
        )

        snapshot = self._snapshot(records, language_code)
        logger.info("%s: %s %d records", language_code, RetranslationStatus.RETRANSLATING.value, len(snapshot))
        rewritten = self.translator.retranslate_language(
            records, language_code, language_name, issues
        )

        final = self.validator.validate_language(
            records, language_code, language_name, self.sample_size
        )

        if final.average_score >= self.threshold:
            logger.info(
                "%s: improved %.2f -> %.2f",
                language_code, original.average_score, final.average_score,
            )
            return RetranslationOutcome(
                language_code=language_code,
                status=RetranslationStatus.IMPROVED,
                original_report=original,
                final_report=final,
                issues=issues,
                retranslated_count=rewritten,
            )

        restored = False
        if self.restore_on_failure:
            self._restore(snapshot, language_code)
            restored = True
        logger.warning(
            "%s: retranslation scored %.2f (< %.2f), %s",
            language_code, final.average_score, self.threshold,
            "original translations restored" if restored else "keeping retranslated text",
        )
        return RetranslationOutcome(
            language_code=language_code,
            status=RetranslationStatus.FAILED_KEPT_ORIGINAL,
            original_report=original,
            final_report=final,
            issues=issues,
            retranslated_count=rewritten,
            restored=restored,
        )

    def _snapshot(
        self, records: Sequence[AmenityRecord], language_code: str
    ) -> List[Tuple[AmenityRecord, str]]:
        return [
            (record, record.translations[language_code])
            for record in records
            if record.has_translation(language_code)
        ]

    def _restore(self, snapshot: List[Tuple[AmenityRecord, str]], language_code: str) -> None:
        for record, text in snapshot:
            record.set_translation(language_code, text)
