"""Batch translator for amenity phrases."""

import logging
import time
from typing import Callable, List, Optional, Sequence, Tuple

from ..config import Config
from ..errors import CompletionError
from ..models.amenity import AmenityRecord
from ..models.translation_result import LanguageTranslationResult, TranslationBatchResult
from ..pipeline.throttle import FixedIntervalThrottle
from .clients import CompletionClient
from .response_parser import failure_sentinel, is_sentinel, parse_numbered_list
from .retry import complete_with_retry

logger = logging.getLogger(__name__)


class BatchTranslator:
    """
    Translates missing amenity phrases one language at a time.

    Strategy:
    1. Select records without a usable translation for the language
    2. Send them in bounded batches as one numbered list per call
    3. Retry failed calls with exponential backoff
    4. Write back every slot that parsed to real text

    Failed slots stay missing so a later run picks them up again.
    """

    def __init__(
        self,
        client: CompletionClient,
        config: Config,
        sleep: Callable[[float], None] = time.sleep,
        throttle: Optional[FixedIntervalThrottle] = None,
    ):
        """
        Initialize the batch translator.

        Args:
            client: Completion capability used for every batch
            config: Pipeline configuration (batch size, retries, sampling)
            sleep: Sleep function for backoff and throttling
            throttle: Scheduler spacing batch calls (built from config if omitted)
        """
        self.client = client
        self.config = config
        self.sleep = sleep
        self.throttle = throttle or FixedIntervalThrottle(config.batch_delay, sleep=sleep)

    def find_missing(self, records: Sequence[AmenityRecord], language_code: str) -> List[AmenityRecord]:
        """Records with no usable translation for the language."""
        return [record for record in records if not record.has_translation(language_code)]

    def translate_language(
        self,
        records: Sequence[AmenityRecord],
        language_code: str,
        language_name: str,
    ) -> LanguageTranslationResult:
        """
        Translate every record still missing this language.

        Existing non-empty translations are never touched, so calling this
        twice only retries what is still missing.

        Args:
            records: The full record set (mutated in place)
            language_code: Target language code (e.g. "es")
            language_name: Display name used in the prompt

        Returns:
            LanguageTranslationResult with one entry per batch
        """
        missing = self.find_missing(records, language_code)
        result = LanguageTranslationResult(
            language_code=language_code,
            language_name=language_name,
            missing_count=len(missing),
        )

        if not missing:
            logger.info("%s already complete", language_code)
            result.already_complete = True
            return result

        batches = self._partition(missing)
        logger.info(
            "%s (%s): %d missing, %d batch(es)",
            language_code, language_name, len(missing), len(batches),
        )

        for number, batch in enumerate(batches, start=1):
            phrases = [record.english_text for record in batch]
            prompt = self._build_translation_prompt(phrases, language_code, language_name)
            translations, attempts = self._run_batch(prompt, len(batch), language_code, number)

            success_count = 0
            for record, translation in zip(batch, translations):
                if is_sentinel(translation):
                    logger.debug("  %s -> failed", record.english_text)
                    continue
                record.set_translation(language_code, translation)
                success_count += 1

            result.batches.append(
                TranslationBatchResult(
                    language_code=language_code,
                    batch_size=len(batch),
                    success_count=success_count,
                    attempts=attempts,
                )
            )
            logger.info(
                "  batch %d/%d: %d/%d translated",
                number, len(batches), success_count, len(batch),
            )

        logger.info(
            "%s: %d/%d translated successfully",
            language_code, result.translated_count, result.missing_count,
        )
        return result

    def retranslate_language(
        self,
        records: Sequence[AmenityRecord],
        language_code: str,
        language_name: str,
        issues: Sequence[str],
    ) -> int:
        """
        Regenerate every existing translation for a language.

        The prompt carries the English phrases, the current translations and
        the reviewer's issues. Parsed translations overwrite the stored text;
        placeholder slots leave the current text in place.

        Returns:
            Number of records whose translation was rewritten
        """
        targets = [record for record in records if record.has_translation(language_code)]
        rewritten = 0

        for number, batch in enumerate(self._partition(targets), start=1):
            phrases = [record.english_text for record in batch]
            current = [record.translations[language_code] for record in batch]
            prompt = self._build_correction_prompt(
                phrases, current, language_code, language_name, issues
            )
            translations, _ = self._run_batch(prompt, len(batch), language_code, number)

            for record, translation in zip(batch, translations):
                if is_sentinel(translation):
                    continue
                record.set_translation(language_code, translation)
                rewritten += 1

        logger.info("%s: retranslated %d/%d records", language_code, rewritten, len(targets))
        return rewritten

    def _partition(self, records: List[AmenityRecord]) -> List[List[AmenityRecord]]:
        size = max(1, self.config.batch_size)
        return [records[i:i + size] for i in range(0, len(records), size)]

    def _run_batch(
        self, prompt: str, count: int, language_code: str, number: int
    ) -> Tuple[List[str], int]:
        """Call the model for one batch; degrade to failure sentinels on exhaustion."""
        self.throttle.wait()
        try:
            text, attempts = complete_with_retry(
                self.client,
                prompt,
                self.config.temperature,
                self.config.max_tokens,
                self.config,
                sleep=self.sleep,
            )
        except CompletionError as e:
            logger.warning(
                "%s batch %d failed after %d attempts: %s",
                language_code, number, self.config.max_attempts, e,
            )
            return [failure_sentinel(k) for k in range(1, count + 1)], self.config.max_attempts

        return parse_numbered_list(text, count), attempts

    def _build_translation_prompt(
        self, phrases: Sequence[str], language_code: str, language_name: str
    ) -> str:
        """Build the numbered-list translation prompt."""
        numbered = "\n".join(f"{i}. {phrase}" for i, phrase in enumerate(phrases, start=1))
        return f"""You are a professional translator specializing in hotel and hospitality terminology.
Translate the following hotel room amenities from English to {language_name} ({language_code}).

IMPORTANT GUIDELINES:
- Use natural, context-appropriate translations for a hotel booking website
- Maintain the same meaning and tone as the original
- Use proper terminology for hotel amenities
- Keep translations concise and user-friendly
- For items with "(surcharge)" or "(on request)", maintain that context
- Return ONLY the translated list, one translation per line, in the same order

English phrases:
{numbered}

{language_name} translations:
"""

    def _build_correction_prompt(
        self,
        phrases: Sequence[str],
        current: Sequence[str],
        language_code: str,
        language_name: str,
        issues: Sequence[str],
    ) -> str:
        """Build the issue-aware retranslation prompt."""
        pairs = "\n".join(
            f'{i}. "{phrase}" -> "{translation}"'
            for i, (phrase, translation) in enumerate(zip(phrases, current), start=1)
        )
        if issues:
            issue_list = "\n".join(f"- {issue}" for issue in issues)
        else:
            issue_list = "- General quality below the required standard"

        return f"""You are a professional translator specializing in hotel and hospitality terminology.
A reviewer found quality problems in these {language_name} ({language_code}) translations of hotel room amenities.

ISSUES REPORTED BY THE REVIEWER:
{issue_list}

CURRENT TRANSLATIONS (English -> {language_name}):
{pairs}

Produce an improved {language_name} translation for every item:
- Fix the reported issues and any similar problems
- Use natural, native phrasing suitable for a hotel booking website
- Keep "(surcharge)" and "(on request)" context
- Return ONLY the improved translations as a numbered list, one per line, in the same order

Improved {language_name} translations:
"""
