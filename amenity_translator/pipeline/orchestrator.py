"""Sequences translation and the quality loop across languages."""

import logging
import time
from datetime import datetime
from typing import Callable, Optional, Sequence

from ..config import Config
from ..models.amenity import AmenityRecord, LanguageSpec
from ..models.quality_report import (
    ERROR_STATUS,
    LanguageRunResult,
    RetranslationOutcome,
    RetranslationStatus,
    RunSummary,
)
from ..translation.translator import BatchTranslator
from ..validation.quality_validator import QualityValidator
from ..validation.retranslation import RetranslationController
from .throttle import FixedIntervalThrottle

logger = logging.getLogger(__name__)

TRANSLATED_ONLY = "TRANSLATED"

# progress_callback(current, total, language_code, status)
ProgressCallback = Callable[[int, int, str, str], None]


class RunOrchestrator:
    """
    Runs each language to completion before starting the next.

    Per language: translate missing items, validate a sample, retranslate
    once if below the threshold. A language that raises is recorded with an
    "error" status and the run moves on.
    """

    def __init__(
        self,
        translator: BatchTranslator,
        validator: QualityValidator,
        controller: RetranslationController,
        config: Config,
        sleep: Callable[[float], None] = time.sleep,
        throttle: Optional[FixedIntervalThrottle] = None,
    ):
        self.translator = translator
        self.validator = validator
        self.controller = controller
        self.config = config
        self.throttle = throttle or FixedIntervalThrottle(config.language_delay, sleep=sleep)

    @classmethod
    def from_client(cls, client, config: Config, sleep: Callable[[float], None] = time.sleep, rng=None):
        """Wire translator, validator and controller around one completion client."""
        translator = BatchTranslator(client, config, sleep=sleep)
        validator = QualityValidator(client, config, rng=rng, sleep=sleep)
        controller = RetranslationController(translator, validator, config)
        return cls(translator, validator, controller, config, sleep=sleep)

    def run(
        self,
        records: Sequence[AmenityRecord],
        languages: Optional[Sequence[LanguageSpec]] = None,
        validate: bool = True,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> RunSummary:
        """
        Process every language in order.

        Args:
            records: The full record set (mutated in place)
            languages: Languages to process (defaults to the configured targets)
            validate: Run the quality loop after translating
            progress_callback: Optional callback(current, total, code, status)

        Returns:
            RunSummary covering every language
        """
        specs = list(languages) if languages is not None else self.config.languages()
        summary = RunSummary()

        for index, language in enumerate(specs, start=1):
            self.throttle.wait()
            result = self._run_language(records, language, validate)
            summary.results.append(result)
            if progress_callback:
                progress_callback(index, len(specs), language.code, result.status)

        summary.finished_at = datetime.now().isoformat()
        logger.info(
            "Run finished: %d/%d items translated across %d language(s), %d error(s)",
            summary.total_translated, summary.total_processed, len(specs), summary.error_count,
        )
        return summary

    def validate_only(
        self,
        records: Sequence[AmenityRecord],
        languages: Optional[Sequence[LanguageSpec]] = None,
        sample_size: Optional[int] = None,
    ) -> RunSummary:
        """Validate existing translations without translating or retranslating."""
        specs = list(languages) if languages is not None else self.config.languages()
        summary = RunSummary()

        for language in specs:
            self.throttle.wait()
            try:
                report = self.validator.validate_language(
                    records, language.code, language.display_name, sample_size
                )
            except Exception as e:
                logger.exception("Validation of %s failed", language.code)
                summary.results.append(self._error_result(language, e))
                continue

            status = RetranslationStatus.SKIPPED if report.sample_size == 0 else RetranslationStatus.ACCEPTABLE
            if report.sample_size and self.controller.needs_retranslation(report):
                status = RetranslationStatus.BELOW_THRESHOLD
            summary.results.append(
                LanguageRunResult(
                    language_code=language.code,
                    language_name=language.display_name,
                    status=status.value,
                    retranslation=RetranslationOutcome(
                        language_code=language.code,
                        status=status,
                        original_report=report,
                    ),
                )
            )

        summary.finished_at = datetime.now().isoformat()
        return summary

    def _run_language(
        self,
        records: Sequence[AmenityRecord],
        language: LanguageSpec,
        validate: bool,
    ) -> LanguageRunResult:
        logger.info("Processing %s (%s)", language.code, language.display_name)
        try:
            translation = self.translator.translate_language(
                records, language.code, language.display_name
            )
            if not validate:
                return LanguageRunResult(
                    language_code=language.code,
                    language_name=language.display_name,
                    status=TRANSLATED_ONLY,
                    translation=translation,
                )

            outcome = self.controller.run(records, language.code, language.display_name)
        except Exception as e:
            logger.exception("Processing %s failed", language.code)
            return self._error_result(language, e)

        return LanguageRunResult(
            language_code=language.code,
            language_name=language.display_name,
            status=outcome.status.value,
            translation=translation,
            retranslation=outcome,
        )

    def _error_result(self, language: LanguageSpec, error: Exception) -> LanguageRunResult:
        return LanguageRunResult(
            language_code=language.code,
            language_name=language.display_name,
            status=ERROR_STATUS,
            error=str(error),
        )
