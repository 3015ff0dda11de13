"""Data models for the amenity translation pipeline."""

from .amenity import AmenityRecord, LanguageSpec
from .translation_result import TranslationBatchResult, LanguageTranslationResult
from .quality_report import (
    QualityLevel,
    QualityBreakdown,
    ValidationRecord,
    LanguageQualityReport,
    RetranslationStatus,
    RetranslationOutcome,
    LanguageRunResult,
    RunSummary,
)

__all__ = [
    "AmenityRecord",
    "LanguageSpec",
    "TranslationBatchResult",
    "LanguageTranslationResult",
    "QualityLevel",
    "QualityBreakdown",
    "ValidationRecord",
    "LanguageQualityReport",
    "RetranslationStatus",
    "RetranslationOutcome",
    "LanguageRunResult",
    "RunSummary",
]
