"""Data models for quality validation, retranslation and run summaries."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from .translation_result import LanguageTranslationResult


class QualityLevel(str, Enum):
    """Categorical quality of a language's sampled translations."""

    EXCELLENT = "EXCELLENT"
    GOOD = "GOOD"
    ACCEPTABLE = "ACCEPTABLE"
    NEEDS_IMPROVEMENT = "NEEDS_IMPROVEMENT"
    NO_TRANSLATIONS = "NO_TRANSLATIONS"


class RetranslationStatus(str, Enum):
    """States of the validate/retranslate feedback loop."""

    ACCEPTABLE = "ACCEPTABLE"
    BELOW_THRESHOLD = "BELOW_THRESHOLD"
    RETRANSLATING = "RETRANSLATING"
    IMPROVED = "IMPROVED"
    FAILED_KEPT_ORIGINAL = "FAILED_KEPT_ORIGINAL"
    SKIPPED = "SKIPPED"  # nothing translated, nothing to validate

    @property
    def terminal(self) -> bool:
        return self in (
            RetranslationStatus.ACCEPTABLE,
            RetranslationStatus.IMPROVED,
            RetranslationStatus.FAILED_KEPT_ORIGINAL,
            RetranslationStatus.SKIPPED,
        )


@dataclass
class QualityBreakdown:
    """Mean per-criterion estimates (0-10)."""

    accuracy: float = 0.0
    cultural: float = 0.0
    natural: float = 0.0
    technical: float = 0.0

    def to_dict(self) -> Dict[str, float]:
        return {
            "accuracy": self.accuracy,
            "cultural": self.cultural,
            "natural": self.natural,
            "technical": self.technical,
        }


@dataclass
class ValidationRecord:
    """Score and assessment for one sampled translation."""

    record_id: object
    english_text: str
    translated_text: str
    score: float  # 0-10
    accuracy: str
    cultural: str
    natural: str
    technical: str
    issues: str
    recommendation: str

    def to_dict(self) -> dict:
        return {
            "id": self.record_id,
            "englishText": self.english_text,
            "translatedText": self.translated_text,
            "score": self.score,
            "accuracy": self.accuracy,
            "cultural": self.cultural,
            "natural": self.natural,
            "technical": self.technical,
            "issues": self.issues,
            "recommendation": self.recommendation,
        }


@dataclass
class LanguageQualityReport:
    """Sampled quality estimate for one language."""

    language_code: str
    language_name: str
    sample_size: int
    total_translated: int
    average_score: float
    quality_level: QualityLevel
    breakdown: QualityBreakdown = field(default_factory=QualityBreakdown)
    validation_records: List[ValidationRecord] = field(default_factory=list)

    def __post_init__(self):
        if self.sample_size > self.total_translated:
            raise ValueError(
                f"sample_size ({self.sample_size}) exceeds total_translated "
                f"({self.total_translated}) for {self.language_code}"
            )

    @classmethod
    def empty(cls, language_code: str, language_name: str) -> "LanguageQualityReport":
        """Zero-score report for a language with nothing to validate."""
        return cls(
            language_code=language_code,
            language_name=language_name,
            sample_size=0,
            total_translated=0,
            average_score=0.0,
            quality_level=QualityLevel.NO_TRANSLATIONS,
        )

    def low_scoring(self, threshold: float) -> List[ValidationRecord]:
        return [r for r in self.validation_records if r.score < threshold]

    def to_dict(self) -> dict:
        return {
            "languageCode": self.language_code,
            "languageName": self.language_name,
            "sampleSize": self.sample_size,
            "totalTranslations": self.total_translated,
            "averageScore": self.average_score,
            "qualityLevel": self.quality_level.value,
            "qualityBreakdown": self.breakdown.to_dict(),
            "validationResults": [r.to_dict() for r in self.validation_records],
        }


@dataclass
class RetranslationOutcome:
    """Terminal state of the feedback loop for one language."""

    language_code: str
    status: RetranslationStatus
    original_report: LanguageQualityReport
    final_report: Optional[LanguageQualityReport] = None
    issues: List[str] = field(default_factory=list)
    retranslated_count: int = 0
    restored: bool = False

    @property
    def original_score(self) -> float:
        return self.original_report.average_score

    @property
    def final_score(self) -> float:
        report = self.final_report or self.original_report
        return report.average_score

    @property
    def report(self) -> LanguageQualityReport:
        """The report describing the translations currently stored."""
        if self.final_report is None or self.restored:
            return self.original_report
        return self.final_report

    def to_dict(self) -> dict:
        data = {
            "status": self.status.value,
            "originalScore": self.original_score,
            "finalScore": self.final_score,
            "retranslatedCount": self.retranslated_count,
            "restoredOriginal": self.restored,
            "issues": self.issues,
        }
        if self.final_report:
            data["finalReport"] = self.final_report.to_dict()
        return data


ERROR_STATUS = "error"


@dataclass
class LanguageRunResult:
    """Everything one language pass produced."""

    language_code: str
    language_name: str
    status: str
    translation: Optional[LanguageTranslationResult] = None
    retranslation: Optional[RetranslationOutcome] = None
    error: Optional[str] = None

    @property
    def report(self) -> Optional[LanguageQualityReport]:
        if self.retranslation is None:
            return None
        return self.retranslation.report

    def to_dict(self) -> dict:
        data = {
            "languageCode": self.language_code,
            "languageName": self.language_name,
            "status": self.status,
        }
        if self.translation:
            data["translation"] = self.translation.to_dict()
        if self.retranslation:
            data.update(self.retranslation.report.to_dict())
            data["retranslation"] = self.retranslation.to_dict()
        if self.error:
            data["error"] = self.error
        return data


@dataclass
class RunSummary:
    """Aggregate of all language passes in one run."""

    started_at: str = field(default_factory=lambda: datetime.now().isoformat())
    finished_at: Optional[str] = None
    results: List[LanguageRunResult] = field(default_factory=list)

    @property
    def total_translated(self) -> int:
        return sum(r.translation.translated_count for r in self.results if r.translation)

    @property
    def total_processed(self) -> int:
        return sum(r.translation.missing_count for r in self.results if r.translation)

    @property
    def success_rate(self) -> float:
        if not self.total_processed:
            return 0.0
        return self.total_translated / self.total_processed * 100

    @property
    def reports(self) -> List[LanguageQualityReport]:
        return [r.report for r in self.results if r.report is not None]

    @property
    def total_validations(self) -> int:
        return sum(report.sample_size for report in self.reports)

    @property
    def overall_score(self) -> float:
        """Sample-weighted mean of the per-language averages."""
        total = self.total_validations
        if not total:
            return 0.0
        return sum(r.average_score * r.sample_size for r in self.reports) / total

    @property
    def quality_distribution(self) -> Dict[str, int]:
        counts = {
            "excellent": 0,
            "good": 0,
            "acceptable": 0,
            "needsImprovement": 0,
        }
        keys = {
            QualityLevel.EXCELLENT: "excellent",
            QualityLevel.GOOD: "good",
            QualityLevel.ACCEPTABLE: "acceptable",
            QualityLevel.NEEDS_IMPROVEMENT: "needsImprovement",
        }
        for report in self.reports:
            key = keys.get(report.quality_level)
            if key:
                counts[key] += 1
        return counts

    def count_status(self, status) -> int:
        value = status.value if isinstance(status, Enum) else status
        return sum(1 for r in self.results if r.status == value)

    @property
    def error_count(self) -> int:
        return self.count_status(ERROR_STATUS)

    def to_dict(self) -> dict:
        return {
            "timestamp": self.finished_at or self.started_at,
            "startedAt": self.started_at,
            "overallScore": self.overall_score,
            "totalValidations": self.total_validations,
            "qualityDistribution": self.quality_distribution,
            "totalTranslated": self.total_translated,
            "totalProcessed": self.total_processed,
            "retranslation": {
                "improved": self.count_status(RetranslationStatus.IMPROVED),
                "failedKeptOriginal": self.count_status(RetranslationStatus.FAILED_KEPT_ORIGINAL),
            },
            "errors": self.error_count,
            "languageResults": [r.to_dict() for r in self.results],
        }
