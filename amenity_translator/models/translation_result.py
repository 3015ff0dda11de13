"""Data models for translation results."""

from dataclasses import dataclass, field
from typing import List


@dataclass
class TranslationBatchResult:
    """Outcome of a single batch call."""

    language_code: str
    batch_size: int
    success_count: int
    attempts: int = 1


@dataclass
class LanguageTranslationResult:
    """Per-language fold of batch results."""

    language_code: str
    language_name: str
    missing_count: int = 0
    batches: List[TranslationBatchResult] = field(default_factory=list)
    already_complete: bool = False

    @property
    def translated_count(self) -> int:
        return sum(batch.success_count for batch in self.batches)

    @property
    def failed_count(self) -> int:
        return self.missing_count - self.translated_count

    @property
    def success_rate(self) -> float:
        """Percentage of missing items translated in this pass."""
        if not self.missing_count:
            return 0.0
        return self.translated_count / self.missing_count * 100

    def to_dict(self) -> dict:
        return {
            "languageCode": self.language_code,
            "languageName": self.language_name,
            "missing": self.missing_count,
            "translated": self.translated_count,
            "failed": self.failed_count,
            "batches": len(self.batches),
            "alreadyComplete": self.already_complete,
        }
