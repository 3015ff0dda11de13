"""Data models for amenity records and languages."""

from dataclasses import dataclass, field
from typing import Dict, Optional, Any

from ..translation.response_parser import is_sentinel


@dataclass(frozen=True)
class LanguageSpec:
    """A supported target language."""

    code: str
    display_name: str


@dataclass
class AmenityRecord:
    """A single amenity phrase and its translations."""

    id: Any
    english_text: str
    translations: Dict[str, str] = field(default_factory=dict)
    category: Optional[str] = None
    priority: Optional[str] = None

    def has_translation(self, language: str) -> bool:
        """Check if this record has a usable translation for the given language."""
        return not is_sentinel(self.translations.get(language))

    def get_translation(self, language: str) -> Optional[str]:
        """Get the current translation, or None when it is missing."""
        if not self.has_translation(language):
            return None
        return self.translations[language]

    def set_translation(self, language: str, value: str) -> None:
        """Set (overwrite) the translation for the given language."""
        self.translations[language] = value
