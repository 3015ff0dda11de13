"""Configuration management for the amenity translation pipeline."""

import os
from dataclasses import dataclass, field
from typing import Dict, List, Optional
from dotenv import load_dotenv

from .errors import ConfigurationError
from .models.amenity import LanguageSpec

load_dotenv()


# Language display names (for prompts)
LANGUAGE_NAMES: Dict[str, str] = {
    "ar": "Arabic",
    "de": "German",
    "es": "Spanish",
    "es419": "Latin American Spanish",
    "fr": "French",
    "it": "Italian",
    "ja": "Japanese",
    "ko": "Korean",
    "nl": "Dutch",
    "pl": "Polish",
    "pt": "Portuguese",
    "ptBr": "Brazilian Portuguese",
    "ru": "Russian",
    "sv": "Swedish",
    "th": "Thai",
    "vi": "Vietnamese",
    "zhCn": "Simplified Chinese",
    "zhHk": "Traditional Chinese",
    "zhTw": "Taiwan Traditional Chinese",
    "gu": "Gujarati",
    "hi": "Hindi",
    "kn": "Kannada",
    "ml": "Malayalam",
    "mr": "Marathi",
    "or": "Odia",
    "pa": "Punjabi",
    "ta": "Tamil",
    "te": "Telugu",
    "bn": "Bengali",
    "fa": "Persian",
    "ms": "Malay",
}


def _env_languages() -> List[str]:
    raw = os.getenv("TARGET_LANGUAGES", "")
    codes = [code.strip() for code in raw.split(",") if code.strip()]
    return codes or list(LANGUAGE_NAMES.keys())


@dataclass
class Config:
    """Application configuration.

    Built once at startup and handed to every component constructor.
    """

    # API Keys
    openrouter_api_key: str = field(
        default_factory=lambda: os.getenv("OPENROUTER_API_KEY", "")
    )
    base_url: str = field(
        default_factory=lambda: os.getenv("OPENROUTER_BASE_URL", "https://openrouter.ai/api/v1")
    )

    # Translation model settings
    model: str = field(default_factory=lambda: os.getenv("MODEL_NAME", "openai/gpt-3.5-turbo"))
    temperature: float = 0.3
    max_tokens: int = 1000

    # Batch translation settings
    batch_size: int = field(default_factory=lambda: int(os.getenv("BATCH_SIZE", "10")))
    batch_delay: float = 1.0  # seconds between batches
    max_attempts: int = 3
    backoff_min: float = 1.0
    backoff_max: float = 10.0

    # Validation settings
    validation_model: str = field(
        default_factory=lambda: os.getenv("VALIDATION_MODEL", "openai/gpt-3.5-turbo")
    )
    validation_temperature: float = 0.1
    validation_max_tokens: int = 300
    sample_size: int = field(default_factory=lambda: int(os.getenv("SAMPLE_SIZE", "5")))
    validation_delay: float = 1.0
    quality_threshold: float = field(
        default_factory=lambda: float(os.getenv("QUALITY_THRESHOLD", "8.5"))
    )

    # Run settings
    language_delay: float = 1.0
    target_languages: List[str] = field(default_factory=_env_languages)

    # Source data provider
    amenities_api_url: str = field(
        default_factory=lambda: os.getenv("AMENITIES_API_URL", "https://api.example.com")
    )
    amenities_endpoint: str = field(
        default_factory=lambda: os.getenv("AMENITIES_ENDPOINT", "/amenities/rooms")
    )
    request_timeout: float = 30.0

    output_dir: str = field(default_factory=lambda: os.getenv("OUTPUT_DIR", "output"))

    language_names: Dict[str, str] = field(default_factory=lambda: dict(LANGUAGE_NAMES))

    def validate(self) -> List[str]:
        """Validate configuration and return list of errors."""
        errors = []
        if not self.openrouter_api_key:
            errors.append("OPENROUTER_API_KEY is not set")
        if not 0 <= self.quality_threshold <= 10:
            errors.append(
                f"QUALITY_THRESHOLD must be between 0 and 10, got {self.quality_threshold}"
            )
        if self.batch_size < 1:
            errors.append(f"BATCH_SIZE must be positive, got {self.batch_size}")
        if self.max_attempts < 1:
            errors.append(f"max_attempts must be positive, got {self.max_attempts}")
        return errors

    def require_valid(self) -> None:
        """Raise ConfigurationError if the configuration cannot run a pass."""
        errors = self.validate()
        if errors:
            raise ConfigurationError("; ".join(errors))

    def language_name(self, code: str) -> str:
        return self.language_names.get(code, code)

    def languages(self, codes: Optional[List[str]] = None) -> List[LanguageSpec]:
        """Resolve language codes (default: configured targets) to LanguageSpecs."""
        selected = codes if codes is not None else self.target_languages
        return [LanguageSpec(code=code, display_name=self.language_name(code)) for code in selected]
