"""Exception taxonomy for the amenity translation pipeline."""


class AmenityTranslatorError(Exception):
    """Base class for all pipeline errors."""


class ConfigurationError(AmenityTranslatorError):
    """A required setting (usually the API key) is missing or invalid."""


class CompletionError(AmenityTranslatorError):
    """A completion call did not produce usable text."""


class ModelUnavailable(CompletionError):
    """The model endpoint could not be reached (network error, timeout)."""


class ModelError(CompletionError):
    """The model endpoint answered with an error or an unusable payload."""


class DataSourceError(AmenityTranslatorError):
    """Source amenity data could not be read."""


class PersistenceError(AmenityTranslatorError):
    """An output artifact could not be written."""
