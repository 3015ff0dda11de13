"""Hotel amenity translation pipeline with LLM quality validation."""

__version__ = "0.1.0"
