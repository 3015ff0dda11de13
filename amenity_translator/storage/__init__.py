"""Source data loading and artifact writing."""

from .amenity_source import AmenitySource, sample_records
from .amenity_writer import AmenityWriter
from .report_writer import ReportWriter

__all__ = ["AmenitySource", "sample_records", "AmenityWriter", "ReportWriter"]
