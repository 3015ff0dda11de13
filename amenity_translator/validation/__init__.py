"""Validation modules for translation quality."""

from .quality_scorer import assessment_score, quality_level_for, aggregate
from .quality_validator import QualityValidator, parse_validation_response
from .retranslation import RetranslationController, collect_issues

__all__ = [
    "assessment_score",
    "quality_level_for",
    "aggregate",
    "QualityValidator",
    "parse_validation_response",
    "RetranslationController",
    "collect_issues",
]
