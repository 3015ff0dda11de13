"""Scoring helpers for translation quality reports."""

from typing import List, Sequence, Tuple

from ..models.quality_report import QualityBreakdown, QualityLevel, ValidationRecord

# Weights quoted to the reviewer model; the model returns the weighted score
CRITERIA_WEIGHTS = {
    "accuracy": 0.30,
    "cultural": 0.25,
    "natural": 0.25,
    "technical": 0.20,
}

EXCELLENT_THRESHOLD = 9.0
GOOD_THRESHOLD = 7.5
ACCEPTABLE_THRESHOLD = 6.0

NEUTRAL_SCORE = 5.0

# Checked top to bottom; first match wins
ASSESSMENT_LADDER: List[Tuple[Tuple[str, ...], float]] = [
    (("excellent", "perfect"), 9.5),
    (("very good", "good"), 8.0),
    (("acceptable", "adequate"), 6.5),
    (("poor", "bad"), 3.0),
    (("failed", "error"), 0.0),
]


def assessment_score(assessment: str) -> float:
    """
    Map a free-text criterion assessment to a 0-10 estimate.

    Args:
        assessment: Reviewer text such as "Good, accurate terminology"

    Returns:
        Score from the keyword ladder, or 5.0 when no keyword matches
    """
    lowered = (assessment or "").lower()
    for keywords, score in ASSESSMENT_LADDER:
        if any(keyword in lowered for keyword in keywords):
            return score
    return NEUTRAL_SCORE


def quality_level_for(score: float) -> QualityLevel:
    """Categorical level for an average score."""
    if score >= EXCELLENT_THRESHOLD:
        return QualityLevel.EXCELLENT
    if score >= GOOD_THRESHOLD:
        return QualityLevel.GOOD
    if score >= ACCEPTABLE_THRESHOLD:
        return QualityLevel.ACCEPTABLE
    return QualityLevel.NEEDS_IMPROVEMENT


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def aggregate(records: Sequence[ValidationRecord]) -> Tuple[float, QualityBreakdown]:
    """
    Average the sampled scores.

    Returns:
        Tuple of (average overall score, per-criterion breakdown)
    """
    if not records:
        return 0.0, QualityBreakdown()

    average = _mean([record.score for record in records])
    breakdown = QualityBreakdown(
        accuracy=_mean([assessment_score(r.accuracy) for r in records]),
        cultural=_mean([assessment_score(r.cultural) for r in records]),
        natural=_mean([assessment_score(r.natural) for r in records]),
        technical=_mean([assessment_score(r.technical) for r in records]),
    )
    return average, breakdown
