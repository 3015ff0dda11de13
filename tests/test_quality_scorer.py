import pytest

from amenity_translator.models.quality_report import QualityLevel, ValidationRecord
from amenity_translator.validation.quality_scorer import aggregate, assessment_score, quality_level_for


def _record(score, assessment="Good"):
    return ValidationRecord(
        record_id=1,
        english_text="Safe",
        translated_text="Caja fuerte",
        score=score,
        accuracy=assessment,
        cultural=assessment,
        natural=assessment,
        technical=assessment,
        issues="None",
        recommendation="Excellent",
    )


@pytest.mark.parametrize(
    "text, expected",
    [
        ("Excellent terminology", 9.5),
        ("Perfect match", 9.5),
        ("Very good overall", 8.0),
        ("Good", 8.0),
        ("Acceptable but stiff", 6.5),
        ("Adequate", 6.5),
        ("Poor word choice", 3.0),
        ("Bad grammar", 3.0),
        ("Validation failed", 0.0),
        ("Error in response", 0.0),
        ("Mostly fine", 5.0),
        ("", 5.0),
    ],
)
def test_assessment_keyword_ladder(text, expected):
    assert assessment_score(text) == expected


def test_ladder_order_prefers_higher_rungs():
    # "excellent" wins over "poor" because it is checked first
    assert assessment_score("Excellent, not poor at all") == 9.5


@pytest.mark.parametrize(
    "score, level",
    [
        (9.0, QualityLevel.EXCELLENT),
        (10, QualityLevel.EXCELLENT),
        (7.5, QualityLevel.GOOD),
        (8.99, QualityLevel.GOOD),
        (6.0, QualityLevel.ACCEPTABLE),
        (5.99, QualityLevel.NEEDS_IMPROVEMENT),
        (0, QualityLevel.NEEDS_IMPROVEMENT),
    ],
)
def test_quality_level_thresholds(score, level):
    assert quality_level_for(score) == level


def test_average_is_mean_of_sample_scores():
    records = [_record(s) for s in [9, 8, 10, 7, 9]]

    average, _ = aggregate(records)

    assert average == pytest.approx(8.6)


def test_breakdown_averages_keyword_estimates():
    records = [_record(9, "Excellent"), _record(6, "Acceptable")]

    _, breakdown = aggregate(records)

    assert breakdown.accuracy == pytest.approx(8.0)
    assert breakdown.technical == pytest.approx(8.0)


def test_aggregate_of_nothing_is_zero():
    average, breakdown = aggregate([])

    assert average == 0.0
    assert breakdown.cultural == 0.0
