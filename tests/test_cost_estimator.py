import pytest

from amenity_translator.cost_estimator import (
    BASE_PROMPT_TOKENS,
    PER_ITEM_OVERHEAD,
    calculate_cost,
    estimate_cost,
    estimate_tokens,
)
from amenity_translator.models.amenity import LanguageSpec


def test_estimate_tokens():
    assert estimate_tokens("") == 5
    assert estimate_tokens("abcd") == 1
    assert estimate_tokens("abcde") == 2


def test_calculate_cost_bills_input_and_output():
    assert calculate_cost(1000, {"input": 0.0015, "output": 0.002}) == pytest.approx(0.0035)


def test_nothing_missing_costs_nothing(make_records):
    records = make_records("Safe")
    records[0].set_translation("es", "Caja fuerte")

    estimate = estimate_cost(records, [LanguageSpec("es", "Spanish")])

    assert estimate.total_missing == 0
    assert estimate.total_tokens == 0
    assert estimate.cost_by_model == {}
    assert estimate.cost_per_translation("gpt-4") == 0.0


def test_batches_counted_per_language(make_records):
    records = make_records(*["abcdefgh"] * 12)
    records[0].set_translation("fr", "x")
    languages = [LanguageSpec("es", "Spanish"), LanguageSpec("fr", "French")]

    estimate = estimate_cost(records, languages, batch_size=10)

    assert estimate.missing_by_language == {"es": 12, "fr": 11}
    assert estimate.total_batches == 4
    per_batch = BASE_PROMPT_TOKENS + (2 + PER_ITEM_OVERHEAD) * 10
    assert estimate.total_tokens == per_batch * 4
    assert estimate.cost_by_model["gpt-4"] > estimate.cost_by_model["gpt-3.5-turbo"]
    assert estimate.cost_per_translation("gpt-4") == pytest.approx(estimate.cost_by_model["gpt-4"] / 23)
