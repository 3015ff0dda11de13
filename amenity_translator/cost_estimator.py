"""Rough token and cost estimate for the outstanding translation work."""

import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from .models.amenity import AmenityRecord, LanguageSpec

# USD per 1K tokens
DEFAULT_PRICING: Dict[str, Dict[str, float]] = {
    "gpt-3.5-turbo": {"input": 0.0015, "output": 0.002},
    "gpt-4": {"input": 0.03, "output": 0.06},
}

BASE_PROMPT_TOKENS = 200  # instructions and formatting per call
PER_ITEM_OVERHEAD = 50
SAMPLE_TEXTS = 10


def estimate_tokens(text: str) -> int:
    """About one token per four characters of English."""
    if not text:
        return 5
    return math.ceil(len(text) / 4)


@dataclass
class CostEstimate:
    """Estimated cost of translating every missing item."""

    missing_by_language: Dict[str, int] = field(default_factory=dict)
    total_batches: int = 0
    total_tokens: int = 0
    cost_by_model: Dict[str, float] = field(default_factory=dict)

    @property
    def total_missing(self) -> int:
        return sum(self.missing_by_language.values())

    def cost_per_translation(self, model: str) -> float:
        if not self.total_missing:
            return 0.0
        return self.cost_by_model.get(model, 0.0) / self.total_missing


def calculate_cost(tokens: int, rates: Dict[str, float]) -> float:
    """Cost of ``tokens`` billed once as input and once as output."""
    return tokens * rates["input"] / 1000 + tokens * rates["output"] / 1000


def estimate_cost(
    records: Sequence[AmenityRecord],
    languages: Sequence[LanguageSpec],
    batch_size: int = 10,
    pricing: Optional[Dict[str, Dict[str, float]]] = None,
) -> CostEstimate:
    """
    Estimate tokens and cost for translating all missing items.

    Args:
        records: Record set to inspect
        languages: Languages that will be translated
        batch_size: Items per call
        pricing: Model -> {"input", "output"} USD per 1K tokens

    Returns:
        CostEstimate (empty costs when nothing is missing)
    """
    pricing = pricing or DEFAULT_PRICING
    estimate = CostEstimate()

    for language in languages:
        missing = sum(1 for record in records if not record.has_translation(language.code))
        if missing:
            estimate.missing_by_language[language.code] = missing
            estimate.total_batches += math.ceil(missing / max(1, batch_size))

    if not estimate.total_missing:
        return estimate

    texts: List[str] = [r.english_text for r in records[:SAMPLE_TEXTS] if r.english_text.strip()]
    average_length = sum(len(t) for t in texts) / len(texts) if texts else 20
    per_item = estimate_tokens("x" * int(average_length)) + PER_ITEM_OVERHEAD

    tokens_per_batch = BASE_PROMPT_TOKENS + per_item * batch_size
    estimate.total_tokens = tokens_per_batch * estimate.total_batches

    for model, rates in pricing.items():
        estimate.cost_by_model[model] = calculate_cost(estimate.total_tokens, rates)

    return estimate
