"""Lenient parser for numbered-list model output."""

import re
from typing import List

MISSING_TEMPLATE = "[MISSING TRANSLATION {}]"
FAILURE_TEMPLATE = "[TRANSLATION FAILED {}]"

# Matches "1." / "12)" style markers at the start of a line
NUMBER_MARKER = re.compile(r"^\s*\d+\s*[.)]\s*")
SENTINEL_PATTERN = re.compile(r"^\[(?:MISSING TRANSLATION|TRANSLATION FAILED) \d+\]$")

QUOTE_PAIRS = {
    '"': '"',
    "'": "'",
    "“": "”",
    "‘": "’",
    "«": "»",
    "「": "」",
}


def missing_placeholder(slot: int) -> str:
    """Placeholder for a slot the model did not answer (1-based)."""
    return MISSING_TEMPLATE.format(slot)


def failure_sentinel(slot: int) -> str:
    """Sentinel for a slot whose batch exhausted its retries (1-based)."""
    return FAILURE_TEMPLATE.format(slot)


def is_sentinel(text) -> bool:
    """True for blank text or any placeholder produced by this module."""
    if text is None:
        return True
    stripped = str(text).strip()
    if not stripped:
        return True
    return SENTINEL_PATTERN.match(stripped) is not None


def clean_line(line: str) -> str:
    """Strip a leading number marker and one layer of surrounding quotes."""
    cleaned = NUMBER_MARKER.sub("", line.strip(), count=1).strip()
    if len(cleaned) >= 2:
        closing = QUOTE_PAIRS.get(cleaned[0])
        if closing and cleaned.endswith(closing):
            cleaned = cleaned[1:-1].strip()
    return cleaned


def parse_numbered_list(text: str, expected_count: int) -> List[str]:
    """
    Turn a numbered-list blob into exactly ``expected_count`` strings.

    Blank lines are skipped. Lines beyond ``expected_count`` are ignored and
    a short answer is padded with distinct missing placeholders. Never raises:
    model output format is not guaranteed.

    Args:
        text: Raw completion text
        expected_count: Number of items that were sent

    Returns:
        List of translations, in input order
    """
    if expected_count <= 0:
        return []

    lines = [line for line in (text or "").splitlines() if line.strip()]

    results: List[str] = []
    for line in lines[:expected_count]:
        cleaned = clean_line(line)
        results.append(cleaned if cleaned else missing_placeholder(len(results) + 1))

    while len(results) < expected_count:
        results.append(missing_placeholder(len(results) + 1))

    return results
