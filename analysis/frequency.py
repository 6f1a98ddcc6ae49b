# frequency.py - Ranked frequency tables for categorical summaries & charts
"""
frequency.py - Frequency Projection

Tallies stringified cell values and ranks them by count. Ties keep the order
in which values were first seen (Python's sort is stable and dicts keep
insertion order). Percentages are taken against every non-empty cell of the
column, not just the rows that survive truncation.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Iterable

from analysis.dataset import is_empty_cell, stringify_cell


# =============================================================================
# CONSTANTS
# =============================================================================

DEFAULT_LIMIT = 10
MAX_LABEL_LENGTH = 20
LABEL_ELLIPSIS = "..."


@dataclass(frozen=True)
class FrequencyPoint:
    """One slice of a pie or bar chart."""
    label: str
    value: int
    percentage: float

    def to_dict(self) -> dict:
        return asdict(self)


# =============================================================================
# TALLY & PROJECTION
# =============================================================================

def tally(values: Iterable[Any]) -> tuple[dict[str, int], int]:
    """
    Count stringified non-empty values.

    Returns:
        (counts in first-seen order, number of non-empty values)
    """
    counts: dict[str, int] = {}
    total = 0
    for value in values:
        if is_empty_cell(value):
            continue
        key = stringify_cell(value)
        counts[key] = counts.get(key, 0) + 1
        total += 1
    return counts, total


def rank(counts: dict[str, int]) -> list[tuple[str, int]]:
    """Sort (key, count) pairs by descending count, ties in first-seen order."""
    return sorted(counts.items(), key=lambda item: item[1], reverse=True)


def truncate_label(label: str, max_length: int = MAX_LABEL_LENGTH) -> str:
    if len(label) > max_length:
        return label[:max_length] + LABEL_ELLIPSIS
    return label


def project(values: Iterable[Any], limit: int | None = DEFAULT_LIMIT) -> list[FrequencyPoint]:
    """
    Reduce a column to a ranked, size-limited frequency table.

    Args:
        values: Raw cells of one column
        limit: Maximum number of entries; None keeps them all

    Returns:
        list of FrequencyPoint(label, value, percentage), most frequent first
    """
    counts, total = tally(values)
    if total == 0:
        return []

    ranked = rank(counts)
    if limit is not None:
        ranked = ranked[:max(limit, 0)]

    return [
        FrequencyPoint(
            label=truncate_label(key),
            value=count,
            percentage=round(count / total * 100, 1),
        )
        for key, count in ranked
    ]
