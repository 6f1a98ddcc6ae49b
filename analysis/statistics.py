# statistics.py - Column summaries & dataset profiling
# Numeric descriptive stats, categorical distributions, dataset profile
"""
statistics.py - Descriptive Statistics Engine

Implements:
    - Numeric summary: mean, median, min, max, sum, count
    - Categorical summary: unique count, most common value, distribution
    - Dataset profile: one summary per column, partitioned by kind

Reported numbers are rounded to 2 decimals; all intermediate arithmetic runs
at full precision. Every function here is pure over its inputs.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, ClassVar, Iterable, Mapping, Union

import numpy as np

from analysis.classifier import ColumnKind, classify
from analysis.dataset import Dataset, coerce_number, is_supported_cell
from analysis.errors import AnalysisError, MalformedColumnError
from analysis.frequency import rank, tally

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

DISPLAY_DECIMALS = 2


def _display(value: float) -> float:
    return round(float(value), DISPLAY_DECIMALS)


# =============================================================================
# PROFILE TYPES
# =============================================================================

@dataclass(frozen=True)
class NumericProfile:
    mean: float
    median: float
    min: float
    max: float
    sum: float
    count: int

    kind: ClassVar[ColumnKind] = ColumnKind.NUMERIC

    def to_dict(self) -> dict:
        return {
            "mean": self.mean,
            "median": self.median,
            "min": self.min,
            "max": self.max,
            "sum": self.sum,
            "count": self.count,
        }


@dataclass(frozen=True)
class CategoricalProfile:
    unique_count: int
    most_common: tuple[str, int] | None
    distribution: Mapping[str, int]
    total: int

    kind: ClassVar[ColumnKind] = ColumnKind.CATEGORICAL

    def to_dict(self) -> dict:
        return {
            "uniqueCount": self.unique_count,
            "mostCommon": list(self.most_common) if self.most_common else None,
            "distribution": dict(self.distribution),
            "total": self.total,
        }


ColumnProfile = Union[NumericProfile, CategoricalProfile]


@dataclass(frozen=True)
class DatasetProfile:
    """Per-column profiles in dataset column order."""

    total_rows: int
    total_columns: int
    columns: Mapping[str, ColumnProfile] = field(default_factory=dict)

    @property
    def numeric(self) -> dict[str, NumericProfile]:
        return {
            name: p for name, p in self.columns.items()
            if isinstance(p, NumericProfile)
        }

    @property
    def categorical(self) -> dict[str, CategoricalProfile]:
        return {
            name: p for name, p in self.columns.items()
            if isinstance(p, CategoricalProfile)
        }

    def column(self, name: str) -> ColumnProfile | None:
        return self.columns.get(name)

    def to_dict(self) -> dict:
        return {
            "totalRows": self.total_rows,
            "totalColumns": self.total_columns,
            "numeric": {name: p.to_dict() for name, p in self.numeric.items()},
            "categorical": {name: p.to_dict() for name, p in self.categorical.items()},
        }


EMPTY_PROFILE = DatasetProfile(total_rows=0, total_columns=0)


# =============================================================================
# NUMERIC SUMMARY
# =============================================================================

def _median(sorted_values: np.ndarray) -> float:
    n = len(sorted_values)
    mid = n // 2
    if n % 2 == 0:
        return (sorted_values[mid - 1] + sorted_values[mid]) / 2
    return sorted_values[mid]


def summarize_numeric(values: Iterable[Any]) -> NumericProfile:
    """
    Descriptive statistics over the numeric-qualifying cells of a column.

    Non-numeric cells are ignored. The column must hold at least one numeric
    cell; classify() guarantees this for NUMERIC columns.

    Raises:
        AnalysisError: If no cell is numeric
    """
    numbers = [n for n in (coerce_number(v) for v in values) if n is not None]
    if not numbers:
        raise AnalysisError("Numeric summary requested for a column with no numeric values")

    ordered = np.sort(np.asarray(numbers, dtype=float))
    count = len(ordered)
    total = float(ordered.sum())

    return NumericProfile(
        mean=_display(total / count),
        median=_display(_median(ordered)),
        min=_display(ordered[0]),
        max=_display(ordered[-1]),
        sum=_display(total),
        count=count,
    )


# =============================================================================
# CATEGORICAL SUMMARY
# =============================================================================

def summarize_categorical(values: Iterable[Any]) -> CategoricalProfile:
    """
    Frequency distribution over the stringified non-empty cells of a column.

    The most common entry is the highest count; ties go to the value seen
    first. An empty column yields unique_count 0 and most_common None.
    """
    counts, total = tally(values)
    ranked = rank(counts)

    return CategoricalProfile(
        unique_count=len(counts),
        most_common=ranked[0] if ranked else None,
        distribution=MappingProxyType(counts),
        total=total,
    )


# =============================================================================
# COLUMN & DATASET PROFILES
# =============================================================================

def profile_column(values: Iterable[Any], column: str | None = None) -> ColumnProfile:
    """
    Classify a column and summarize it accordingly.

    Malformed columns (cells that are not null, number or string) fall back to
    a categorical summary of their well-formed cells.
    """
    values = list(values)
    try:
        kind = classify(values, column=column)
    except MalformedColumnError as e:
        logger.warning("%s; summarizing as categorical", e)
        return summarize_categorical(v for v in values if is_supported_cell(v))

    if kind is ColumnKind.NUMERIC:
        return summarize_numeric(values)
    return summarize_categorical(values)


def profile_dataset(dataset: Dataset) -> DatasetProfile:
    """
    Profile every column of a dataset.

    Args:
        dataset: Loaded Dataset

    Returns:
        DatasetProfile. A dataset with zero rows reports zero rows, zero
        columns and no column profiles.
    """
    if dataset.is_empty:
        logger.debug("Empty dataset; returning zero profile")
        return EMPTY_PROFILE

    profiles: dict[str, ColumnProfile] = {}
    for name in dataset.columns:
        profiles[name] = profile_column(dataset.column_values(name), column=name)

    numeric = sum(1 for p in profiles.values() if isinstance(p, NumericProfile))
    logger.debug(
        "Profiled %d rows: %d numeric, %d categorical column(s)",
        dataset.row_count, numeric, len(profiles) - numeric,
    )

    return DatasetProfile(
        total_rows=dataset.row_count,
        total_columns=dataset.column_count,
        columns=MappingProxyType(profiles),
    )
