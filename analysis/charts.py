# charts.py - Chart recommendations from a dataset profile
# Ordered rule table: pie -> bar -> line -> comparison, capped at MAX_CHARTS
"""
charts.py - Chart Planning

Proposes up to MAX_CHARTS chart specifications for a DatasetProfile. The
planner never looks at raw rows, only at the profile.

Rules run in table order and their output is concatenated, so the table
defines both precedence and which charts survive truncation:

    1. pie         categorical column with 2-15 distinct values
    2. bar         categorical column with 2-20 distinct values
    3. line        first 3 numeric columns, when at least 2 exist
    4. comparison  first 2 numeric columns, when at least 2 exist
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, NamedTuple

from analysis.statistics import CategoricalProfile, DatasetProfile


# =============================================================================
# CONSTANTS
# =============================================================================

MAX_CHARTS = 6

PIE_MIN_CATEGORIES = 2
PIE_MAX_CATEGORIES = 15
BAR_MIN_CATEGORIES = 2
BAR_MAX_CATEGORIES = 20

MIN_NUMERIC_COLUMNS = 2
LINE_MAX_COLUMNS = 3


class ChartKind(str, Enum):
    PIE = "pie"
    BAR = "bar"
    LINE = "line"
    COMPARISON = "comparison"


@dataclass(frozen=True)
class ChartSpec:
    """Declarative description of one recommended chart."""
    kind: ChartKind
    columns: tuple[str, ...]
    title: str
    description: str

    @property
    def column(self) -> str:
        """Primary column (the only one for pie/bar charts)."""
        return self.columns[0]

    def to_dict(self) -> dict:
        payload = {
            "type": self.kind.value,
            "title": self.title,
            "description": self.description,
        }
        if self.kind in (ChartKind.PIE, ChartKind.BAR):
            payload["column"] = self.column
        else:
            payload["columns"] = list(self.columns)
        return payload


# =============================================================================
# RULES
# =============================================================================

class ChartRule(NamedTuple):
    """A named predicate over the profile paired with the specs it yields."""
    name: str
    applies: Callable[[DatasetProfile], bool]
    build: Callable[[DatasetProfile], Iterable[ChartSpec]]


def _categorical_in_range(profile: DatasetProfile, low: int, high: int) -> list[tuple[str, CategoricalProfile]]:
    return [
        (name, cat) for name, cat in profile.categorical.items()
        if low <= cat.unique_count <= high
    ]


def _has_pie_candidates(profile: DatasetProfile) -> bool:
    return bool(_categorical_in_range(profile, PIE_MIN_CATEGORIES, PIE_MAX_CATEGORIES))


def _pie_specs(profile: DatasetProfile) -> list[ChartSpec]:
    return [
        ChartSpec(
            kind=ChartKind.PIE,
            columns=(name,),
            title=f"{name} Distribution",
            description=(
                f"Shows the breakdown of {cat.total} records "
                f"across {cat.unique_count} categories"
            ),
        )
        for name, cat in _categorical_in_range(profile, PIE_MIN_CATEGORIES, PIE_MAX_CATEGORIES)
    ]


def _has_bar_candidates(profile: DatasetProfile) -> bool:
    return bool(_categorical_in_range(profile, BAR_MIN_CATEGORIES, BAR_MAX_CATEGORIES))


def _bar_specs(profile: DatasetProfile) -> list[ChartSpec]:
    return [
        ChartSpec(
            kind=ChartKind.BAR,
            columns=(name,),
            title=f"{name} Frequency",
            description=f"Count of occurrences for each {name}",
        )
        for name, _ in _categorical_in_range(profile, BAR_MIN_CATEGORIES, BAR_MAX_CATEGORIES)
    ]


def _has_numeric_pair(profile: DatasetProfile) -> bool:
    return len(profile.numeric) >= MIN_NUMERIC_COLUMNS


def _line_specs(profile: DatasetProfile) -> list[ChartSpec]:
    tracked = tuple(profile.numeric)[:LINE_MAX_COLUMNS]
    return [
        ChartSpec(
            kind=ChartKind.LINE,
            columns=tracked,
            title=f"Numeric Trends: {', '.join(tracked)}",
            description="Shows the progression of numeric values across records",
        )
    ]


def _comparison_specs(profile: DatasetProfile) -> list[ChartSpec]:
    first, second = tuple(profile.numeric)[:2]
    return [
        ChartSpec(
            kind=ChartKind.COMPARISON,
            columns=(first, second),
            title=f"{first} vs {second}",
            description="Comparison of two numeric variables",
        )
    ]


CHART_RULES: tuple[ChartRule, ...] = (
    ChartRule("pie", _has_pie_candidates, _pie_specs),
    ChartRule("bar", _has_bar_candidates, _bar_specs),
    ChartRule("line", _has_numeric_pair, _line_specs),
    ChartRule("comparison", _has_numeric_pair, _comparison_specs),
)


# =============================================================================
# PLANNER
# =============================================================================

def plan(
    profile: DatasetProfile,
    rules: Iterable[ChartRule] = CHART_RULES,
    max_charts: int = MAX_CHARTS,
) -> list[ChartSpec]:
    """
    Recommend charts for a profiled dataset.

    Args:
        profile: Output of profile_dataset()
        rules: Ordered rule table, CHART_RULES by default
        max_charts: Cap on the number of specs returned

    Returns:
        Ordered list of at most max_charts ChartSpec. Datasets without
        qualifying columns simply yield fewer (possibly zero) charts.
    """
    specs: list[ChartSpec] = []
    for rule in rules:
        if rule.applies(profile):
            specs.extend(rule.build(profile))
        if len(specs) >= max_charts:
            break
    return specs[:max_charts]
