# series.py - Renderable data series for planned charts
"""
series.py - Chart Series Builder

Turns a ChartSpec into the concrete points a renderer draws:

    pie / bar    ranked FrequencyPoint slices (8 / 10 entries)
    line         {"index", <col>: value, ...} for the first 50 rows; a column
                 is left out of a point when its cell is missing or not numeric
    comparison   {"index", <a>: value, <b>: value} for the first 100 rows,
                 keeping only rows where both cells are numeric; indexes
                 number the kept rows 1, 2, 3, ...

Missing values never abort a series; they only thin it out.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from analysis.charts import ChartKind, ChartSpec
from analysis.dataset import Dataset, coerce_number
from analysis.frequency import FrequencyPoint, project


# =============================================================================
# CONSTANTS
# =============================================================================

PIE_SLICE_LIMIT = 8
BAR_LIMIT = 10
LINE_ROW_LIMIT = 50
COMPARISON_ROW_LIMIT = 100

INDEX_KEY = "index"


@dataclass(frozen=True)
class ChartSeries:
    spec: ChartSpec
    points: tuple[Any, ...]

    def to_dict(self) -> dict:
        return {
            **self.spec.to_dict(),
            "data": [
                p.to_dict() if isinstance(p, FrequencyPoint) else dict(p)
                for p in self.points
            ],
        }


# =============================================================================
# SERIES BUILDERS
# =============================================================================

def frequency_series(dataset: Dataset, column: str, limit: int) -> list[FrequencyPoint]:
    return project(dataset.column_values(column), limit=limit)


def line_series(
    dataset: Dataset,
    columns: tuple[str, ...],
    row_limit: int = LINE_ROW_LIMIT,
) -> list[dict[str, Any]]:
    """
    One point per leading row; points may be sparse across columns.

    A column named like INDEX_KEY is left out so the position is never
    overwritten.
    """
    tracked = [c for c in columns if c != INDEX_KEY]
    points = []
    for position, row in enumerate(dataset.rows[:row_limit], start=1):
        point: dict[str, Any] = {INDEX_KEY: position}
        for column in tracked:
            value = coerce_number(row[column])
            if value is not None:
                point[column] = value
        points.append(point)
    return points


def comparison_series(
    dataset: Dataset,
    first: str,
    second: str,
    row_limit: int = COMPARISON_ROW_LIMIT,
) -> list[dict[str, Any]]:
    """
    Paired values for the leading rows where both columns are numeric.

    Raises:
        ValueError: If either column is named like INDEX_KEY
    """
    if INDEX_KEY in (first, second):
        raise ValueError(f"Column '{INDEX_KEY}' collides with the point index")

    points = []
    for row in dataset.rows[:row_limit]:
        a = coerce_number(row[first])
        b = coerce_number(row[second])
        if a is None or b is None:
            continue
        points.append({INDEX_KEY: len(points) + 1, first: a, second: b})
    return points


def build_series(spec: ChartSpec, dataset: Dataset) -> ChartSeries:
    """
    Realize the data behind one chart specification.

    Args:
        spec: A ChartSpec, typically from charts.plan()
        dataset: The dataset the plan was computed from

    Returns:
        ChartSeries wrapping the spec and its points

    Raises:
        KeyError: If the spec names a column the dataset does not have
    """
    missing = [c for c in spec.columns if c not in dataset.columns]
    if missing:
        raise KeyError(f"Chart '{spec.title}' references unknown column(s): {', '.join(missing)}")

    if spec.kind is ChartKind.PIE:
        points = frequency_series(dataset, spec.column, PIE_SLICE_LIMIT)
    elif spec.kind is ChartKind.BAR:
        points = frequency_series(dataset, spec.column, BAR_LIMIT)
    elif spec.kind is ChartKind.LINE:
        points = line_series(dataset, spec.columns)
    elif spec.kind is ChartKind.COMPARISON:
        first, second = spec.columns[:2]
        points = comparison_series(dataset, first, second)
    else:
        raise ValueError(f"Unsupported chart kind: {spec.kind}")

    return ChartSeries(spec=spec, points=tuple(points))
