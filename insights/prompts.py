# prompts.py - Insight request payloads & prompt text
"""
prompts.py - Insight Requests

Builds the request handed to the text-generation capability:

- Dataset-level: column names, row count, sample rows, full profile
- Point-level: chart kind, column, one data point, row count, column profile

The capability itself is any `async (InsightRequest) -> str` callable.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable

from analysis.charts import ChartSpec
from analysis.dataset import Dataset
from analysis.statistics import DatasetProfile
from analysis.validators import sanitize_for_json


# =============================================================================
# CONSTANTS
# =============================================================================

DATASET_SAMPLE_ROWS = 5
PROMPT_SAMPLE_ROWS = 3
DATASET_MAX_TOKENS = 1000
POINT_MAX_TOKENS = 300

DATASET_SYSTEM_PROMPT = (
    "You are a data analyst. Describe datasets precisely and reference the "
    "numbers you are given."
)
POINT_SYSTEM_PROMPT = (
    "You are a data analyst explaining a single chart data point to a "
    "business user. Be specific and actionable."
)


@dataclass(frozen=True)
class InsightRequest:
    """One call to the text-generation service."""
    kind: str  # "dataset" | "point"
    prompt: str
    max_tokens: int
    system_prompt: str | None = None
    payload: dict[str, Any] = field(default_factory=dict)


Completion = Callable[[InsightRequest], Awaitable[str]]


def _dumps(obj: Any) -> str:
    return json.dumps(sanitize_for_json(obj), ensure_ascii=False)


# =============================================================================
# REQUEST BUILDERS
# =============================================================================

def build_dataset_request(dataset: Dataset, profile: DatasetProfile) -> InsightRequest:
    """Request for a whole-dataset narrative with a structured JSON block."""
    columns = list(dataset.columns)
    payload = {
        "columns": columns,
        "rowCount": dataset.row_count,
        "sampleRows": dataset.head(DATASET_SAMPLE_ROWS),
        "statistics": profile,
    }

    prompt = f"""Analyze this CSV data and provide intelligent insights. Here's the data summary:

Columns: {", ".join(columns)}
Total Rows: {dataset.row_count}
Sample Data: {_dumps(dataset.head(PROMPT_SAMPLE_ROWS))}
Statistics: {_dumps(profile)}

Please provide:
1. What type of data is this? (e.g., sales data, employee data, survey results, etc.)
2. Key insights and patterns you notice
3. Notable trends or anomalies
4. Recommendations for further analysis
5. What the data reveals about the subject

Format your response as JSON with these keys: dataType, keyInsights (array), trends (array), recommendations (array), summary"""

    return InsightRequest(
        kind="dataset",
        prompt=prompt,
        max_tokens=DATASET_MAX_TOKENS,
        system_prompt=DATASET_SYSTEM_PROMPT,
        payload=sanitize_for_json(payload),
    )


def build_point_request(
    spec: ChartSpec,
    point: Any,
    total_rows: int,
    profile: DatasetProfile,
) -> InsightRequest:
    """Request for a 2-3 sentence comment on one hovered chart point."""
    column = spec.column
    column_stats = profile.column(column)
    payload = {
        "chartType": spec.kind.value,
        "column": column,
        "dataPoint": point,
        "totalRows": total_rows,
        "columnStats": column_stats,
    }

    prompt = f"""Provide a brief insight about this data point from a {spec.kind.value} chart:

Column: {column}
Data Point: {_dumps(point)}
Total Records: {total_rows}
Column Statistics: {_dumps(column_stats)}

Give a 2-3 sentence insight about what this data point means, its significance, or any interesting pattern. Be specific and actionable."""

    return InsightRequest(
        kind="point",
        prompt=prompt,
        max_tokens=POINT_MAX_TOKENS,
        system_prompt=POINT_SYSTEM_PROMPT,
        payload=sanitize_for_json(payload),
    )
