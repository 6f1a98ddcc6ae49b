# generator.py - Dataset & data-point insights with graceful degradation
"""
generator.py - Insight Generation

Sends insight requests through an injected completion capability and turns
the reply into a DatasetInsights record. The service is optional: any failure
is logged and replaced with a fixed placeholder, so statistics and charts are
always available.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from typing import Any

from analysis.charts import ChartSpec
from analysis.dataset import Dataset
from analysis.statistics import DatasetProfile
from insights.prompts import Completion, build_dataset_request, build_point_request

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

# Greedy: from the first "{" to the last "}" in the reply
JSON_BLOCK_PATTERN = re.compile(r"\{[\s\S]*\}")

UNKNOWN_DATA_TYPE = "Unknown"
POINT_INSIGHT_UNAVAILABLE = "Unable to generate insight at this moment."


@dataclass(frozen=True)
class DatasetInsights:
    data_type: str
    summary: str
    key_insights: tuple[str, ...] = ()
    trends: tuple[str, ...] = ()
    recommendations: tuple[str, ...] = ()
    available: bool = True

    def to_dict(self) -> dict:
        return {
            "dataType": self.data_type,
            "keyInsights": list(self.key_insights),
            "trends": list(self.trends),
            "recommendations": list(self.recommendations),
            "summary": self.summary,
            "available": self.available,
        }


UNAVAILABLE_INSIGHTS = DatasetInsights(
    data_type="Unable to determine",
    summary="AI analysis is temporarily unavailable. Showing statistical analysis only.",
    key_insights=("Manual analysis available in statistics section",),
    available=False,
)


# =============================================================================
# RESPONSE PARSING
# =============================================================================

def _string_list(value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,) if value.strip() else ()
    if isinstance(value, (list, tuple)):
        return tuple(str(v) for v in value if v is not None and str(v).strip())
    return (str(value),)


def _unstructured(text: str) -> DatasetInsights:
    return DatasetInsights(data_type=UNKNOWN_DATA_TYPE, summary=text.strip())


def parse_insight_response(text: str) -> DatasetInsights:
    """
    Extract the structured block from a service reply.

    Args:
        text: Raw reply, optionally embedding a JSON object with dataType,
            keyInsights, trends, recommendations and summary

    Returns:
        DatasetInsights. Without a decodable JSON object, the whole reply
        becomes the summary and every list is empty.
    """
    match = JSON_BLOCK_PATTERN.search(text or "")
    if not match:
        return _unstructured(text or "")

    try:
        data = json.loads(match.group(0))
    except json.JSONDecodeError:
        logger.debug("Insight reply contains an undecodable JSON block")
        return _unstructured(text)

    if not isinstance(data, dict):
        return _unstructured(text)

    summary = data.get("summary")
    return DatasetInsights(
        data_type=str(data.get("dataType") or UNKNOWN_DATA_TYPE),
        summary=str(summary) if summary is not None else "",
        key_insights=_string_list(data.get("keyInsights")),
        trends=_string_list(data.get("trends")),
        recommendations=_string_list(data.get("recommendations")),
    )


# =============================================================================
# GENERATION
# =============================================================================

async def generate_dataset_insights(
    dataset: Dataset,
    profile: DatasetProfile,
    complete: Completion | None,
) -> DatasetInsights:
    """
    Ask the service for a dataset-level narrative.

    Args:
        dataset: Loaded dataset (sample rows are sent)
        profile: Its DatasetProfile
        complete: Async completion capability; None means no service

    Returns:
        Parsed DatasetInsights, or UNAVAILABLE_INSIGHTS on any failure
    """
    if complete is None:
        return UNAVAILABLE_INSIGHTS

    try:
        text = await complete(build_dataset_request(dataset, profile))
    except Exception as e:
        logger.warning("Dataset insight generation failed: %s", e)
        return UNAVAILABLE_INSIGHTS

    if not isinstance(text, str):
        logger.warning("Insight service returned %s instead of text", type(text).__name__)
        return UNAVAILABLE_INSIGHTS

    return parse_insight_response(text)


async def generate_point_insight(
    spec: ChartSpec,
    point: Any,
    dataset: Dataset,
    profile: DatasetProfile,
    complete: Completion | None,
) -> str:
    """
    Ask the service to comment on one chart data point.

    Returns:
        Reply text, or POINT_INSIGHT_UNAVAILABLE on any failure
    """
    if complete is None:
        return POINT_INSIGHT_UNAVAILABLE

    try:
        text = await complete(build_point_request(spec, point, dataset.row_count, profile))
    except Exception as e:
        logger.warning("Point insight generation failed for %s: %s", spec.title, e)
        return POINT_INSIGHT_UNAVAILABLE

    if not isinstance(text, str) or not text.strip():
        return POINT_INSIGHT_UNAVAILABLE
    return text.strip()
