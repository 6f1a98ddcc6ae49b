# state.py - Shared AnalysisState schema
# TypedDict passed between pipeline nodes
"""
state.py - Pipeline State Schema

Defines the TypedDict structure passed between LangGraph nodes.
"""

from __future__ import annotations

from typing import Any, Callable, Mapping, Sequence, TypedDict

from analysis.charts import ChartSpec
from analysis.dataset import Dataset
from analysis.series import ChartSeries
from analysis.statistics import DatasetProfile
from insights.generator import DatasetInsights
from insights.prompts import Completion


class AnalysisState(TypedDict, total=False):
    """
    State shared by all pipeline nodes.

    All fields are optional (total=False) to support partial updates.
    """

    # =========================================================================
    # INPUT LAYER
    # =========================================================================
    raw_file: bytes | None  # Uploaded delimited text
    filename: str | None
    records: Sequence[Mapping[str, Any]] | None  # Pre-parsed rows
    columns: Sequence[str] | None  # Header order for records

    # =========================================================================
    # DATA LAYER
    # =========================================================================
    dataset: Dataset | None
    profile: DatasetProfile | None

    # =========================================================================
    # CHART LAYER
    # =========================================================================
    chart_plan: list[ChartSpec] | None
    chart_series: list[ChartSeries] | None

    # =========================================================================
    # INSIGHT LAYER
    # =========================================================================
    insights: DatasetInsights | None
    warnings: list[str]

    # =========================================================================
    # OUTPUT LAYER
    # =========================================================================
    dashboard: dict | None  # JSON-safe payload for a renderer

    # =========================================================================
    # CONTROL LAYER
    # =========================================================================
    current_node: str | None
    progress: float  # 0.0 - 1.0
    progress_message: str | None

    # =========================================================================
    # ERROR LAYER
    # =========================================================================
    error: str | None
    error_type: str | None
    failed_node: str | None
    partial_results: bool
    recovery_hint: str | None

    # =========================================================================
    # CAPABILITIES (not persisted)
    # =========================================================================
    completion: Completion | None
    progress_callback: Callable[[dict], None] | None


def create_initial_state(
    raw_file: bytes | None = None,
    filename: str | None = None,
    records: Sequence[Mapping[str, Any]] | None = None,
    columns: Sequence[str] | None = None,
    completion: Completion | None = None,
    progress_callback: Callable[[dict], None] | None = None,
) -> AnalysisState:
    """
    Create a fresh AnalysisState.

    Provide either raw_file (delimited text) or records (already parsed rows).
    """
    return AnalysisState(
        raw_file=raw_file,
        filename=filename,
        records=records,
        columns=columns,
        dataset=None,
        profile=None,
        chart_plan=None,
        chart_series=None,
        insights=None,
        warnings=[],
        dashboard=None,
        current_node=None,
        progress=0.0,
        progress_message=None,
        error=None,
        error_type=None,
        failed_node=None,
        partial_results=False,
        recovery_hint=None,
        completion=completion,
        progress_callback=progress_callback,
    )
