# nodes.py - Pipeline stages (individual graph node functions)
# Steps: ingest -> profile -> plan charts -> build series -> insights -> dashboard
"""
nodes.py - LangGraph Pipeline Nodes

Each node takes AnalysisState and returns a partial state update.

Node Responsibilities:
- ingest_data_node: Parse delimited text or accept pre-parsed rows
- profile_data_node: Classify and summarize every column
- plan_charts_node: Recommend charts from the profile
- build_series_node: Realize data for every planned chart
- generate_insights_node: Ask the insight service (degrades to a placeholder)
- assemble_dashboard_node: JSON-safe payload for a renderer
- handle_error_node: User-facing error payload with partial results
"""

from __future__ import annotations

import logging

from analysis.charts import ChartKind, plan
from analysis.data_loader import load_csv, separator_for
from analysis.dataset import Dataset, is_blank_row
from analysis.errors import AnalysisError
from analysis.series import INDEX_KEY, build_series
from analysis.statistics import profile_dataset
from analysis.validators import sanitize_for_json, validate_dataset, validate_file_extension
from insights.generator import UNAVAILABLE_INSIGHTS, generate_dataset_insights

logger = logging.getLogger(__name__)


# =============================================================================
# PROGRESS HELPERS
# =============================================================================

def _emit_progress(
    state: dict,
    node: str,
    progress: float,
    message: str,
    status: str = "running",
) -> None:
    """
    Emit a progress update via the callback if available.

    Callback failures are logged and never break the node.
    """
    callback = state.get("progress_callback")
    if callback and callable(callback):
        try:
            callback({
                "node": node,
                "status": status,
                "progress": progress,
                "message": message,
            })
        except Exception:
            logger.debug("Progress callback failed in %s", node, exc_info=True)


def _create_error_state(
    state: dict,
    node: str,
    error_msg: str,
    error_type: str,
    recovery_hint: str,
) -> dict:
    logger.warning("%s failed (%s): %s", node, error_type, error_msg)
    return {
        "error": error_msg,
        "error_type": error_type,
        "failed_node": node,
        "recovery_hint": recovery_hint,
        "current_node": node,
        "partial_results": bool(state.get("profile") or state.get("dataset")),
    }


# =============================================================================
# NODE: INGEST DATA
# =============================================================================

def ingest_data_node(state: dict) -> dict:
    """
    Produce the Dataset the rest of the pipeline reads.

    Input state (one of):
        - dataset: Dataset
        - records (+ optional columns): pre-parsed rows
        - raw_file (+ filename): delimited text bytes

    Output state updates:
        - dataset, warnings, current_node, progress
    """
    node_name = "ingest_data"
    _emit_progress(state, node_name, 0.05, "Reading data...")

    warnings = list(state.get("warnings", []))
    dataset = state.get("dataset")

    if dataset is None and state.get("records") is not None:
        rows = [r for r in state["records"] if not is_blank_row(r)]
        dataset = Dataset.from_records(rows, columns=state.get("columns"))

    elif dataset is None and state.get("raw_file") is not None:
        filename = state.get("filename") or "upload.csv"
        is_valid, message = validate_file_extension(filename)
        if not is_valid:
            return _create_error_state(
                state, node_name, message, "INVALID_FILE",
                "Upload a delimited text file (.csv, .tsv or .txt).",
            )

        dataset, error = load_csv(
            state["raw_file"], filename=filename, sep=separator_for(filename),
        )
        if error:
            return _create_error_state(
                state, node_name, error, "PARSE_FAILED",
                "Check that the file is delimited text with a header row.",
            )

    if dataset is None:
        return _create_error_state(
            state, node_name, "No data provided", "DATA_MISSING",
            "Please upload a file.",
        )

    has_rows, message = validate_dataset(dataset)
    if not has_rows:
        warnings.append(f"{message}; statistics and charts will be empty")

    _emit_progress(state, node_name, 0.15, "Data loaded", "complete")

    return {
        "dataset": dataset,
        "warnings": warnings,
        "current_node": node_name,
        "progress": 0.15,
        "progress_message": f"Loaded {dataset.row_count} rows",
    }


# =============================================================================
# NODE: PROFILE DATA
# =============================================================================

def profile_data_node(state: dict) -> dict:
    """Classify and summarize every column."""
    node_name = "profile_data"
    _emit_progress(state, node_name, 0.2, "Calculating statistics...")

    try:
        profile = profile_dataset(state["dataset"])
    except AnalysisError as e:
        return _create_error_state(
            state, node_name,
            f"Profiling failed: {e}",
            "ANALYSIS_FAILED",
            "The data structure could not be analyzed. Check for malformed columns.",
        )

    _emit_progress(state, node_name, 0.4, "Profiling complete", "complete")

    return {
        "profile": profile,
        "current_node": node_name,
        "progress": 0.4,
        "progress_message": (
            f"Profiled {len(profile.numeric)} numeric and "
            f"{len(profile.categorical)} categorical columns"
        ),
    }


# =============================================================================
# NODE: PLAN CHARTS
# =============================================================================

def plan_charts_node(state: dict) -> dict:
    node_name = "plan_charts"
    _emit_progress(state, node_name, 0.45, "Choosing visualizations...")

    charts = plan(state["profile"])

    _emit_progress(state, node_name, 0.5, f"{len(charts)} chart(s) planned", "complete")
    return {
        "chart_plan": charts,
        "current_node": node_name,
        "progress": 0.5,
    }


# =============================================================================
# NODE: BUILD SERIES
# =============================================================================

def build_series_node(state: dict) -> dict:
    """Build the series for every planned chart; a failing chart is skipped."""
    node_name = "build_series"
    _emit_progress(state, node_name, 0.55, "Creating visualizations...")

    warnings = list(state.get("warnings", []))
    dataset = state["dataset"]
    series = []

    for spec in state.get("chart_plan") or []:
        try:
            series.append(build_series(spec, dataset))
        except (KeyError, ValueError) as e:
            warnings.append(f"Skipped chart '{spec.title}': {e}")
            continue
        if spec.kind is ChartKind.LINE and INDEX_KEY in spec.columns:
            warnings.append(
                f"Column '{INDEX_KEY}' left out of chart '{spec.title}'; "
                "the name is reserved for the row position"
            )

    _emit_progress(state, node_name, 0.65, "Visualizations ready", "complete")
    return {
        "chart_series": series,
        "warnings": warnings,
        "current_node": node_name,
        "progress": 0.65,
    }


# =============================================================================
# NODE: GENERATE INSIGHTS
# =============================================================================

async def generate_insights_node(state: dict) -> dict:
    """
    Ask the insight service about the dataset.

    Never fails: without a completion capability, or when the service errors,
    the placeholder insights are stored and a warning is recorded.
    """
    node_name = "generate_insights"
    _emit_progress(state, node_name, 0.7, "Generating AI insights...")

    warnings = list(state.get("warnings", []))
    dataset = state["dataset"]
    profile = state["profile"]

    if dataset.is_empty:
        insights = UNAVAILABLE_INSIGHTS
    else:
        insights = await generate_dataset_insights(dataset, profile, state.get("completion"))

    if not insights.available:
        warnings.append("AI insights unavailable; showing statistical analysis only")

    _emit_progress(state, node_name, 0.9, "Insights complete", "complete")
    return {
        "insights": insights,
        "warnings": warnings,
        "current_node": node_name,
        "progress": 0.9,
    }


# =============================================================================
# NODE: ASSEMBLE DASHBOARD
# =============================================================================

def assemble_dashboard_node(state: dict) -> dict:
    node_name = "assemble_dashboard"
    dataset = state["dataset"]

    dashboard = {
        "is_error": False,
        "columns": list(dataset.columns),
        "profile": state.get("profile"),
        "charts": state.get("chart_series") or [],
        "insights": state.get("insights") or UNAVAILABLE_INSIGHTS,
        "warnings": state.get("warnings", []),
    }

    _emit_progress(state, node_name, 1.0, "Analysis complete", "complete")
    return {
        "dashboard": sanitize_for_json(dashboard),
        "current_node": node_name,
        "progress": 1.0,
        "progress_message": "Analysis complete",
    }


# =============================================================================
# NODE: HANDLE ERROR
# =============================================================================

def handle_error_node(state: dict) -> dict:
    """
    Build the user-facing error payload.

    Whatever was computed before the failure is passed along.
    """
    node_name = "handle_error"
    _emit_progress(state, node_name, 0.99, "Handling error...", "failed")

    error = state.get("error") or "An unknown error occurred"
    error_type = state.get("error_type") or "UNKNOWN"

    payload = {
        "is_error": True,
        "error_message": error,
        "error_type": error_type,
        "failed_node": state.get("failed_node") or "unknown",
        "recovery_hint": state.get("recovery_hint") or "Please try again.",
        "has_partial_results": bool(state.get("partial_results")),
    }

    if state.get("partial_results"):
        payload["partial_results"] = {
            "profile": state.get("profile"),
            "warnings": state.get("warnings", []) + [f"Analysis incomplete: {error}"],
        }

    return {
        "dashboard": sanitize_for_json(payload),
        "current_node": node_name,
        "progress": 1.0,
        "progress_message": f"Error: {error_type}",
    }
