# graph.py - LangGraph workflow definition
# Defines node edges and error routing
"""
graph.py - LangGraph Workflow Definition

Flow:
    START -> ingest_data -> profile_data -> plan_charts -> build_series
          -> generate_insights -> assemble_dashboard -> END
                 |               |
              [ERROR]         [ERROR] -> handle_error -> END

Chart planning, series building and insight generation never set an error:
they degrade (fewer charts, placeholder insights) instead.

The insight node is async, so the graph runs through ainvoke/astream;
run_analysis() wraps that for synchronous callers.
"""

from __future__ import annotations

import asyncio
from typing import Any, AsyncIterator, Callable, Literal, Mapping, Sequence

from langgraph.graph import END, START, StateGraph

from insights.prompts import Completion
from pipeline.nodes import (
    assemble_dashboard_node,
    build_series_node,
    generate_insights_node,
    handle_error_node,
    ingest_data_node,
    plan_charts_node,
    profile_data_node,
)
from pipeline.state import AnalysisState, create_initial_state


# =============================================================================
# CONDITIONAL ROUTING
# =============================================================================

def route_after_node(state: AnalysisState) -> Literal["continue", "error"]:
    if state.get("error"):
        return "error"
    return "continue"


# =============================================================================
# GRAPH BUILDER
# =============================================================================

def build_analysis_graph() -> StateGraph:
    """Build the (uncompiled) analysis workflow."""
    workflow = StateGraph(AnalysisState)

    workflow.add_node("ingest_data", ingest_data_node)
    workflow.add_node("profile_data", profile_data_node)
    workflow.add_node("plan_charts", plan_charts_node)
    workflow.add_node("build_series", build_series_node)
    workflow.add_node("generate_insights", generate_insights_node)
    workflow.add_node("assemble_dashboard", assemble_dashboard_node)
    workflow.add_node("handle_error", handle_error_node)

    workflow.add_edge(START, "ingest_data")

    workflow.add_conditional_edges(
        "ingest_data",
        route_after_node,
        {
            "continue": "profile_data",
            "error": "handle_error",
        },
    )
    workflow.add_conditional_edges(
        "profile_data",
        route_after_node,
        {
            "continue": "plan_charts",
            "error": "handle_error",
        },
    )

    workflow.add_edge("plan_charts", "build_series")
    workflow.add_edge("build_series", "generate_insights")
    workflow.add_edge("generate_insights", "assemble_dashboard")
    workflow.add_edge("assemble_dashboard", END)
    workflow.add_edge("handle_error", END)

    return workflow


# Compiled graph singleton (lazy initialization)
_compiled_graph = None


def get_compiled_graph():
    global _compiled_graph
    if _compiled_graph is None:
        _compiled_graph = build_analysis_graph().compile()
    return _compiled_graph


# =============================================================================
# GRAPH EXECUTION
# =============================================================================

async def arun_analysis(
    raw_file: bytes | None = None,
    filename: str | None = None,
    records: Sequence[Mapping[str, Any]] | None = None,
    columns: Sequence[str] | None = None,
    completion: Completion | None = None,
    progress_callback: Callable[[dict], None] | None = None,
) -> dict:
    """
    Run the complete workflow.

    Args:
        raw_file: Delimited text bytes (alternative to records)
        filename: Original filename, used for extension checks and messages
        records: Pre-parsed rows (alternative to raw_file)
        columns: Header order for records
        completion: Async insight capability; None skips the service
        progress_callback: Optional callback for progress updates

    Returns:
        Final state dict; state["dashboard"] holds the renderable payload

    Example:
        state = await arun_analysis(records=rows, columns=["dept", "salary"])
        for chart in state["dashboard"]["charts"]:
            print(chart["title"], len(chart["data"]))
    """
    initial_state = create_initial_state(
        raw_file=raw_file,
        filename=filename,
        records=records,
        columns=columns,
        completion=completion,
        progress_callback=progress_callback,
    )
    return await get_compiled_graph().ainvoke(initial_state)


def run_analysis(**kwargs: Any) -> dict:
    """
    Synchronous wrapper around arun_analysis().

    Must not be called from inside a running event loop.
    """
    return asyncio.run(arun_analysis(**kwargs))


async def astream_analysis(
    raw_file: bytes | None = None,
    filename: str | None = None,
    records: Sequence[Mapping[str, Any]] | None = None,
    columns: Sequence[str] | None = None,
    completion: Completion | None = None,
    progress_callback: Callable[[dict], None] | None = None,
) -> AsyncIterator[tuple[str, dict]]:
    """
    Stream the workflow, yielding (node_name, accumulated_state) after each node.

    Example:
        async for node, state in astream_analysis(raw_file=data, filename="x.csv"):
            print(node, state.get("progress"))
    """
    initial_state = create_initial_state(
        raw_file=raw_file,
        filename=filename,
        records=records,
        columns=columns,
        completion=completion,
        progress_callback=progress_callback,
    )

    accumulated_state = dict(initial_state)
    async for event in get_compiled_graph().astream(initial_state):
        for node_name, state_update in event.items():
            accumulated_state.update(state_update or {})
            yield node_name, accumulated_state
