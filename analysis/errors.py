# errors.py - Engine error kinds
"""
errors.py - Analysis Engine Errors

Every error here is recoverable: callers catch it, log it and fall back to a
best-effort profile or chart plan.
"""

from __future__ import annotations


class AnalysisError(Exception):
    """Base exception for analysis engine errors."""
    pass


class MalformedColumnError(AnalysisError):
    """Raised when a column holds cells that are neither null, number nor string."""

    def __init__(self, column: str | None, bad_cells: int):
        self.column = column
        self.bad_cells = bad_cells
        label = f"'{column}'" if column is not None else "column"
        super().__init__(f"{label} has {bad_cells} unsupported cell value(s)")


class EmptyDatasetError(AnalysisError):
    """Raised when a caller requires rows and the dataset has none."""
    pass
