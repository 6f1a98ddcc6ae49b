# classifier.py - Numeric vs categorical column classification
"""
classifier.py - Column Classification

A column is NUMERIC when strictly more than half of its non-empty cells are
numeric (numbers, or strings that parse cleanly as decimals). Everything else,
including columns with no non-empty cells, is CATEGORICAL.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Iterable

from analysis.dataset import is_empty_cell, is_numeric_cell, is_supported_cell
from analysis.errors import MalformedColumnError


# =============================================================================
# CONSTANTS
# =============================================================================

NUMERIC_SHARE_THRESHOLD = 0.5  # numeric share must be strictly above this


class ColumnKind(str, Enum):
    NUMERIC = "numeric"
    CATEGORICAL = "categorical"


# =============================================================================
# CLASSIFICATION
# =============================================================================

def non_empty_values(values: Iterable[Any]) -> list[Any]:
    return [v for v in values if not is_empty_cell(v)]


def classify(values: Iterable[Any], column: str | None = None) -> ColumnKind:
    """
    Decide whether a column is numeric or categorical.

    Args:
        values: Raw cells of one column, in any order
        column: Column name, used only in error messages

    Returns:
        ColumnKind.NUMERIC or ColumnKind.CATEGORICAL

    Raises:
        MalformedColumnError: If any cell is not null, number or string
    """
    present = non_empty_values(values)

    bad_cells = sum(1 for v in present if not is_supported_cell(v))
    if bad_cells:
        raise MalformedColumnError(column, bad_cells)

    numeric_count = sum(1 for v in present if is_numeric_cell(v))

    if numeric_count > 0 and numeric_count > len(present) * NUMERIC_SHARE_THRESHOLD:
        return ColumnKind.NUMERIC
    return ColumnKind.CATEGORICAL
