# dataset.py - Immutable dataset model & cell coercion
# Rows of named cells, strict numeric parsing, display stringification
"""
dataset.py - Dataset Model

A Dataset is an ordered tuple of column names plus an ordered tuple of
read-only rows. Every row carries every column; absent cells are None.

Cells are one of: missing (None, NaN, pandas NA, ""), a number, or a string.
Numbers embedded in strings only count when the WHOLE string is a decimal
literal, so "42abc" stays text.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Sequence

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

# Plain decimal literal with optional sign and exponent. No "inf", "nan",
# hex or digit separators.
DECIMAL_PATTERN = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")

_NUMBER_TYPES = (int, float, np.integer, np.floating)
_BOOL_TYPES = (bool, np.bool_)


# =============================================================================
# CELL HELPERS
# =============================================================================

def is_empty_cell(value: Any) -> bool:
    """True for None, NaN, pandas NA/NaT and the empty string."""
    if value is None or value is pd.NA or value is pd.NaT:
        return True
    if isinstance(value, str):
        return value == ""
    if isinstance(value, (float, np.floating)):
        return bool(np.isnan(value))
    return False


def is_supported_cell(value: Any) -> bool:
    """True if the cell is missing, a string, a boolean or a number."""
    return (
        is_empty_cell(value)
        or isinstance(value, str)
        or isinstance(value, _BOOL_TYPES)
        or isinstance(value, _NUMBER_TYPES)
    )


def coerce_number(value: Any) -> float | None:
    """
    Convert a cell to a finite float, or None if it is not numeric.

    Numbers pass through (booleans do not count). Strings must fully match a
    decimal literal once surrounding whitespace is trimmed.
    """
    if isinstance(value, _BOOL_TYPES):
        return None

    if isinstance(value, _NUMBER_TYPES):
        number = float(value)
        return number if math.isfinite(number) else None

    if isinstance(value, str):
        text = value.strip()
        if not DECIMAL_PATTERN.fullmatch(text):
            return None
        number = float(text)
        # "1e999" matches the pattern but overflows to inf
        return number if math.isfinite(number) else None

    return None


def is_numeric_cell(value: Any) -> bool:
    return coerce_number(value) is not None


def stringify_cell(value: Any) -> str:
    """
    Display key for a cell.

    Integral floats drop their fractional part so 5, 5.0 and "5" share the
    key "5". Booleans render lowercase.
    """
    if isinstance(value, _BOOL_TYPES):
        return "true" if value else "false"
    if isinstance(value, np.integer):
        return str(int(value))
    if isinstance(value, (float, np.floating)):
        number = float(value)
        if math.isfinite(number) and number.is_integer():
            return str(int(number))
        return repr(number)
    return str(value)


def is_blank_row(row: Mapping[str, Any]) -> bool:
    """True if every cell in the row is missing."""
    return all(is_empty_cell(v) for v in row.values())


# =============================================================================
# DATASET
# =============================================================================

@dataclass(frozen=True)
class Dataset:
    """Immutable, ordered collection of rows sharing one column set."""

    columns: tuple[str, ...]
    rows: tuple[Mapping[str, Any], ...]

    @classmethod
    def from_records(
        cls,
        records: Iterable[Mapping[str, Any]],
        columns: Sequence[str] | None = None,
    ) -> Dataset:
        """
        Build a Dataset from row mappings.

        Args:
            records: Row mappings (column name -> cell)
            columns: Header order. Defaults to the union of record keys in
                first-seen order.

        Returns:
            Dataset whose rows each hold exactly `columns` (absent cells
            become None, unknown keys are dropped)
        """
        records = list(records)

        if columns is None:
            seen: dict[str, None] = {}
            for record in records:
                for key in record:
                    seen.setdefault(key, None)
            names = tuple(seen)
        else:
            names = tuple(dict.fromkeys(columns))

        rows = []
        reshaped = 0
        for record in records:
            if record.keys() != set(names):
                reshaped += 1
            rows.append(MappingProxyType({name: record.get(name) for name in names}))

        if reshaped:
            logger.debug("Normalized %d row(s) to the %d-column header", reshaped, len(names))

        return cls(columns=names, rows=tuple(rows))

    @classmethod
    def empty(cls) -> Dataset:
        return cls(columns=(), rows=())

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @property
    def column_count(self) -> int:
        return len(self.columns)

    @property
    def is_empty(self) -> bool:
        return not self.rows

    def column_values(self, name: str) -> list[Any]:
        """All cells of one column in row order."""
        if name not in self.columns:
            raise KeyError(f"Unknown column: {name}")
        return [row[name] for row in self.rows]

    def head(self, n: int = 5) -> list[dict[str, Any]]:
        """First n rows as plain dicts."""
        return [dict(row) for row in self.rows[:n]]
