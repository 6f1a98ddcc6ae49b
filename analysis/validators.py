# validators.py - Input checks & JSON sanitization
"""
validators.py - Input Validation

Production helpers for:
- File type validation
- Dataset sanity checks
- JSON-safe conversion of engine output
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from enum import Enum
from typing import Any

import numpy as np

from analysis.dataset import Dataset
from analysis.errors import EmptyDatasetError


# =============================================================================
# CONSTANTS
# =============================================================================

ALLOWED_EXTENSIONS = {".csv", ".tsv", ".txt"}


# =============================================================================
# FILE VALIDATION
# =============================================================================

def validate_file_extension(filename: str) -> tuple[bool, str | None]:
    """
    Validate that a file has a delimited-text extension.

    Returns:
        (is_valid, error_message)
    """
    if not filename:
        return False, "No filename provided"

    ext = "." + filename.rsplit(".", 1)[-1].lower() if "." in filename else ""

    if ext not in ALLOWED_EXTENSIONS:
        allowed = ", ".join(sorted(ALLOWED_EXTENSIONS))
        return False, f"Invalid file type: {ext or '(none)'}. Allowed: {allowed}"

    return True, None


# =============================================================================
# DATASET VALIDATION
# =============================================================================

def validate_dataset(dataset: Dataset | None) -> tuple[bool, str | None]:
    """
    Check that a dataset can be charted.

    An empty dataset is valid input for the engine (it profiles to zeros), so
    it is reported here rather than rejected.

    Returns:
        (has_rows, message)
    """
    if dataset is None:
        return False, "No data provided"

    if not isinstance(dataset, Dataset):
        return False, "Data is not a valid Dataset"

    if dataset.column_count == 0:
        return False, "Dataset has no columns"

    if dataset.row_count == 0:
        return False, "Dataset has no rows"

    return True, None


def require_rows(dataset: Dataset) -> Dataset:
    """Return the dataset unchanged, or raise EmptyDatasetError if it has no rows."""
    if dataset.is_empty:
        raise EmptyDatasetError("Dataset has no rows")
    return dataset


# =============================================================================
# JSON SANITIZATION
# =============================================================================

def sanitize_for_json(obj: Any) -> Any:
    """
    Recursively convert engine output into JSON-safe values.

    Objects exposing to_dict() are expanded; numpy scalars become Python
    scalars; NaN and infinities become None.
    """
    if obj is None:
        return None

    if hasattr(obj, "to_dict") and callable(obj.to_dict):
        return sanitize_for_json(obj.to_dict())

    if isinstance(obj, Enum):
        return obj.value

    if isinstance(obj, Mapping):
        return {str(k): sanitize_for_json(v) for k, v in obj.items()}

    if isinstance(obj, (list, tuple)):
        return [sanitize_for_json(v) for v in obj]

    if isinstance(obj, np.ndarray):
        return sanitize_for_json(obj.tolist())

    if isinstance(obj, np.bool_):
        return bool(obj)

    if isinstance(obj, np.integer):
        return int(obj)

    if isinstance(obj, (float, np.floating)):
        value = float(obj)
        return value if math.isfinite(value) else None

    return obj
