# data_loader.py - Delimited text -> Dataset
# Encoding detection, size limits, typed cells, blank-row filtering
"""
data_loader.py - CSV Loading

Parses uploaded delimited text into a Dataset:
- Encoding detection
- Size limit
- Typed cells (numbers stay numbers, blanks become None)
- Entirely empty rows removed before the engine sees them
"""

from __future__ import annotations

import csv
import io
import logging
from typing import Any, BinaryIO

import numpy as np
import pandas as pd

from analysis.dataset import Dataset, is_blank_row

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

MAX_FILE_SIZE_MB = 50
MAX_FILE_SIZE_BYTES = MAX_FILE_SIZE_MB * 1024 * 1024
SUPPORTED_ENCODINGS = ["utf-8", "utf-8-sig", "latin-1", "cp1252"]

# None lets pandas sniff the delimiter
EXTENSION_SEPARATORS = {".csv": ",", ".tsv": "\t", ".txt": None}


# =============================================================================
# FRAME CONVERSION
# =============================================================================

def _to_cell(value: Any) -> Any:
    if value is None or value is pd.NA or value is pd.NaT:
        return None
    if isinstance(value, (float, np.floating)) and np.isnan(value):
        return None
    if isinstance(value, np.generic):
        return value.item()
    return value


def _unique_headers(names: list[str]) -> list[str]:
    """Suffix repeated headers the way pandas does: a, a.1, a.2, ..."""
    seen: set[str] = set()
    unique = []
    for name in names:
        candidate, n = name, 0
        while candidate in seen:
            n += 1
            candidate = f"{name}.{n}"
        if candidate != name:
            logger.warning("Duplicate column header %r renamed to %r", name, candidate)
        seen.add(candidate)
        unique.append(candidate)
    return unique


def dataset_from_frame(df: pd.DataFrame) -> Dataset:
    """
    Convert a DataFrame into a Dataset.

    Column names are stringified and stripped; names that collide after
    stripping get a numeric suffix. NaN cells become None and numpy scalars
    become Python numbers. Rows whose cells are all missing are dropped.
    """
    columns = _unique_headers([str(c).strip() for c in df.columns])
    records = []
    for raw in df.itertuples(index=False, name=None):
        row = {name: _to_cell(value) for name, value in zip(columns, raw)}
        if not is_blank_row(row):
            records.append(row)

    dropped = len(df) - len(records)
    if dropped:
        logger.debug("Dropped %d empty row(s)", dropped)

    return Dataset.from_records(records, columns=columns)


# =============================================================================
# DATA LOADING
# =============================================================================

def _read_bytes(file: BinaryIO | bytes | str) -> bytes:
    if isinstance(file, str):
        with open(file, "rb") as f:
            return f.read()
    if isinstance(file, (bytes, bytearray)):
        return bytes(file)
    raw = file.read()
    if hasattr(file, "seek"):
        file.seek(0)
    return raw


def separator_for(filename: str) -> str | None:
    """Field delimiter implied by a file's extension; comma when unknown."""
    ext = "." + filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
    return EXTENSION_SEPARATORS.get(ext, ",")


def load_csv(
    file: BinaryIO | bytes | str,
    filename: str = "unknown.csv",
    sep: str | None = ",",
) -> tuple[Dataset | None, str | None]:
    """
    Load delimited text into a Dataset.

    Args:
        file: File-like object, bytes, or file path
        filename: Original filename for error messages
        sep: Field delimiter; None lets pandas sniff it

    Returns:
        Tuple of (Dataset or None, error_message or None). A file with a
        header but no data rows loads as a Dataset with zero rows.
    """
    try:
        raw_bytes = _read_bytes(file)
    except OSError as e:
        return None, f"Failed to read {filename}: {e}"

    if len(raw_bytes) > MAX_FILE_SIZE_BYTES:
        return None, f"File exceeds {MAX_FILE_SIZE_MB}MB limit ({len(raw_bytes) / 1024 / 1024:.1f}MB)"

    if len(raw_bytes) == 0:
        return None, "File is empty"

    df = None
    last_error = None

    for encoding in SUPPORTED_ENCODINGS:
        try:
            text = raw_bytes.decode(encoding)
        except UnicodeDecodeError:
            last_error = f"Encoding {encoding} failed"
            continue

        try:
            df = pd.read_csv(
                io.StringIO(text),
                sep=sep,
                engine="python" if sep is None else "c",
                on_bad_lines="warn",
                skip_blank_lines=True,
            )
            break
        except pd.errors.EmptyDataError:
            return None, "CSV file contains no data"
        except pd.errors.ParserError as e:
            last_error = f"CSV parsing error: {e}"
            continue
        except csv.Error as e:
            return None, f"Could not detect the field delimiter: {e}"

    if df is None:
        return None, last_error or "Failed to parse CSV with any supported encoding"

    if len(df.columns) == 0:
        return None, "CSV file contains no columns"

    dataset = dataset_from_frame(df)
    logger.info(
        "Loaded %s: %d rows x %d columns",
        filename, dataset.row_count, dataset.column_count,
    )
    return dataset, None
