"""
Validation for places CSV uploads.

Two checks live here: the structural header check, which runs once per
upload and rejects the whole file, and the per-row check, which only
rejects the row it fails on.
"""

import logging
from typing import Any, Dict, Sequence

from .exceptions import MissingFieldError, SchemaError
from .normalizers import (
    coerce_row,
    collapse_whitespace,
    normalize_key,
    normalize_keys,
    translate_columns,
)
from .schemas import EXPECTED_COLUMNS, REQUIRED_COLUMNS, PlaceRecord, build_place_record

logger = logging.getLogger(__name__)


def validate_csv_structure(
    header: Sequence[str], expected: Sequence[str] = EXPECTED_COLUMNS
) -> None:
    """
    Check the header row against the expected columns, position by position.

    Args:
        header: Column names from the decoder, possibly with BOMs or padding
        expected: Expected column names in order

    Raises:
        SchemaError: On a column count mismatch or the first out-of-place column
    """
    cleaned = [normalize_key(column) for column in header]

    if len(cleaned) != len(expected):
        logger.warning(
            f"CSV header has {len(cleaned)} columns, expected {len(expected)}"
        )
        raise SchemaError("CSV column count does not match the required format.")

    for position, (actual, wanted) in enumerate(zip(cleaned, expected)):
        if actual != wanted:
            logger.warning(
                f"CSV header mismatch at column {position + 1}: "
                f"expected '{wanted}', got '{actual}'"
            )
            raise SchemaError(
                f"Column order mismatch: Expected '{wanted}' but got '{actual}'",
                position=position,
                expected=wanted,
                actual=actual,
            )


def validate_row_data(row: Dict[str, Any]) -> None:
    """
    Ensure every required column has a non-blank value.

    Args:
        row: Row with normalized keys (display column names)

    Raises:
        MissingFieldError: Naming the first required column that is blank
    """
    for column in REQUIRED_COLUMNS:
        if not collapse_whitespace(row.get(column)):
            raise MissingFieldError(column)


def normalize_row(raw: Dict[str, Any]) -> PlaceRecord:
    """
    Turn one decoded CSV row into a storage-ready PlaceRecord.

    Steps, in order: key cleanup, required-field check, column-name
    translation, value coercion, typed record construction.

    Raises:
        RowError: If the row cannot be stored
    """
    row = normalize_keys(raw)
    validate_row_data(row)
    return build_place_record(coerce_row(translate_columns(row)))


def row_code(raw: Dict[str, Any]) -> str:
    """
    Best-effort code of a raw row for failure reporting.
    """
    for key, value in raw.items():
        if normalize_key(key) == "CODE":
            code = collapse_whitespace(value)
            if code:
                return code
    return "UNKNOWN"
