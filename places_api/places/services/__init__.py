"""
Services package for places data processing.

This package contains the CSV ingestion pipeline for places: decoding,
header and row validation, normalization, and the batched two-table upsert.
"""

from .exceptions import (
    DecodeError,
    IngestError,
    InvalidFieldError,
    MissingFieldError,
    RowError,
    SchemaError,
    StorageError,
)
from .parsers import HeaderEvent, RowEvent, decode_csv
from .pipeline import (
    IngestContext,
    RowPartition,
    UploadState,
    ingest_events,
    ingest_places,
    partition_rows,
)
from .schemas import EXPECTED_COLUMNS, IngestReport, PlaceRecord
from .upsert import delete_place, write_batches
from .validators import normalize_row, validate_csv_structure, validate_row_data

__all__ = [
    "DecodeError",
    "IngestError",
    "InvalidFieldError",
    "MissingFieldError",
    "RowError",
    "SchemaError",
    "StorageError",
    "HeaderEvent",
    "RowEvent",
    "decode_csv",
    "IngestContext",
    "RowPartition",
    "UploadState",
    "ingest_events",
    "ingest_places",
    "partition_rows",
    "EXPECTED_COLUMNS",
    "IngestReport",
    "PlaceRecord",
    "delete_place",
    "write_batches",
    "normalize_row",
    "validate_csv_structure",
    "validate_row_data",
]
