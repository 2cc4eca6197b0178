"""
Errors raised by the places CSV ingestion pipeline.

Fatal errors (DecodeError, SchemaError, StorageError) stop the upload and
are mapped to an HTTP status by the view. RowError subclasses only reject
the row they were raised for.
"""

from typing import Optional


class IngestError(Exception):
    """Base class for ingestion failures."""


class DecodeError(IngestError):
    """The payload is not valid UTF-8 delimited text."""


class SchemaError(IngestError):
    """
    The header row does not match the expected columns.

    `position`, `expected` and `actual` are set for order mismatches and
    left as None for count mismatches.
    """

    def __init__(
        self,
        message: str,
        position: Optional[int] = None,
        expected: Optional[str] = None,
        actual: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.position = position
        self.expected = expected
        self.actual = actual


class RowError(IngestError):
    """A single data row was rejected."""

    def __init__(self, message: str, column: Optional[str] = None) -> None:
        super().__init__(message)
        self.column = column


class MissingFieldError(RowError):
    def __init__(self, column: str) -> None:
        super().__init__(f"Missing value for required field: {column}", column)


class InvalidFieldError(RowError):
    pass


class StorageError(IngestError):
    """A batch upsert failed. Earlier batches stay committed."""

    def __init__(self, message: str, batch_index: Optional[int] = None) -> None:
        super().__init__(message)
        self.batch_index = batch_index
