"""
Places CSV ingestion pipeline.

    decode -> validate header -> fold rows into accepted/failed -> batch upsert

Each upload gets its own IngestContext; nothing is shared between uploads
apart from the database tables.
"""

import enum
import logging
from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, Iterator, List, Optional

from django.db import DatabaseError

from .exceptions import DecodeError, IngestError, RowError, SchemaError, StorageError
from .parsers import CSVEvent, HeaderEvent, RowEvent, decode_csv
from .schemas import FailedRow, IngestReport, OverrideRow, PlaceRecord
from .upsert import DEFAULT_BATCH_SIZE, fetch_existing_codes, write_batches
from .validators import normalize_row, row_code, validate_csv_structure

logger = logging.getLogger(__name__)


class UploadState(enum.Enum):
    RECEIVED = "received"
    HEADER_VALIDATED = "header_validated"
    ROWS_PROCESSED = "rows_processed"
    BATCHED = "batched"
    COMPLETED = "completed"
    ABORTED = "aborted"
    FAILED = "failed"


_TRANSITIONS = {
    UploadState.RECEIVED: {UploadState.HEADER_VALIDATED, UploadState.ABORTED},
    # Decoding or the existing-codes lookup can fail after the header, before any write
    UploadState.HEADER_VALIDATED: {
        UploadState.ROWS_PROCESSED,
        UploadState.ABORTED,
        UploadState.FAILED,
    },
    UploadState.ROWS_PROCESSED: {
        UploadState.BATCHED,
        UploadState.COMPLETED,
        UploadState.FAILED,
    },
    UploadState.BATCHED: {UploadState.BATCHED, UploadState.COMPLETED, UploadState.FAILED},
}


@dataclass
class IngestContext:
    """
    Per-upload state passed through the pipeline stages.
    """

    using: str = "default"
    batch_size: int = DEFAULT_BATCH_SIZE
    dry_run: bool = False
    source: str = "upload"
    existing_codes: FrozenSet[str] = frozenset()
    state: UploadState = UploadState.RECEIVED
    batches_written: int = 0

    def advance(self, state: UploadState) -> None:
        if state not in _TRANSITIONS.get(self.state, set()):
            raise RuntimeError(
                f"Invalid upload state transition {self.state.value} -> {state.value}"
            )
        logger.debug(f"{self.source}: {self.state.value} -> {state.value}")
        self.state = state


@dataclass
class RowPartition:
    """
    Result of folding the data rows of one upload.

    All three lists keep upload order.
    """

    accepted: List[PlaceRecord] = field(default_factory=list)
    failed: List[FailedRow] = field(default_factory=list)
    overrides: List[OverrideRow] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.accepted) + len(self.failed)


def read_header(events: Iterator[CSVEvent]) -> List[str]:
    """
    Pull the header event off a decoder stream.
    """
    event = next(events, None)
    if not isinstance(event, HeaderEvent):
        raise SchemaError("CSV file has no header row.")
    return event.columns


def partition_rows(
    rows: Iterable[RowEvent], existing_codes: FrozenSet[str] = frozenset()
) -> RowPartition:
    """
    Validate and normalize every data row in one pass.

    Args:
        rows: Row events following the header
        existing_codes: Codes already stored, used to flag overrides

    Returns:
        RowPartition with accepted records, failures and overrides
    """
    partition = RowPartition()

    for event in rows:
        try:
            record = normalize_row(event.values)
        except RowError as e:
            code = row_code(event.values)
            logger.warning(f"Line {event.line_number}: row {code} rejected: {e}")
            partition.failed.append(FailedRow(code=code, error=str(e)))
            continue

        if record.code in existing_codes:
            partition.overrides.append(OverrideRow(code=record.code))
        partition.accepted.append(record)

    return partition


def ingest_events(events: Iterable[CSVEvent], context: IngestContext) -> IngestReport:
    """
    Run the pipeline over already-decoded CSV events.

    Raises:
        SchemaError: Header mismatch, nothing is written
        DecodeError: Payload stopped decoding, nothing is written
        StorageError: Existing codes could not be read, or a batch failed;
            earlier batches stay written
    """
    events = iter(events)

    try:
        validate_csv_structure(read_header(events))
        context.advance(UploadState.HEADER_VALIDATED)

        try:
            context.existing_codes = fetch_existing_codes(context.using)
        except DatabaseError as e:
            logger.error(f"{context.source}: could not read existing place codes: {e}")
            raise StorageError("Could not read existing place codes") from e

        partition = partition_rows(events, context.existing_codes)
    except (DecodeError, SchemaError):
        context.advance(UploadState.ABORTED)
        raise
    except StorageError:
        context.advance(UploadState.FAILED)
        raise
    context.advance(UploadState.ROWS_PROCESSED)

    logger.info(
        f"{context.source}: {partition.total} rows, {len(partition.accepted)} accepted, "
        f"{len(partition.failed)} failed, {len(partition.overrides)} overrides"
    )

    if not context.dry_run:
        try:
            context.batches_written = write_batches(
                partition.accepted,
                using=context.using,
                batch_size=context.batch_size,
                on_batch=lambda index, written: context.advance(UploadState.BATCHED),
            )
        except IngestError:
            context.advance(UploadState.FAILED)
            raise

    context.advance(UploadState.COMPLETED)
    return IngestReport(
        total_records=partition.total,
        success_records=len(partition.accepted),
        override_records=len(partition.overrides),
        failed_records=len(partition.failed),
        batches=context.batches_written,
        dry_run=context.dry_run,
        failed_details=partition.failed,
        override_details=partition.overrides,
    )


def ingest_places(
    payload: bytes,
    using: str = "default",
    batch_size: int = DEFAULT_BATCH_SIZE,
    dry_run: bool = False,
    source: str = "upload",
    context: Optional[IngestContext] = None,
) -> IngestReport:
    """
    Ingest a `;`-delimited places CSV payload.

    Args:
        payload: Raw uploaded bytes
        using: Database alias
        batch_size: Records per upsert batch
        dry_run: Validate only, skip writes
        source: Label used in log messages
        context: Context to run with; when given, the other options are ignored
            and its state reflects how far the upload got

    Returns:
        IngestReport summarizing the upload
    """
    if context is None:
        context = IngestContext(
            using=using, batch_size=batch_size, dry_run=dry_run, source=source
        )
    return ingest_events(decode_csv(payload), context)
