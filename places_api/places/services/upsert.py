"""
Batched upsert writer for places.

Accepted records are written in fixed-size batches. Each batch is staged
in temporary tables through bound-parameter inserts and merged into
`places` and `min_places` with a set-based INSERT ... ON CONFLICT, both
inside a single transaction so the two tables cannot diverge.
"""

import logging
from typing import Callable, Iterator, List, Optional, Sequence, Tuple, Type

from django.db import DatabaseError, connections, models, transaction

from ..models import MinPlace, Place
from .exceptions import StorageError
from .schemas import PlaceRecord

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 50


def chunked(records: Sequence[PlaceRecord], size: int) -> Iterator[List[PlaceRecord]]:
    """
    Split records into consecutive lists of at most `size` items.
    """
    if size < 1:
        raise ValueError(f"Batch size must be positive, got {size}")

    for start in range(0, len(records), size):
        yield list(records[start : start + size])


def dedupe_by_code(records: Sequence[PlaceRecord]) -> List[PlaceRecord]:
    """
    Keep only the last record for each code, in the order of those last
    occurrences.

    A single ON CONFLICT statement cannot update the same key twice.
    """
    last_index = {record.code: index for index, record in enumerate(records)}
    return [
        record for index, record in enumerate(records) if last_index[record.code] == index
    ]


def fetch_existing_codes(using: str = "default") -> frozenset:
    """
    Snapshot of every code currently stored in places.
    """
    return frozenset(Place.objects.using(using).values_list("code", flat=True))


def _staging_table_name(model: Type[models.Model]) -> str:
    return f"staging_{model._meta.db_table}"


def _merge_into(cursor, connection, model: Type[models.Model], rows: List[Tuple]) -> None:
    """
    Stage rows in a temporary table shaped like `model` and upsert them.

    Column definitions come from the model fields so the staging table
    always matches the target table. Values are bound, never interpolated.
    """
    qn = connection.ops.quote_name
    meta = model._meta
    fields = meta.concrete_fields
    target = qn(meta.db_table)
    staging = qn(_staging_table_name(model))
    columns = ", ".join(qn(field.column) for field in fields)

    definitions = []
    for field in fields:
        definition = f"{qn(field.column)} {field.db_type(connection)}"
        if field.primary_key:
            definition += " PRIMARY KEY"
        elif not field.null:
            definition += " NOT NULL"
        definitions.append(definition)

    updates = ", ".join(
        f"{qn(field.column)} = excluded.{qn(field.column)}"
        for field in fields
        if not field.primary_key
    )

    cursor.execute(f"CREATE TEMPORARY TABLE {staging} ({', '.join(definitions)})")
    cursor.executemany(
        f"INSERT INTO {staging} ({columns}) VALUES ({', '.join(['%s'] * len(fields))})",
        rows,
    )
    # WHERE is required by SQLite to parse ON CONFLICT after INSERT ... SELECT
    cursor.execute(
        f"INSERT INTO {target} ({columns}) "
        f"SELECT {columns} FROM {staging} WHERE 1 = 1 "
        f"ON CONFLICT ({qn(meta.pk.column)}) DO UPDATE SET {updates}"
    )
    cursor.execute(f"DROP TABLE {staging}")


def upsert_places(cursor, connection, records: Sequence[PlaceRecord]) -> None:
    _merge_into(cursor, connection, Place, [record.place_values() for record in records])


def upsert_min_places(cursor, connection, records: Sequence[PlaceRecord]) -> None:
    _merge_into(
        cursor, connection, MinPlace, [record.min_place_values() for record in records]
    )


def upsert_batch(records: Sequence[PlaceRecord], using: str = "default") -> int:
    """
    Upsert one batch into places and min_places in a single transaction.

    Args:
        records: Batch of validated records
        using: Database alias

    Returns:
        Number of distinct codes written

    Raises:
        DatabaseError: Propagated from the backend; the batch is rolled back
    """
    records = dedupe_by_code(records)
    if not records:
        return 0

    connection = connections[using]
    with transaction.atomic(using=using):
        with connection.cursor() as cursor:
            upsert_places(cursor, connection, records)
            upsert_min_places(cursor, connection, records)

    return len(records)


def write_batches(
    records: Sequence[PlaceRecord],
    using: str = "default",
    batch_size: int = DEFAULT_BATCH_SIZE,
    on_batch: Optional[Callable[[int, int], None]] = None,
) -> int:
    """
    Write records in sequential batches.

    Batches run in input order, so when a code appears in several batches
    the last one wins. A failing batch stops the run; batches before it
    stay committed.

    Args:
        records: Accepted records in upload order
        using: Database alias
        batch_size: Records per batch
        on_batch: Called with (batch_index, written) after each batch commits

    Returns:
        Number of batches written

    Raises:
        StorageError: If the backend cannot upsert or a batch fails
    """
    connection = connections[using]
    if not connection.features.supports_update_conflicts_with_target:
        raise StorageError(
            f"Database backend '{connection.vendor}' does not support "
            f"INSERT ... ON CONFLICT upserts"
        )

    batches = 0
    for batch_index, batch in enumerate(chunked(records, batch_size)):
        try:
            written = upsert_batch(batch, using=using)
        except DatabaseError as e:
            logger.error(
                f"Batch {batch_index + 1} upsert failed "
                f"({len(batch)} records, first code {batch[0].code}): {e}"
            )
            raise StorageError(
                f"Batch {batch_index + 1} upsert failed", batch_index=batch_index
            ) from e

        batches += 1
        logger.info(f"Batch {batch_index + 1}: upserted {written} places")
        if on_batch is not None:
            on_batch(batch_index, written)

    return batches


def delete_place(code: str, using: str = "default") -> bool:
    """
    Delete a place from both tables atomically.

    Returns:
        True if a row was removed from either table
    """
    with transaction.atomic(using=using):
        places_deleted, _ = Place.objects.using(using).filter(code=code).delete()
        min_deleted, _ = MinPlace.objects.using(using).filter(code=code).delete()

    if places_deleted != min_deleted:
        logger.warning(
            f"Place {code} was present in only one table "
            f"(places={places_deleted}, min_places={min_deleted})"
        )

    deleted = (places_deleted + min_deleted) > 0
    if deleted:
        logger.info(f"Deleted place {code}")
    return deleted
