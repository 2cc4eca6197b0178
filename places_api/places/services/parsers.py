"""
Stream decoder for uploaded places CSV files.

The decoder turns a raw byte payload into events: exactly one HeaderEvent,
then one RowEvent per non-empty data line. Decoding is lazy and the
returned generator can only be consumed once.
"""

import csv
import io
import logging
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Union

from .exceptions import DecodeError

logger = logging.getLogger(__name__)

DEFAULT_DELIMITER = ";"


@dataclass(frozen=True)
class HeaderEvent:
    columns: List[str]


@dataclass(frozen=True)
class RowEvent:
    line_number: int
    values: Dict[str, Optional[str]]


CSVEvent = Union[HeaderEvent, RowEvent]


def decode_csv(payload: bytes, delimiter: str = DEFAULT_DELIMITER) -> Iterator[CSVEvent]:
    """
    Decode a delimited-text payload into header and row events.

    Cells are keyed by the raw header names; callers clean the keys.
    Rows shorter than the header get None for the missing cells, surplus
    cells are dropped. Cells are not length-limited beyond the payload size.

    Args:
        payload: UTF-8 bytes, optionally starting with a byte-order mark
        delimiter: Field separator

    Yields:
        HeaderEvent first, then RowEvent for every non-empty line

    Raises:
        DecodeError: If the payload is not valid UTF-8 or not parseable CSV
    """
    # No single cell can be larger than the whole payload
    if len(payload) > csv.field_size_limit():
        csv.field_size_limit(len(payload))

    text = io.TextIOWrapper(io.BytesIO(payload), encoding="utf-8", newline="")
    reader = csv.reader(text, delimiter=delimiter)

    try:
        header = next(reader, [])
        yield HeaderEvent(columns=list(header))

        for values in reader:
            if not values:
                continue

            if len(values) > len(header):
                logger.debug(
                    f"Line {reader.line_num}: {len(values) - len(header)} "
                    f"extra cells dropped"
                )

            row = {
                column: values[index] if index < len(values) else None
                for index, column in enumerate(header)
            }
            yield RowEvent(line_number=reader.line_num, values=row)

    except UnicodeDecodeError as e:
        logger.error(f"CSV payload is not valid UTF-8: {e}")
        raise DecodeError("Uploaded file is not valid UTF-8 text.") from e
    except csv.Error as e:
        logger.error(f"Malformed CSV near line {reader.line_num}: {e}")
        raise DecodeError(f"Malformed CSV near line {reader.line_num}: {e}") from e

