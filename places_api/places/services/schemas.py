"""
Pydantic schemas for places CSV ingestion.

This module defines the expected CSV layout, the typed record every
accepted row is turned into, and the summary returned to the uploader.
"""

import logging
from typing import List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel
from pydantic.types import conint, constr

from ..models import MinPlace, Place
from .exceptions import InvalidFieldError

logger = logging.getLogger(__name__)

# Exact header row, order-sensitive
EXPECTED_COLUMNS: Tuple[str, ...] = (
    "CODE",
    "SOURCES",
    "Name",
    "English Text",
    "Spanish Text",
    "Chinese Text",
    "German Text",
    "French Text",
    "Russian Text",
    "Portuguese Text",
    "Italian Text",
    "Hindi Text",
    "Arab Text",
    "Turkish Text",
    "Japanese Text",
    "Romanian Text",
    "Polish Text",
    "Czech Text",
    "Indonesian Text",
    "Level",
    "Coordinates",
    "Province",
    "Country",
    "Tag",
    "IMAGE",
    "Web",
    "Phone",
)

OPTIONAL_COLUMNS = frozenset({"Web", "Phone"})

REQUIRED_COLUMNS: Tuple[str, ...] = tuple(
    column for column in EXPECTED_COLUMNS if column not in OPTIONAL_COLUMNS
)

RequiredText = constr(min_length=1)
Level = conint(ge=0, le=255)


class PlaceRecord(BaseModel):
    """
    A validated, storage-ready places row.

    Field names match the Place model. Unknown keys are rejected so a
    translated row has to match the table exactly.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    code: constr(min_length=1, max_length=50)
    sources: RequiredText
    name: RequiredText
    english_text: RequiredText
    spanish_text: RequiredText
    chinese_text: RequiredText
    german_text: RequiredText
    french_text: RequiredText
    russian_text: RequiredText
    portuguese_text: RequiredText
    italian_text: RequiredText
    hindi_text: RequiredText
    arab_text: RequiredText
    turkish_text: RequiredText
    japanese_text: RequiredText
    romanian_text: RequiredText
    polish_text: RequiredText
    czech_text: RequiredText
    indonesian_text: RequiredText
    level: Level
    coordinates: constr(min_length=1, max_length=50)
    province: constr(min_length=1, max_length=200)
    country: constr(min_length=1, max_length=50)
    tag: constr(min_length=1, max_length=50)
    image: RequiredText
    web: Optional[str] = None
    phone: Optional[str] = None

    def place_values(self) -> Tuple:
        """
        Values in Place column order, ready to bind as query parameters.
        """
        return tuple(
            getattr(self, field.attname) for field in Place._meta.concrete_fields
        )

    def min_place_values(self) -> Tuple:
        """
        Values in MinPlace column order.
        """
        return tuple(
            getattr(self, field.attname) for field in MinPlace._meta.concrete_fields
        )


def build_place_record(data: dict) -> PlaceRecord:
    """
    Construct a PlaceRecord, turning pydantic errors into InvalidFieldError.

    Args:
        data: Translated and coerced row keyed by Place field names

    Returns:
        Validated PlaceRecord

    Raises:
        InvalidFieldError: Naming the first offending field
    """
    try:
        return PlaceRecord(**data)
    except ValidationError as e:
        error = e.errors()[0]
        field = ".".join(str(loc) for loc in error["loc"])
        logger.debug(
            f"Record validation failed for {data.get('code', 'unknown')}: "
            f"{e.error_count()} errors"
        )
        raise InvalidFieldError(
            f"Invalid value for field '{field}': {error['msg']}", field
        ) from e


class FailedRow(BaseModel):
    code: str
    error: str
    status: Literal["failed"] = "failed"


class OverrideRow(BaseModel):
    code: str
    status: Literal["override"] = "override"


class IngestReport(BaseModel):
    """
    Summary of one CSV upload.

    Dumped with camelCase aliases for the HTTP response.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    message: str = "CSV data processed"
    total_records: int = Field(default=0, description="Data rows in the upload")
    success_records: int = Field(default=0, description="Rows accepted and written")
    override_records: int = Field(
        default=0, description="Accepted rows whose code already existed"
    )
    failed_records: int = Field(default=0, description="Rows rejected by validation")
    batches: int = Field(default=0, description="Batch upserts executed")
    dry_run: bool = False
    failed_details: List[FailedRow] = Field(default_factory=list)
    override_details: List[OverrideRow] = Field(default_factory=list)

    def to_response(self) -> dict:
        return self.model_dump(
            by_alias=True,
            include={
                "message",
                "total_records",
                "success_records",
                "override_records",
                "failed_records",
                "failed_details",
                "override_details",
            },
        )
