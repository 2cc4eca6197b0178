"""
Normalization utilities for places CSV rows.

This module strips encoding artifacts from keys and values, translates the
CSV display column names into storage field names, and coerces raw cell
values into the strings stored in the database.
"""

import re
from typing import Any, Dict, Optional

BOM = "\ufeff"

_WHITESPACE_RUN = re.compile(r"\s+")

# CSV display name -> Place field name
COLUMN_MAPPING = {
    "CODE": "code",
    "SOURCES": "sources",
    "Name": "name",
    "English Text": "english_text",
    "Spanish Text": "spanish_text",
    "Chinese Text": "chinese_text",
    "German Text": "german_text",
    "French Text": "french_text",
    "Russian Text": "russian_text",
    "Portuguese Text": "portuguese_text",
    "Italian Text": "italian_text",
    "Hindi Text": "hindi_text",
    "Arab Text": "arab_text",
    "Turkish Text": "turkish_text",
    "Japanese Text": "japanese_text",
    "Romanian Text": "romanian_text",
    "Polish Text": "polish_text",
    "Czech Text": "czech_text",
    "Indonesian Text": "indonesian_text",
    "Level": "level",
    "Coordinates": "coordinates",
    "Province": "province",
    "Country": "country",
    "Tag": "tag",
    "IMAGE": "image",
    "Web": "web",
    "Phone": "phone",
}

# Stored as NULL when blank
NULLABLE_FIELDS = frozenset({"web", "phone"})


def strip_bom(value: str) -> str:
    """
    Remove every byte-order mark from a string.
    """
    return value.replace(BOM, "")


def normalize_key(key: str) -> str:
    """
    Clean a column name: drop byte-order marks and surrounding whitespace.
    """
    return strip_bom(key).strip()


def normalize_keys(row: Dict[str, Any]) -> Dict[str, Any]:
    """
    Return a copy of `row` with every key passed through normalize_key.

    Args:
        row: Raw row mapping as produced by the CSV decoder

    Returns:
        New mapping with cleaned keys and untouched values
    """
    return {normalize_key(key): value for key, value in row.items()}


def collapse_whitespace(value: Optional[str]) -> str:
    """
    Trim a value, strip byte-order marks and collapse internal whitespace runs.

    None becomes an empty string.
    """
    if value is None:
        return ""
    return _WHITESPACE_RUN.sub(" ", strip_bom(str(value)).strip())


def normalize_string(value: Any, default: Optional[str] = None) -> Optional[str]:
    """
    Force a cell value to a trimmed string.

    Args:
        value: Raw cell value
        default: Returned when the value is None or blank after trimming

    Returns:
        Trimmed string or default
    """
    if value is None:
        return default

    normalized = str(value).strip()
    return normalized if normalized else default


def translate_columns(row: Dict[str, Any]) -> Dict[str, Any]:
    """
    Rename CSV display columns to storage field names.

    Columns missing from COLUMN_MAPPING keep their name.
    """
    return {COLUMN_MAPPING.get(key, key): value for key, value in row.items()}


def coerce_row(row: Dict[str, Any]) -> Dict[str, Optional[str]]:
    """
    Coerce every value of a translated row to a trimmed string.

    Blank values of nullable fields become None; blank values elsewhere stay
    as empty strings so that record validation reports them.
    """
    coerced = {}
    for field, value in row.items():
        if field in NULLABLE_FIELDS:
            coerced[field] = normalize_string(value)
        else:
            coerced[field] = normalize_string(value, "")
    return coerced
