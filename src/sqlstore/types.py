# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Mapping of model attribute kinds to column types and value encodings."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from .errors import SchemaError

TYPE_MAPPING: dict[str, str] = {
    "String": "varchar(255)",
    "Text": "text",
    "Float": "float",
    "Integer": "integer",
    "Number": "integer",
    "Reference": "integer",
    "Date": "varchar(255)",
    "Boolean": "boolean",
}


def column_type(data_type: str, table: str = "?") -> str:
    """Return the upper-case column type for an attribute kind."""
    try:
        return TYPE_MAPPING[data_type].upper()
    except KeyError:
        raise SchemaError(table, detail=f"unknown data type '{data_type}'") from None


def date_to_text(value: date) -> str:
    """Canonical textual form of a date value (ISO-8601)."""
    return value.isoformat()


def text_to_date(text: str) -> date | datetime:
    """Parse the canonical textual form back into a date or datetime.

    Text without a time part gives a date. A trailing "Z" is read as UTC,
    the form JSON serializers emit.
    """
    if "T" not in text and " " not in text:
        return date.fromisoformat(text)
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


def serialize_value(data_type: str, value: Any) -> Any:
    """Convert a record value into the form bound to a statement parameter."""
    if value is None:
        return None
    if data_type == "Date" and isinstance(value, date):
        return date_to_text(value)
    if data_type == "Boolean":
        return 1 if value else 0
    return value
