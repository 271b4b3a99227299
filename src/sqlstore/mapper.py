# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Materialize select results as VALID model records."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from .model import ID_COLUMN, META_M_ID, STATE_VALID
from .types import text_to_date

if TYPE_CHECKING:
    from .model import Model, ModelRecord

logger = logging.getLogger(__name__)


def map_row(model: Model, row: dict[str, Any]) -> ModelRecord:
    """Build one record from a raw row.

    The hidden m_id column becomes the record's client identifier and is
    dropped from the fields. Textual Date values are parsed (text that does
    not parse is kept as stored) and Boolean 0/1 values become bool.
    """
    fields = dict(row)
    m_id = fields.pop(META_M_ID, None)
    persisted_id = fields.pop(ID_COLUMN, None)

    rec = model.create_record(
        fields, state=STATE_VALID, m_id=m_id, persisted_id=persisted_id
    )

    for name, attr in rec.meta.items():
        value = rec.record.get(name)
        if value is None:
            continue
        if attr.data_type == "Date" and isinstance(value, str):
            rec.record[name] = _parse_date(value)
        elif attr.data_type == "Boolean" and value in (0, 1):
            rec.record[name] = bool(value)
    return rec


def _parse_date(value: str) -> Any:
    """Parse stored date text; text in no ISO form is kept as stored."""
    try:
        return text_to_date(value)
    except ValueError:
        logger.warning("Unparseable date value kept as text: %r", value)
        return value


def map_rows(model: Model, rows: list[dict[str, Any]]) -> list[ModelRecord]:
    """Build records from rows, keeping the store's row order."""
    return [map_row(model, row) for row in rows]


__all__ = ["map_row", "map_rows"]
