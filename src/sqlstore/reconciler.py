# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Read back the store-assigned ID after an insert."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .errors import ReconciliationError
from .model import ID_COLUMN

if TYPE_CHECKING:
    from .model import ModelRecord
    from .store import Transaction

logger = logging.getLogger(__name__)


async def reconcile(tx: Transaction, record: ModelRecord) -> int:
    """Set record.persisted_id from the table's sequence value.

    Runs inside the insert's own transaction, so the sequence value read is
    the one the insert just assigned.

    Raises:
        ReconciliationError: If the sequence has no entry for the table.
    """
    query = (
        f"SELECT seq AS {ID_COLUMN} FROM {tx.adapter.sequence_table} WHERE name = ?"
    )
    row = await tx.fetch_one(query, [record.name])
    if row is None or row[ID_COLUMN] is None:
        raise ReconciliationError(record.name, record.m_id)
    record.persisted_id = row[ID_COLUMN]
    logger.debug("%s m_id=%s persisted as ID=%s", record.name, record.m_id, record.persisted_id)
    return record.persisted_id


__all__ = ["reconcile"]
