# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Lazy table creation gating every provider operation.

Each model's table is created once per store, on first use. Concurrent
first-use callers all wait on the same creation task; none of them is
dropped. A failed creation is forgotten, so the next call retries.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

from .builder import build_create_table
from .errors import SchemaError, SqlStoreError, StatementError, TransactionError
from .model import ID_COLUMN

if TYPE_CHECKING:
    from .model import Model
    from .store import Store

logger = logging.getLogger(__name__)


class SchemaManager:
    """Creates model tables and tracks which ones are ready.

    Attributes:
        store: The Store handle tables are created in.
    """

    def __init__(self, store: Store):
        self.store = store
        self._pending: dict[str, asyncio.Task[None]] = {}

    def is_ready(self, model: Model) -> bool:
        task = self._pending.get(model.name)
        return task is not None and task.done() and task.exception() is None

    async def ensure_ready(self, model: Model) -> None:
        """Wait until the table for `model` exists, creating it if needed.

        Raises:
            ConfigurationError: If the store cannot be opened.
            SchemaError: If the table cannot be created.
        """
        if self.is_ready(model):
            return
        task = self._pending.get(model.name)
        if task is None:
            task = asyncio.ensure_future(self._create_table(model))
            self._pending[model.name] = task
        try:
            await asyncio.shield(task)
        except SqlStoreError:
            if self._pending.get(model.name) is task:
                del self._pending[model.name]
            raise

    async def _create_table(self, model: Model) -> None:
        await self.store.open()
        stmt = build_create_table(model, self.store.adapter.pk_column(ID_COLUMN))
        try:
            async with self.store.transaction() as tx:
                await tx.execute(stmt.sql)
        except (StatementError, TransactionError) as exc:
            logger.error("Cannot create table '%s': %s", model.name, exc.detail)
            raise SchemaError(model.name, stmt.sql, exc.detail) from exc
        logger.debug("Table '%s' ready", model.name)

    async def table_columns(self, model: Model) -> list[dict[str, Any]]:
        """Return the stored column set of a model's table (name, type, notnull, pk)."""
        async with self.store.transaction(read_only=True) as tx:
            return await tx.fetch_all(
                'SELECT name, type, "notnull", pk FROM pragma_table_info(?) ORDER BY cid',
                [model.name],
            )


__all__ = ["SchemaManager"]
