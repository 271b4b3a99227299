# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Async CRUD data provider mapping model records onto store tables.

SqlProvider is the public surface. Every operation is completed through the
callbacks passed with the call; the coroutine's boolean result only says
whether the operation reached the store.

Flow of one call:
    1. Operation built (callbacks resolved, constraint coerced)
    2. Statement built (ValidationError stops here, before any I/O)
    3. Table ensured (first use creates it; concurrent callers wait together)
    4. Statement executed in its transaction
    5. Post-processing (ID read-back, record manager, result mapping)
    6. on_success / on_error dispatched

Usage:
    provider = configure("/data/app.db")

    ann = users.create_record({"name": "Ann", "age": 30})
    await provider.save(model=ann, on_success=saved, on_error=failed)

    await provider.find(
        model=users,
        constraint={"statement": "WHERE age > ?", "parameters": [25]},
        order="age ASC",
        limit=10,
        on_success={"target": view, "action": "show"},
    )

    await provider.delete(model=ann, on_success=removed)
    await provider.close()
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from .builder import build_delete, build_insert, build_select, build_update
from .config import DEFAULT_SIZE, StoreConfig
from .errors import ConfigurationError, SchemaError, ValidationError, VersionError
from .executor import Operation, OpKind, TransactionExecutor, report_error
from .model import STATE_NEW
from .presenter import LogPresenter
from .schema import SchemaManager
from .store import Store

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .builder import Constraint, Statement
    from .model import Model, ModelRecord
    from .presenter import Presenter

logger = logging.getLogger(__name__)


class SqlProvider:
    """Data provider bound to one store.

    The store handle, schema manager and executor are created on first use
    and shared by every call made through this instance. No per-call state
    is kept on the provider.

    Attributes:
        config: StoreConfig for this provider.
        presenter: Receives alerts for configuration errors.
    """

    def __init__(self, config: StoreConfig | None = None, presenter: Presenter | None = None):
        self.config = config or StoreConfig()
        self.presenter: Presenter = presenter or LogPresenter()
        self._store: Store | None = None
        self._schema: SchemaManager | None = None
        self._executor: TransactionExecutor | None = None

    @property
    def store(self) -> Store:
        """Store handle (created lazily).

        Raises:
            ConfigurationError: If the store name selects no supported engine.
        """
        if self._store is None:
            self._store = Store(
                self.config.store_name, size=self.config.size, version=self.config.version
            )
        return self._store

    @property
    def schema(self) -> SchemaManager:
        if self._schema is None:
            self._schema = SchemaManager(self.store)
        return self._schema

    @property
    def executor(self) -> TransactionExecutor:
        if self._executor is None:
            self._executor = TransactionExecutor(self.store)
        return self._executor

    # -------------------------------------------------------------------------
    # Public operations
    # -------------------------------------------------------------------------

    async def save(
        self, model: ModelRecord, on_success: Any = None, on_error: Any = None
    ) -> bool:
        """Insert a NEW record or update the dirty fields of a VALID one.

        on_success is called without arguments once the transaction commits;
        after an insert, model.persisted_id is already set.
        """
        op = Operation.create(model, on_success, on_error)
        record = op.record
        if record.state == STATE_NEW:
            kind, builder = OpKind.INSERT, build_insert
        else:
            kind, builder = OpKind.UPDATE, build_update
        stmt = await self._build_or_report(op, builder, record)
        if stmt is None or not await self._prepare(op):
            return False
        return await self.executor.perform_op(stmt, op, kind)

    async def find(
        self,
        model: Model | ModelRecord,
        on_success: Any = None,
        on_error: Any = None,
        columns: Sequence[str] | None = None,
        constraint: Constraint | dict[str, Any] | None = None,
        order: str | None = None,
        limit: int | str | None = None,
    ) -> bool:
        """Select records; on_success receives the list of VALID records.

        A constraint whose placeholder count differs from its parameter
        count is rejected before any I/O: the call returns False and neither
        callback fires.
        """
        op = Operation.create(
            model, on_success, on_error,
            columns=columns, constraint=constraint, order=order, limit=limit,
        )
        try:
            stmt = build_select(op.descriptor, op.columns, op.constraint, op.order, op.limit)
        except ValidationError as exc:
            logger.error("%s", exc)
            return False
        if not await self._prepare(op):
            return False
        return await self.executor.perform_read(stmt, op)

    async def delete(
        self, model: ModelRecord, on_success: Any = None, on_error: Any = None
    ) -> bool:
        """Delete a record by its persisted ID and drop it from the record manager."""
        op = Operation.create(model, on_success, on_error)
        stmt = await self._build_or_report(op, build_delete, op.record)
        if stmt is None or not await self._prepare(op):
            return False
        return await self.executor.perform_op(stmt, op, OpKind.DELETE)

    del_ = delete

    async def close(self) -> None:
        """Release the store handle."""
        if self._store is not None:
            await self._store.close()

    async def __aenter__(self) -> SqlProvider:
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    # -------------------------------------------------------------------------
    # Private helpers
    # -------------------------------------------------------------------------

    async def _build_or_report(
        self, op: Operation, builder: Any, record: ModelRecord
    ) -> Statement | None:
        try:
            return builder(record)
        except ValidationError as exc:
            await report_error(op, exc)
            return None

    async def _prepare(self, op: Operation) -> bool:
        """Ensure the store is open and the table exists. False stops the call."""
        try:
            await self.schema.ensure_ready(op.descriptor)
        except ConfigurationError as exc:
            logger.error("Store '%s' unavailable: %s", self.config.store_name, exc)
            self._present(exc)
            return False
        except SchemaError as exc:
            logger.error("%s", exc)
            return False
        return True

    def _present(self, exc: ConfigurationError) -> None:
        if isinstance(exc, VersionError):
            self.presenter.alert(
                f"Database version {exc.expected} not supported.", "Invalid database version."
            )
        else:
            self.presenter.alert(str(exc), "Storage not available.")


def configure(
    store_name: str | StoreConfig,
    size: int | None = None,
    presenter: Presenter | None = None,
    **kwargs: Any,
) -> SqlProvider:
    """Create a provider bound to a store.

    Args:
        store_name: Store name, or a complete StoreConfig.
        size: Maximum store size in bytes (None = DEFAULT_SIZE, 1 MiB).
        presenter: Alert target for configuration errors.
        **kwargs: Further StoreConfig fields (version, description).
    """
    if isinstance(store_name, StoreConfig):
        return SqlProvider(store_name, presenter=presenter)
    config = StoreConfig(store_name=store_name, size=size or DEFAULT_SIZE, **kwargs)
    return SqlProvider(config, presenter=presenter)


__all__ = ["SqlProvider", "configure"]
