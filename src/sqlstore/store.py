# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Store handle with serialized read/write and read-only transactions."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import sqlite3
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

from .adapters import DbAdapter, get_adapter
from .errors import ConfigurationError, StatementError, TransactionError, VersionError

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Sequence

logger = logging.getLogger(__name__)

# Engine-level failures. aiosqlite raises ValueError on a closed handle.
_ENGINE_ERRORS = (sqlite3.Error, ValueError)


class Transaction:
    """Statement execution bound to one open transaction.

    Any engine error raised by a statement becomes StatementError carrying
    the SQL text; the enclosing Store.transaction() then rolls back.
    """

    def __init__(self, store: Store, conn: Any, read_only: bool):
        self.store = store
        self.conn = conn
        self.read_only = read_only

    @property
    def adapter(self) -> DbAdapter:
        return self.store.adapter

    async def execute(self, query: str, params: Sequence[Any] | None = None) -> int:
        """Execute statement, return affected row count."""
        logger.debug("execute: %s %r", query, params)
        try:
            return await self.adapter.execute(self.conn, query, params)
        except _ENGINE_ERRORS as exc:
            raise StatementError(query, exc) from exc

    async def fetch_one(
        self, query: str, params: Sequence[Any] | None = None
    ) -> dict[str, Any] | None:
        """Execute query, return single row."""
        logger.debug("fetch_one: %s %r", query, params)
        try:
            return await self.adapter.fetch_one(self.conn, query, params)
        except _ENGINE_ERRORS as exc:
            raise StatementError(query, exc) from exc

    async def fetch_all(
        self, query: str, params: Sequence[Any] | None = None
    ) -> list[dict[str, Any]]:
        """Execute query, return all rows in store order."""
        logger.debug("fetch_all: %s %r", query, params)
        try:
            return await self.adapter.fetch_all(self.conn, query, params)
        except _ENGINE_ERRORS as exc:
            raise StatementError(query, exc) from exc


class Store:
    """The store handle shared by every operation of one provider.

    The underlying connection is opened lazily on first use and kept for the
    lifetime of the Store. Transactions are serialized in arrival order: a
    transaction runs only after every earlier one has committed or rolled
    back.

    Usage:
        store = Store("/data/app.db")
        async with store.transaction() as tx:
            await tx.execute("UPDATE User SET age = ? WHERE ID = ?", [31, 1])
        # COMMIT on success, ROLLBACK on exception

        async with store.transaction(read_only=True) as tx:
            rows = await tx.fetch_all("SELECT * FROM User")

        await store.close()
    """

    def __init__(
        self,
        connection_string: str,
        size: int | None = None,
        version: int | None = None,
    ):
        """Initialize the store handle.

        Args:
            connection_string: Store name or connection string.
            size: Maximum store size in bytes (None = no quota).
            version: Expected schema version (None = accept any).

        Raises:
            ConfigurationError: If the connection string names no supported engine.
        """
        self.connection_string = connection_string
        self.size = size
        self.version = version
        self.adapter: DbAdapter = get_adapter(connection_string)
        self._conn: Any = None
        self._open_lock = asyncio.Lock()
        self._tx_lock = asyncio.Lock()

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    # -------------------------------------------------------------------------
    # Handle management
    # -------------------------------------------------------------------------

    async def open(self) -> Any:
        """Open the handle if needed and return it.

        Raises:
            ConfigurationError: If the engine cannot open the store.
            VersionError: If the stored schema version differs from the configured one.
        """
        async with self._open_lock:
            if self._conn is not None:
                return self._conn
            try:
                conn = await self.adapter.acquire()
            except (sqlite3.Error, OSError) as exc:
                raise ConfigurationError(
                    f"Cannot open store '{self.connection_string}': {exc}"
                ) from exc
            try:
                await self._apply_quota(conn)
                await self._check_version(conn)
            except _ENGINE_ERRORS as exc:
                await self.adapter.release(conn)
                raise ConfigurationError(
                    f"Cannot open store '{self.connection_string}': {exc}"
                ) from exc
            except BaseException:
                await self.adapter.release(conn)
                raise
            logger.debug("Store '%s' opened", self.connection_string)
            self._conn = conn
            return conn

    async def close(self) -> None:
        """Release the handle. A later operation opens it again."""
        async with self._open_lock:
            if self._conn is None:
                return
            conn, self._conn = self._conn, None
            await self.adapter.release(conn)
            logger.debug("Store '%s' closed", self.connection_string)

    async def _apply_quota(self, conn: Any) -> None:
        if not self.size:
            return
        page_size = await self.adapter.pragma(conn, "page_size")
        await self.adapter.pragma(conn, "max_page_count", max(1, self.size // page_size))

    async def _check_version(self, conn: Any) -> None:
        if self.version is None:
            return
        current = await self.adapter.pragma(conn, "user_version")
        if current == 0:
            await self.adapter.pragma(conn, "user_version", self.version)
        elif current != self.version:
            raise VersionError(self.connection_string, self.version, current)

    # -------------------------------------------------------------------------
    # Transactions
    # -------------------------------------------------------------------------

    @asynccontextmanager
    async def transaction(self, read_only: bool = False) -> AsyncIterator[Transaction]:
        """Run the enclosed statements as one transaction.

        Raises:
            StatementError: From a failing statement (after rollback).
            TransactionError: If begin, commit or rollback fails.
        """
        conn = await self.open()
        async with self._tx_lock:
            try:
                if read_only:
                    await self.adapter.set_query_only(conn, True)
                await self.adapter.begin(conn)
            except _ENGINE_ERRORS as exc:
                await self._reset_query_only(conn, read_only)
                raise TransactionError(f"Cannot begin transaction: {exc}", exc) from exc

            try:
                yield Transaction(self, conn, read_only)
            except BaseException:
                await self._end(conn, read_only, commit=False)
                raise
            await self._end(conn, read_only, commit=True)

    async def _end(self, conn: Any, read_only: bool, commit: bool) -> None:
        action = "commit" if commit else "rollback"
        try:
            if commit:
                await self.adapter.commit(conn)
            else:
                await self.adapter.rollback(conn)
        except _ENGINE_ERRORS as exc:
            if commit:
                with contextlib.suppress(*_ENGINE_ERRORS):
                    await self.adapter.rollback(conn)
            raise TransactionError(f"Transaction {action} failed: {exc}", exc) from exc
        finally:
            await self._reset_query_only(conn, read_only)

    async def _reset_query_only(self, conn: Any, read_only: bool) -> None:
        if not read_only:
            return
        try:
            await self.adapter.set_query_only(conn, False)
        except _ENGINE_ERRORS as exc:
            raise TransactionError(f"Cannot leave read-only mode: {exc}", exc) from exc


__all__ = ["Store", "Transaction"]
