# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""SQLite async adapter using aiosqlite with one long-lived store handle."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import aiosqlite

from .base import DbAdapter

if TYPE_CHECKING:
    from collections.abc import Sequence


class SqliteAdapter(DbAdapter):
    """SQLite async adapter.

    The connection is opened in autocommit mode (isolation_level=None) so
    transaction boundaries are always explicit: begin() issues BEGIN and
    commit()/rollback() close it. Rows come back as plain dicts keyed by
    column name, in the engine's row order.
    """

    sequence_table = "sqlite_sequence"

    def __init__(self, db_path: str):
        self.db_path = db_path or ":memory:"

    async def acquire(self) -> aiosqlite.Connection:
        """Open the store handle."""
        return await aiosqlite.connect(self.db_path, isolation_level=None)

    async def release(self, conn: aiosqlite.Connection) -> None:
        """Close the store handle."""
        await conn.close()

    async def begin(self, conn: aiosqlite.Connection) -> None:
        """Start a deferred transaction."""
        await conn.execute("BEGIN")

    async def commit(self, conn: aiosqlite.Connection) -> None:
        """Commit transaction on connection."""
        await conn.commit()

    async def rollback(self, conn: aiosqlite.Connection) -> None:
        """Rollback transaction on connection."""
        await conn.rollback()

    async def execute(
        self, conn: aiosqlite.Connection, query: str, params: Sequence[Any] | None = None
    ) -> int:
        """Execute query, return affected row count."""
        cursor = await conn.execute(query, tuple(params or ()))
        try:
            return cursor.rowcount
        finally:
            await cursor.close()

    async def fetch_one(
        self, conn: aiosqlite.Connection, query: str, params: Sequence[Any] | None = None
    ) -> dict[str, Any] | None:
        """Execute query, return single row as dict or None."""
        async with conn.execute(query, tuple(params or ())) as cursor:
            row = await cursor.fetchone()
            if row is None:
                return None
            cols = [c[0] for c in cursor.description]
            return dict(zip(cols, row, strict=True))

    async def fetch_all(
        self, conn: aiosqlite.Connection, query: str, params: Sequence[Any] | None = None
    ) -> list[dict[str, Any]]:
        """Execute query, return all rows as list of dicts."""
        async with conn.execute(query, tuple(params or ())) as cursor:
            rows = await cursor.fetchall()
            cols = [c[0] for c in cursor.description]
            return [dict(zip(cols, row, strict=True)) for row in rows]

    async def pragma(self, conn: aiosqlite.Connection, name: str, value: Any = None) -> Any:
        """Read a pragma, or set it to an integer value."""
        if value is not None:
            await conn.execute(f"PRAGMA {name} = {int(value)}")
            return int(value)
        async with conn.execute(f"PRAGMA {name}") as cursor:
            row = await cursor.fetchone()
            return row[0] if row else None
