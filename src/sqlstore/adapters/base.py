# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Base adapter class for the embedded async relational engine."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Sequence


class DbAdapter(ABC):
    """Abstract base class for async engine adapters.

    Provides a unified interface for the store handle with:
    - Handle management (acquire, release)
    - Explicit transaction control (begin, commit, rollback)
    - Raw statement execution (execute, fetch_one, fetch_all)
    - Engine metadata (pragma, set_query_only, sequence table, primary key)

    Connection model:
    - acquire(): Opens the store handle (one per provider)
    - release(conn): Closes the store handle

    Statements use positional `?` placeholders, the same form accepted by
    caller-supplied constraints, so one parameter list serves a whole
    statement.
    """

    sequence_table: str = "sqlite_sequence"

    def pk_column(self, name: str) -> str:
        """Return SQL definition for the store-assigned primary key column."""
        return f"{name} INTEGER PRIMARY KEY ASC AUTOINCREMENT UNIQUE"

    @abstractmethod
    async def acquire(self) -> Any:
        """Open the store handle."""
        ...

    @abstractmethod
    async def release(self, conn: Any) -> None:
        """Close the store handle."""
        ...

    # -------------------------------------------------------------------------
    # Connection-bound operations
    # -------------------------------------------------------------------------

    @abstractmethod
    async def begin(self, conn: Any) -> None:
        """Start an explicit transaction on connection."""
        ...

    @abstractmethod
    async def commit(self, conn: Any) -> None:
        """Commit transaction on connection."""
        ...

    @abstractmethod
    async def rollback(self, conn: Any) -> None:
        """Rollback transaction on connection."""
        ...

    @abstractmethod
    async def execute(
        self, conn: Any, query: str, params: Sequence[Any] | None = None
    ) -> int:
        """Execute query on connection, return affected row count."""
        ...

    @abstractmethod
    async def fetch_one(
        self, conn: Any, query: str, params: Sequence[Any] | None = None
    ) -> dict[str, Any] | None:
        """Execute query on connection, return single row as dict or None."""
        ...

    @abstractmethod
    async def fetch_all(
        self, conn: Any, query: str, params: Sequence[Any] | None = None
    ) -> list[dict[str, Any]]:
        """Execute query on connection, return all rows as list of dicts."""
        ...

    @abstractmethod
    async def pragma(self, conn: Any, name: str, value: Any = None) -> Any:
        """Read a pragma, or set it when value is given."""
        ...

    async def set_query_only(self, conn: Any, enabled: bool) -> None:
        """Toggle read-only mode for subsequent statements."""
        await self.pragma(conn, "query_only", 1 if enabled else 0)
