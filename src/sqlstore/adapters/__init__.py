# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Engine adapters for the embedded relational store.

Components:
    DbAdapter: Abstract base class defining the adapter interface.
    SqliteAdapter: SQLite adapter using aiosqlite.
    get_adapter: Factory function to create adapters from connection strings.

Example:
    Usage via Store (recommended)::

        from sqlstore.store import Store

        store = Store("/data/app.db")
        async with store.transaction() as tx:
            await tx.execute("INSERT INTO users (name, _m_id) VALUES (?, ?)", ["Ann", 1])
        # COMMIT on success, ROLLBACK on exception
"""

from ..errors import ConfigurationError
from .base import DbAdapter
from .sqlite import SqliteAdapter

__all__ = ["DbAdapter", "SqliteAdapter", "ADAPTERS", "get_adapter"]

# Adapter registry
ADAPTERS: dict[str, type[DbAdapter]] = {
    "sqlite": SqliteAdapter,
}


def get_adapter(connection_string: str) -> DbAdapter:
    """Create engine adapter from connection string.

    Connection string formats:
        - "/path/to/db.sqlite" → SQLite (absolute path)
        - "./path/to/db.sqlite" → SQLite (relative path)
        - "sqlite:/path/to/db.sqlite" → SQLite
        - "sqlite::memory:" or ":memory:" → SQLite in-memory

    Args:
        connection_string: Store name or connection string.

    Returns:
        Configured DbAdapter instance.

    Raises:
        ConfigurationError: If the string names no supported engine.
    """
    if (
        connection_string.startswith("/")
        or connection_string.startswith("./")
        or connection_string == ":memory:"
    ):
        return SqliteAdapter(connection_string)

    if ":" not in connection_string:
        raise ConfigurationError(
            f"Invalid store name: '{connection_string}'. "
            "Expected 'type:connection_info' or path (absolute or relative)."
        )

    db_type, connection_info = connection_string.split(":", 1)
    adapter_class = ADAPTERS.get(db_type.lower())
    if adapter_class is None:
        raise ConfigurationError(
            f"Unknown storage engine: '{db_type}'. Supported: {', '.join(sorted(ADAPTERS))}"
        )
    return adapter_class(connection_info)
