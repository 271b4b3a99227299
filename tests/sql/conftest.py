# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Store fixtures for the SQL layer tests.

Each fixture works on a SQLite file inside pytest's tmp_path, so tests can
reopen the same store to check what was committed.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator

import pytest_asyncio

from sqlstore.schema import SchemaManager
from sqlstore.store import Store


@pytest_asyncio.fixture
async def store(db_path: str) -> AsyncGenerator[Store, None]:
    """Store on a temporary SQLite file, closed after the test."""
    store = Store(db_path)
    yield store
    await store.close()


@pytest_asyncio.fixture
async def schema(store: Store) -> SchemaManager:
    """SchemaManager bound to the temporary store."""
    return SchemaManager(store)
