# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Shared fixtures: model descriptors, providers on temporary SQLite files, SQL capture."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from typing import Any

import pytest
import pytest_asyncio

from sqlstore import Attribute, Model, SqlProvider, StoreConfig
from sqlstore.store import Transaction


class Recorder:
    """Callable that records every invocation, usable as a plain callback."""

    def __init__(self) -> None:
        self.calls: list[tuple[Any, ...]] = []

    def __call__(self, *args: Any) -> None:
        self.calls.append(args)

    @property
    def called(self) -> bool:
        return bool(self.calls)


@pytest.fixture
def recorder():
    """Factory for fresh Recorder instances."""
    return Recorder


@pytest.fixture
def users() -> Model:
    """User{name: String, age: Integer}."""
    return Model("User", {
        "name": Attribute("String"),
        "age": Attribute("Integer"),
    })


@pytest.fixture
def events() -> Model:
    """Model covering every attribute kind."""
    return Model("Event", {
        "title": Attribute("String", is_required=True),
        "notes": Attribute("Text"),
        "starts": Attribute("Date"),
        "price": Attribute("Float"),
        "seats": Attribute("Number"),
        "owner": Attribute("Reference"),
        "public": Attribute("Boolean"),
    })


@pytest.fixture
def db_path(tmp_path) -> str:
    return str(tmp_path / "test.db")


@pytest_asyncio.fixture
async def provider(db_path: str) -> AsyncGenerator[SqlProvider, None]:
    """Provider bound to a fresh SQLite file."""
    provider = SqlProvider(StoreConfig(store_name=db_path))
    yield provider
    await provider.close()


@pytest.fixture
def sql_log(monkeypatch) -> list[tuple[str, list[Any]]]:
    """Capture (sql, params) of every statement sent through a Transaction."""
    log: list[tuple[str, list[Any]]] = []

    def wrap(original):
        async def wrapper(self, query, params=None):
            log.append((query, list(params or [])))
            return await original(self, query, params)

        return wrapper

    for name in ("execute", "fetch_one", "fetch_all"):
        monkeypatch.setattr(Transaction, name, wrap(getattr(Transaction, name)))
    return log
