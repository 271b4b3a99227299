# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Provider configuration.

Usage:
    config = StoreConfig(store_name="/data/app.db", size=5 * 1024 * 1024)
    provider = SqlProvider(config)

    # From environment (SQLSTORE_NAME, SQLSTORE_SIZE, SQLSTORE_VERSION):
    provider = SqlProvider(config_from_env())
"""

from __future__ import annotations

import os
from dataclasses import dataclass

# Quota applied by configure() when none is given
DEFAULT_SIZE = 1024 * 1024


@dataclass
class StoreConfig:
    """Configuration for one provider instance.

    Attributes:
        store_name: SQLite path, "./relative.db", ":memory:" or "sqlite:<path>".
        size: Maximum store size in bytes. None means no quota; configure()
            substitutes DEFAULT_SIZE.
        version: Expected schema version. None opens the store regardless of
            its version; a fresh store is stamped with the configured version.
        description: Informational label, shown as caption by `sqlstore tables`
            when the store comes from the environment.
    """

    store_name: str = ":memory:"
    size: int | None = None
    version: int | None = None
    description: str = ""


def config_from_env() -> StoreConfig:
    """Build StoreConfig from SQLSTORE_* environment variables.

    Environment variables:
        SQLSTORE_NAME: Store name (default: :memory:)
        SQLSTORE_SIZE: Quota in bytes (default: no quota)
        SQLSTORE_VERSION: Expected schema version (default: any)
    """
    size = os.environ.get("SQLSTORE_SIZE")
    version = os.environ.get("SQLSTORE_VERSION")
    return StoreConfig(
        store_name=os.environ.get("SQLSTORE_NAME", ":memory:"),
        size=int(size) if size else None,
        version=int(version) if version else None,
        description=os.environ.get("SQLSTORE_DESCRIPTION", ""),
    )


__all__ = ["DEFAULT_SIZE", "StoreConfig", "config_from_env"]
