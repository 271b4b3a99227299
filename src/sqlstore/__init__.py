# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""genro-sqlstore: async CRUD data provider over an embedded SQL store.

Components:
    SqlProvider: Public save/find/delete surface, bound to one store.
    configure: Factory returning a provider for a store name.
    Model, ModelRecord, Attribute, RecordManager: In-memory model side.
    BoundCallback, PlainCallback: Completion handler variants.
    Constraint: Select filter with positional parameters.
    Store: Store handle with serialized transactions.

Example:
    Insert then query::

        from sqlstore import Attribute, Model, configure

        users = Model("User", {
            "name": Attribute("String"),
            "age": Attribute("Integer"),
        })
        provider = configure("/data/app.db")

        ann = users.create_record({"name": "Ann", "age": 30})
        await provider.save(model=ann, on_success=lambda: print(ann.persisted_id))
        await provider.find(
            model=users,
            constraint={"statement": "WHERE age > ?", "parameters": [25]},
            on_success=lambda records: print(records),
        )
"""

from .builder import Constraint, Statement
from .callbacks import BoundCallback, PlainCallback
from .config import StoreConfig, config_from_env
from .errors import (
    ConfigurationError,
    ConstraintMismatchError,
    EmptyUpdateError,
    MissingIdentifierError,
    ReconciliationError,
    SchemaError,
    SqlStoreError,
    StatementError,
    TransactionError,
    ValidationError,
    VersionError,
)
from .model import (
    ID_COLUMN,
    META_M_ID,
    STATE_NEW,
    STATE_VALID,
    Attribute,
    Model,
    ModelRecord,
    RecordManager,
)
from .presenter import LogPresenter, Presenter
from .provider import SqlProvider, configure
from .store import Store

__version__ = "0.1.0"

__all__ = [
    # Provider
    "SqlProvider",
    "configure",
    "StoreConfig",
    "config_from_env",
    "Store",
    # Model side
    "Attribute",
    "Model",
    "ModelRecord",
    "RecordManager",
    "STATE_NEW",
    "STATE_VALID",
    "META_M_ID",
    "ID_COLUMN",
    # Operations
    "Constraint",
    "Statement",
    "BoundCallback",
    "PlainCallback",
    "Presenter",
    "LogPresenter",
    # Exceptions
    "SqlStoreError",
    "ConfigurationError",
    "VersionError",
    "SchemaError",
    "ValidationError",
    "ConstraintMismatchError",
    "EmptyUpdateError",
    "MissingIdentifierError",
    "StatementError",
    "TransactionError",
    "ReconciliationError",
]
