# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Exception hierarchy for the data provider.

Failures are split by how far they travel:

- ConfigurationError / VersionError: reported to the presenter, never retried.
- SchemaError: logged, the table latch stays unset.
- ValidationError: raised before any I/O.
- StatementError: logged only, no callback fires.
- TransactionError / ReconciliationError: delivered to the on_error callback.
"""

from __future__ import annotations

from typing import Any


class SqlStoreError(Exception):
    """Base class for all provider errors."""


class ConfigurationError(SqlStoreError):
    """The host offers no usable storage engine, or the store cannot be opened."""


class VersionError(ConfigurationError):
    """The store carries a schema version different from the configured one."""

    def __init__(self, store_name: str, expected: int, actual: int):
        self.store_name = store_name
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Database version {expected} not supported by '{store_name}' (found {actual})"
        )


class SchemaError(SqlStoreError):
    """Table creation failed."""

    def __init__(self, table: str, sql: str | None = None, detail: Any = None):
        self.table = table
        self.sql = sql
        self.detail = detail
        msg = f"Cannot create table '{table}'"
        if detail is not None:
            msg += f": {detail}"
        super().__init__(msg)


class ValidationError(SqlStoreError):
    """An operation was rejected before reaching the store."""


class ConstraintMismatchError(ValidationError):
    """Constraint placeholders and parameters disagree in number."""

    def __init__(self, statement: str, expected: int, given: int):
        self.statement = statement
        self.expected = expected
        self.given = given
        super().__init__(
            f"Not enough parameters provided for statement: given: {given} needed: {expected}"
        )


class EmptyUpdateError(ValidationError):
    """Update requested for a record with no dirty attribute."""

    def __init__(self, table: str, m_id: Any):
        self.table = table
        self.m_id = m_id
        super().__init__(f"Nothing to update in '{table}' for record m_id={m_id!r}")


class MissingIdentifierError(ValidationError):
    """Update or delete requested for a record the store never assigned an ID."""

    def __init__(self, table: str, m_id: Any):
        self.table = table
        self.m_id = m_id
        super().__init__(f"Record m_id={m_id!r} in '{table}' has no persisted ID")


class StatementError(SqlStoreError):
    """A single statement failed inside a transaction."""

    def __init__(self, sql: str, detail: Any = None):
        self.sql = sql
        self.detail = detail
        super().__init__(f"Incorrect statement: {sql}")


class TransactionError(SqlStoreError):
    """The transaction as a whole failed (begin, commit, rollback, handle)."""

    def __init__(self, message: str, detail: Any = None):
        self.detail = detail
        super().__init__(message)


class ReconciliationError(TransactionError):
    """The store-assigned ID could not be read back after an insert."""

    def __init__(self, table: str, m_id: Any):
        self.table = table
        self.m_id = m_id
        super().__init__(f"No sequence value found for '{table}' (record m_id={m_id!r})")


__all__ = [
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
