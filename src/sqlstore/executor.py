# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Run built statements in transactions and route outcomes to callbacks.

Outcome routing:

- StatementError: logged, no callback fires.
- TransactionError (ReconciliationError included): on_error receives it.
- Success: record side effects first (identity on INSERT, record manager
  removal on DELETE), then on_success.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

from .builder import Constraint
from .callbacks import Callback, as_callback, dispatch
from .errors import StatementError, TransactionError
from .mapper import map_rows
from .model import STATE_VALID, Model, ModelRecord
from .reconciler import reconcile

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .builder import Statement
    from .store import Store

logger = logging.getLogger(__name__)


class OpKind(Enum):
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


@dataclass
class Operation:
    """Per-call context: the target model/record, its callbacks and select options."""

    model: Model | ModelRecord
    on_success: Callback | None = None
    on_error: Callback | None = None
    columns: Sequence[str] | None = None
    constraint: Constraint | None = None
    order: str | None = None
    limit: int | str | None = None

    @classmethod
    def create(
        cls, model: Model | ModelRecord, on_success: Any = None, on_error: Any = None, **kwargs: Any
    ) -> Operation:
        """Build an Operation, resolving callbacks and constraint at the boundary."""
        if not isinstance(model, (Model, ModelRecord)):
            raise TypeError(f"Expected Model or ModelRecord, got {type(model).__name__}")
        constraint = Constraint.coerce(kwargs.pop("constraint", None))
        return cls(
            model,
            as_callback(on_success),
            as_callback(on_error),
            constraint=constraint,
            **kwargs,
        )

    @property
    def descriptor(self) -> Model:
        return self.model.model if isinstance(self.model, ModelRecord) else self.model

    @property
    def record(self) -> ModelRecord:
        if not isinstance(self.model, ModelRecord):
            raise TypeError(f"Operation on '{self.model.name}' needs a record, not a model")
        return self.model


class TransactionExecutor:
    """Executes single-statement operations against a Store."""

    def __init__(self, store: Store):
        self.store = store

    async def perform_op(self, statement: Statement, op: Operation, kind: OpKind) -> bool:
        """Run an INSERT, UPDATE or DELETE in a read/write transaction.

        INSERT reads back the assigned ID inside the same transaction, so
        on_success always observes the record with persisted_id set.

        Returns:
            True if on_success was reached, False otherwise.
        """
        record = op.record
        try:
            async with self.store.transaction() as tx:
                await tx.execute(statement.sql, statement.params)
                if kind is OpKind.INSERT:
                    await reconcile(tx, record)
        except StatementError as exc:
            logger.error("Incorrect statement: %s (%s)", exc.sql, exc.detail)
            return False
        except TransactionError as exc:
            if kind is OpKind.INSERT:
                # rolled back: the ID read inside the transaction is void
                record.persisted_id = None
            await report_error(op, exc)
            return False

        if kind is OpKind.INSERT:
            record.state = STATE_VALID
        elif kind is OpKind.DELETE:
            record.record_manager.remove(record.m_id)

        await dispatch(op.on_success)
        return True

    async def perform_read(self, statement: Statement, op: Operation) -> bool:
        """Run a SELECT in a read-only transaction and deliver mapped records.

        Returns:
            True if on_success was reached, False otherwise.
        """
        try:
            async with self.store.transaction(read_only=True) as tx:
                rows = await tx.fetch_all(statement.sql, statement.params)
        except StatementError as exc:
            logger.error("Incorrect statement: %s (%s)", exc.sql, exc.detail)
            return False
        except TransactionError as exc:
            await report_error(op, exc)
            return False

        records = map_rows(op.descriptor, rows)
        await dispatch(op.on_success, records)
        return True


async def report_error(op: Operation, exc: Exception) -> None:
    """Deliver a failure to on_error, or log it when there is none."""
    logger.warning("%s operation failed: %s", op.descriptor.name, exc)
    if not await dispatch(op.on_error, exc):
        logger.error("No on_error callback defined for '%s'", op.descriptor.name)


__all__ = ["OpKind", "Operation", "TransactionExecutor", "report_error"]
