# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""SQL statement builder for model records.

Every value reaches the engine as a bound `?` parameter, the same path used
by caller-supplied constraints. Identifiers (table and attribute names) come
from the model descriptor and are emitted as-is.

Usage:
    stmt = build_select(users, constraint=Constraint("WHERE age > ?", [25]),
                        order="age ASC", limit=10)
    stmt.sql     # 'SELECT * FROM User WHERE age > ? ORDER BY age ASC LIMIT 10'
    stmt.params  # [25]
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from .errors import ConstraintMismatchError, EmptyUpdateError, MissingIdentifierError
from .model import ID_COLUMN, META_M_ID
from .types import column_type, serialize_value

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .model import Model, ModelRecord


@dataclass(frozen=True)
class Statement:
    """SQL text plus its positional parameters."""

    sql: str
    params: list[Any] = field(default_factory=list)


@dataclass(frozen=True)
class Constraint:
    """Filter for a select: statement text with `?` placeholders and values.

    The statement is appended verbatim (e.g. "WHERE age > ?"). When it has no
    placeholders, the caller is responsible for its safety.
    """

    statement: str
    parameters: Sequence[Any] | None = None

    @classmethod
    def coerce(cls, value: Constraint | Mapping[str, Any] | None) -> Constraint | None:
        if value is None or isinstance(value, Constraint):
            return value
        return cls(value["statement"], value.get("parameters"))

    @property
    def placeholder_count(self) -> int:
        return self.statement.count("?")


def build_create_table(model: Model, pk_column: str | None = None) -> Statement:
    """Generate CREATE TABLE IF NOT EXISTS for a model.

    Columns: store-assigned ID, declared attributes in order, hidden m_id.
    """
    col_defs = [pk_column or f"{ID_COLUMN} INTEGER PRIMARY KEY ASC AUTOINCREMENT UNIQUE"]
    for name, attr in model.attributes.items():
        col = f"{name} {column_type(attr.data_type, model.name)}"
        if attr.is_required:
            col += " NOT NULL"
        col_defs.append(col)
    col_defs.append(f"{META_M_ID} INTEGER NOT NULL")
    return Statement(f"CREATE TABLE IF NOT EXISTS {model.name} ({', '.join(col_defs)})")


def build_insert(record: ModelRecord) -> Statement:
    """INSERT listing every record field, then the hidden m_id column."""
    meta = record.meta
    columns = list(record.record)
    params = [serialize_value(meta[c].data_type, record.record[c]) for c in columns]
    columns.append(META_M_ID)
    params.append(record.m_id)
    placeholders = ", ".join("?" for _ in columns)
    return Statement(
        f"INSERT INTO {record.name} ({', '.join(columns)}) VALUES ({placeholders})", params
    )


def build_update(record: ModelRecord) -> Statement:
    """UPDATE of the dirty fields only, keyed by persisted ID.

    Raises:
        MissingIdentifierError: If the record has no persisted ID.
        EmptyUpdateError: If no field is dirty.
    """
    if record.persisted_id is None:
        raise MissingIdentifierError(record.name, record.m_id)

    assignments = []
    params = []
    for name, value in record.record.items():
        attr = record.meta[name]
        if name == ID_COLUMN or not attr.is_updated:
            continue
        assignments.append(f"{name} = ?")
        params.append(serialize_value(attr.data_type, value))

    if not assignments:
        raise EmptyUpdateError(record.name, record.m_id)

    params.append(record.persisted_id)
    return Statement(
        f"UPDATE {record.name} SET {', '.join(assignments)} WHERE {ID_COLUMN} = ?", params
    )


def build_delete(record: ModelRecord) -> Statement:
    """DELETE by persisted ID.

    Raises:
        MissingIdentifierError: If the record has no persisted ID.
    """
    if record.persisted_id is None:
        raise MissingIdentifierError(record.name, record.m_id)
    return Statement(f"DELETE FROM {record.name} WHERE {ID_COLUMN} = ?", [record.persisted_id])


def build_select(
    model: Model,
    columns: Sequence[str] | None = None,
    constraint: Constraint | Mapping[str, Any] | None = None,
    order: str | None = None,
    limit: int | str | None = None,
) -> Statement:
    """SELECT over a model's table.

    Args:
        model: Model descriptor.
        columns: Columns to select (None = *). ID is always included.
        constraint: Constraint (or mapping with statement/parameters).
        order: ORDER BY expression, appended as given.
        limit: LIMIT value, appended as given.

    Raises:
        ConstraintMismatchError: If placeholders and parameters differ in number.
    """
    if columns:
        cols = list(columns)
        if ID_COLUMN not in cols:
            cols.append(ID_COLUMN)
        sql = f"SELECT {', '.join(cols)} FROM {model.name}"
    else:
        sql = f"SELECT * FROM {model.name}"

    params: list[Any] = []
    constraint = Constraint.coerce(constraint)
    if constraint is not None:
        expected = constraint.placeholder_count
        given = list(constraint.parameters or ())
        if expected != len(given):
            raise ConstraintMismatchError(constraint.statement, expected, len(given))
        sql += f" {constraint.statement}"
        params = given

    if order:
        sql += f" ORDER BY {order}"

    if limit:
        sql += f" LIMIT {limit}"

    return Statement(sql, params)


__all__ = [
    "Statement",
    "Constraint",
    "build_create_table",
    "build_insert",
    "build_update",
    "build_delete",
    "build_select",
]
