# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Tests for sqlstore.builder - SQL statement generation."""

from __future__ import annotations

from datetime import date

import pytest

from sqlstore.builder import (
    Constraint,
    Statement,
    build_create_table,
    build_delete,
    build_insert,
    build_select,
    build_update,
)
from sqlstore.errors import (
    ConstraintMismatchError,
    EmptyUpdateError,
    MissingIdentifierError,
    SchemaError,
    ValidationError,
)
from sqlstore.model import STATE_VALID, Attribute, Model


def _stored(model: Model, fields: dict, persisted_id: int = 5):
    """A record as it looks after being read back from the store."""
    return model.create_record(fields, state=STATE_VALID, persisted_id=persisted_id)


class TestCreateTable:
    """Tests for build_create_table."""

    def test_exact_ddl(self, users):
        stmt = build_create_table(users)
        assert stmt.sql == (
            "CREATE TABLE IF NOT EXISTS User ("
            "ID INTEGER PRIMARY KEY ASC AUTOINCREMENT UNIQUE, "
            "name VARCHAR(255), age INTEGER, _m_id INTEGER NOT NULL)"
        )
        assert stmt.params == []

    def test_all_kinds_and_required(self, events):
        sql = build_create_table(events).sql
        assert "title VARCHAR(255) NOT NULL" in sql
        assert "notes TEXT," in sql
        assert "starts VARCHAR(255)," in sql
        assert "price FLOAT," in sql
        assert "seats INTEGER," in sql
        assert "owner INTEGER," in sql
        assert "public BOOLEAN," in sql

    def test_custom_pk_column(self, users):
        sql = build_create_table(users, "ID INTEGER PRIMARY KEY").sql
        assert sql.startswith("CREATE TABLE IF NOT EXISTS User (ID INTEGER PRIMARY KEY, name")

    def test_unknown_kind_raises_schema_error(self):
        model = Model("Bad", {"blob": Attribute("Binary")})
        with pytest.raises(SchemaError, match="unknown data type 'Binary'"):
            build_create_table(model)


class TestInsert:
    """Tests for build_insert."""

    def test_insert_sql_and_params(self, users):
        ann = users.create_record({"name": "Ann", "age": 30})
        stmt = build_insert(ann)
        assert stmt.sql == "INSERT INTO User (name, age, _m_id) VALUES (?, ?, ?)"
        assert stmt.params == ["Ann", 30, ann.m_id]

    def test_insert_only_given_fields(self, users):
        bob = users.create_record({"name": "Bob"})
        stmt = build_insert(bob)
        assert stmt.sql == "INSERT INTO User (name, _m_id) VALUES (?, ?)"
        assert stmt.params == ["Bob", bob.m_id]

    def test_insert_serializes_dates_and_booleans(self, events):
        rec = events.create_record({
            "title": "Launch",
            "starts": date(2024, 5, 1),
            "public": True,
        })
        stmt = build_insert(rec)
        assert stmt.params == ["Launch", "2024-05-01", 1, rec.m_id]

    def test_values_never_inlined(self, users):
        rec = users.create_record({"name": "O'Brien; DROP TABLE User", "age": 1})
        stmt = build_insert(rec)
        assert "O'Brien" not in stmt.sql
        assert stmt.params[0] == "O'Brien; DROP TABLE User"


class TestUpdate:
    """Tests for build_update."""

    def test_only_dirty_fields(self, users):
        ann = _stored(users, {"name": "Ann", "age": 30})
        ann.set("age", 31)
        stmt = build_update(ann)
        assert stmt.sql == "UPDATE User SET age = ? WHERE ID = ?"
        assert stmt.params == [31, 5]

    def test_several_dirty_fields_keep_attribute_order(self, users):
        ann = _stored(users, {"name": "Ann", "age": 30})
        ann.set("age", 31)
        ann.set("name", "Anne")
        stmt = build_update(ann)
        assert stmt.sql == "UPDATE User SET name = ?, age = ? WHERE ID = ?"
        assert stmt.params == ["Anne", 31, 5]

    def test_comma_in_value_stays_one_parameter(self, users):
        ann = _stored(users, {"name": "Ann", "age": 30})
        ann.set("name", "Smith, John")
        stmt = build_update(ann)
        assert stmt.sql == "UPDATE User SET name = ? WHERE ID = ?"
        assert stmt.params == ["Smith, John", 5]

    def test_no_dirty_fields_raises(self, users):
        ann = _stored(users, {"name": "Ann", "age": 30})
        with pytest.raises(EmptyUpdateError) as exc_info:
            build_update(ann)
        assert exc_info.value.table == "User"
        assert exc_info.value.m_id == ann.m_id
        assert isinstance(exc_info.value, ValidationError)

    def test_missing_identifier_raises(self, users):
        ann = users.create_record({"name": "Ann"})
        ann.set("age", 31)
        with pytest.raises(MissingIdentifierError):
            build_update(ann)


class TestDelete:
    """Tests for build_delete."""

    def test_delete_by_id(self, users):
        ann = _stored(users, {"name": "Ann"}, persisted_id=7)
        stmt = build_delete(ann)
        assert stmt == Statement("DELETE FROM User WHERE ID = ?", [7])

    def test_missing_identifier_raises(self, users):
        ann = users.create_record({"name": "Ann"})
        with pytest.raises(MissingIdentifierError):
            build_delete(ann)


class TestSelect:
    """Tests for build_select."""

    def test_default_select(self, users):
        assert build_select(users) == Statement("SELECT * FROM User", [])

    def test_constraint_order_limit(self, users):
        stmt = build_select(
            users,
            constraint=Constraint("WHERE age > ?", [25]),
            order="age ASC",
            limit=10,
        )
        assert stmt.sql == "SELECT * FROM User WHERE age > ? ORDER BY age ASC LIMIT 10"
        assert stmt.params == [25]

    def test_constraint_as_mapping(self, users):
        stmt = build_select(
            users, constraint={"statement": "WHERE name = ?", "parameters": ["Ann"]}
        )
        assert stmt.sql == "SELECT * FROM User WHERE name = ?"
        assert stmt.params == ["Ann"]

    def test_columns_always_include_id(self, users):
        columns = ["name"]
        stmt = build_select(users, columns=columns)
        assert stmt.sql == "SELECT name, ID FROM User"
        assert columns == ["name"]

    def test_columns_with_id_not_duplicated(self, users):
        stmt = build_select(users, columns=["ID", "name"])
        assert stmt.sql == "SELECT ID, name FROM User"

    def test_parameter_mismatch_raises(self, users):
        with pytest.raises(ConstraintMismatchError) as exc_info:
            build_select(users, constraint=Constraint("WHERE age > ? AND age < ?", [25]))
        assert exc_info.value.expected == 2
        assert exc_info.value.given == 1
        assert "given: 1 needed: 2" in str(exc_info.value)

    def test_placeholders_without_parameters_raise(self, users):
        with pytest.raises(ConstraintMismatchError):
            build_select(users, constraint=Constraint("WHERE age > ?"))

    def test_extra_parameters_raise(self, users):
        with pytest.raises(ConstraintMismatchError):
            build_select(users, constraint=Constraint("WHERE age > 25", [1]))

    def test_statement_without_placeholders_is_verbatim(self, users):
        stmt = build_select(users, constraint=Constraint("WHERE age > 25"))
        assert stmt.sql == "SELECT * FROM User WHERE age > 25"
        assert stmt.params == []


class TestConstraint:
    """Tests for Constraint coercion."""

    def test_coerce_none(self):
        assert Constraint.coerce(None) is None

    def test_coerce_instance_unchanged(self):
        c = Constraint("WHERE x = ?", [1])
        assert Constraint.coerce(c) is c

    def test_coerce_mapping_without_parameters(self):
        c = Constraint.coerce({"statement": "WHERE x = 1"})
        assert c == Constraint("WHERE x = 1", None)
        assert c.placeholder_count == 0
