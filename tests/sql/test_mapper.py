# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Tests for sqlstore.mapper and sqlstore.reconciler."""

from __future__ import annotations

from datetime import date, datetime, timezone

import pytest

from sqlstore.errors import ReconciliationError, TransactionError
from sqlstore.mapper import map_row, map_rows
from sqlstore.model import STATE_VALID
from sqlstore.reconciler import reconcile


class TestMapRow:
    """Tests for map_row / map_rows."""

    def test_hidden_column_becomes_m_id(self, users):
        rec = map_row(users, {"ID": 4, "name": "Ann", "age": 30, "_m_id": 12})
        assert rec.m_id == 12
        assert rec.persisted_id == 4
        assert rec.state == STATE_VALID
        assert rec.record == {"name": "Ann", "age": 30}

    def test_record_is_registered(self, users):
        rec = map_row(users, {"ID": 1, "name": "Ann", "age": 30, "_m_id": 3})
        assert users.record_manager.get(3) is rec

    def test_row_without_m_id_gets_new_one(self, users):
        rec = map_row(users, {"ID": 1, "name": "Ann"})
        assert rec.m_id is not None
        assert rec.record == {"name": "Ann"}

    def test_mapped_m_id_advances_counter(self, users):
        map_row(users, {"ID": 1, "name": "Ann", "_m_id": 40})
        assert users.create_record({"name": "Bob"}).m_id == 41

    def test_date_and_boolean_values(self, events):
        rec = map_row(events, {
            "ID": 1,
            "title": "Launch",
            "starts": "2024-05-01T10:00:00Z",
            "public": 1,
            "notes": None,
            "_m_id": 1,
        })
        assert rec.get("starts") == datetime(2024, 5, 1, 10, 0, tzinfo=timezone.utc)
        assert rec.get("public") is True
        assert rec.get("notes") is None

    def test_date_without_time_stays_date(self, events):
        rec = map_row(events, {"ID": 1, "title": "x", "starts": "2024-05-01", "_m_id": 1})
        assert rec.get("starts") == date(2024, 5, 1)
        assert type(rec.get("starts")) is date

    def test_unparseable_date_kept_as_text(self, events, caplog):
        rec = map_row(events, {"ID": 1, "title": "x", "starts": "soon", "_m_id": 1})
        assert rec.get("starts") == "soon"
        assert "Unparseable date value" in caplog.text

    def test_fields_are_clean(self, users):
        rec = map_row(users, {"ID": 1, "name": "Ann", "age": 30, "_m_id": 1})
        assert rec.dirty_fields() == []

    def test_map_rows_keeps_order(self, users):
        rows = [
            {"ID": 2, "name": "Bob", "_m_id": 2},
            {"ID": 1, "name": "Ann", "_m_id": 1},
        ]
        assert [r.persisted_id for r in map_rows(users, rows)] == [2, 1]

    def test_map_rows_empty(self, users):
        assert map_rows(users, []) == []


class TestReconcile:
    """Tests for reading back the store-assigned ID."""

    async def test_sets_persisted_id(self, store, schema, users):
        await schema.ensure_ready(users)
        ann = users.create_record({"name": "Ann"})
        bob = users.create_record({"name": "Bob"})

        for rec in (ann, bob):
            async with store.transaction() as tx:
                await tx.execute(
                    "INSERT INTO User (name, _m_id) VALUES (?, ?)", [rec.get("name"), rec.m_id]
                )
                await reconcile(tx, rec)

        assert ann.persisted_id == 1
        assert bob.persisted_id == 2

    async def test_no_sequence_row_raises(self, store, schema, users):
        await schema.ensure_ready(users)
        ann = users.create_record({"name": "Ann"})
        with pytest.raises(ReconciliationError) as exc_info:
            async with store.transaction() as tx:
                await reconcile(tx, ann)
        assert isinstance(exc_info.value, TransactionError)
        assert exc_info.value.m_id == ann.m_id
        assert ann.persisted_id is None
