# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Model descriptors, records and the live record manager.

These are the in-memory side of the provider: a Model describes a table
(name plus ordered attribute metadata), a ModelRecord is one row held by the
application, and the RecordManager indexes live records by their client
identifier (m_id).

Usage:
    users = Model("User", {
        "name": Attribute("String", is_required=True),
        "age": Attribute("Integer"),
    })
    ann = users.create_record({"name": "Ann", "age": 30})
    ann.m_id          # client identifier, assigned at creation
    ann.persisted_id  # None until the insert commits
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any

STATE_NEW = "state_new"
STATE_VALID = "state_valid"

# Hidden column carrying the client identifier
META_M_ID = "_m_id"

# Store-assigned primary key column
ID_COLUMN = "ID"


@dataclass
class Attribute:
    """Metadata for one model attribute."""

    data_type: str
    is_required: bool = False
    is_updated: bool = False


class RecordManager:
    """Live records of one model, keyed by client identifier."""

    def __init__(self) -> None:
        self.records: dict[int, ModelRecord] = {}

    def add(self, record: ModelRecord) -> None:
        self.records[record.m_id] = record

    def remove(self, m_id: int) -> ModelRecord | None:
        return self.records.pop(m_id, None)

    def get(self, m_id: int) -> ModelRecord | None:
        return self.records.get(m_id)

    def __contains__(self, m_id: object) -> bool:
        return m_id in self.records

    def __len__(self) -> int:
        return len(self.records)


class ModelRecord:
    """One in-memory record of a model.

    Attributes:
        model: The Model this record belongs to.
        m_id: Client identifier, stable for the record's lifetime.
        persisted_id: Store-assigned ID, None until the first insert commits.
        state: STATE_NEW or STATE_VALID.
        record: Attribute values in model attribute order.
        meta: Per-record copy of the attribute metadata (dirty flags).
    """

    def __init__(
        self,
        model: Model,
        record: dict[str, Any],
        state: str,
        m_id: int,
        persisted_id: int | None = None,
    ):
        self.model = model
        self.m_id = m_id
        self.persisted_id = persisted_id
        self.state = state
        self.meta = {name: replace(attr) for name, attr in model.attributes.items()}
        self.record = record

    @property
    def name(self) -> str:
        return self.model.name

    @property
    def record_manager(self) -> RecordManager:
        return self.model.record_manager

    def get(self, name: str) -> Any:
        return self.record.get(name)

    def set(self, name: str, value: Any) -> None:
        """Set an attribute value and flag it as dirty."""
        if name not in self.meta:
            raise KeyError(f"'{self.model.name}' has no attribute '{name}'")
        self.record[name] = value
        self.meta[name].is_updated = True

    def dirty_fields(self) -> list[str]:
        return [name for name in self.record if self.meta[name].is_updated]

    def mark_clean(self) -> None:
        """Reset dirty flags, typically after a successful update."""
        for attr in self.meta.values():
            attr.is_updated = False

    def __repr__(self) -> str:
        return (
            f"<{self.model.name} m_id={self.m_id} ID={self.persisted_id} "
            f"state={self.state} {self.record!r}>"
        )


class Model:
    """Model descriptor: table name and ordered attribute metadata.

    The attribute set is fixed once the table exists in a store; changing it
    afterwards is not detected.
    """

    def __init__(
        self,
        name: str,
        attributes: dict[str, Attribute],
        record_manager: RecordManager | None = None,
    ):
        if not name:
            raise ValueError("Model must define 'name'")
        if ID_COLUMN in attributes or META_M_ID in attributes:
            raise ValueError(f"'{ID_COLUMN}' and '{META_M_ID}' are reserved column names")
        self.name = name
        self.attributes = dict(attributes)
        self.record_manager = record_manager if record_manager is not None else RecordManager()
        self._last_m_id = 0

    def next_m_id(self) -> int:
        self._last_m_id += 1
        return self._last_m_id

    def create_record(
        self,
        fields: dict[str, Any] | None = None,
        state: str = STATE_NEW,
        m_id: int | None = None,
        persisted_id: int | None = None,
    ) -> ModelRecord:
        """Build a record and register it with the record manager.

        Args:
            fields: Attribute values; unknown names raise KeyError.
            state: STATE_NEW for fresh records, STATE_VALID for stored ones.
            m_id: Client identifier; a new one is assigned when None.
            persisted_id: Store-assigned ID for records read back from the store.
        """
        fields = fields or {}
        unknown = set(fields) - set(self.attributes)
        if unknown:
            raise KeyError(f"'{self.name}' has no attribute(s) {sorted(unknown)}")

        if m_id is None:
            m_id = self.next_m_id()
        else:
            self._last_m_id = max(self._last_m_id, m_id)

        values = {name: fields[name] for name in self.attributes if name in fields}
        rec = ModelRecord(self, values, state, m_id, persisted_id)
        self.record_manager.add(rec)
        return rec


__all__ = [
    "Attribute",
    "Model",
    "ModelRecord",
    "RecordManager",
    "STATE_NEW",
    "STATE_VALID",
    "META_M_ID",
    "ID_COLUMN",
]
