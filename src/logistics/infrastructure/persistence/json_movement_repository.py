"""JSON-file-backed implementation of MovementRepository (append only)."""

from __future__ import annotations

from dataclasses import replace

from logistics.domain.model.movement import MovementEntry, MovementKind
from logistics.domain.model.value_objects import StockKey
from logistics.domain.repository.movement_repository import MovementRepository
from logistics.infrastructure.persistence.json_store import (
    JsonFileStore,
    dt_from_raw,
    dt_to_raw,
)


class JsonMovementRepository(JsonFileStore, MovementRepository):

    def append_many(self, entries: list[MovementEntry]) -> list[MovementEntry]:
        with self._io_lock:
            rows = self._load_raw()
            next_id = self._next_id(rows)
            stored = []
            for offset, entry in enumerate(entries):
                entry = replace(entry, id=next_id + offset)
                rows.append(self._to_raw(entry))
                stored.append(entry)
            self._persist_raw(rows)
        return stored

    def list_all(self) -> list[MovementEntry]:
        return [self._to_domain(r) for r in self._load_raw()]

    def list_for_stock(self, key: StockKey) -> list[MovementEntry]:
        return [e for e in self.list_all() if e.key == key]

    def list_for_warehouse(self, warehouse_id: str) -> list[MovementEntry]:
        return [e for e in self.list_all() if e.warehouse_id == warehouse_id]

    def list_by_reference(self, reference_document: str) -> list[MovementEntry]:
        return [e for e in self.list_all() if e.reference_document == reference_document]

    @staticmethod
    def _to_raw(entry: MovementEntry) -> dict:
        return {
            "id": entry.id,
            "warehouse_id": entry.warehouse_id,
            "product_id": entry.product_id,
            "kind": entry.kind.value,
            "quantity": entry.quantity,
            "occurred_at": dt_to_raw(entry.occurred_at),
            "reference_document": entry.reference_document,
            "description": entry.description,
        }

    @staticmethod
    def _to_domain(raw: dict) -> MovementEntry:
        return MovementEntry(
            id=raw["id"],
            warehouse_id=raw["warehouse_id"],
            product_id=raw["product_id"],
            kind=MovementKind(raw["kind"]),
            quantity=raw["quantity"],
            occurred_at=dt_from_raw(raw["occurred_at"]),
            reference_document=raw["reference_document"],
            description=raw.get("description", ""),
        )
