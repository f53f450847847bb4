"""Domain service: the append-only movement log.

Only the StockLedger writes here, and only for changes it has committed.
"""

from __future__ import annotations

from logistics.domain.model.movement import MovementEntry
from logistics.domain.model.value_objects import StockKey
from logistics.domain.repository.movement_repository import MovementRepository


class MovementRecorder:

    def __init__(self, movement_repo: MovementRepository) -> None:
        self._movement_repo = movement_repo

    def record(self, entries: list[MovementEntry]) -> list[MovementEntry]:
        if not entries:
            return []
        return self._movement_repo.append_many(entries)

    def for_stock(self, warehouse_id: str, product_id: str) -> list[MovementEntry]:
        return self._movement_repo.list_for_stock(StockKey(warehouse_id, product_id))

    def for_warehouse(self, warehouse_id: str) -> list[MovementEntry]:
        return self._movement_repo.list_for_warehouse(warehouse_id)

    def by_reference(self, reference_document: str) -> list[MovementEntry]:
        return self._movement_repo.list_by_reference(reference_document)

    def all(self) -> list[MovementEntry]:
        return self._movement_repo.list_all()
