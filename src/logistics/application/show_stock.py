"""Application service: stock level and movement queries.

Read-only; nothing here takes a lock.
"""

from __future__ import annotations

from dataclasses import dataclass

from logistics.application.dto import MovementDTO, StockDTO, movement_dto, stock_dto
from logistics.domain.service.movement_recorder import MovementRecorder
from logistics.domain.service.stock_ledger import LOW_STOCK_THRESHOLD, StockLedger


@dataclass(frozen=True)
class ProductAvailabilityDTO:
    product_id: str
    total_on_hand: int
    available_across_warehouses: int
    per_warehouse: list[StockDTO]


class ShowStockHandler:

    def __init__(self, ledger: StockLedger) -> None:
        self._ledger = ledger

    def handle(self, warehouse_id: str | None = None) -> list[StockDTO]:
        records = sorted(self._ledger.records(warehouse_id), key=lambda r: r.key)
        return [stock_dto(r) for r in records]

    def availability(self, product_id: str) -> ProductAvailabilityDTO:
        per_warehouse = [
            stock_dto(r)
            for r in sorted(self._ledger.records(), key=lambda r: r.key)
            if r.product_id == product_id
        ]
        return ProductAvailabilityDTO(
            product_id=product_id,
            total_on_hand=self._ledger.total_stock(product_id),
            available_across_warehouses=self._ledger.available_stock_across_warehouses(product_id),
            per_warehouse=per_warehouse,
        )

    def low_stock(self, warehouse_id: str, threshold: int = LOW_STOCK_THRESHOLD) -> list[StockDTO]:
        records = sorted(self._ledger.low_stock_in(warehouse_id, threshold), key=lambda r: r.key)
        return [stock_dto(r) for r in records]


class ShowMovementsHandler:

    def __init__(self, recorder: MovementRecorder) -> None:
        self._recorder = recorder

    def handle(
        self,
        warehouse_id: str | None = None,
        product_id: str | None = None,
        reference: str | None = None,
    ) -> list[MovementDTO]:
        if reference is not None:
            entries = self._recorder.by_reference(reference)
        elif warehouse_id is not None and product_id is not None:
            entries = self._recorder.for_stock(warehouse_id, product_id)
        elif warehouse_id is not None:
            entries = self._recorder.for_warehouse(warehouse_id)
        else:
            entries = self._recorder.all()
        if product_id is not None:
            entries = [e for e in entries if e.product_id == product_id]
        return [movement_dto(e) for e in entries]
