"""Application service: Adjust Stock use case (manual inventory correction)."""

from __future__ import annotations

from logistics.application.dto import StockDTO, stock_dto
from logistics.domain.service.stock_ledger import StockLedger


class AdjustStockHandler:

    def __init__(self, ledger: StockLedger) -> None:
        self._ledger = ledger

    def handle(
        self,
        warehouse_id: str,
        product_id: str,
        on_hand: int,
        reserved: int,
    ) -> StockDTO:
        return stock_dto(self._ledger.adjust(warehouse_id, product_id, on_hand, reserved))
