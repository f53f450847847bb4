"""Application service: Update Purchase Order use case.

Replaces supplier, lines and expected delivery of an order that has not
been approved yet.
"""

from __future__ import annotations

from datetime import datetime

from logistics.application.create_purchase_order import build_purchase_lines
from logistics.application.dto import PurchaseLineSpec, PurchaseOrderDTO, purchase_order_dto
from logistics.domain.exceptions import EntityNotFoundError
from logistics.domain.repository.purchase_order_repository import PurchaseOrderRepository
from logistics.domain.service.locking import KeyedLocks


class UpdatePurchaseOrderHandler:

    def __init__(self, order_repo: PurchaseOrderRepository, locks: KeyedLocks) -> None:
        self._order_repo = order_repo
        self._locks = locks

    def handle(
        self,
        order_id: int,
        supplier_id: str,
        line_specs: list[PurchaseLineSpec],
        expected_delivery: datetime | None = None,
    ) -> PurchaseOrderDTO:
        lines = build_purchase_lines(line_specs)
        with self._locks.hold(("purchase-order", order_id)):
            order = self._order_repo.get_by_id(order_id)
            if order is None:
                raise EntityNotFoundError(f"Purchase order #{order_id} not found")
            order.replace_lines(supplier_id, lines, expected_delivery)
            self._order_repo.save(order)
        return purchase_order_dto(order)
