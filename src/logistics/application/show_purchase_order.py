"""Application service: Show / List Purchase Orders use case."""

from __future__ import annotations

from logistics.application.dto import PurchaseOrderDTO, purchase_order_dto
from logistics.domain.exceptions import EntityNotFoundError
from logistics.domain.repository.purchase_order_repository import PurchaseOrderRepository


class ShowPurchaseOrderHandler:

    def __init__(self, order_repo: PurchaseOrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, order_id: int) -> PurchaseOrderDTO:
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise EntityNotFoundError(f"Purchase order #{order_id} not found")
        return purchase_order_dto(order)

    def list(self) -> list[PurchaseOrderDTO]:
        orders = sorted(self._order_repo.list_all(), key=lambda o: o.id or 0)
        return [purchase_order_dto(o) for o in orders]
