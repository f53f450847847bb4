"""Application service: Show / List Sales Orders use case."""

from __future__ import annotations

from logistics.application.dto import SalesOrderDTO, sales_order_dto
from logistics.domain.exceptions import EntityNotFoundError
from logistics.domain.model.sales_order import SalesOrderStatus
from logistics.domain.repository.sales_order_repository import SalesOrderRepository
from logistics.domain.repository.shipment_repository import ShipmentRepository


class ShowSalesOrderHandler:

    def __init__(
        self,
        order_repo: SalesOrderRepository,
        shipment_repo: ShipmentRepository,
    ) -> None:
        self._order_repo = order_repo
        self._shipment_repo = shipment_repo

    def handle(self, order_id: int) -> SalesOrderDTO:
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise EntityNotFoundError(f"Sales order #{order_id} not found")
        shipment = self._shipment_repo.get_by_sales_order(order_id)
        return sales_order_dto(
            order,
            tracking_number=shipment.tracking_number if shipment is not None else None,
        )

    def list(self, status: SalesOrderStatus | None = None) -> list[SalesOrderDTO]:
        if status is None:
            orders = self._order_repo.list_all()
        else:
            orders = self._order_repo.list_by_status(status)
        return [sales_order_dto(o) for o in sorted(orders, key=lambda o: o.id or 0)]
