"""Application service: Deliver Sales Order use case.

Marks a SHIPPED order DELIVERED. If its shipment is still in transit the
shipment is closed too, which gives the carrier its slot back.
"""

from __future__ import annotations

import structlog

from logistics.application.dto import SalesOrderDTO, sales_order_dto
from logistics.domain.clock import Clock
from logistics.domain.exceptions import EntityNotFoundError
from logistics.domain.model.shipment import ShipmentStatus
from logistics.domain.repository.sales_order_repository import SalesOrderRepository
from logistics.domain.repository.shipment_repository import ShipmentRepository
from logistics.domain.service.carrier_allocator import CarrierCapacityAllocator
from logistics.domain.service.locking import KeyedLocks

logger = structlog.get_logger(__name__)


class DeliverSalesOrderHandler:

    def __init__(
        self,
        order_repo: SalesOrderRepository,
        shipment_repo: ShipmentRepository,
        allocator: CarrierCapacityAllocator,
        locks: KeyedLocks,
        clock: Clock,
    ) -> None:
        self._order_repo = order_repo
        self._shipment_repo = shipment_repo
        self._allocator = allocator
        self._locks = locks
        self._clock = clock

    def handle(self, order_id: int) -> SalesOrderDTO:
        with self._locks.hold(("sales-order", order_id)):
            order = self._order_repo.get_by_id(order_id)
            if order is None:
                raise EntityNotFoundError(f"Sales order #{order_id} not found")
            order.ensure_can("deliver")

            shipment = self._shipment_repo.get_by_sales_order(order_id)
            if shipment is not None and shipment.status == ShipmentStatus.IN_TRANSIT:
                shipment = self._allocator.complete_delivery(shipment.id)

            order.mark_delivered(self._clock.now())
            self._order_repo.save(order)

        logger.info("sales_order_delivered", order_id=order_id)
        tracking = shipment.tracking_number if shipment is not None else None
        return sales_order_dto(order, tracking_number=tracking)
