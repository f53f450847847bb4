"""Application service: Deliver Shipment use case.

Closes an IN_TRANSIT shipment, frees the carrier slot and, when the sales
order is still SHIPPED, marks it DELIVERED as well.
"""

from __future__ import annotations

import structlog

from logistics.application.dto import ShipmentDTO, shipment_dto
from logistics.domain.clock import Clock
from logistics.domain.exceptions import EntityNotFoundError
from logistics.domain.model.sales_order import SalesOrderStatus
from logistics.domain.repository.sales_order_repository import SalesOrderRepository
from logistics.domain.repository.shipment_repository import ShipmentRepository
from logistics.domain.service.carrier_allocator import CarrierCapacityAllocator
from logistics.domain.service.locking import KeyedLocks

logger = structlog.get_logger(__name__)


class DeliverShipmentHandler:

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

    def handle(self, shipment_id: int) -> ShipmentDTO:
        found = self._shipment_repo.get_by_id(shipment_id)
        if found is None:
            raise EntityNotFoundError(f"Shipment #{shipment_id} not found")

        # Order lock first, then shipment and carrier: same order as the
        # sales-order handlers.
        with self._locks.hold(("sales-order", found.sales_order_id)):
            shipment = self._allocator.complete_delivery(shipment_id)

            order = self._order_repo.get_by_id(shipment.sales_order_id)
            if order is not None and order.status == SalesOrderStatus.SHIPPED:
                order.mark_delivered(self._clock.now())
                self._order_repo.save(order)

        logger.info(
            "shipment_delivered",
            shipment_id=shipment_id,
            sales_order_id=shipment.sales_order_id,
            carrier_id=shipment.carrier_id,
        )
        return shipment_dto(shipment)
