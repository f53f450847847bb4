"""Application service: Approve Purchase Order use case."""

from __future__ import annotations

import structlog

from logistics.application.dto import PurchaseOrderDTO, purchase_order_dto
from logistics.domain.clock import Clock
from logistics.domain.exceptions import EntityNotFoundError
from logistics.domain.repository.purchase_order_repository import PurchaseOrderRepository
from logistics.domain.service.locking import KeyedLocks

logger = structlog.get_logger(__name__)


class ApprovePurchaseOrderHandler:

    def __init__(
        self,
        order_repo: PurchaseOrderRepository,
        locks: KeyedLocks,
        clock: Clock,
    ) -> None:
        self._order_repo = order_repo
        self._locks = locks
        self._clock = clock

    def handle(self, order_id: int) -> PurchaseOrderDTO:
        with self._locks.hold(("purchase-order", order_id)):
            order = self._order_repo.get_by_id(order_id)
            if order is None:
                raise EntityNotFoundError(f"Purchase order #{order_id} not found")
            order.approve(self._clock.now())
            self._order_repo.save(order)

        logger.info("purchase_order_approved", order_id=order_id)
        return purchase_order_dto(order)
