"""Application service: Delete Purchase Order use case."""

from __future__ import annotations

import structlog

from logistics.domain.exceptions import EntityNotFoundError
from logistics.domain.repository.purchase_order_repository import PurchaseOrderRepository
from logistics.domain.service.locking import KeyedLocks

logger = structlog.get_logger(__name__)


class DeletePurchaseOrderHandler:

    def __init__(self, order_repo: PurchaseOrderRepository, locks: KeyedLocks) -> None:
        self._order_repo = order_repo
        self._locks = locks

    def handle(self, order_id: int) -> None:
        with self._locks.hold(("purchase-order", order_id)):
            order = self._order_repo.get_by_id(order_id)
            if order is None:
                raise EntityNotFoundError(f"Purchase order #{order_id} not found")
            order.ensure_deletable()
            self._order_repo.delete(order_id)
        logger.info("purchase_order_deleted", order_id=order_id)
