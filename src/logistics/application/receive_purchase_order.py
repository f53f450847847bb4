"""Application service: Receive Purchase Order use case.

Books every line of an APPROVED purchase order into one warehouse. All lines
go through a single ledger transaction, so the stock records (created on
first receipt) and the INBOUND movements appear together or not at all.
"""

from __future__ import annotations

import structlog

from logistics.application.dto import PurchaseOrderDTO, purchase_order_dto
from logistics.domain.clock import Clock
from logistics.domain.exceptions import EntityNotFoundError, ValidationError
from logistics.domain.model.value_objects import StockKey
from logistics.domain.repository.purchase_order_repository import PurchaseOrderRepository
from logistics.domain.service.locking import KeyedLocks
from logistics.domain.service.stock_ledger import StockLedger

logger = structlog.get_logger(__name__)


class ReceivePurchaseOrderHandler:

    def __init__(
        self,
        order_repo: PurchaseOrderRepository,
        ledger: StockLedger,
        locks: KeyedLocks,
        clock: Clock,
    ) -> None:
        self._order_repo = order_repo
        self._ledger = ledger
        self._locks = locks
        self._clock = clock

    def handle(self, order_id: int, warehouse_id: str) -> PurchaseOrderDTO:
        if not warehouse_id or not warehouse_id.strip():
            raise ValidationError("Receiving warehouse is required")

        with self._locks.hold(("purchase-order", order_id)):
            order = self._order_repo.get_by_id(order_id)
            if order is None:
                raise EntityNotFoundError(f"Purchase order #{order_id} not found")
            order.ensure_can("receive")

            keys = [StockKey(warehouse_id, line.product_id) for line in order.lines]
            with self._ledger.transaction(keys) as tx:
                tx.persist(order, self._order_repo.save)
                for line in order.lines:
                    tx.receive(
                        StockKey(warehouse_id, line.product_id),
                        line.quantity.value,
                        order.reference,
                        f"Purchase order reception - {line.product_id} "
                        f"from supplier {order.supplier_id}",
                    )
                order.mark_received(warehouse_id, self._clock.now())

        logger.info(
            "purchase_order_received",
            order_id=order_id,
            warehouse_id=warehouse_id,
            lines=len(order.lines),
        )
        return purchase_order_dto(order)
