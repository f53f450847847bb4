"""Application service: Reserve Sales Order use case.

Reserves every line of a CREATED order in one ledger transaction. If any
line is short the whole reservation is rolled back and the order stays
CREATED.
"""

from __future__ import annotations

import structlog

from logistics.application.dto import SalesOrderDTO, sales_order_dto
from logistics.domain.clock import Clock
from logistics.domain.exceptions import EntityNotFoundError
from logistics.domain.repository.sales_order_repository import SalesOrderRepository
from logistics.domain.service.locking import KeyedLocks
from logistics.domain.service.stock_ledger import StockLedger

logger = structlog.get_logger(__name__)


class ReserveSalesOrderHandler:

    def __init__(
        self,
        order_repo: SalesOrderRepository,
        ledger: StockLedger,
        locks: KeyedLocks,
        clock: Clock,
    ) -> None:
        self._order_repo = order_repo
        self._ledger = ledger
        self._locks = locks
        self._clock = clock

    def handle(self, order_id: int) -> SalesOrderDTO:
        with self._locks.hold(("sales-order", order_id)):
            order = self._order_repo.get_by_id(order_id)
            if order is None:
                raise EntityNotFoundError(f"Sales order #{order_id} not found")
            order.ensure_can("reserve")

            with self._ledger.transaction(order.stock_demand()) as tx:
                tx.persist(order, self._order_repo.save)
                for line in order.lines:
                    tx.reserve(line.key, line.quantity.value)
                order.mark_reserved(self._clock.now())

        logger.info("sales_order_reserved", order_id=order_id, lines=len(order.lines))
        return sales_order_dto(order)
