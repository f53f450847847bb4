"""Application service: Cancel Sales Order use case.

CREATED orders are canceled without touching stock. RESERVED orders give
back every line's reservation in one ledger transaction first.

The reservation-expiry sweep goes through this handler too, passing
``require_status=RESERVED`` so an order a user shipped or canceled in the
meantime is left alone.
"""

from __future__ import annotations

import structlog

from logistics.application.dto import SalesOrderDTO, sales_order_dto
from logistics.domain.exceptions import EntityNotFoundError, InvalidOperationError
from logistics.domain.model.sales_order import SalesOrderStatus
from logistics.domain.repository.sales_order_repository import SalesOrderRepository
from logistics.domain.service.locking import KeyedLocks
from logistics.domain.service.stock_ledger import StockLedger

logger = structlog.get_logger(__name__)


class CancelSalesOrderHandler:

    def __init__(
        self,
        order_repo: SalesOrderRepository,
        ledger: StockLedger,
        locks: KeyedLocks,
    ) -> None:
        self._order_repo = order_repo
        self._ledger = ledger
        self._locks = locks

    def handle(
        self,
        order_id: int,
        require_status: SalesOrderStatus | None = None,
    ) -> SalesOrderDTO:
        with self._locks.hold(("sales-order", order_id)):
            order = self._order_repo.get_by_id(order_id)
            if order is None:
                raise EntityNotFoundError(f"Sales order #{order_id} not found")
            if require_status is not None and order.status != require_status:
                raise InvalidOperationError(
                    f"Sales order #{order_id} is {order.status.value}, "
                    f"expected {require_status.value}"
                )
            order.ensure_can("cancel")

            released = order.status == SalesOrderStatus.RESERVED
            if released:
                with self._ledger.transaction(order.stock_demand()) as tx:
                    tx.persist(order, self._order_repo.save)
                    for line in order.lines:
                        tx.release(line.key, line.quantity.value)
                    order.mark_canceled()
            else:
                order.mark_canceled()
                self._order_repo.save(order)

        logger.info("sales_order_canceled", order_id=order_id, released_stock=released)
        return sales_order_dto(order)
