"""Application service: Ship Sales Order use case.

Commits the reserved stock of every line (one OUTBOUND movement per line,
all in one ledger transaction), marks the order SHIPPED and plans its
shipment.
"""

from __future__ import annotations

import structlog

from logistics.application.dto import SalesOrderDTO, sales_order_dto
from logistics.domain.clock import Clock
from logistics.domain.exceptions import EntityNotFoundError
from logistics.domain.model.shipment import Shipment
from logistics.domain.repository.sales_order_repository import SalesOrderRepository
from logistics.domain.repository.shipment_repository import ShipmentRepository
from logistics.domain.service.locking import KeyedLocks
from logistics.domain.service.shipment_planning import planned_dispatch
from logistics.domain.service.stock_ledger import StockLedger

logger = structlog.get_logger(__name__)


class ShipSalesOrderHandler:

    def __init__(
        self,
        order_repo: SalesOrderRepository,
        shipment_repo: ShipmentRepository,
        ledger: StockLedger,
        locks: KeyedLocks,
        clock: Clock,
        cutoff_hour: int = 15,
        wait_hours: int = 12,
    ) -> None:
        self._order_repo = order_repo
        self._shipment_repo = shipment_repo
        self._ledger = ledger
        self._locks = locks
        self._clock = clock
        self._cutoff_hour = cutoff_hour
        self._wait_hours = wait_hours

    def handle(self, order_id: int) -> SalesOrderDTO:
        with self._locks.hold(("sales-order", order_id)):
            order = self._order_repo.get_by_id(order_id)
            if order is None:
                raise EntityNotFoundError(f"Sales order #{order_id} not found")
            order.ensure_can("ship")

            reference = f"SO-{order.id}"
            with self._ledger.transaction(order.stock_demand()) as tx:
                tx.persist(order, self._order_repo.save)
                for line in order.lines:
                    tx.commit_shipment(
                        line.key,
                        line.quantity.value,
                        reference,
                        f"Sales order shipment - {line.product_id} from warehouse "
                        f"{line.warehouse_id} to client {order.client_id}",
                    )
                now = self._clock.now()
                order.mark_shipped(now)

                # Left in place if the commit fails; a retried ship reuses it.
                shipment = self._shipment_repo.get_by_sales_order(order_id)
                if shipment is None:
                    shipment = Shipment.plan(
                        order_id,
                        planned_dispatch(now, self._cutoff_hour, self._wait_hours),
                        now,
                    )
                    tx.persist(shipment, self._shipment_repo.save)

        logger.info(
            "sales_order_shipped",
            order_id=order_id,
            shipment_id=shipment.id,
            tracking_number=shipment.tracking_number,
        )
        return sales_order_dto(order, tracking_number=shipment.tracking_number)
