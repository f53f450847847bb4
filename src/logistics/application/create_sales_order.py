"""Application service: Create Sales Order use case.

Builds a CREATED sales order after a soft availability check. No stock is
reserved here; reservation is a separate step, so an order that passes this
check can still fail to reserve later.
"""

from __future__ import annotations

import structlog

from logistics.application.dto import SalesLineSpec, SalesOrderDTO, sales_order_dto
from logistics.domain.clock import Clock
from logistics.domain.exceptions import InsufficientStockError
from logistics.domain.model.sales_order import SalesOrder, SalesOrderLine
from logistics.domain.model.value_objects import Money, Quantity
from logistics.domain.repository.sales_order_repository import SalesOrderRepository
from logistics.domain.service.stock_ledger import StockLedger

logger = structlog.get_logger(__name__)


class CreateSalesOrderHandler:

    def __init__(
        self,
        order_repo: SalesOrderRepository,
        ledger: StockLedger,
        clock: Clock,
    ) -> None:
        self._order_repo = order_repo
        self._ledger = ledger
        self._clock = clock

    def handle(
        self,
        client_id: str,
        warehouse_id: str,
        line_specs: list[SalesLineSpec],
        allow_backorder: bool = False,
    ) -> SalesOrderDTO:
        lines: list[SalesOrderLine] = []
        for spec in line_specs:
            quantity = Quantity(spec.quantity)
            back_order = False

            # Stock elsewhere counts: it could be transferred before shipping.
            plausible = max(
                self._ledger.available_stock_in(warehouse_id, spec.product_id),
                self._ledger.available_stock_across_warehouses(spec.product_id),
            )
            if plausible < quantity.value:
                if not allow_backorder:
                    raise InsufficientStockError(
                        f"Insufficient stock for product '{spec.product_id}' "
                        f"(requested {quantity.value}, available {plausible})"
                    )
                back_order = True

            lines.append(
                SalesOrderLine(
                    product_id=spec.product_id,
                    warehouse_id=warehouse_id,
                    quantity=quantity,
                    unit_price=Money.of(spec.unit_price),
                    back_order=back_order,
                )
            )

        order = SalesOrder.create(client_id, warehouse_id, lines, self._clock.now())
        self._order_repo.save(order)

        logger.info(
            "sales_order_created",
            order_id=order.id,
            client_id=order.client_id,
            warehouse_id=warehouse_id,
            lines=len(lines),
            back_order=order.has_back_order,
        )
        return sales_order_dto(order)
