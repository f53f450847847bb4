"""Application service: Create Purchase Order use case."""

from __future__ import annotations

from datetime import datetime

import structlog

from logistics.application.dto import PurchaseLineSpec, PurchaseOrderDTO, purchase_order_dto
from logistics.domain.clock import Clock
from logistics.domain.model.purchase_order import PurchaseOrder, PurchaseOrderLine
from logistics.domain.model.value_objects import Money, Quantity
from logistics.domain.repository.purchase_order_repository import PurchaseOrderRepository

logger = structlog.get_logger(__name__)


def build_purchase_lines(line_specs: list[PurchaseLineSpec]) -> list[PurchaseOrderLine]:
    return [
        PurchaseOrderLine(
            product_id=spec.product_id,
            quantity=Quantity(spec.quantity),
            unit_price=Money.of(spec.unit_price),
        )
        for spec in line_specs
    ]


class CreatePurchaseOrderHandler:

    def __init__(self, order_repo: PurchaseOrderRepository, clock: Clock) -> None:
        self._order_repo = order_repo
        self._clock = clock

    def handle(
        self,
        supplier_id: str,
        line_specs: list[PurchaseLineSpec],
        expected_delivery: datetime | None = None,
    ) -> PurchaseOrderDTO:
        order = PurchaseOrder.create(
            supplier_id,
            build_purchase_lines(line_specs),
            self._clock.now(),
            expected_delivery=expected_delivery,
        )
        self._order_repo.save(order)
        logger.info(
            "purchase_order_created",
            order_id=order.id,
            supplier_id=order.supplier_id,
            lines=len(order.lines),
        )
        return purchase_order_dto(order)
