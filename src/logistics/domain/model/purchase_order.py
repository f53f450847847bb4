"""PurchaseOrder aggregate: stock coming in from suppliers.

The receiving warehouse is chosen when the goods arrive, not when the order
is raised, so the lines carry no warehouse.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from logistics.domain.exceptions import InvalidOperationError, ValidationError
from logistics.domain.model.state_machine import TransitionTable
from logistics.domain.model.value_objects import Money, Quantity


class PurchaseOrderStatus(Enum):
    CREATED = "CREATED"
    APPROVED = "APPROVED"
    RECEIVED = "RECEIVED"
    CANCELED = "CANCELED"


TRANSITIONS: TransitionTable[PurchaseOrderStatus] = TransitionTable(
    "purchase order",
    {
        (PurchaseOrderStatus.CREATED, "approve"): PurchaseOrderStatus.APPROVED,
        (PurchaseOrderStatus.APPROVED, "receive"): PurchaseOrderStatus.RECEIVED,
        (PurchaseOrderStatus.CREATED, "cancel"): PurchaseOrderStatus.CANCELED,
        (PurchaseOrderStatus.APPROVED, "cancel"): PurchaseOrderStatus.CANCELED,
    },
)

# Structural edits are not transitions, so they get their own allow-lists.
_UPDATABLE = (PurchaseOrderStatus.CREATED,)
_DELETABLE = (PurchaseOrderStatus.CREATED, PurchaseOrderStatus.CANCELED)


@dataclass
class PurchaseOrderLine:
    product_id: str
    quantity: Quantity
    unit_price: Money

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity.value


def _validate_lines(supplier_id: str, lines: list[PurchaseOrderLine]) -> None:
    if not supplier_id or not supplier_id.strip():
        raise ValidationError("Supplier is required")
    if not lines:
        raise ValidationError("Purchase order must contain at least one line")


@dataclass
class PurchaseOrder:

    id: int | None
    supplier_id: str
    lines: list[PurchaseOrderLine]
    status: PurchaseOrderStatus = PurchaseOrderStatus.CREATED
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    expected_delivery: datetime | None = None
    approved_at: datetime | None = None
    received_at: datetime | None = None
    canceled_at: datetime | None = None
    received_warehouse_id: str | None = None
    version: int = 0

    @staticmethod
    def create(
        supplier_id: str,
        lines: list[PurchaseOrderLine],
        now: datetime,
        expected_delivery: datetime | None = None,
    ) -> PurchaseOrder:
        _validate_lines(supplier_id, lines)
        return PurchaseOrder(
            id=None,
            supplier_id=supplier_id.strip(),
            lines=list(lines),
            created_at=now,
            expected_delivery=expected_delivery,
        )

    @property
    def reference(self) -> str:
        """Reference stamped on the movements this order produces."""
        return f"PO-{self.id}"

    # --- State transitions ----------------------------------------------------

    def ensure_can(self, action: str) -> None:
        TRANSITIONS.next_state(self.status, action)

    def approve(self, now: datetime) -> None:
        self.status = TRANSITIONS.next_state(self.status, "approve")
        self.approved_at = now

    def mark_received(self, warehouse_id: str, now: datetime) -> None:
        self.status = TRANSITIONS.next_state(self.status, "receive")
        self.received_at = now
        self.received_warehouse_id = warehouse_id

    def cancel(self, now: datetime) -> None:
        if self.status == PurchaseOrderStatus.RECEIVED:
            raise InvalidOperationError(
                "Cannot cancel a purchase order that has already been received"
            )
        if self.status == PurchaseOrderStatus.CANCELED:
            raise InvalidOperationError("Purchase order is already canceled")
        self.status = TRANSITIONS.next_state(self.status, "cancel")
        self.canceled_at = now

    # --- Structural edits -----------------------------------------------------

    def replace_lines(
        self,
        supplier_id: str,
        lines: list[PurchaseOrderLine],
        expected_delivery: datetime | None,
    ) -> None:
        if self.status not in _UPDATABLE:
            raise InvalidOperationError(
                f"Cannot update purchase order with status: {self.status.value}"
            )
        _validate_lines(supplier_id, lines)
        self.supplier_id = supplier_id.strip()
        self.lines = list(lines)
        self.expected_delivery = expected_delivery

    def ensure_deletable(self) -> None:
        if self.status not in _DELETABLE:
            raise InvalidOperationError(
                f"Cannot delete purchase order with status: {self.status.value}"
            )

    @property
    def total(self) -> Money:
        result = Money.zero()
        for line in self.lines:
            result = result + line.line_total
        return result
