"""SalesOrder aggregate: the order side of fulfillment.

The SalesOrder owns its lines. Stock is never touched here; the application
handlers drive the StockLedger and then call the ``mark_*`` transition that
matches, so a failed ledger call leaves the order in its previous state.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum

from logistics.domain.exceptions import ValidationError
from logistics.domain.model.state_machine import TransitionTable
from logistics.domain.model.value_objects import Money, Quantity, StockKey


class SalesOrderStatus(Enum):
    CREATED = "CREATED"
    RESERVED = "RESERVED"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELED = "CANCELED"


TRANSITIONS: TransitionTable[SalesOrderStatus] = TransitionTable(
    "sales order",
    {
        (SalesOrderStatus.CREATED, "reserve"): SalesOrderStatus.RESERVED,
        (SalesOrderStatus.RESERVED, "ship"): SalesOrderStatus.SHIPPED,
        (SalesOrderStatus.SHIPPED, "deliver"): SalesOrderStatus.DELIVERED,
        (SalesOrderStatus.CREATED, "cancel"): SalesOrderStatus.CANCELED,
        (SalesOrderStatus.RESERVED, "cancel"): SalesOrderStatus.CANCELED,
    },
)

MAX_LINES = 100


@dataclass
class SalesOrderLine:
    """One product line, fulfilled from the order's warehouse.

    ``unit_price`` is captured when the order is created. ``back_order``
    marks a line accepted even though the stock check at creation failed.
    """

    product_id: str
    warehouse_id: str
    quantity: Quantity
    unit_price: Money
    back_order: bool = False

    @property
    def key(self) -> StockKey:
        return StockKey(self.warehouse_id, self.product_id)

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity.value


@dataclass
class SalesOrder:
    """Aggregate root for sales orders.

    Use ``SalesOrder.create()`` for new orders; ``__init__`` stays plain so
    repositories can reconstitute persisted orders without re-validating.
    ``version`` counts saves; a save carrying a stale version is rejected.
    """

    id: int | None
    client_id: str
    warehouse_id: str
    lines: list[SalesOrderLine]
    status: SalesOrderStatus = SalesOrderStatus.CREATED
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    reserved_at: datetime | None = None
    shipped_at: datetime | None = None
    delivered_at: datetime | None = None
    version: int = 0

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def create(
        client_id: str,
        warehouse_id: str,
        lines: list[SalesOrderLine],
        now: datetime,
    ) -> SalesOrder:
        if not client_id or not client_id.strip():
            raise ValidationError("Client is required")
        if not warehouse_id or not warehouse_id.strip():
            raise ValidationError("Fulfillment warehouse is required")
        if not lines:
            raise ValidationError("Sales order must contain at least one line")
        if len(lines) > MAX_LINES:
            raise ValidationError(f"Maximum {MAX_LINES} lines per sales order")
        for line in lines:
            if line.warehouse_id != warehouse_id:
                raise ValidationError(
                    f"Line for product '{line.product_id}' targets warehouse "
                    f"'{line.warehouse_id}', expected '{warehouse_id}'"
                )
        return SalesOrder(
            id=None,
            client_id=client_id.strip(),
            warehouse_id=warehouse_id,
            lines=list(lines),
            created_at=now,
        )

    # --- State transitions ----------------------------------------------------

    def ensure_can(self, action: str) -> None:
        """Raise InvalidOperationError unless *action* is legal right now."""
        TRANSITIONS.next_state(self.status, action)

    def mark_reserved(self, now: datetime) -> None:
        self.status = TRANSITIONS.next_state(self.status, "reserve")
        self.reserved_at = now

    def mark_shipped(self, now: datetime) -> None:
        self.status = TRANSITIONS.next_state(self.status, "ship")
        self.shipped_at = now

    def mark_delivered(self, now: datetime) -> None:
        self.status = TRANSITIONS.next_state(self.status, "deliver")
        self.delivered_at = now

    def mark_canceled(self) -> None:
        self.status = TRANSITIONS.next_state(self.status, "cancel")

    # --- Queries --------------------------------------------------------------

    def stock_demand(self) -> dict[StockKey, int]:
        """Quantity per stock record, merging lines for the same product."""
        demand: dict[StockKey, int] = {}
        for line in self.lines:
            demand[line.key] = demand.get(line.key, 0) + line.quantity.value
        return demand

    def reserved_before(self, cutoff: datetime) -> bool:
        return (
            self.status == SalesOrderStatus.RESERVED
            and self.reserved_at is not None
            and self.reserved_at < cutoff
        )

    def is_reservation_expired(self, now: datetime, ttl: timedelta) -> bool:
        return self.reserved_before(now - ttl)

    @property
    def total(self) -> Money:
        result = Money.zero()
        for line in self.lines:
            result = result + line.line_total
        return result

    @property
    def has_back_order(self) -> bool:
        return any(line.back_order for line in self.lines)
