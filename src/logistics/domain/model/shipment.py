"""Shipment aggregate: the physical dispatch of one shipped sales order."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from logistics.domain.model.state_machine import TransitionTable


class ShipmentStatus(Enum):
    PLANNED = "PLANNED"
    IN_TRANSIT = "IN_TRANSIT"
    DELIVERED = "DELIVERED"


TRANSITIONS: TransitionTable[ShipmentStatus] = TransitionTable(
    "shipment",
    {
        (ShipmentStatus.PLANNED, "dispatch"): ShipmentStatus.IN_TRANSIT,
        (ShipmentStatus.IN_TRANSIT, "deliver"): ShipmentStatus.DELIVERED,
    },
)


def tracking_number_for(sales_order_id: int, now: datetime) -> str:
    return f"TRK-{int(now.timestamp() * 1000)}-{sales_order_id}"


@dataclass
class Shipment:

    id: int | None
    sales_order_id: int
    tracking_number: str
    status: ShipmentStatus = ShipmentStatus.PLANNED
    carrier_id: str | None = None
    planned_date: datetime | None = None
    shipped_date: datetime | None = None
    delivered_date: datetime | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    version: int = 0

    @staticmethod
    def plan(sales_order_id: int, planned_date: datetime, now: datetime) -> Shipment:
        return Shipment(
            id=None,
            sales_order_id=sales_order_id,
            tracking_number=tracking_number_for(sales_order_id, now),
            planned_date=planned_date,
            created_at=now,
        )

    def ensure_can(self, action: str) -> None:
        TRANSITIONS.next_state(self.status, action)

    def dispatch(self, carrier_id: str, now: datetime) -> None:
        """Hand the shipment to *carrier_id*: PLANNED -> IN_TRANSIT."""
        self.status = TRANSITIONS.next_state(self.status, "dispatch")
        self.carrier_id = carrier_id
        self.shipped_date = now

    def mark_delivered(self, now: datetime) -> None:
        self.status = TRANSITIONS.next_state(self.status, "deliver")
        self.delivered_date = now
