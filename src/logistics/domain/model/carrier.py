"""Carrier aggregate: a transport company with a daily shipment cap."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from logistics.domain.exceptions import InvalidOperationError, ValidationError


class CarrierStatus(Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    SUSPENDED = "SUSPENDED"


@dataclass
class Carrier:
    """Aggregate root for carrier capacity.

    Invariants:
    - ``0 <= current_daily_shipments <= max_daily_capacity`` while ACTIVE
    """

    id: str
    code: str
    name: str
    max_daily_capacity: int
    current_daily_shipments: int = 0
    status: CarrierStatus = CarrierStatus.ACTIVE
    version: int = 0

    def __post_init__(self) -> None:
        if self.max_daily_capacity < 0:
            raise ValidationError("Maximum daily capacity cannot be negative")

    @property
    def remaining_capacity(self) -> int:
        return max(self.max_daily_capacity - self.current_daily_shipments, 0)

    @property
    def is_active(self) -> bool:
        return self.status == CarrierStatus.ACTIVE

    def take(self, count: int = 1) -> None:
        """Consume *count* slots of today's capacity."""
        if not self.is_active:
            raise InvalidOperationError(
                f"Carrier '{self.code}' is not active (status {self.status.value})"
            )
        if count > self.remaining_capacity:
            raise InvalidOperationError(
                f"Carrier '{self.code}' has reached its max daily capacity "
                f"({self.current_daily_shipments}/{self.max_daily_capacity}). "
                f"Available capacity: {self.remaining_capacity}, requested: {count}"
            )
        self.current_daily_shipments += count

    def release_slot(self) -> None:
        if self.current_daily_shipments > 0:
            self.current_daily_shipments -= 1

    def reset_daily(self) -> None:
        self.current_daily_shipments = 0
