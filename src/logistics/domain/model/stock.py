"""StockRecord aggregate: on-hand and reserved quantities per warehouse/product.

One record exists for every (warehouse, product) pair that has ever received
stock. Callers never touch it directly; every change goes through the
StockLedger so that it is locked, persisted and written to the movement log.
"""

from __future__ import annotations

from dataclasses import dataclass

from logistics.domain.exceptions import InsufficientStockError, InvalidQuantityError
from logistics.domain.model.value_objects import StockKey


def _require_positive(quantity: int, what: str) -> None:
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise InvalidQuantityError(f"{what} quantity must be an integer")
    if quantity <= 0:
        raise InvalidQuantityError(f"{what} quantity must be positive, got {quantity}")


@dataclass
class StockRecord:
    """Aggregate root for stock tracking.

    Invariants:
    - ``0 <= reserved <= on_hand``
    - ``available`` is always >= 0
    """

    warehouse_id: str
    product_id: str
    on_hand: int = 0
    reserved: int = 0
    version: int = 0

    @property
    def key(self) -> StockKey:
        return StockKey(self.warehouse_id, self.product_id)

    @property
    def available(self) -> int:
        return self.on_hand - self.reserved

    def reserve(self, quantity: int) -> None:
        """Earmark *quantity* units for an order.

        Raises InsufficientStockError if fewer units are available.
        """
        _require_positive(quantity, "Reservation")
        if quantity > self.available:
            raise InsufficientStockError(
                f"Insufficient stock for product '{self.product_id}' in warehouse "
                f"'{self.warehouse_id}' (need {quantity}, have {self.available} available)"
            )
        self.reserved += quantity

    def release(self, quantity: int) -> int:
        """Give back a reservation, floored at zero.

        Returns the quantity actually released, which is smaller than
        *quantity* when less than that was reserved.
        """
        _require_positive(quantity, "Release")
        released = min(quantity, self.reserved)
        self.reserved -= released
        return released

    def commit_shipment(self, quantity: int) -> None:
        """Remove shipped units: both on-hand and reserved drop by *quantity*."""
        _require_positive(quantity, "Shipment")
        if quantity > self.reserved:
            raise InvalidQuantityError(
                f"Cannot ship {quantity} of product '{self.product_id}' from "
                f"warehouse '{self.warehouse_id}' - only {self.reserved} reserved"
            )
        self.reserved -= quantity
        self.on_hand -= quantity

    def receive(self, quantity: int) -> None:
        _require_positive(quantity, "Received")
        self.on_hand += quantity

    def adjust(self, new_on_hand: int, new_reserved: int) -> int:
        """Overwrite both quantities; returns ``new_on_hand - old_on_hand``."""
        if new_on_hand < 0 or new_reserved < 0:
            raise InvalidQuantityError("Quantities cannot be negative")
        if new_reserved > new_on_hand:
            raise InvalidQuantityError(
                f"Reserved quantity ({new_reserved}) cannot exceed "
                f"quantity on hand ({new_on_hand})"
            )
        delta = new_on_hand - self.on_hand
        self.on_hand = new_on_hand
        self.reserved = new_reserved
        return delta
