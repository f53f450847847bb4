"""MovementEntry: one immutable line of the stock audit trail."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from logistics.domain.exceptions import InvalidQuantityError
from logistics.domain.model.value_objects import StockKey


class MovementKind(Enum):
    INBOUND = "INBOUND"
    OUTBOUND = "OUTBOUND"
    ADJUSTMENT = "ADJUSTMENT"


@dataclass(frozen=True)
class MovementEntry:
    """A single inbound, outbound or corrective change to a StockRecord.

    ``id`` is None until the recorder appends the entry to the log.
    """

    warehouse_id: str
    product_id: str
    kind: MovementKind
    quantity: int
    occurred_at: datetime
    reference_document: str
    description: str = ""
    id: int | None = None

    def __post_init__(self) -> None:
        if self.quantity <= 0:
            raise InvalidQuantityError(
                f"Movement quantity must be positive, got {self.quantity}"
            )

    @property
    def key(self) -> StockKey:
        return StockKey(self.warehouse_id, self.product_id)
