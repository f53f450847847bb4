"""Abstract repository for the PurchaseOrder aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from logistics.domain.model.purchase_order import PurchaseOrder


class PurchaseOrderRepository(ABC):

    @abstractmethod
    def get_by_id(self, order_id: int) -> PurchaseOrder | None:
        """Return a purchase order by its ID, or None if not found."""

    @abstractmethod
    def list_all(self) -> list[PurchaseOrder]:
        """Return every purchase order."""

    @abstractmethod
    def save(self, order: PurchaseOrder) -> None:
        """Persist a new or updated order, assigning an ID to new ones."""

    @abstractmethod
    def delete(self, order_id: int) -> None:
        """Remove an order together with its lines."""
