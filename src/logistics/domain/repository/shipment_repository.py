"""Abstract repository for the Shipment aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from logistics.domain.model.shipment import Shipment


class ShipmentRepository(ABC):

    @abstractmethod
    def get_by_id(self, shipment_id: int) -> Shipment | None:
        """Return a shipment by its ID, or None if not found."""

    @abstractmethod
    def get_by_sales_order(self, sales_order_id: int) -> Shipment | None:
        """Return the shipment of a sales order, or None."""

    @abstractmethod
    def list_all(self) -> list[Shipment]:
        """Return every shipment."""

    @abstractmethod
    def save(self, shipment: Shipment) -> None:
        """Persist a new or updated shipment, assigning an ID to new ones."""
