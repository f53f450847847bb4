"""Abstract repository for the SalesOrder aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from logistics.domain.model.sales_order import SalesOrder, SalesOrderStatus


class SalesOrderRepository(ABC):

    @abstractmethod
    def get_by_id(self, order_id: int) -> SalesOrder | None:
        """Return a sales order by its ID, or None if not found."""

    @abstractmethod
    def list_by_status(self, status: SalesOrderStatus) -> list[SalesOrder]:
        """Return every sales order currently in *status*."""

    @abstractmethod
    def list_all(self) -> list[SalesOrder]:
        """Return every sales order."""

    @abstractmethod
    def save(self, order: SalesOrder) -> None:
        """Persist a new or updated order, assigning an ID to new ones."""
