"""Abstract repository for the append-only movement log."""

from __future__ import annotations

from abc import ABC, abstractmethod

from logistics.domain.model.movement import MovementEntry
from logistics.domain.model.value_objects import StockKey


class MovementRepository(ABC):

    @abstractmethod
    def append_many(self, entries: list[MovementEntry]) -> list[MovementEntry]:
        """Append entries and return them with their assigned ids."""

    @abstractmethod
    def list_all(self) -> list[MovementEntry]:
        """Return the whole log in append order."""

    @abstractmethod
    def list_for_stock(self, key: StockKey) -> list[MovementEntry]:
        """Return the movements of one stock record."""

    @abstractmethod
    def list_for_warehouse(self, warehouse_id: str) -> list[MovementEntry]:
        """Return every movement in a warehouse."""

    @abstractmethod
    def list_by_reference(self, reference_document: str) -> list[MovementEntry]:
        """Return the movements caused by one document (e.g. ``PO-3``)."""
