"""Abstract repository for the StockRecord aggregate.

Defined in the domain layer so the ledger never depends on infrastructure.
Concrete implementations (JSON, in-memory) live elsewhere.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from logistics.domain.model.stock import StockRecord
from logistics.domain.model.value_objects import StockKey


class StockRepository(ABC):

    @abstractmethod
    def get(self, key: StockKey) -> StockRecord | None:
        """Return the record for a warehouse/product pair, or None."""

    @abstractmethod
    def list_by_product(self, product_id: str) -> list[StockRecord]:
        """Return the product's record in every warehouse that has one."""

    @abstractmethod
    def list_by_warehouse(self, warehouse_id: str) -> list[StockRecord]:
        """Return every record held in a warehouse."""

    @abstractmethod
    def list_all(self) -> list[StockRecord]:
        """Return every stock record."""

    @abstractmethod
    def save_many(self, records: list[StockRecord]) -> None:
        """Persist records as one write.

        Each record's ``version`` must match the stored version (0 for a new
        record); otherwise ConflictError is raised and nothing is written.
        On success every record's ``version`` is incremented.
        """
