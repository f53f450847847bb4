"""JSON-file-backed implementation of StockRepository."""

from __future__ import annotations

from logistics.domain.exceptions import ConflictError
from logistics.domain.model.stock import StockRecord
from logistics.domain.model.value_objects import StockKey
from logistics.domain.repository.stock_repository import StockRepository
from logistics.infrastructure.persistence.json_store import JsonFileStore


class JsonStockRepository(JsonFileStore, StockRepository):

    # --- StockRepository interface --------------------------------------------

    def get(self, key: StockKey) -> StockRecord | None:
        for raw in self._load_raw():
            if raw["warehouse_id"] == key.warehouse_id and raw["product_id"] == key.product_id:
                return self._to_domain(raw)
        return None

    def list_by_product(self, product_id: str) -> list[StockRecord]:
        return [self._to_domain(r) for r in self._load_raw() if r["product_id"] == product_id]

    def list_by_warehouse(self, warehouse_id: str) -> list[StockRecord]:
        return [self._to_domain(r) for r in self._load_raw() if r["warehouse_id"] == warehouse_id]

    def list_all(self) -> list[StockRecord]:
        return [self._to_domain(r) for r in self._load_raw()]

    def save_many(self, records: list[StockRecord]) -> None:
        with self._io_lock:
            rows = self._load_raw()
            index = {(r["warehouse_id"], r["product_id"]): i for i, r in enumerate(rows)}

            for record in records:
                pos = index.get((record.warehouse_id, record.product_id))
                stored_version = rows[pos]["version"] if pos is not None else 0
                if stored_version != record.version:
                    raise ConflictError(
                        f"Stock record {record.key} was modified concurrently "
                        f"(expected version {record.version}, found {stored_version})"
                    )

            for record in records:
                record.version += 1
                raw = self._to_raw(record)
                pos = index.get((record.warehouse_id, record.product_id))
                if pos is None:
                    index[(record.warehouse_id, record.product_id)] = len(rows)
                    rows.append(raw)
                else:
                    rows[pos] = raw

            self._persist_raw(rows)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(record: StockRecord) -> dict:
        return {
            "warehouse_id": record.warehouse_id,
            "product_id": record.product_id,
            "on_hand": record.on_hand,
            "reserved": record.reserved,
            "version": record.version,
        }

    @staticmethod
    def _to_domain(raw: dict) -> StockRecord:
        return StockRecord(
            warehouse_id=raw["warehouse_id"],
            product_id=raw["product_id"],
            on_hand=raw["on_hand"],
            reserved=raw["reserved"],
            version=raw.get("version", 0),
        )
