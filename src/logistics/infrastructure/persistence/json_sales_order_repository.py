"""JSON-file-backed implementation of SalesOrderRepository."""

from __future__ import annotations

from decimal import Decimal

from logistics.domain.model.sales_order import SalesOrder, SalesOrderLine, SalesOrderStatus
from logistics.domain.model.value_objects import Money, Quantity
from logistics.domain.repository.sales_order_repository import SalesOrderRepository
from logistics.infrastructure.persistence.json_store import (
    JsonFileStore,
    dt_from_raw,
    dt_to_raw,
)


class JsonSalesOrderRepository(JsonFileStore, SalesOrderRepository):

    def get_by_id(self, order_id: int) -> SalesOrder | None:
        for raw in self._load_raw():
            if raw["id"] == order_id:
                return self._to_domain(raw)
        return None

    def list_by_status(self, status: SalesOrderStatus) -> list[SalesOrder]:
        return [self._to_domain(r) for r in self._load_raw() if r["status"] == status.value]

    def list_all(self) -> list[SalesOrder]:
        return [self._to_domain(r) for r in self._load_raw()]

    def save(self, order: SalesOrder) -> None:
        with self._io_lock:
            rows = self._load_raw()
            if order.id is None:
                order.id = self._next_id(rows)
            else:
                self._check_version(rows, order.id, order.version, f"Sales order #{order.id}")
            raw = self._to_raw(order)
            raw["version"] = order.version + 1
            self._upsert(rows, raw)
            self._persist_raw(rows)
            order.version += 1

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(order: SalesOrder) -> dict:
        return {
            "id": order.id,
            "client_id": order.client_id,
            "warehouse_id": order.warehouse_id,
            "status": order.status.value,
            "created_at": dt_to_raw(order.created_at),
            "reserved_at": dt_to_raw(order.reserved_at),
            "shipped_at": dt_to_raw(order.shipped_at),
            "delivered_at": dt_to_raw(order.delivered_at),
            "version": order.version,
            "lines": [
                {
                    "product_id": line.product_id,
                    "warehouse_id": line.warehouse_id,
                    "quantity": line.quantity.value,
                    "unit_price": str(line.unit_price.amount),
                    "currency": line.unit_price.currency,
                    "back_order": line.back_order,
                }
                for line in order.lines
            ],
        }

    @staticmethod
    def _to_domain(raw: dict) -> SalesOrder:
        lines = [
            SalesOrderLine(
                product_id=line["product_id"],
                warehouse_id=line["warehouse_id"],
                quantity=Quantity(line["quantity"]),
                unit_price=Money(Decimal(line["unit_price"]), line.get("currency", "USD")),
                back_order=line.get("back_order", False),
            )
            for line in raw["lines"]
        ]
        return SalesOrder(
            id=raw["id"],
            client_id=raw["client_id"],
            warehouse_id=raw["warehouse_id"],
            lines=lines,
            status=SalesOrderStatus(raw["status"]),
            created_at=dt_from_raw(raw["created_at"]),
            reserved_at=dt_from_raw(raw.get("reserved_at")),
            shipped_at=dt_from_raw(raw.get("shipped_at")),
            delivered_at=dt_from_raw(raw.get("delivered_at")),
            version=raw.get("version", 0),
        )
