"""JSON-file-backed implementation of PurchaseOrderRepository."""

from __future__ import annotations

from decimal import Decimal

from logistics.domain.model.purchase_order import (
    PurchaseOrder,
    PurchaseOrderLine,
    PurchaseOrderStatus,
)
from logistics.domain.model.value_objects import Money, Quantity
from logistics.domain.repository.purchase_order_repository import PurchaseOrderRepository
from logistics.infrastructure.persistence.json_store import (
    JsonFileStore,
    dt_from_raw,
    dt_to_raw,
)


class JsonPurchaseOrderRepository(JsonFileStore, PurchaseOrderRepository):

    def get_by_id(self, order_id: int) -> PurchaseOrder | None:
        for raw in self._load_raw():
            if raw["id"] == order_id:
                return self._to_domain(raw)
        return None

    def list_all(self) -> list[PurchaseOrder]:
        return [self._to_domain(r) for r in self._load_raw()]

    def save(self, order: PurchaseOrder) -> None:
        with self._io_lock:
            rows = self._load_raw()
            if order.id is None:
                order.id = self._next_id(rows)
            else:
                self._check_version(rows, order.id, order.version, f"Purchase order #{order.id}")
            raw = self._to_raw(order)
            raw["version"] = order.version + 1
            self._upsert(rows, raw)
            self._persist_raw(rows)
            order.version += 1

    def delete(self, order_id: int) -> None:
        with self._io_lock:
            rows = [r for r in self._load_raw() if r["id"] != order_id]
            self._persist_raw(rows)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(order: PurchaseOrder) -> dict:
        return {
            "id": order.id,
            "supplier_id": order.supplier_id,
            "status": order.status.value,
            "created_at": dt_to_raw(order.created_at),
            "expected_delivery": dt_to_raw(order.expected_delivery),
            "approved_at": dt_to_raw(order.approved_at),
            "received_at": dt_to_raw(order.received_at),
            "canceled_at": dt_to_raw(order.canceled_at),
            "received_warehouse_id": order.received_warehouse_id,
            "version": order.version,
            "lines": [
                {
                    "product_id": line.product_id,
                    "quantity": line.quantity.value,
                    "unit_price": str(line.unit_price.amount),
                    "currency": line.unit_price.currency,
                }
                for line in order.lines
            ],
        }

    @staticmethod
    def _to_domain(raw: dict) -> PurchaseOrder:
        lines = [
            PurchaseOrderLine(
                product_id=line["product_id"],
                quantity=Quantity(line["quantity"]),
                unit_price=Money(Decimal(line["unit_price"]), line.get("currency", "USD")),
            )
            for line in raw["lines"]
        ]
        return PurchaseOrder(
            id=raw["id"],
            supplier_id=raw["supplier_id"],
            lines=lines,
            status=PurchaseOrderStatus(raw["status"]),
            created_at=dt_from_raw(raw["created_at"]),
            expected_delivery=dt_from_raw(raw.get("expected_delivery")),
            approved_at=dt_from_raw(raw.get("approved_at")),
            received_at=dt_from_raw(raw.get("received_at")),
            canceled_at=dt_from_raw(raw.get("canceled_at")),
            received_warehouse_id=raw.get("received_warehouse_id"),
            version=raw.get("version", 0),
        )
