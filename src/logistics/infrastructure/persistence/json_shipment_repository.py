"""JSON-file-backed implementation of ShipmentRepository."""

from __future__ import annotations

from logistics.domain.model.shipment import Shipment, ShipmentStatus
from logistics.domain.repository.shipment_repository import ShipmentRepository
from logistics.infrastructure.persistence.json_store import (
    JsonFileStore,
    dt_from_raw,
    dt_to_raw,
)


class JsonShipmentRepository(JsonFileStore, ShipmentRepository):

    def get_by_id(self, shipment_id: int) -> Shipment | None:
        for raw in self._load_raw():
            if raw["id"] == shipment_id:
                return self._to_domain(raw)
        return None

    def get_by_sales_order(self, sales_order_id: int) -> Shipment | None:
        for raw in self._load_raw():
            if raw["sales_order_id"] == sales_order_id:
                return self._to_domain(raw)
        return None

    def list_all(self) -> list[Shipment]:
        return [self._to_domain(r) for r in self._load_raw()]

    def save(self, shipment: Shipment) -> None:
        with self._io_lock:
            rows = self._load_raw()
            if shipment.id is None:
                shipment.id = self._next_id(rows)
            else:
                self._check_version(rows, shipment.id, shipment.version, f"Shipment #{shipment.id}")
            raw = self._to_raw(shipment)
            raw["version"] = shipment.version + 1
            self._upsert(rows, raw)
            self._persist_raw(rows)
            shipment.version += 1

    @staticmethod
    def _to_raw(shipment: Shipment) -> dict:
        return {
            "id": shipment.id,
            "sales_order_id": shipment.sales_order_id,
            "tracking_number": shipment.tracking_number,
            "status": shipment.status.value,
            "carrier_id": shipment.carrier_id,
            "planned_date": dt_to_raw(shipment.planned_date),
            "shipped_date": dt_to_raw(shipment.shipped_date),
            "delivered_date": dt_to_raw(shipment.delivered_date),
            "created_at": dt_to_raw(shipment.created_at),
            "version": shipment.version,
        }

    @staticmethod
    def _to_domain(raw: dict) -> Shipment:
        return Shipment(
            id=raw["id"],
            sales_order_id=raw["sales_order_id"],
            tracking_number=raw["tracking_number"],
            status=ShipmentStatus(raw["status"]),
            carrier_id=raw.get("carrier_id"),
            planned_date=dt_from_raw(raw.get("planned_date")),
            shipped_date=dt_from_raw(raw.get("shipped_date")),
            delivered_date=dt_from_raw(raw.get("delivered_date")),
            created_at=dt_from_raw(raw["created_at"]),
            version=raw.get("version", 0),
        )
