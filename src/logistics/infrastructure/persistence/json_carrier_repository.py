"""JSON-file-backed implementation of CarrierRepository."""

from __future__ import annotations

from logistics.domain.model.carrier import Carrier, CarrierStatus
from logistics.domain.repository.carrier_repository import CarrierRepository
from logistics.infrastructure.persistence.json_store import JsonFileStore


class JsonCarrierRepository(JsonFileStore, CarrierRepository):

    def get_by_id(self, carrier_id: str) -> Carrier | None:
        for raw in self._load_raw():
            if raw["id"] == carrier_id:
                return self._to_domain(raw)
        return None

    def list_all(self) -> list[Carrier]:
        return [self._to_domain(r) for r in self._load_raw()]

    def save(self, carrier: Carrier) -> None:
        with self._io_lock:
            rows = self._load_raw()
            self._check_version(rows, carrier.id, carrier.version, f"Carrier '{carrier.id}'")
            raw = self._to_raw(carrier)
            raw["version"] = carrier.version + 1
            self._upsert(rows, raw)
            self._persist_raw(rows)
            carrier.version += 1

    @staticmethod
    def _to_raw(carrier: Carrier) -> dict:
        return {
            "id": carrier.id,
            "code": carrier.code,
            "name": carrier.name,
            "max_daily_capacity": carrier.max_daily_capacity,
            "current_daily_shipments": carrier.current_daily_shipments,
            "status": carrier.status.value,
            "version": carrier.version,
        }

    @staticmethod
    def _to_domain(raw: dict) -> Carrier:
        return Carrier(
            id=raw["id"],
            code=raw["code"],
            name=raw["name"],
            max_daily_capacity=raw["max_daily_capacity"],
            current_daily_shipments=raw.get("current_daily_shipments", 0),
            status=CarrierStatus(raw.get("status", "ACTIVE")),
            version=raw.get("version", 0),
        )
