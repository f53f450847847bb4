"""Application service: Assign Carrier use cases.

Single assignment and all-or-nothing batch assignment both delegate to the
CarrierCapacityAllocator, which owns the capacity rules.
"""

from __future__ import annotations

from logistics.application.dto import ShipmentDTO, shipment_dto
from logistics.domain.service.carrier_allocator import CarrierCapacityAllocator


class AssignCarrierHandler:

    def __init__(self, allocator: CarrierCapacityAllocator) -> None:
        self._allocator = allocator

    def handle(self, shipment_id: int, carrier_id: str) -> ShipmentDTO:
        return shipment_dto(self._allocator.assign(shipment_id, carrier_id))


class AssignCarrierBatchHandler:

    def __init__(self, allocator: CarrierCapacityAllocator) -> None:
        self._allocator = allocator

    def handle(self, carrier_id: str, shipment_ids: list[int]) -> list[ShipmentDTO]:
        shipments = self._allocator.assign_batch(carrier_id, shipment_ids)
        return [shipment_dto(s) for s in shipments]
