"""Application service: carrier registration, capacity housekeeping and queries."""

from __future__ import annotations

from logistics.application.dto import CarrierDTO, ShipmentDTO, carrier_dto, shipment_dto
from logistics.domain.exceptions import EntityNotFoundError, ValidationError
from logistics.domain.model.carrier import Carrier, CarrierStatus
from logistics.domain.repository.carrier_repository import CarrierRepository
from logistics.domain.repository.shipment_repository import ShipmentRepository
from logistics.domain.service.carrier_allocator import CarrierCapacityAllocator
from logistics.domain.service.locking import KeyedLocks


class ResetDailyCapacityHandler:

    def __init__(self, allocator: CarrierCapacityAllocator) -> None:
        self._allocator = allocator

    def handle(self) -> list[CarrierDTO]:
        return [carrier_dto(c) for c in self._allocator.reset_daily()]


class ShowCarriersHandler:

    def __init__(
        self,
        carrier_repo: CarrierRepository,
        allocator: CarrierCapacityAllocator,
    ) -> None:
        self._carrier_repo = carrier_repo
        self._allocator = allocator

    def handle(self, available_only: bool = False) -> list[CarrierDTO]:
        if available_only:
            carriers = self._allocator.available_carriers()
        else:
            carriers = self._carrier_repo.list_all()
        return [carrier_dto(c) for c in sorted(carriers, key=lambda c: c.code)]


class ShowShipmentHandler:

    def __init__(self, shipment_repo: ShipmentRepository) -> None:
        self._shipment_repo = shipment_repo

    def handle(self, shipment_id: int) -> ShipmentDTO:
        shipment = self._shipment_repo.get_by_id(shipment_id)
        if shipment is None:
            raise EntityNotFoundError(f"Shipment #{shipment_id} not found")
        return shipment_dto(shipment)

    def list(self) -> list[ShipmentDTO]:
        shipments = sorted(self._shipment_repo.list_all(), key=lambda s: s.id or 0)
        return [shipment_dto(s) for s in shipments]


class RegisterCarrierHandler:
    """Create a carrier, or update name, cap and status of an existing one.

    The daily counter is kept on update.
    """

    def __init__(self, carrier_repo: CarrierRepository, locks: KeyedLocks) -> None:
        self._carrier_repo = carrier_repo
        self._locks = locks

    def handle(
        self,
        carrier_id: str,
        code: str,
        name: str,
        max_daily_capacity: int,
        status: str = CarrierStatus.ACTIVE.value,
    ) -> CarrierDTO:
        if not carrier_id or not code:
            raise ValidationError("Carrier id and code are required")
        try:
            carrier_status = CarrierStatus(status.upper())
        except ValueError:
            raise ValidationError(f"Unknown carrier status '{status}'") from None

        with self._locks.hold(("carrier", carrier_id)):
            existing = self._carrier_repo.get_by_id(carrier_id)
            carrier = Carrier(
                id=carrier_id,
                code=code,
                name=name,
                max_daily_capacity=max_daily_capacity,
                current_daily_shipments=(
                    existing.current_daily_shipments if existing is not None else 0
                ),
                status=carrier_status,
                version=existing.version if existing is not None else 0,
            )
            self._carrier_repo.save(carrier)
        return carrier_dto(carrier)
