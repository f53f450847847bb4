"""Domain service: Carrier Capacity Allocation.

Hands PLANNED shipments to carriers while keeping each carrier's daily
counter within its cap. Single assignment checks only its own shipment;
batch assignment validates the whole batch first and applies it all or not
at all.
"""

from __future__ import annotations

from copy import copy

import structlog

from logistics.domain.clock import Clock
from logistics.domain.exceptions import (
    EntityNotFoundError,
    InvalidOperationError,
    ValidationError,
)
from logistics.domain.model.carrier import Carrier
from logistics.domain.model.shipment import Shipment, ShipmentStatus
from logistics.domain.repository.carrier_repository import CarrierRepository
from logistics.domain.repository.shipment_repository import ShipmentRepository
from logistics.domain.service.locking import KeyedLocks

logger = structlog.get_logger(__name__)


class CarrierCapacityAllocator:

    def __init__(
        self,
        carrier_repo: CarrierRepository,
        shipment_repo: ShipmentRepository,
        locks: KeyedLocks,
        clock: Clock,
    ) -> None:
        self._carrier_repo = carrier_repo
        self._shipment_repo = shipment_repo
        self._locks = locks
        self._clock = clock

    # --- Loading --------------------------------------------------------------

    def _carrier(self, carrier_id: str) -> Carrier:
        carrier = self._carrier_repo.get_by_id(carrier_id)
        if carrier is None:
            raise EntityNotFoundError(f"Carrier '{carrier_id}' not found")
        return carrier

    def _shipment(self, shipment_id: int) -> Shipment:
        shipment = self._shipment_repo.get_by_id(shipment_id)
        if shipment is None:
            raise EntityNotFoundError(f"Shipment #{shipment_id} not found")
        return shipment

    # --- Assignment -----------------------------------------------------------

    def assign(self, shipment_id: int, carrier_id: str) -> Shipment:
        """Dispatch one PLANNED shipment with *carrier_id*."""
        with self._locks.hold(("shipment", shipment_id), ("carrier", carrier_id)):
            shipment = self._shipment(shipment_id)
            carrier = self._carrier(carrier_id)

            shipment.ensure_can("dispatch")
            try:
                carrier.take(1)
            except InvalidOperationError:
                logger.warning(
                    "carrier_assignment_rejected",
                    carrier_id=carrier_id,
                    shipment_id=shipment_id,
                    current=carrier.current_daily_shipments,
                    capacity=carrier.max_daily_capacity,
                )
                raise
            shipment.dispatch(carrier.id, self._clock.now())

            # Counter first, so a failed shipment save can only over-count.
            self._carrier_repo.save(carrier)
            self._shipment_repo.save(shipment)

        logger.info("carrier_assigned", carrier_id=carrier_id, shipment_id=shipment_id)
        return shipment

    def assign_batch(self, carrier_id: str, shipment_ids: list[int]) -> list[Shipment]:
        """Dispatch every shipment in *shipment_ids* with one carrier, or none."""
        if not shipment_ids:
            raise ValidationError("At least one shipment is required")
        if len(set(shipment_ids)) != len(shipment_ids):
            raise ValidationError("Shipment list contains duplicates")

        keys = [("carrier", carrier_id)] + [("shipment", sid) for sid in shipment_ids]
        with self._locks.hold(*keys):
            carrier = self._carrier(carrier_id)
            if not carrier.is_active:
                raise InvalidOperationError(
                    f"Carrier '{carrier.code}' is not active (status {carrier.status.value})"
                )
            if len(shipment_ids) > carrier.remaining_capacity:
                raise InvalidOperationError(
                    f"Cannot assign {len(shipment_ids)} shipments to carrier "
                    f"'{carrier.code}'. Available capacity: {carrier.remaining_capacity}"
                )

            shipments = [self._shipment(sid) for sid in shipment_ids]
            not_planned = [s for s in shipments if s.status != ShipmentStatus.PLANNED]
            if not_planned:
                listing = ", ".join(f"#{s.id} ({s.status.value})" for s in not_planned)
                raise InvalidOperationError(
                    f"Only PLANNED shipments can be assigned. Not planned: {listing}"
                )

            now = self._clock.now()
            carrier.take(len(shipments))
            for shipment in shipments:
                shipment.dispatch(carrier.id, now)
            self._carrier_repo.save(carrier)
            for shipment in shipments:
                self._shipment_repo.save(shipment)

        logger.info(
            "carrier_batch_assigned",
            carrier_id=carrier_id,
            shipment_ids=list(shipment_ids),
            current=carrier.current_daily_shipments,
        )
        return shipments

    # --- Delivery & counters --------------------------------------------------

    def complete_delivery(self, shipment_id: int) -> Shipment:
        """IN_TRANSIT -> DELIVERED, giving the carrier its slot back."""
        with self._locks.hold(("shipment", shipment_id)):
            shipment = self._shipment(shipment_id)
            shipment.mark_delivered(self._clock.now())
            self._shipment_repo.save(shipment)
        if shipment.carrier_id is not None:
            self.release(shipment.carrier_id)
        return shipment

    def release(self, carrier_id: str) -> Carrier:
        with self._locks.hold(("carrier", carrier_id)):
            carrier = self._carrier(carrier_id)
            carrier.release_slot()
            self._carrier_repo.save(carrier)
        return copy(carrier)

    def reset_daily(self) -> list[Carrier]:
        """Zero every carrier's daily counter; safe to call repeatedly."""
        carriers = []
        for listed in self._carrier_repo.list_all():
            with self._locks.hold(("carrier", listed.id)):
                carrier = self._carrier(listed.id)
                carrier.reset_daily()
                self._carrier_repo.save(carrier)
            carriers.append(copy(carrier))
        logger.info("carrier_daily_counters_reset", carriers=len(carriers))
        return carriers

    def available_carriers(self) -> list[Carrier]:
        return [
            c for c in self._carrier_repo.list_all()
            if c.is_active and c.remaining_capacity > 0
        ]
