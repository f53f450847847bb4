"""Unit tests for the Shipment and Carrier aggregates."""

from datetime import datetime, timezone

import pytest

from logistics.domain.exceptions import InvalidOperationError, ValidationError
from logistics.domain.model.carrier import Carrier, CarrierStatus
from logistics.domain.model.shipment import Shipment, ShipmentStatus

NOW = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


class TestShipment:

    def test_plan_sets_tracking_number(self):
        shipment = Shipment.plan(42, NOW, NOW)
        assert shipment.status == ShipmentStatus.PLANNED
        assert shipment.tracking_number == f"TRK-{int(NOW.timestamp() * 1000)}-42"

    def test_dispatch_then_deliver(self):
        shipment = Shipment.plan(1, NOW, NOW)
        shipment.dispatch("DHL", NOW)
        assert shipment.status == ShipmentStatus.IN_TRANSIT
        assert shipment.carrier_id == "DHL"
        shipment.mark_delivered(NOW)
        assert shipment.status == ShipmentStatus.DELIVERED

    def test_deliver_planned_rejected(self):
        with pytest.raises(InvalidOperationError, match="Cannot deliver shipment in PLANNED status"):
            Shipment.plan(1, NOW, NOW).mark_delivered(NOW)


class TestCarrier:

    def test_take_consumes_capacity(self):
        carrier = Carrier("c1", "DHL", "DHL Express", max_daily_capacity=2)
        carrier.take()
        assert carrier.current_daily_shipments == 1
        assert carrier.remaining_capacity == 1

    def test_take_beyond_capacity_rejected(self):
        carrier = Carrier("c1", "DHL", "DHL Express", max_daily_capacity=1, current_daily_shipments=1)
        with pytest.raises(InvalidOperationError, match=r"max daily capacity \(1/1\)"):
            carrier.take()

    def test_inactive_carrier_rejected(self):
        carrier = Carrier("c1", "DHL", "DHL Express", 5, status=CarrierStatus.SUSPENDED)
        with pytest.raises(InvalidOperationError, match="not active"):
            carrier.take()

    def test_release_floored_at_zero(self):
        carrier = Carrier("c1", "DHL", "DHL Express", 5)
        carrier.release_slot()
        assert carrier.current_daily_shipments == 0

    def test_negative_capacity_rejected(self):
        with pytest.raises(ValidationError):
            Carrier("c1", "DHL", "DHL Express", -1)
