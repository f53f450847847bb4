"""Integration tests for carrier assignment and shipment delivery."""

import pytest

from logistics.application.assign_carrier import AssignCarrierBatchHandler, AssignCarrierHandler
from logistics.application.deliver_shipment import DeliverShipmentHandler
from logistics.application.manage_carriers import (
    RegisterCarrierHandler,
    ResetDailyCapacityHandler,
    ShowCarriersHandler,
    ShowShipmentHandler,
)
from logistics.domain.exceptions import (
    EntityNotFoundError,
    InvalidOperationError,
    ValidationError,
)
from logistics.domain.model.carrier import Carrier
from logistics.domain.model.sales_order import (
    SalesOrder,
    SalesOrderLine,
    SalesOrderStatus,
)
from logistics.domain.model.shipment import Shipment
from logistics.domain.model.value_objects import Money, Quantity
from tests.fakes import FakeWorld


def _setup(orders=3, capacity=2):
    world = FakeWorld(carriers=[Carrier("c1", "DHL", "DHL Express", max_daily_capacity=capacity)])
    now = world.clock.now()
    for _ in range(orders):
        order = SalesOrder.create(
            "C1", "W1", [SalesOrderLine("P1", "W1", Quantity(1), Money.of("1"))], now
        )
        order.status = SalesOrderStatus.SHIPPED
        world.sales_orders.save(order)
        world.shipments.save(Shipment.plan(order.id, now, now))
    return world


class TestAssignCarrier:

    def test_assign(self):
        world = _setup()
        dto = AssignCarrierHandler(world.allocator).handle(1, "c1")
        assert dto.status == "IN_TRANSIT"
        assert dto.carrier_id == "c1"

    def test_batch_over_capacity_rejected(self):
        world = _setup(orders=3, capacity=2)
        with pytest.raises(InvalidOperationError, match="Cannot assign 3 shipments"):
            AssignCarrierBatchHandler(world.allocator).handle("c1", [1, 2, 3])
        assert ShowCarriersHandler(world.carriers, world.allocator).handle()[0].current_daily_shipments == 0

    def test_batch_within_capacity(self):
        world = _setup(orders=3, capacity=2)
        dtos = AssignCarrierBatchHandler(world.allocator).handle("c1", [1, 3])
        assert [d.id for d in dtos] == [1, 3]
        assert ShowCarriersHandler(world.carriers, world.allocator).handle(available_only=True) == []


class TestDeliverShipment:

    def test_delivery_closes_shipment_order_and_frees_slot(self):
        world = _setup()
        AssignCarrierHandler(world.allocator).handle(1, "c1")
        handler = DeliverShipmentHandler(
            world.sales_orders, world.shipments, world.allocator, world.locks, world.clock
        )

        dto = handler.handle(1)

        assert dto.status == "DELIVERED"
        assert world.sales_orders.get_by_id(dto.sales_order_id).status == SalesOrderStatus.DELIVERED
        assert world.carriers.get_by_id("c1").current_daily_shipments == 0

    def test_planned_shipment_cannot_be_delivered(self):
        world = _setup()
        handler = DeliverShipmentHandler(
            world.sales_orders, world.shipments, world.allocator, world.locks, world.clock
        )
        with pytest.raises(InvalidOperationError):
            handler.handle(1)
        assert world.sales_orders.get_by_id(1).status == SalesOrderStatus.SHIPPED

    def test_unknown_shipment(self):
        world = _setup()
        handler = DeliverShipmentHandler(
            world.sales_orders, world.shipments, world.allocator, world.locks, world.clock
        )
        with pytest.raises(EntityNotFoundError):
            handler.handle(99)


class TestCarrierHousekeeping:

    def test_register_keeps_daily_counter_on_update(self):
        world = _setup()
        AssignCarrierHandler(world.allocator).handle(1, "c1")
        dto = RegisterCarrierHandler(world.carriers, world.locks).handle("c1", "DHL", "DHL", 10)
        assert dto.max_daily_capacity == 10
        assert dto.current_daily_shipments == 1

    def test_register_unknown_status_rejected(self):
        world = _setup()
        with pytest.raises(ValidationError, match="Unknown carrier status"):
            RegisterCarrierHandler(world.carriers, world.locks).handle("c2", "UPS", "UPS", 3, "paused")

    def test_reset_daily(self):
        world = _setup()
        AssignCarrierBatchHandler(world.allocator).handle("c1", [1, 2])
        [dto] = ResetDailyCapacityHandler(world.allocator).handle()
        assert dto.current_daily_shipments == 0

    def test_show_shipment(self):
        world = _setup()
        handler = ShowShipmentHandler(world.shipments)
        assert handler.handle(2).sales_order_id == 2
        assert [s.id for s in handler.list()] == [1, 2, 3]
