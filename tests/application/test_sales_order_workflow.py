"""Integration tests for the sales-order use cases."""

import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone

import pytest

from logistics.application.cancel_sales_order import CancelSalesOrderHandler
from logistics.application.create_sales_order import CreateSalesOrderHandler
from logistics.application.deliver_sales_order import DeliverSalesOrderHandler
from logistics.application.dto import SalesLineSpec
from logistics.application.reserve_sales_order import ReserveSalesOrderHandler
from logistics.application.ship_sales_order import ShipSalesOrderHandler
from logistics.application.show_sales_order import ShowSalesOrderHandler
from logistics.domain.exceptions import (
    EntityNotFoundError,
    InsufficientStockError,
    InvalidOperationError,
    InvalidQuantityError,
    ValidationError,
)
from logistics.domain.model.carrier import Carrier
from logistics.domain.model.movement import MovementKind
from logistics.domain.model.sales_order import SalesOrderStatus
from logistics.domain.model.shipment import ShipmentStatus
from logistics.domain.model.stock import StockRecord
from tests.fakes import FakeWorld


def _setup():
    world = FakeWorld(
        stock=[
            StockRecord("W1", "P1", on_hand=100),
            StockRecord("W1", "P2", on_hand=10),
            StockRecord("W2", "P2", on_hand=50),
        ],
        carriers=[Carrier("c1", "DHL", "DHL Express", max_daily_capacity=5)],
    )
    world.create = CreateSalesOrderHandler(world.sales_orders, world.ledger, world.clock)
    world.reserve = ReserveSalesOrderHandler(world.sales_orders, world.ledger, world.locks, world.clock)
    world.ship = ShipSalesOrderHandler(
        world.sales_orders, world.shipments, world.ledger, world.locks, world.clock,
        cutoff_hour=15, wait_hours=12,
    )
    world.deliver = DeliverSalesOrderHandler(
        world.sales_orders, world.shipments, world.allocator, world.locks, world.clock
    )
    world.cancel = CancelSalesOrderHandler(world.sales_orders, world.ledger, world.locks)
    return world


def _order(world, *lines):
    specs = list(lines) or [SalesLineSpec("P1", 10, "2.50"), SalesLineSpec("P2", 5, "4.00")]
    return world.create.handle("C1", "W1", specs)


class TestCreateSalesOrder:

    def test_create_touches_no_stock(self):
        world = _setup()
        dto = _order(world)
        assert dto.status == "CREATED"
        assert dto.total == "45.00 USD"
        assert world.stock("W1", "P1").reserved == 0
        assert world.recorder.all() == []

    def test_soft_check_counts_other_warehouses(self):
        world = _setup()
        # Only 10 of P2 in W1, but 60 across warehouses.
        dto = _order(world, SalesLineSpec("P2", 40))
        assert dto.lines[0].back_order is False

    def test_soft_check_rejects_implausible_quantity(self):
        world = _setup()
        with pytest.raises(InsufficientStockError, match="available 60"):
            _order(world, SalesLineSpec("P2", 61))
        assert world.sales_orders.list_all() == []

    def test_backorder_flags_line_instead_of_failing(self):
        world = _setup()
        dto = world.create.handle("C1", "W1", [SalesLineSpec("P9", 3)], allow_backorder=True)
        assert dto.lines[0].back_order is True

    def test_zero_quantity_rejected(self):
        world = _setup()
        with pytest.raises(InvalidQuantityError):
            _order(world, SalesLineSpec("P1", 0))

    def test_empty_order_rejected(self):
        world = _setup()
        with pytest.raises(ValidationError, match="at least one line"):
            world.create.handle("C1", "W1", [])


class TestReserveSalesOrder:

    def test_reserve_every_line(self):
        world = _setup()
        dto = _order(world)
        reserved = world.reserve.handle(dto.id)
        assert reserved.status == "RESERVED"
        assert world.stock("W1", "P1").reserved == 10
        assert world.stock("W1", "P2").reserved == 5
        assert world.sales_orders.get_by_id(dto.id).reserved_at == world.clock.now()

    def test_soft_check_passes_but_hard_check_fails(self):
        world = _setup()
        dto = _order(world, SalesLineSpec("P2", 40))
        with pytest.raises(InsufficientStockError):
            world.reserve.handle(dto.id)
        assert world.stock("W1", "P2").reserved == 0

    def test_reserve_twice_rejected(self):
        world = _setup()
        dto = _order(world)
        world.reserve.handle(dto.id)
        with pytest.raises(InvalidOperationError, match="Cannot reserve"):
            world.reserve.handle(dto.id)
        assert world.stock("W1", "P1").reserved == 10

    def test_unknown_order(self):
        with pytest.raises(EntityNotFoundError, match="not found"):
            _setup().reserve.handle(999)

    def test_concurrent_reserve_of_same_order_applies_once(self):
        world = _setup()
        dto = _order(world)
        barrier = threading.Barrier(8)

        def attempt():
            barrier.wait()
            try:
                world.reserve.handle(dto.id)
                return True
            except InvalidOperationError:
                return False

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(lambda _: attempt(), range(8)))

        assert results.count(True) == 1
        assert world.stock("W1", "P1").reserved == 10


class TestShipSalesOrder:

    def test_ship_commits_stock_and_plans_shipment(self):
        world = _setup()
        world.clock.set(datetime(2024, 1, 1, 10, 0, tzinfo=timezone.utc))
        dto = _order(world)
        world.reserve.handle(dto.id)

        shipped = world.ship.handle(dto.id)

        assert shipped.status == "SHIPPED"
        assert shipped.tracking_number.startswith("TRK-")
        p1 = world.stock("W1", "P1")
        assert (p1.on_hand, p1.reserved) == (90, 0)

        movements = world.recorder.by_reference(f"SO-{dto.id}")
        assert [m.kind for m in movements] == [MovementKind.OUTBOUND, MovementKind.OUTBOUND]
        assert "to client C1" in movements[0].description

        shipment = world.shipments.get_by_sales_order(dto.id)
        assert shipment.status == ShipmentStatus.PLANNED
        assert shipment.planned_date == datetime(2024, 1, 1, 22, 0, tzinfo=timezone.utc)

    def test_ship_requires_reservation(self):
        world = _setup()
        dto = _order(world)
        with pytest.raises(InvalidOperationError, match="allowed from: RESERVED"):
            world.ship.handle(dto.id)
        assert world.recorder.all() == []
        assert world.shipments.list_all() == []


class TestDeliverSalesOrder:

    def test_deliver_closes_in_transit_shipment_and_frees_carrier(self):
        world = _setup()
        dto = _order(world)
        world.reserve.handle(dto.id)
        world.ship.handle(dto.id)
        shipment = world.shipments.get_by_sales_order(dto.id)
        world.allocator.assign(shipment.id, "c1")

        world.clock.advance(days=1)
        delivered = world.deliver.handle(dto.id)

        assert delivered.status == "DELIVERED"
        assert world.shipments.get_by_id(shipment.id).status == ShipmentStatus.DELIVERED
        assert world.carriers.get_by_id("c1").current_daily_shipments == 0

    def test_deliver_without_carrier_leaves_shipment_planned(self):
        world = _setup()
        dto = _order(world)
        world.reserve.handle(dto.id)
        world.ship.handle(dto.id)
        world.deliver.handle(dto.id)
        assert world.shipments.get_by_sales_order(dto.id).status == ShipmentStatus.PLANNED

    def test_deliver_unshipped_rejected(self):
        world = _setup()
        dto = _order(world)
        with pytest.raises(InvalidOperationError):
            world.deliver.handle(dto.id)


class TestCancelSalesOrder:

    def test_cancel_created_order_touches_no_stock(self):
        world = _setup()
        dto = _order(world)
        assert world.cancel.handle(dto.id).status == "CANCELED"
        assert world.stock_repo.save_calls == 0

    def test_cancel_reserved_order_releases_every_line(self):
        world = _setup()
        dto = _order(world)
        world.reserve.handle(dto.id)
        world.cancel.handle(dto.id)
        assert world.stock("W1", "P1").reserved == 0
        assert world.stock("W1", "P2").reserved == 0

    def test_cancel_shipped_rejected(self):
        world = _setup()
        dto = _order(world)
        world.reserve.handle(dto.id)
        world.ship.handle(dto.id)
        with pytest.raises(InvalidOperationError, match="Cannot cancel"):
            world.cancel.handle(dto.id)

    def test_required_status_mismatch_rejected(self):
        world = _setup()
        dto = _order(world)
        with pytest.raises(InvalidOperationError, match="expected RESERVED"):
            world.cancel.handle(dto.id, require_status=SalesOrderStatus.RESERVED)
        assert world.sales_orders.get_by_id(dto.id).status == SalesOrderStatus.CREATED


class TestShowSalesOrder:

    def test_show_includes_tracking_number(self):
        world = _setup()
        dto = _order(world)
        world.reserve.handle(dto.id)
        shipped = world.ship.handle(dto.id)
        shown = ShowSalesOrderHandler(world.sales_orders, world.shipments).handle(dto.id)
        assert shown.tracking_number == shipped.tracking_number

    def test_list_by_status(self):
        world = _setup()
        first = _order(world)
        _order(world)
        world.reserve.handle(first.id)
        handler = ShowSalesOrderHandler(world.sales_orders, world.shipments)
        assert [o.id for o in handler.list(SalesOrderStatus.RESERVED)] == [first.id]
        assert len(handler.list()) == 2
