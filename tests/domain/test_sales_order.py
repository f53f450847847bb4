"""Unit tests for the SalesOrder aggregate and its state machine."""

from datetime import datetime, timedelta, timezone

import pytest

from logistics.domain.exceptions import InvalidOperationError, ValidationError
from logistics.domain.model.sales_order import (
    MAX_LINES,
    SalesOrder,
    SalesOrderLine,
    SalesOrderStatus,
)
from logistics.domain.model.value_objects import Money, Quantity, StockKey

NOW = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


def _line(product="P1", qty=5, price="10.00", warehouse="W1"):
    return SalesOrderLine(product, warehouse, Quantity(qty), Money.of(price))


def _order(*lines):
    order = SalesOrder.create("C1", "W1", list(lines) or [_line()], NOW)
    order.id = 1
    return order


class TestCreate:

    def test_new_order_is_created(self):
        order = _order()
        assert order.status == SalesOrderStatus.CREATED
        assert order.created_at == NOW

    def test_empty_order_rejected(self):
        with pytest.raises(ValidationError, match="at least one line"):
            SalesOrder.create("C1", "W1", [], NOW)

    def test_missing_client_rejected(self):
        with pytest.raises(ValidationError, match="Client is required"):
            SalesOrder.create("  ", "W1", [_line()], NOW)

    def test_line_from_other_warehouse_rejected(self):
        with pytest.raises(ValidationError, match="expected 'W1'"):
            SalesOrder.create("C1", "W1", [_line(warehouse="W2")], NOW)

    def test_too_many_lines_rejected(self):
        lines = [_line(product=f"P{i}") for i in range(MAX_LINES + 1)]
        with pytest.raises(ValidationError, match="Maximum"):
            SalesOrder.create("C1", "W1", lines, NOW)

    def test_total(self):
        order = _order(_line(qty=2, price="10.00"), _line(product="P2", qty=1, price="5.50"))
        assert order.total == Money.of("25.50")


class TestTransitions:

    def test_happy_path(self):
        order = _order()
        order.mark_reserved(NOW)
        order.mark_shipped(NOW + timedelta(hours=1))
        order.mark_delivered(NOW + timedelta(days=1))
        assert order.status == SalesOrderStatus.DELIVERED
        assert order.reserved_at == NOW
        assert order.delivered_at == NOW + timedelta(days=1)

    def test_ship_from_created_rejected(self):
        order = _order()
        with pytest.raises(InvalidOperationError, match="allowed from: RESERVED"):
            order.mark_shipped(NOW)
        assert order.status == SalesOrderStatus.CREATED

    @pytest.mark.parametrize("status", [SalesOrderStatus.CREATED, SalesOrderStatus.RESERVED])
    def test_cancel_allowed(self, status):
        order = _order()
        order.status = status
        order.mark_canceled()
        assert order.status == SalesOrderStatus.CANCELED

    @pytest.mark.parametrize(
        "status",
        [SalesOrderStatus.SHIPPED, SalesOrderStatus.DELIVERED, SalesOrderStatus.CANCELED],
    )
    def test_cancel_rejected_after_shipping_or_cancel(self, status):
        order = _order()
        order.status = status
        with pytest.raises(InvalidOperationError):
            order.mark_canceled()


class TestQueries:

    def test_stock_demand_merges_lines_for_same_product(self):
        order = _order(_line(qty=2), _line(qty=3), _line(product="P2", qty=1))
        assert order.stock_demand() == {StockKey("W1", "P1"): 5, StockKey("W1", "P2"): 1}

    def test_reservation_expiry(self):
        order = _order()
        order.mark_reserved(NOW)
        ttl = timedelta(hours=24)
        assert not order.is_reservation_expired(NOW + timedelta(hours=24), ttl)
        assert order.is_reservation_expired(NOW + timedelta(hours=24, seconds=1), ttl)

    def test_unreserved_order_never_expires(self):
        order = _order()
        assert not order.is_reservation_expired(NOW + timedelta(days=30), timedelta(hours=1))
