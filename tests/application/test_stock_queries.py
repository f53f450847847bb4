"""Tests for stock adjustment and the read-only stock/movement queries."""

import pytest

from logistics.application.adjust_stock import AdjustStockHandler
from logistics.application.show_stock import ShowMovementsHandler, ShowStockHandler
from logistics.domain.exceptions import EntityNotFoundError, InvalidQuantityError
from logistics.domain.model.stock import StockRecord
from tests.fakes import FakeWorld


def _setup():
    return FakeWorld(stock=[
        StockRecord("W1", "P1", on_hand=8, reserved=2),
        StockRecord("W1", "P2", on_hand=50),
        StockRecord("W2", "P1", on_hand=30, reserved=10),
    ])


class TestAdjustStock:

    def test_adjust(self):
        world = _setup()
        dto = AdjustStockHandler(world.ledger).handle("W1", "P2", 60, 5)
        assert (dto.on_hand, dto.reserved, dto.available) == (60, 5, 55)
        [movement] = ShowMovementsHandler(world.recorder).handle(warehouse_id="W1")
        assert movement.kind == "ADJUSTMENT"
        assert "Added 10 units" in movement.description

    def test_adjust_invalid_rejected(self):
        with pytest.raises(InvalidQuantityError):
            AdjustStockHandler(_setup().ledger).handle("W1", "P2", 1, 2)

    def test_adjust_unknown_record(self):
        with pytest.raises(EntityNotFoundError):
            AdjustStockHandler(_setup().ledger).handle("W9", "P2", 1, 0)


class TestShowStock:

    def test_list_by_warehouse(self):
        rows = ShowStockHandler(_setup().ledger).handle("W1")
        assert [(r.product_id, r.available) for r in rows] == [("P1", 6), ("P2", 50)]

    def test_availability(self):
        dto = ShowStockHandler(_setup().ledger).availability("P1")
        assert dto.total_on_hand == 38
        assert dto.available_across_warehouses == 26
        assert [r.warehouse_id for r in dto.per_warehouse] == ["W1", "W2"]

    def test_low_stock(self):
        rows = ShowStockHandler(_setup().ledger).low_stock("W1")
        assert [r.product_id for r in rows] == ["P1"]


class TestShowMovements:

    def test_filters(self):
        world = _setup()
        world.ledger.receive("W1", "P1", 5, "PO-1")
        world.ledger.receive("W2", "P1", 5, "PO-2")
        world.ledger.receive("W1", "P2", 5, "PO-2")
        handler = ShowMovementsHandler(world.recorder)

        assert len(handler.handle()) == 3
        assert [m.reference_document for m in handler.handle("W1", "P1")] == ["PO-1"]
        assert [m.warehouse_id for m in handler.handle(reference="PO-2")] == ["W2", "W1"]
        assert [m.warehouse_id for m in handler.handle(product_id="P1")] == ["W1", "W2"]
