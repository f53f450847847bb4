"""Tests for the StockLedger domain service."""

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest
from structlog.testing import capture_logs

from logistics.domain.exceptions import (
    ConflictError,
    EntityNotFoundError,
    InsufficientStockError,
    InvalidQuantityError,
)
from logistics.domain.model.movement import MovementKind
from logistics.domain.model.stock import StockRecord
from logistics.domain.model.value_objects import StockKey
from tests.fakes import FakeWorld


def _world(*records):
    return FakeWorld(stock=list(records) or [StockRecord("W1", "P1", on_hand=100)])


class TestSingleOperations:

    def test_reserve(self):
        world = _world()
        rec = world.ledger.reserve("W1", "P1", 30)
        assert (rec.on_hand, rec.reserved, rec.available) == (100, 30, 70)
        assert world.stock("W1", "P1").reserved == 30

    def test_reserve_unknown_record_not_found(self):
        with pytest.raises(EntityNotFoundError, match="No stock record"):
            _world().ledger.reserve("W9", "P1", 1)

    def test_reserve_insufficient_leaves_record_untouched(self):
        world = _world(StockRecord("W1", "P1", on_hand=10, reserved=8))
        with pytest.raises(InsufficientStockError):
            world.ledger.reserve("W1", "P1", 3)
        assert world.stock("W1", "P1").reserved == 8

    @pytest.mark.parametrize("qty", [0, -1])
    def test_non_positive_quantities_rejected(self, qty):
        world = _world()
        with pytest.raises(InvalidQuantityError):
            world.ledger.reserve("W1", "P1", qty)
        with pytest.raises(InvalidQuantityError):
            world.ledger.receive("W1", "P1", qty, "PO-1")

    def test_release_is_clamped_and_logged(self):
        world = _world(StockRecord("W1", "P1", on_hand=10, reserved=2))
        with capture_logs() as logs:
            rec = world.ledger.release("W1", "P1", 5)
        assert rec.reserved == 0
        clamped = [e for e in logs if e["event"] == "stock_release_clamped"]
        assert clamped and clamped[0]["released"] == 2
        assert clamped[0]["log_level"] == "warning"

    def test_commit_shipment_emits_outbound(self):
        world = _world(StockRecord("W1", "P1", on_hand=10, reserved=4))
        rec = world.ledger.commit_shipment("W1", "P1", 4, "SO-1")
        assert (rec.on_hand, rec.reserved) == (6, 0)
        [movement] = world.recorder.all()
        assert movement.kind == MovementKind.OUTBOUND
        assert movement.quantity == 4
        assert movement.reference_document == "SO-1"

    def test_commit_more_than_reserved_rejected(self):
        world = _world(StockRecord("W1", "P1", on_hand=10, reserved=1))
        with pytest.raises(InvalidQuantityError):
            world.ledger.commit_shipment("W1", "P1", 2)
        assert world.recorder.all() == []

    def test_receive_creates_record_lazily(self):
        world = _world()
        rec = world.ledger.receive("W2", "P7", 40, "PO-3")
        assert rec.on_hand == 40
        assert world.stock("W2", "P7").version == 1
        [movement] = world.recorder.for_stock("W2", "P7")
        assert movement.kind == MovementKind.INBOUND
        assert movement.reference_document == "PO-3"

    def test_adjust_emits_signed_description(self):
        world = _world()
        world.ledger.adjust("W1", "P1", 80, 0)
        [movement] = world.recorder.all()
        assert movement.kind == MovementKind.ADJUSTMENT
        assert movement.quantity == 20
        assert "Removed 20 units" in movement.description
        assert movement.reference_document.startswith("ADJ-")

    def test_adjust_without_change_emits_nothing(self):
        world = _world(StockRecord("W1", "P1", on_hand=100, reserved=5))
        world.ledger.adjust("W1", "P1", 100, 0)
        assert world.recorder.all() == []
        assert world.stock("W1", "P1").reserved == 0

    def test_adjust_reserved_above_on_hand_rejected(self):
        with pytest.raises(InvalidQuantityError):
            _world().ledger.adjust("W1", "P1", 5, 6)


class TestQueries:

    def test_availability_sums(self):
        world = _world(
            StockRecord("W1", "P1", on_hand=10, reserved=4),
            StockRecord("W2", "P1", on_hand=20, reserved=0),
            StockRecord("W2", "P2", on_hand=5),
        )
        assert world.ledger.available_stock_in("W1", "P1") == 6
        assert world.ledger.available_stock_in("W3", "P1") == 0
        assert world.ledger.available_stock_across_warehouses("P1") == 26
        assert world.ledger.total_stock("P1") == 30

    def test_low_stock(self):
        world = _world(
            StockRecord("W1", "P1", on_hand=10),
            StockRecord("W1", "P2", on_hand=11),
        )
        assert [r.product_id for r in world.ledger.low_stock_in("W1")] == ["P1"]


class TestTransaction:

    def test_failure_rolls_back_every_record(self):
        world = _world(
            StockRecord("W1", "P1", on_hand=10),
            StockRecord("W1", "P2", on_hand=1),
        )
        keys = [StockKey("W1", "P1"), StockKey("W1", "P2")]
        with pytest.raises(InsufficientStockError):
            with world.ledger.transaction(keys) as tx:
                tx.reserve(keys[0], 5)
                tx.reserve(keys[1], 5)
        assert world.stock("W1", "P1").reserved == 0
        assert world.stock_repo.save_calls == 0

    def test_undeclared_key_rejected(self):
        world = _world()
        with pytest.raises(ValueError, match="not part of this transaction"):
            with world.ledger.transaction([StockKey("W1", "P1")]) as tx:
                tx.reserve(StockKey("W1", "P2"), 1)

    def test_movements_recorded_only_on_commit(self):
        world = _world(StockRecord("W1", "P1", on_hand=10, reserved=10))
        key = StockKey("W1", "P1")
        with pytest.raises(RuntimeError):
            with world.ledger.transaction([key]) as tx:
                tx.commit_shipment(key, 5, "SO-1")
                raise RuntimeError("boom")
        assert world.recorder.all() == []
        assert world.stock("W1", "P1").on_hand == 10

    def test_stale_version_is_a_conflict(self):
        world = _world()
        stale = world.stock("W1", "P1")
        world.ledger.reserve("W1", "P1", 1)
        with pytest.raises(ConflictError):
            world.stock_repo.save_many([stale])


class TestConcurrency:

    def test_concurrent_reservations_never_oversell(self):
        world = _world(StockRecord("W1", "P1", on_hand=50))
        workers = 20
        barrier = threading.Barrier(workers)

        def reserve():
            barrier.wait()
            try:
                world.ledger.reserve("W1", "P1", 5)
                return True
            except InsufficientStockError:
                return False

        with ThreadPoolExecutor(max_workers=workers) as pool:
            results = list(pool.map(lambda _: reserve(), range(workers)))

        assert results.count(True) == 10
        rec = world.stock("W1", "P1")
        assert rec.reserved == 50
        assert rec.available == 0

    def test_receive_reserve_commit_round_trip(self):
        world = _world()
        world.ledger.receive("W5", "P9", 30, "PO-1")
        world.ledger.reserve("W5", "P9", 30)
        world.ledger.commit_shipment("W5", "P9", 30, "SO-1")
        rec = world.stock("W5", "P9")
        assert (rec.on_hand, rec.reserved) == (0, 0)
        kinds = [m.kind for m in world.recorder.for_stock("W5", "P9")]
        assert kinds == [MovementKind.INBOUND, MovementKind.OUTBOUND]
