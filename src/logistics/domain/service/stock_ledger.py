"""Domain service: Stock Ledger.

The only code path allowed to change a StockRecord. Every change runs inside
a ledger transaction:

  1. lock the affected records (keyed locks, fixed order),
  2. work on private copies of the records,
  3. on success save the aggregates staged with ``persist()`` (the order
     whose status changes with the stock), then all records in one write,
     then the movements,
  4. on any exception inside the block drop the copies, so nothing is
     applied; if a step of the commit fails, write back what the earlier
     steps changed and re-raise.

Multi-line operations (reserving or shipping a whole order, receiving a whole
purchase order) open one transaction over every record they touch, which
makes them all-or-nothing.
"""

from __future__ import annotations

from contextlib import contextmanager
from copy import deepcopy
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Callable, Iterable, Iterator

import structlog

from logistics.domain.clock import Clock
from logistics.domain.exceptions import EntityNotFoundError
from logistics.domain.model.movement import MovementEntry, MovementKind
from logistics.domain.model.stock import StockRecord
from logistics.domain.model.value_objects import StockKey
from logistics.domain.repository.stock_repository import StockRepository
from logistics.domain.service.locking import KeyedLocks
from logistics.domain.service.movement_recorder import MovementRecorder

logger = structlog.get_logger(__name__)

LOW_STOCK_THRESHOLD = 10


def _lock_key(key: StockKey) -> tuple[str, str, str]:
    return ("stock", key.warehouse_id, key.product_id)


@dataclass
class _StagedSave:
    aggregate: Any
    save: Callable[[Any], None]
    snapshot: Any = None

    def restore(self) -> None:
        self.snapshot.version = self.aggregate.version
        self.save(self.snapshot)


class LedgerTransaction:
    """Working set of one ledger transaction.

    Only keys declared when the transaction was opened may be touched;
    they are the ones that are locked.
    """

    def __init__(self, stock_repo: StockRepository, keys: list[StockKey], now: datetime) -> None:
        self._stock_repo = stock_repo
        self._keys = set(keys)
        self._records: dict[StockKey, StockRecord] = {}
        self._originals: dict[StockKey, StockRecord] = {}
        self._movements: list[MovementEntry] = []
        self._staged: list[_StagedSave] = []
        self.now = now

    # --- Working copies -------------------------------------------------------

    def record(self, key: StockKey, create: bool = False) -> StockRecord:
        if key not in self._keys:
            raise ValueError(f"Stock record {key} is not part of this transaction")
        if key not in self._records:
            stored = self._stock_repo.get(key)
            if stored is None:
                if not create:
                    raise EntityNotFoundError(
                        f"No stock record for product '{key.product_id}' "
                        f"in warehouse '{key.warehouse_id}'"
                    )
                stored = StockRecord(warehouse_id=key.warehouse_id, product_id=key.product_id)
            self._originals[key] = replace(stored)
            self._records[key] = replace(stored)
        return self._records[key]

    def original(self, key: StockKey) -> StockRecord:
        """The record as it was read, before this transaction touched it."""
        return replace(self._originals[key])

    def persist(self, aggregate: Any, save: Callable[[Any], None]) -> None:
        """Save *aggregate* with *save* as the first step of the commit.

        Call it before mutating the aggregate: an aggregate that already has
        an id is snapshotted here and written back if a later commit step
        fails. New aggregates have nothing to restore and are kept.
        """
        snapshot = deepcopy(aggregate) if aggregate.id is not None else None
        self._staged.append(_StagedSave(aggregate, save, snapshot))

    @property
    def staged(self) -> list[_StagedSave]:
        return list(self._staged)

    @property
    def records(self) -> list[StockRecord]:
        return list(self._records.values())

    @property
    def movements(self) -> list[MovementEntry]:
        return list(self._movements)

    def _emit(
        self,
        record: StockRecord,
        kind: MovementKind,
        quantity: int,
        reference_document: str,
        description: str,
    ) -> None:
        self._movements.append(
            MovementEntry(
                warehouse_id=record.warehouse_id,
                product_id=record.product_id,
                kind=kind,
                quantity=quantity,
                occurred_at=self.now,
                reference_document=reference_document,
                description=description,
            )
        )

    # --- Operations -----------------------------------------------------------

    def reserve(self, key: StockKey, quantity: int) -> StockRecord:
        record = self.record(key)
        record.reserve(quantity)
        return record

    def release(self, key: StockKey, quantity: int) -> StockRecord:
        record = self.record(key)
        released = record.release(quantity)
        if released < quantity:
            logger.warning(
                "stock_release_clamped",
                warehouse_id=key.warehouse_id,
                product_id=key.product_id,
                requested=quantity,
                released=released,
            )
        return record

    def commit_shipment(
        self,
        key: StockKey,
        quantity: int,
        reference_document: str,
        description: str = "",
    ) -> StockRecord:
        record = self.record(key)
        record.commit_shipment(quantity)
        self._emit(
            record,
            MovementKind.OUTBOUND,
            quantity,
            reference_document,
            description or f"Shipment of {quantity} units of {key.product_id}",
        )
        return record

    def receive(
        self,
        key: StockKey,
        quantity: int,
        reference_document: str,
        description: str = "",
    ) -> StockRecord:
        record = self.record(key, create=True)
        record.receive(quantity)
        self._emit(
            record,
            MovementKind.INBOUND,
            quantity,
            reference_document,
            description or f"Reception of {quantity} units of {key.product_id}",
        )
        return record

    def adjust(self, key: StockKey, new_on_hand: int, new_reserved: int) -> StockRecord:
        record = self.record(key)
        delta = record.adjust(new_on_hand, new_reserved)
        if delta:
            direction = "Added" if delta > 0 else "Removed"
            self._emit(
                record,
                MovementKind.ADJUSTMENT,
                abs(delta),
                f"ADJ-{int(self.now.timestamp() * 1000)}",
                f"Inventory adjustment - {direction} {abs(delta)} units - {key.product_id}",
            )
        return record


class StockLedger:

    def __init__(
        self,
        stock_repo: StockRepository,
        recorder: MovementRecorder,
        locks: KeyedLocks,
        clock: Clock,
    ) -> None:
        self._stock_repo = stock_repo
        self._recorder = recorder
        self._locks = locks
        self._clock = clock

    @contextmanager
    def transaction(self, keys: Iterable[StockKey]) -> Iterator[LedgerTransaction]:
        ordered = sorted(set(keys))
        with self._locks.hold(*(_lock_key(k) for k in ordered)):
            tx = LedgerTransaction(self._stock_repo, ordered, self._clock.now())
            try:
                yield tx
            except Exception:
                logger.debug("ledger_transaction_rolled_back", keys=[str(k) for k in ordered])
                raise
            self._commit(tx)

    def _commit(self, tx: LedgerTransaction) -> None:
        undo: list[Callable[[], None]] = []
        records = tx.records
        try:
            for staged in tx.staged:
                staged.save(staged.aggregate)
                if staged.snapshot is not None:
                    undo.append(staged.restore)
            if records:
                self._stock_repo.save_many(records)
                undo.append(lambda: self._restore_records(tx, records))
            recorded = self._recorder.record(tx.movements)
        except Exception:
            logger.warning(
                "ledger_commit_failed",
                records=[str(r.key) for r in records],
                undo_steps=len(undo),
            )
            for step in reversed(undo):
                try:
                    step()
                except Exception:
                    logger.exception("ledger_commit_undo_failed")
            raise
        logger.debug(
            "ledger_transaction_committed",
            records=[str(r.key) for r in records],
            movements=len(recorded),
        )

    def _restore_records(self, tx: LedgerTransaction, records: list[StockRecord]) -> None:
        self._stock_repo.save_many(
            [replace(tx.original(r.key), version=r.version) for r in records]
        )

    # --- Single-record operations ---------------------------------------------

    def reserve(self, warehouse_id: str, product_id: str, quantity: int) -> StockRecord:
        key = StockKey(warehouse_id, product_id)
        with self.transaction([key]) as tx:
            record = tx.reserve(key, quantity)
        return replace(record)

    def release(self, warehouse_id: str, product_id: str, quantity: int) -> StockRecord:
        key = StockKey(warehouse_id, product_id)
        with self.transaction([key]) as tx:
            record = tx.release(key, quantity)
        return replace(record)

    def commit_shipment(
        self,
        warehouse_id: str,
        product_id: str,
        quantity: int,
        reference_document: str = "",
        description: str = "",
    ) -> StockRecord:
        key = StockKey(warehouse_id, product_id)
        with self.transaction([key]) as tx:
            record = tx.commit_shipment(key, quantity, reference_document, description)
        return replace(record)

    def receive(
        self,
        warehouse_id: str,
        product_id: str,
        quantity: int,
        reference_document: str,
        description: str = "",
    ) -> StockRecord:
        key = StockKey(warehouse_id, product_id)
        with self.transaction([key]) as tx:
            record = tx.receive(key, quantity, reference_document, description)
        return replace(record)

    def adjust(
        self,
        warehouse_id: str,
        product_id: str,
        new_on_hand: int,
        new_reserved: int,
    ) -> StockRecord:
        key = StockKey(warehouse_id, product_id)
        with self.transaction([key]) as tx:
            record = tx.adjust(key, new_on_hand, new_reserved)
        logger.info(
            "stock_adjusted",
            warehouse_id=warehouse_id,
            product_id=product_id,
            on_hand=record.on_hand,
            reserved=record.reserved,
        )
        return replace(record)

    # --- Queries --------------------------------------------------------------

    def get(self, warehouse_id: str, product_id: str) -> StockRecord:
        record = self._stock_repo.get(StockKey(warehouse_id, product_id))
        if record is None:
            raise EntityNotFoundError(
                f"No stock record for product '{product_id}' in warehouse '{warehouse_id}'"
            )
        return replace(record)

    def available_stock_in(self, warehouse_id: str, product_id: str) -> int:
        record = self._stock_repo.get(StockKey(warehouse_id, product_id))
        return record.available if record is not None else 0

    def available_stock_across_warehouses(self, product_id: str) -> int:
        return sum(r.available for r in self._stock_repo.list_by_product(product_id))

    def total_stock(self, product_id: str) -> int:
        return sum(r.on_hand for r in self._stock_repo.list_by_product(product_id))

    def low_stock_in(self, warehouse_id: str, threshold: int = LOW_STOCK_THRESHOLD) -> list[StockRecord]:
        return [
            replace(r)
            for r in self._stock_repo.list_by_warehouse(warehouse_id)
            if r.on_hand <= threshold
        ]

    def records(self, warehouse_id: str | None = None) -> list[StockRecord]:
        if warehouse_id is None:
            found = self._stock_repo.list_all()
        else:
            found = self._stock_repo.list_by_warehouse(warehouse_id)
        return [replace(r) for r in found]
