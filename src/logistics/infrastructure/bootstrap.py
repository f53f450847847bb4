"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.

One KeyedLocks instance and one clock are shared by everything built here,
so handlers created in the same process lock against each other.
"""

from __future__ import annotations

from logistics.application.cancel_sales_order import CancelSalesOrderHandler
from logistics.application.expire_reservations import (
    ExpireReservationsHandler,
    ReservationReportHandler,
)
from logistics.domain.clock import Clock, SystemClock
from logistics.domain.service.carrier_allocator import CarrierCapacityAllocator
from logistics.domain.service.locking import KeyedLocks
from logistics.domain.service.movement_recorder import MovementRecorder
from logistics.domain.service.stock_ledger import StockLedger
from logistics.infrastructure.config import Settings, load_settings
from logistics.infrastructure.persistence.json_carrier_repository import JsonCarrierRepository
from logistics.infrastructure.persistence.json_movement_repository import JsonMovementRepository
from logistics.infrastructure.persistence.json_purchase_order_repository import (
    JsonPurchaseOrderRepository,
)
from logistics.infrastructure.persistence.json_sales_order_repository import (
    JsonSalesOrderRepository,
)
from logistics.infrastructure.persistence.json_shipment_repository import JsonShipmentRepository
from logistics.infrastructure.persistence.json_stock_repository import JsonStockRepository
from logistics.infrastructure.scheduler import ReservationExpiryScheduler

_LOCKS = KeyedLocks()
_CLOCK = SystemClock()


def settings() -> Settings:
    return load_settings()


def locks() -> KeyedLocks:
    return _LOCKS


def clock() -> Clock:
    return _CLOCK


# --- Repositories -------------------------------------------------------------


def stock_repository() -> JsonStockRepository:
    return JsonStockRepository(settings().data_dir / "stock.json")


def movement_repository() -> JsonMovementRepository:
    return JsonMovementRepository(settings().data_dir / "movements.json")


def sales_order_repository() -> JsonSalesOrderRepository:
    return JsonSalesOrderRepository(settings().data_dir / "sales_orders.json")


def purchase_order_repository() -> JsonPurchaseOrderRepository:
    return JsonPurchaseOrderRepository(settings().data_dir / "purchase_orders.json")


def shipment_repository() -> JsonShipmentRepository:
    return JsonShipmentRepository(settings().data_dir / "shipments.json")


def carrier_repository() -> JsonCarrierRepository:
    return JsonCarrierRepository(settings().data_dir / "carriers.json")


# --- Domain services ----------------------------------------------------------


def movement_recorder() -> MovementRecorder:
    return MovementRecorder(movement_repository())


def stock_ledger() -> StockLedger:
    return StockLedger(stock_repository(), movement_recorder(), _LOCKS, _CLOCK)


def carrier_allocator() -> CarrierCapacityAllocator:
    return CarrierCapacityAllocator(carrier_repository(), shipment_repository(), _LOCKS, _CLOCK)


# --- Reservation expiry -------------------------------------------------------


def expire_reservations_handler() -> ExpireReservationsHandler:
    orders = sales_order_repository()
    return ExpireReservationsHandler(
        order_repo=orders,
        cancel_handler=CancelSalesOrderHandler(orders, stock_ledger(), _LOCKS),
        clock=_CLOCK,
        ttl_hours=settings().reservation_ttl_hours,
    )


def reservation_report_handler() -> ReservationReportHandler:
    return ReservationReportHandler(
        sales_order_repository(), _CLOCK, ttl_hours=settings().reservation_ttl_hours
    )


def expiry_scheduler() -> ReservationExpiryScheduler:
    config = settings()
    return ReservationExpiryScheduler(
        sweep=expire_reservations_handler(),
        report=reservation_report_handler(),
        clock=_CLOCK,
        sweep_interval_seconds=config.sweep_interval_seconds,
        report_interval_seconds=config.report_interval_seconds,
    )
