"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without exposing
domain internals. The ``*_dto`` functions are the only place aggregates are
turned into DTOs.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from logistics.domain.model.carrier import Carrier
from logistics.domain.model.movement import MovementEntry
from logistics.domain.model.purchase_order import PurchaseOrder
from logistics.domain.model.sales_order import SalesOrder
from logistics.domain.model.shipment import Shipment
from logistics.domain.model.stock import StockRecord


def _fmt(value: datetime | None) -> str | None:
    return value.strftime("%Y-%m-%d %H:%M UTC") if value is not None else None


# --- Inputs -------------------------------------------------------------------


@dataclass(frozen=True)
class SalesLineSpec:
    """Input: one requested product line of a sales order."""

    product_id: str
    quantity: int
    unit_price: str = "0"


@dataclass(frozen=True)
class PurchaseLineSpec:
    """Input: one product line of a purchase order."""

    product_id: str
    quantity: int
    unit_price: str = "0"


# --- Outputs ------------------------------------------------------------------


@dataclass(frozen=True)
class SalesOrderLineDTO:
    product_id: str
    warehouse_id: str
    quantity: int
    unit_price: str
    line_total: str
    back_order: bool


@dataclass(frozen=True)
class SalesOrderDTO:
    id: int
    client_id: str
    warehouse_id: str
    status: str
    lines: list[SalesOrderLineDTO]
    total: str
    created_at: str | None
    reserved_at: str | None = None
    shipped_at: str | None = None
    delivered_at: str | None = None
    tracking_number: str | None = None


@dataclass(frozen=True)
class PurchaseOrderLineDTO:
    product_id: str
    quantity: int
    unit_price: str
    line_total: str


@dataclass(frozen=True)
class PurchaseOrderDTO:
    id: int
    supplier_id: str
    status: str
    lines: list[PurchaseOrderLineDTO]
    total: str
    created_at: str | None
    expected_delivery: str | None = None
    approved_at: str | None = None
    received_at: str | None = None
    canceled_at: str | None = None
    received_warehouse_id: str | None = None


@dataclass(frozen=True)
class ShipmentDTO:
    id: int
    sales_order_id: int
    tracking_number: str
    status: str
    carrier_id: str | None
    planned_date: str | None
    shipped_date: str | None
    delivered_date: str | None


@dataclass(frozen=True)
class CarrierDTO:
    id: str
    code: str
    name: str
    status: str
    current_daily_shipments: int
    max_daily_capacity: int
    remaining_capacity: int


@dataclass(frozen=True)
class StockDTO:
    warehouse_id: str
    product_id: str
    on_hand: int
    reserved: int
    available: int


@dataclass(frozen=True)
class MovementDTO:
    id: int | None
    warehouse_id: str
    product_id: str
    kind: str
    quantity: int
    occurred_at: str | None
    reference_document: str
    description: str


@dataclass(frozen=True)
class SweepResult:
    """Outcome of one reservation-expiry sweep."""

    as_of: datetime
    found: list[int] = field(default_factory=list)
    canceled: list[int] = field(default_factory=list)
    failed: list[int] = field(default_factory=list)


@dataclass(frozen=True)
class ReservationReport:
    as_of: datetime
    total_reserved: int
    near_expiry: list[int]


# --- Mapping ------------------------------------------------------------------


def sales_order_dto(order: SalesOrder, tracking_number: str | None = None) -> SalesOrderDTO:
    return SalesOrderDTO(
        id=order.id,  # type: ignore[arg-type]
        client_id=order.client_id,
        warehouse_id=order.warehouse_id,
        status=order.status.value,
        lines=[
            SalesOrderLineDTO(
                product_id=line.product_id,
                warehouse_id=line.warehouse_id,
                quantity=line.quantity.value,
                unit_price=str(line.unit_price),
                line_total=str(line.line_total),
                back_order=line.back_order,
            )
            for line in order.lines
        ],
        total=str(order.total),
        created_at=_fmt(order.created_at),
        reserved_at=_fmt(order.reserved_at),
        shipped_at=_fmt(order.shipped_at),
        delivered_at=_fmt(order.delivered_at),
        tracking_number=tracking_number,
    )


def purchase_order_dto(order: PurchaseOrder) -> PurchaseOrderDTO:
    return PurchaseOrderDTO(
        id=order.id,  # type: ignore[arg-type]
        supplier_id=order.supplier_id,
        status=order.status.value,
        lines=[
            PurchaseOrderLineDTO(
                product_id=line.product_id,
                quantity=line.quantity.value,
                unit_price=str(line.unit_price),
                line_total=str(line.line_total),
            )
            for line in order.lines
        ],
        total=str(order.total),
        created_at=_fmt(order.created_at),
        expected_delivery=_fmt(order.expected_delivery),
        approved_at=_fmt(order.approved_at),
        received_at=_fmt(order.received_at),
        canceled_at=_fmt(order.canceled_at),
        received_warehouse_id=order.received_warehouse_id,
    )


def shipment_dto(shipment: Shipment) -> ShipmentDTO:
    return ShipmentDTO(
        id=shipment.id,  # type: ignore[arg-type]
        sales_order_id=shipment.sales_order_id,
        tracking_number=shipment.tracking_number,
        status=shipment.status.value,
        carrier_id=shipment.carrier_id,
        planned_date=_fmt(shipment.planned_date),
        shipped_date=_fmt(shipment.shipped_date),
        delivered_date=_fmt(shipment.delivered_date),
    )


def carrier_dto(carrier: Carrier) -> CarrierDTO:
    return CarrierDTO(
        id=carrier.id,
        code=carrier.code,
        name=carrier.name,
        status=carrier.status.value,
        current_daily_shipments=carrier.current_daily_shipments,
        max_daily_capacity=carrier.max_daily_capacity,
        remaining_capacity=carrier.remaining_capacity,
    )


def stock_dto(record: StockRecord) -> StockDTO:
    return StockDTO(
        warehouse_id=record.warehouse_id,
        product_id=record.product_id,
        on_hand=record.on_hand,
        reserved=record.reserved,
        available=record.available,
    )


def movement_dto(entry: MovementEntry) -> MovementDTO:
    return MovementDTO(
        id=entry.id,
        warehouse_id=entry.warehouse_id,
        product_id=entry.product_id,
        kind=entry.kind.value,
        quantity=entry.quantity,
        occurred_at=_fmt(entry.occurred_at),
        reference_document=entry.reference_document,
        description=entry.description,
    )
