"""Shared table formatting for the CLI."""

from __future__ import annotations

import click

from logistics.application.dto import (
    MovementDTO,
    PurchaseOrderDTO,
    SalesOrderDTO,
    ShipmentDTO,
    StockDTO,
)


def show_sales_order(dto: SalesOrderDTO) -> None:
    click.echo(f"Sales order #{dto.id}  (status={dto.status})")
    click.echo(f"Client:    {dto.client_id}")
    click.echo(f"Warehouse: {dto.warehouse_id}")
    click.echo(f"Created:   {dto.created_at}")
    if dto.reserved_at:
        click.echo(f"Reserved:  {dto.reserved_at}")
    if dto.shipped_at:
        click.echo(f"Shipped:   {dto.shipped_at}")
    if dto.delivered_at:
        click.echo(f"Delivered: {dto.delivered_at}")
    if dto.tracking_number:
        click.echo(f"Tracking:  {dto.tracking_number}")
    click.echo()
    click.echo(f"  {'Product':<20} {'Qty':>5} {'Price':>12} {'Total':>12}")
    click.echo(f"  {'-'*51}")
    for line in dto.lines:
        flag = "  (backorder)" if line.back_order else ""
        click.echo(
            f"  {line.product_id:<20} {line.quantity:>5} "
            f"{line.unit_price:>12} {line.line_total:>12}{flag}"
        )
    click.echo(f"  {'-'*51}")
    click.echo(f"  {'Order Total':<27} {dto.total:>24}")


def show_purchase_order(dto: PurchaseOrderDTO) -> None:
    click.echo(f"Purchase order #{dto.id}  (status={dto.status})")
    click.echo(f"Supplier:  {dto.supplier_id}")
    click.echo(f"Created:   {dto.created_at}")
    if dto.expected_delivery:
        click.echo(f"Expected:  {dto.expected_delivery}")
    if dto.received_warehouse_id:
        click.echo(f"Received:  {dto.received_at} into {dto.received_warehouse_id}")
    click.echo()
    click.echo(f"  {'Product':<20} {'Qty':>5} {'Price':>12} {'Total':>12}")
    click.echo(f"  {'-'*51}")
    for line in dto.lines:
        click.echo(
            f"  {line.product_id:<20} {line.quantity:>5} "
            f"{line.unit_price:>12} {line.line_total:>12}"
        )
    click.echo(f"  {'-'*51}")
    click.echo(f"  {'Order Total':<27} {dto.total:>24}")


def show_stock(records: list[StockDTO]) -> None:
    if not records:
        click.echo("No stock records.")
        return
    click.echo(f"  {'Warehouse':<12} {'Product':<20} {'On hand':>8} {'Reserved':>9} {'Available':>10}")
    click.echo(f"  {'-'*63}")
    for r in records:
        click.echo(
            f"  {r.warehouse_id:<12} {r.product_id:<20} "
            f"{r.on_hand:>8} {r.reserved:>9} {r.available:>10}"
        )


def show_movements(entries: list[MovementDTO]) -> None:
    if not entries:
        click.echo("No movements.")
        return
    for e in entries:
        click.echo(
            f"  #{e.id:<5} {e.occurred_at}  {e.kind:<10} {e.quantity:>6}  "
            f"{e.warehouse_id}/{e.product_id}  {e.reference_document}  {e.description}"
        )


def show_shipment(dto: ShipmentDTO) -> None:
    carrier = dto.carrier_id or "-"
    click.echo(
        f"Shipment #{dto.id}  (status={dto.status})  order #{dto.sales_order_id}  "
        f"carrier={carrier}  tracking={dto.tracking_number}"
    )
    click.echo(f"  planned={dto.planned_date}  shipped={dto.shipped_date}  delivered={dto.delivered_date}")
