"""CLI commands for the SalesOrder aggregate."""

from __future__ import annotations

import click

from logistics.application.cancel_sales_order import CancelSalesOrderHandler
from logistics.application.create_sales_order import CreateSalesOrderHandler
from logistics.application.deliver_sales_order import DeliverSalesOrderHandler
from logistics.application.dto import SalesLineSpec
from logistics.application.reserve_sales_order import ReserveSalesOrderHandler
from logistics.application.ship_sales_order import ShipSalesOrderHandler
from logistics.application.show_sales_order import ShowSalesOrderHandler
from logistics.domain.exceptions import DomainException
from logistics.domain.model.sales_order import SalesOrderStatus
from logistics.infrastructure.bootstrap import (
    carrier_allocator,
    clock,
    locks,
    sales_order_repository,
    settings,
    shipment_repository,
    stock_ledger,
)
from logistics.infrastructure.cli.display import show_sales_order
from logistics.infrastructure.cli.parsing import parse_lines


@click.command("create")
@click.option("--client", "client_id", required=True, help="Client ID.")
@click.option("--warehouse", "warehouse_id", required=True, help="Fulfillment warehouse ID.")
@click.option("--lines", required=True, help="Lines as 'Product:Qty[@Price],...'.")
@click.option("--allow-backorder", is_flag=True, default=False, help="Accept lines short on stock.")
def order_create(client_id: str, warehouse_id: str, lines: str, allow_backorder: bool) -> None:
    """Create a new sales order (no stock is reserved yet)."""
    specs = [SalesLineSpec(p, q, price) for p, q, price in parse_lines(lines)]

    handler = CreateSalesOrderHandler(sales_order_repository(), stock_ledger(), clock())

    try:
        dto = handler.handle(client_id, warehouse_id, specs, allow_backorder=allow_backorder)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    show_sales_order(dto)


@click.command("show")
@click.option("--id", "order_id", required=True, type=int, help="Sales order ID.")
def order_show(order_id: int) -> None:
    """Show details of a sales order."""
    handler = ShowSalesOrderHandler(sales_order_repository(), shipment_repository())

    try:
        dto = handler.handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    show_sales_order(dto)


@click.command("list")
@click.option(
    "--status",
    type=click.Choice([s.value for s in SalesOrderStatus], case_sensitive=False),
    default=None,
)
def order_list(status: str | None) -> None:
    """List sales orders."""
    handler = ShowSalesOrderHandler(sales_order_repository(), shipment_repository())
    wanted = SalesOrderStatus(status.upper()) if status else None
    orders = handler.list(wanted)
    if not orders:
        click.echo("No sales orders.")
    for dto in orders:
        click.echo(
            f"  #{dto.id:<5} {dto.status:<10} {dto.client_id:<15} "
            f"{dto.warehouse_id:<10} {dto.total:>14}"
        )


@click.command("reserve")
@click.option("--id", "order_id", required=True, type=int, help="Sales order ID.")
def order_reserve(order_id: int) -> None:
    """Reserve stock for every line of a CREATED order."""
    handler = ReserveSalesOrderHandler(sales_order_repository(), stock_ledger(), locks(), clock())

    try:
        handler.handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Sales order #{order_id} reserved.")


@click.command("ship")
@click.option("--id", "order_id", required=True, type=int, help="Sales order ID.")
def order_ship(order_id: int) -> None:
    """Ship a RESERVED order (deducts stock, plans the shipment)."""
    config = settings()
    handler = ShipSalesOrderHandler(
        sales_order_repository(),
        shipment_repository(),
        stock_ledger(),
        locks(),
        clock(),
        cutoff_hour=config.shipment_cutoff_hour,
        wait_hours=config.shipment_wait_hours,
    )

    try:
        dto = handler.handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Sales order #{order_id} shipped. Tracking: {dto.tracking_number}")


@click.command("deliver")
@click.option("--id", "order_id", required=True, type=int, help="Sales order ID.")
def order_deliver(order_id: int) -> None:
    """Mark a SHIPPED order delivered."""
    handler = DeliverSalesOrderHandler(
        sales_order_repository(),
        shipment_repository(),
        carrier_allocator(),
        locks(),
        clock(),
    )

    try:
        handler.handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Sales order #{order_id} delivered.")


@click.command("cancel")
@click.option("--id", "order_id", required=True, type=int, help="Sales order ID.")
def order_cancel(order_id: int) -> None:
    """Cancel an order (releases reserved stock if reserved)."""
    handler = CancelSalesOrderHandler(sales_order_repository(), stock_ledger(), locks())

    try:
        handler.handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Sales order #{order_id} canceled.")
