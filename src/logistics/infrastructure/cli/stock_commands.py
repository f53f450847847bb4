"""CLI commands for stock levels and the movement log."""

from __future__ import annotations

import click

from logistics.application.adjust_stock import AdjustStockHandler
from logistics.application.show_stock import ShowMovementsHandler, ShowStockHandler
from logistics.domain.exceptions import DomainException
from logistics.domain.service.stock_ledger import LOW_STOCK_THRESHOLD
from logistics.infrastructure.bootstrap import movement_recorder, stock_ledger
from logistics.infrastructure.cli.display import show_movements, show_stock


@click.command("show")
@click.option("--warehouse", "warehouse_id", default=None, help="Limit to one warehouse.")
def stock_show(warehouse_id: str | None) -> None:
    """Show on-hand, reserved and available quantities."""
    show_stock(ShowStockHandler(stock_ledger()).handle(warehouse_id))


@click.command("availability")
@click.option("--product", "product_id", required=True, help="Product ID.")
def stock_availability(product_id: str) -> None:
    """Show a product's stock across every warehouse."""
    dto = ShowStockHandler(stock_ledger()).availability(product_id)
    click.echo(f"Product {dto.product_id}")
    click.echo(f"  Total on hand:         {dto.total_on_hand}")
    click.echo(f"  Available (all sites): {dto.available_across_warehouses}")
    click.echo()
    show_stock(dto.per_warehouse)


@click.command("low")
@click.option("--warehouse", "warehouse_id", required=True, help="Warehouse ID.")
@click.option("--threshold", default=LOW_STOCK_THRESHOLD, show_default=True, type=int)
def stock_low(warehouse_id: str, threshold: int) -> None:
    """List records at or below the low-stock threshold."""
    show_stock(ShowStockHandler(stock_ledger()).low_stock(warehouse_id, threshold))


@click.command("adjust")
@click.option("--warehouse", "warehouse_id", required=True, help="Warehouse ID.")
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--on-hand", required=True, type=int, help="New quantity on hand.")
@click.option("--reserved", required=True, type=int, help="New reserved quantity.")
def stock_adjust(warehouse_id: str, product_id: str, on_hand: int, reserved: int) -> None:
    """Overwrite a record's quantities after a physical count."""
    handler = AdjustStockHandler(stock_ledger())

    try:
        dto = handler.handle(warehouse_id, product_id, on_hand, reserved)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(
        f"Stock {dto.warehouse_id}/{dto.product_id} adjusted: "
        f"on hand {dto.on_hand}, reserved {dto.reserved}, available {dto.available}"
    )


@click.command("movements")
@click.option("--warehouse", "warehouse_id", default=None)
@click.option("--product", "product_id", default=None)
@click.option("--reference", default=None, help="Document reference, e.g. PO-3 or SO-7.")
def stock_movements(warehouse_id: str | None, product_id: str | None, reference: str | None) -> None:
    """Show the movement log."""
    handler = ShowMovementsHandler(movement_recorder())
    show_movements(handler.handle(warehouse_id, product_id, reference))
