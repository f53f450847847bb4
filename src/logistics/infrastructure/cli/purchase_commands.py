"""CLI commands for the PurchaseOrder aggregate."""

from __future__ import annotations

import click

from logistics.application.approve_purchase_order import ApprovePurchaseOrderHandler
from logistics.application.cancel_purchase_order import CancelPurchaseOrderHandler
from logistics.application.create_purchase_order import CreatePurchaseOrderHandler
from logistics.application.delete_purchase_order import DeletePurchaseOrderHandler
from logistics.application.dto import PurchaseLineSpec
from logistics.application.receive_purchase_order import ReceivePurchaseOrderHandler
from logistics.application.show_purchase_order import ShowPurchaseOrderHandler
from logistics.application.update_purchase_order import UpdatePurchaseOrderHandler
from logistics.domain.exceptions import DomainException
from logistics.infrastructure.bootstrap import (
    clock,
    locks,
    purchase_order_repository,
    stock_ledger,
)
from logistics.infrastructure.cli.display import show_purchase_order
from logistics.infrastructure.cli.parsing import parse_date, parse_lines


def _specs(lines: str) -> list[PurchaseLineSpec]:
    return [PurchaseLineSpec(p, q, price) for p, q, price in parse_lines(lines)]


@click.command("create")
@click.option("--supplier", "supplier_id", required=True, help="Supplier ID.")
@click.option("--lines", required=True, help="Lines as 'Product:Qty[@Price],...'.")
@click.option("--expected", default=None, help="Expected delivery date (YYYY-MM-DD).")
def po_create(supplier_id: str, lines: str, expected: str | None) -> None:
    """Raise a new purchase order."""
    specs = _specs(lines)
    handler = CreatePurchaseOrderHandler(purchase_order_repository(), clock())

    try:
        dto = handler.handle(supplier_id, specs, expected_delivery=parse_date(expected))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    show_purchase_order(dto)


@click.command("update")
@click.option("--id", "order_id", required=True, type=int, help="Purchase order ID.")
@click.option("--supplier", "supplier_id", required=True, help="Supplier ID.")
@click.option("--lines", required=True, help="Lines as 'Product:Qty[@Price],...'.")
@click.option("--expected", default=None, help="Expected delivery date (YYYY-MM-DD).")
def po_update(order_id: int, supplier_id: str, lines: str, expected: str | None) -> None:
    """Replace the lines of a purchase order that is not approved yet."""
    specs = _specs(lines)
    handler = UpdatePurchaseOrderHandler(purchase_order_repository(), locks())

    try:
        dto = handler.handle(order_id, supplier_id, specs, expected_delivery=parse_date(expected))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    show_purchase_order(dto)


@click.command("approve")
@click.option("--id", "order_id", required=True, type=int, help="Purchase order ID.")
def po_approve(order_id: int) -> None:
    """Approve a CREATED purchase order."""
    handler = ApprovePurchaseOrderHandler(purchase_order_repository(), locks(), clock())

    try:
        handler.handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Purchase order #{order_id} approved.")


@click.command("receive")
@click.option("--id", "order_id", required=True, type=int, help="Purchase order ID.")
@click.option("--warehouse", "warehouse_id", required=True, help="Receiving warehouse ID.")
def po_receive(order_id: int, warehouse_id: str) -> None:
    """Receive an APPROVED purchase order into a warehouse."""
    handler = ReceivePurchaseOrderHandler(
        purchase_order_repository(), stock_ledger(), locks(), clock()
    )

    try:
        handler.handle(order_id, warehouse_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Purchase order #{order_id} received into {warehouse_id}.")


@click.command("cancel")
@click.option("--id", "order_id", required=True, type=int, help="Purchase order ID.")
def po_cancel(order_id: int) -> None:
    """Cancel a purchase order that has not been received."""
    handler = CancelPurchaseOrderHandler(purchase_order_repository(), locks(), clock())

    try:
        handler.handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Purchase order #{order_id} canceled.")


@click.command("delete")
@click.option("--id", "order_id", required=True, type=int, help="Purchase order ID.")
def po_delete(order_id: int) -> None:
    """Delete a CREATED or CANCELED purchase order."""
    handler = DeletePurchaseOrderHandler(purchase_order_repository(), locks())

    try:
        handler.handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Purchase order #{order_id} deleted.")


@click.command("show")
@click.option("--id", "order_id", required=True, type=int, help="Purchase order ID.")
def po_show(order_id: int) -> None:
    """Show details of a purchase order."""
    handler = ShowPurchaseOrderHandler(purchase_order_repository())

    try:
        dto = handler.handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    show_purchase_order(dto)


@click.command("list")
def po_list() -> None:
    """List purchase orders."""
    orders = ShowPurchaseOrderHandler(purchase_order_repository()).list()
    if not orders:
        click.echo("No purchase orders.")
    for dto in orders:
        click.echo(f"  #{dto.id:<5} {dto.status:<10} {dto.supplier_id:<15} {dto.total:>14}")
