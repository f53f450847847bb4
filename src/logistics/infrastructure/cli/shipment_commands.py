"""CLI commands for shipments and carriers."""

from __future__ import annotations

import click

from logistics.application.assign_carrier import AssignCarrierBatchHandler, AssignCarrierHandler
from logistics.application.deliver_shipment import DeliverShipmentHandler
from logistics.application.manage_carriers import (
    RegisterCarrierHandler,
    ResetDailyCapacityHandler,
    ShowCarriersHandler,
    ShowShipmentHandler,
)
from logistics.domain.exceptions import DomainException
from logistics.domain.model.carrier import CarrierStatus
from logistics.infrastructure.bootstrap import (
    carrier_allocator,
    carrier_repository,
    clock,
    locks,
    sales_order_repository,
    shipment_repository,
)
from logistics.infrastructure.cli.display import show_shipment
from logistics.infrastructure.cli.parsing import parse_ids


# --- Shipments ----------------------------------------------------------------


@click.command("show")
@click.option("--id", "shipment_id", required=True, type=int, help="Shipment ID.")
def shipment_show(shipment_id: int) -> None:
    """Show one shipment."""
    try:
        dto = ShowShipmentHandler(shipment_repository()).handle(shipment_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    show_shipment(dto)


@click.command("list")
def shipment_list() -> None:
    """List every shipment."""
    shipments = ShowShipmentHandler(shipment_repository()).list()
    if not shipments:
        click.echo("No shipments.")
    for dto in shipments:
        show_shipment(dto)


@click.command("assign")
@click.option("--id", "shipment_id", required=True, type=int, help="Shipment ID.")
@click.option("--carrier", "carrier_id", required=True, help="Carrier ID.")
def shipment_assign(shipment_id: int, carrier_id: str) -> None:
    """Hand a PLANNED shipment to a carrier."""
    handler = AssignCarrierHandler(carrier_allocator())

    try:
        dto = handler.handle(shipment_id, carrier_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Shipment #{dto.id} assigned to carrier {carrier_id} (status={dto.status}).")


@click.command("assign-batch")
@click.option("--carrier", "carrier_id", required=True, help="Carrier ID.")
@click.option("--ids", required=True, help="Shipment IDs as '1,2,3'.")
def shipment_assign_batch(carrier_id: str, ids: str) -> None:
    """Hand several PLANNED shipments to one carrier, all or none."""
    handler = AssignCarrierBatchHandler(carrier_allocator())

    try:
        shipments = handler.handle(carrier_id, parse_ids(ids))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"{len(shipments)} shipments assigned to carrier {carrier_id}.")


@click.command("deliver")
@click.option("--id", "shipment_id", required=True, type=int, help="Shipment ID.")
def shipment_deliver(shipment_id: int) -> None:
    """Close an IN_TRANSIT shipment and deliver its order."""
    handler = DeliverShipmentHandler(
        sales_order_repository(),
        shipment_repository(),
        carrier_allocator(),
        locks(),
        clock(),
    )

    try:
        handler.handle(shipment_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Shipment #{shipment_id} delivered.")


# --- Carriers -----------------------------------------------------------------


@click.command("add")
@click.option("--id", "carrier_id", required=True, help="Carrier ID.")
@click.option("--code", required=True, help="Short carrier code.")
@click.option("--name", required=True, help="Display name.")
@click.option("--capacity", required=True, type=int, help="Maximum shipments per day.")
@click.option(
    "--status",
    type=click.Choice([s.value for s in CarrierStatus], case_sensitive=False),
    default=CarrierStatus.ACTIVE.value,
    show_default=True,
)
def carrier_add(carrier_id: str, code: str, name: str, capacity: int, status: str) -> None:
    """Register a carrier or update an existing one."""
    handler = RegisterCarrierHandler(carrier_repository(), locks())

    try:
        dto = handler.handle(carrier_id, code, name, capacity, status)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Carrier {dto.code} saved (capacity {dto.max_daily_capacity}/day, {dto.status}).")


@click.command("list")
@click.option("--available", is_flag=True, default=False, help="Only carriers with spare capacity.")
def carrier_list(available: bool) -> None:
    """List carriers and today's load."""
    carriers = ShowCarriersHandler(carrier_repository(), carrier_allocator()).handle(available)
    if not carriers:
        click.echo("No carriers.")
    for dto in carriers:
        click.echo(
            f"  {dto.code:<10} {dto.name:<20} {dto.status:<10} "
            f"{dto.current_daily_shipments:>4}/{dto.max_daily_capacity:<4} "
            f"(free {dto.remaining_capacity})"
        )


@click.command("reset-daily")
def carrier_reset_daily() -> None:
    """Zero every carrier's daily shipment counter."""
    carriers = ResetDailyCapacityHandler(carrier_allocator()).handle()
    click.echo(f"Daily counters reset for {len(carriers)} carriers.")
