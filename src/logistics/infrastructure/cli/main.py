import click

from logistics.infrastructure.bootstrap import settings
from logistics.infrastructure.cli.order_commands import (
    order_cancel,
    order_create,
    order_deliver,
    order_list,
    order_reserve,
    order_ship,
    order_show,
)
from logistics.infrastructure.cli.purchase_commands import (
    po_approve,
    po_cancel,
    po_create,
    po_delete,
    po_list,
    po_receive,
    po_show,
    po_update,
)
from logistics.infrastructure.cli.scheduler_commands import (
    scheduler_report,
    scheduler_run,
    scheduler_sweep,
)
from logistics.infrastructure.cli.shipment_commands import (
    carrier_add,
    carrier_list,
    carrier_reset_daily,
    shipment_assign,
    shipment_assign_batch,
    shipment_deliver,
    shipment_list,
    shipment_show,
)
from logistics.infrastructure.cli.stock_commands import (
    stock_adjust,
    stock_availability,
    stock_low,
    stock_movements,
    stock_show,
)
from logistics.infrastructure.config import ConfigurationError
from logistics.infrastructure.logging_config import configure_logging


@click.group()
@click.option("--log-level", default=None, help="Override LOG_LEVEL for this run.")
def cli(log_level: str | None) -> None:
    """Logistics: multi-warehouse stock and fulfillment"""
    configure_logging(log_level.upper() if log_level else None)
    try:
        settings()
    except ConfigurationError as exc:
        raise click.ClickException(str(exc))


@cli.group()
def stock() -> None:
    """Inspect and correct stock levels."""


@cli.group()
def order() -> None:
    """Manage sales orders."""


@cli.group()
def po() -> None:
    """Manage purchase orders."""


@cli.group()
def shipment() -> None:
    """Manage shipments."""


@cli.group()
def carrier() -> None:
    """Manage carriers and their daily capacity."""


@cli.group()
def scheduler() -> None:
    """Reservation expiry jobs."""


# Register subcommands
stock.add_command(stock_adjust)
stock.add_command(stock_availability)
stock.add_command(stock_low)
stock.add_command(stock_movements)
stock.add_command(stock_show)
order.add_command(order_cancel)
order.add_command(order_create)
order.add_command(order_deliver)
order.add_command(order_list)
order.add_command(order_reserve)
order.add_command(order_ship)
order.add_command(order_show)
po.add_command(po_approve)
po.add_command(po_cancel)
po.add_command(po_create)
po.add_command(po_delete)
po.add_command(po_list)
po.add_command(po_receive)
po.add_command(po_show)
po.add_command(po_update)
shipment.add_command(shipment_assign)
shipment.add_command(shipment_assign_batch)
shipment.add_command(shipment_deliver)
shipment.add_command(shipment_list)
shipment.add_command(shipment_show)
carrier.add_command(carrier_add)
carrier.add_command(carrier_list)
carrier.add_command(carrier_reset_daily)
scheduler.add_command(scheduler_report)
scheduler.add_command(scheduler_run)
scheduler.add_command(scheduler_sweep)
