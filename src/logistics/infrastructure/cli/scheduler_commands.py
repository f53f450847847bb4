"""CLI commands for the reservation-expiry jobs."""

from __future__ import annotations

import time

import click

from logistics.infrastructure.bootstrap import (
    expire_reservations_handler,
    expiry_scheduler,
    reservation_report_handler,
)


@click.command("sweep")
def scheduler_sweep() -> None:
    """Cancel reservations older than the TTL, once."""
    result = expire_reservations_handler().handle()
    click.echo(
        f"Expired reservations: found {len(result.found)}, "
        f"canceled {len(result.canceled)}, failed {len(result.failed)}"
    )
    for order_id in result.canceled:
        click.echo(f"  canceled sales order #{order_id}")


@click.command("report")
@click.option("--stale-days", default=30, show_default=True, type=int)
def scheduler_report(stale_days: int) -> None:
    """Report reservations close to expiry and old canceled orders."""
    handler = reservation_report_handler()
    report = handler.handle()
    stale = handler.stale_canceled(days=stale_days)
    click.echo(f"Reserved orders: {report.total_reserved}")
    click.echo(f"Near expiry:     {len(report.near_expiry)} {report.near_expiry or ''}".rstrip())
    click.echo(f"Canceled > {stale_days} days: {len(stale)}")


@click.command("run")
def scheduler_run() -> None:
    """Run the sweep and report on their intervals until interrupted."""
    scheduler = expiry_scheduler()
    scheduler.start()
    click.echo("Reservation expiry scheduler running. Press Ctrl+C to stop.")
    try:
        while scheduler.is_running:
            time.sleep(1.0)
    except KeyboardInterrupt:
        click.echo("Stopping...")
    finally:
        scheduler.stop()
