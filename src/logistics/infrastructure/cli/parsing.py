"""Option parsers shared by the CLI command modules."""

from __future__ import annotations

from datetime import datetime, timezone

import click


def parse_lines(raw: str) -> list[tuple[str, int, str]]:
    """Parse 'P1:5@12.50,P2:3' into (product_id, quantity, unit_price) tuples.

    The price part is optional and defaults to 0.
    """
    parsed: list[tuple[str, int, str]] = []
    for pair in raw.split(","):
        pair = pair.strip()
        if not pair:
            continue
        price = "0"
        if "@" in pair:
            pair, price = pair.rsplit("@", 1)
        if ":" not in pair:
            raise click.BadParameter(
                f"Invalid line format '{pair}'. Expected 'Product:Quantity[@Price]'."
            )
        product_id, qty_str = pair.rsplit(":", 1)
        try:
            qty = int(qty_str)
        except ValueError:
            raise click.BadParameter(
                f"Invalid quantity '{qty_str}' for product '{product_id}'."
            )
        parsed.append((product_id.strip(), qty, price.strip()))
    if not parsed:
        raise click.BadParameter("At least one line is required.")
    return parsed


def parse_ids(raw: str) -> list[int]:
    """Parse '1,2,3' into a list of ints."""
    try:
        return [int(part) for part in raw.split(",") if part.strip()]
    except ValueError:
        raise click.BadParameter(f"Invalid id list '{raw}'. Expected '1,2,3'.")


def parse_date(raw: str | None) -> datetime | None:
    """Parse an ISO date or datetime; naive values are taken as UTC."""
    if raw is None:
        return None
    try:
        value = datetime.fromisoformat(raw)
    except ValueError:
        raise click.BadParameter(f"Invalid date '{raw}'. Expected YYYY-MM-DD.")
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value
