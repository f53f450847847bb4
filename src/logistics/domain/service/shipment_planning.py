"""Shipment planning rules: when does a newly shipped order leave the dock."""

from __future__ import annotations

from datetime import datetime, time, timedelta


def planned_dispatch(now: datetime, cutoff_hour: int, wait_hours: int) -> datetime:
    """Planned date for a shipment created at *now*.

    Orders shipped at or before the cutoff hour are planned ``wait_hours``
    from now; later ones wait from the start of the next day.
    """
    cutoff = now.replace(hour=cutoff_hour, minute=0, second=0, microsecond=0)
    if now <= cutoff:
        return now + timedelta(hours=wait_hours)
    next_day = datetime.combine(now.date() + timedelta(days=1), time.min, tzinfo=now.tzinfo)
    return next_day + timedelta(hours=wait_hours)
