"""Runtime settings read from the environment.

Everything tunable lives here so the composition root can hand plain values
to handlers; nothing below the infrastructure layer reads ``os.environ``.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

# When installed in editable mode the project root is the repo root.
DEFAULT_DATA_DIR = Path(__file__).resolve().parents[3] / "data"


class ConfigurationError(ValueError):
    """An environment variable holds a value the engine cannot use."""


@dataclass(frozen=True)
class Settings:
    data_dir: Path = DEFAULT_DATA_DIR
    reservation_ttl_hours: int = 24
    shipment_cutoff_hour: int = 15
    shipment_wait_hours: int = 12
    sweep_interval_seconds: int = 3600
    report_interval_seconds: int = 86400


def _int(env: Mapping[str, str], name: str, default: int, minimum: int = 0) -> int:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from None
    if value < minimum:
        raise ConfigurationError(f"{name} must be at least {minimum}, got {value}")
    return value


def load_settings(env: Mapping[str, str] | None = None) -> Settings:
    """Build Settings from *env* (defaults to ``os.environ``)."""
    env = os.environ if env is None else env

    cutoff = _int(env, "LOGISTICS_SHIPMENT_CUTOFF_HOUR", 15)
    if cutoff > 23:
        raise ConfigurationError(
            f"LOGISTICS_SHIPMENT_CUTOFF_HOUR must be between 0 and 23, got {cutoff}"
        )

    data_dir = env.get("LOGISTICS_DATA_DIR")
    return Settings(
        data_dir=Path(data_dir) if data_dir else DEFAULT_DATA_DIR,
        reservation_ttl_hours=_int(env, "LOGISTICS_RESERVATION_TTL_HOURS", 24, minimum=1),
        shipment_cutoff_hour=cutoff,
        shipment_wait_hours=_int(env, "LOGISTICS_SHIPMENT_WAIT_HOURS", 12),
        sweep_interval_seconds=_int(env, "LOGISTICS_SWEEP_INTERVAL_SECONDS", 3600, minimum=1),
        report_interval_seconds=_int(env, "LOGISTICS_REPORT_INTERVAL_SECONDS", 86400, minimum=1),
    )
