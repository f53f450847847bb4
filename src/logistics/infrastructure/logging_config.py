"""structlog setup shared by the CLI and the background scheduler."""

from __future__ import annotations

import logging
import os
import sys

import structlog


def get_log_level() -> str:
    env = (os.getenv("ENVIRONMENT") or "development").lower()
    level_map = {
        "production": "INFO",
        "staging": "INFO",
        "development": "INFO",
        "test": "WARNING",
    }
    return os.getenv("LOG_LEVEL", level_map.get(env, "INFO")).upper()


def configure_logging(level: str | None = None) -> None:
    """Route structlog through stdlib logging on stderr.

    Production and staging render JSON lines; anything else gets the
    human-readable console renderer.
    """
    log_level = level or get_log_level()
    env = os.getenv("ENVIRONMENT", "development").lower()

    handler = logging.StreamHandler(sys.stderr)
    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(log_level)

    processors: list = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.contextvars.merge_contextvars,
    ]
    if env in ("production", "staging"):
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )
