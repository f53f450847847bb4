"""Background runner for the reservation-expiry jobs.

Two jobs share one daemon thread: the expiry sweep (hourly by default) and
the near-expiry report (daily by default). ``tick()`` runs whatever is due
and is public so tests can drive the runner with a FixedClock instead of a
thread.
"""

from __future__ import annotations

import threading
from datetime import datetime, timedelta

import structlog

from logistics.application.expire_reservations import (
    ExpireReservationsHandler,
    ReservationReportHandler,
)
from logistics.domain.clock import Clock

logger = structlog.get_logger(__name__)


class ReservationExpiryScheduler:

    def __init__(
        self,
        sweep: ExpireReservationsHandler,
        report: ReservationReportHandler,
        clock: Clock,
        sweep_interval_seconds: int = 3600,
        report_interval_seconds: int = 86400,
        poll_seconds: float | None = None,
    ) -> None:
        self._sweep = sweep
        self._report = report
        self._clock = clock
        self._sweep_interval = timedelta(seconds=sweep_interval_seconds)
        self._report_interval = timedelta(seconds=report_interval_seconds)
        self._poll_seconds = poll_seconds or min(sweep_interval_seconds, report_interval_seconds, 60)
        self._next_sweep: datetime | None = None
        self._next_report: datetime | None = None
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    def tick(self) -> list[str]:
        """Run every job that is due; returns the names of the jobs run."""
        now = self._clock.now()
        fired: list[str] = []

        if self._next_sweep is None or now >= self._next_sweep:
            try:
                self._sweep.handle(now)
            except Exception:
                logger.exception("reservation_sweep_failed")
            self._next_sweep = now + self._sweep_interval
            fired.append("sweep")

        if self._next_report is None or now >= self._next_report:
            try:
                self._report.handle(now)
                self._report.stale_canceled(now)
            except Exception:
                logger.exception("reservation_report_failed")
            self._next_report = now + self._report_interval
            fired.append("report")

        return fired

    def start(self) -> None:
        if self._thread is not None and self._thread.is_alive():
            return
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._run_loop,
            name="reservation-expiry",
            daemon=True,
        )
        self._thread.start()
        logger.info(
            "scheduler_started",
            sweep_interval=self._sweep_interval.total_seconds(),
            report_interval=self._report_interval.total_seconds(),
        )

    def stop(self, timeout: float = 30.0) -> None:
        self._stop_event.set()
        if self._thread is not None and self._thread.is_alive():
            self._thread.join(timeout=timeout)
        logger.info("scheduler_stopped")

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def _run_loop(self) -> None:
        while not self._stop_event.is_set():
            self.tick()
            self._stop_event.wait(timeout=self._poll_seconds)
