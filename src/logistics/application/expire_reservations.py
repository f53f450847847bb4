"""Application service: reservation expiry.

``ExpireReservationsHandler`` cancels RESERVED orders older than the TTL
through the regular cancel path. ``ReservationReportHandler`` only reads:
it counts what is about to expire and what could be archived.
"""

from __future__ import annotations

from datetime import datetime, timedelta

import structlog

from logistics.application.cancel_sales_order import CancelSalesOrderHandler
from logistics.application.dto import ReservationReport, SweepResult
from logistics.domain.clock import Clock
from logistics.domain.exceptions import DomainException
from logistics.domain.model.sales_order import SalesOrderStatus
from logistics.domain.repository.sales_order_repository import SalesOrderRepository

logger = structlog.get_logger(__name__)

NEAR_EXPIRY_MARGIN = timedelta(hours=2)
STALE_CANCELED_DAYS = 30


class ExpireReservationsHandler:

    def __init__(
        self,
        order_repo: SalesOrderRepository,
        cancel_handler: CancelSalesOrderHandler,
        clock: Clock,
        ttl_hours: int = 24,
    ) -> None:
        self._order_repo = order_repo
        self._cancel = cancel_handler
        self._clock = clock
        self._ttl = timedelta(hours=ttl_hours)

    def handle(self, as_of: datetime | None = None) -> SweepResult:
        now = as_of or self._clock.now()
        cutoff = now - self._ttl
        expired = [
            o for o in self._order_repo.list_by_status(SalesOrderStatus.RESERVED)
            if o.reserved_before(cutoff)
        ]
        result = SweepResult(as_of=now, found=sorted(o.id for o in expired))
        if not expired:
            logger.debug("reservation_sweep_nothing_expired", cutoff=cutoff.isoformat())
            return result

        logger.info("reservation_sweep_started", expired=len(expired), cutoff=cutoff.isoformat())
        for order in sorted(expired, key=lambda o: o.id):
            try:
                self._cancel.handle(order.id, require_status=SalesOrderStatus.RESERVED)
            except DomainException as exc:
                # Usually a user shipped or canceled the order first.
                result.failed.append(order.id)
                logger.warning("reservation_expiry_skipped", order_id=order.id, reason=str(exc))
                continue
            except Exception:
                result.failed.append(order.id)
                logger.exception("reservation_expiry_failed", order_id=order.id)
                continue
            result.canceled.append(order.id)
            logger.info(
                "reservation_expired",
                order_id=order.id,
                reserved_at=order.reserved_at.isoformat(),
            )

        logger.info(
            "reservation_sweep_finished",
            canceled=len(result.canceled),
            failed=len(result.failed),
        )
        return result


class ReservationReportHandler:

    def __init__(
        self,
        order_repo: SalesOrderRepository,
        clock: Clock,
        ttl_hours: int = 24,
    ) -> None:
        self._order_repo = order_repo
        self._clock = clock
        self._ttl = timedelta(hours=ttl_hours)

    def handle(self, as_of: datetime | None = None) -> ReservationReport:
        now = as_of or self._clock.now()
        warning_cutoff = now - (self._ttl - NEAR_EXPIRY_MARGIN)
        reserved = self._order_repo.list_by_status(SalesOrderStatus.RESERVED)
        near_expiry = sorted(o.id for o in reserved if o.reserved_before(warning_cutoff))

        report = ReservationReport(
            as_of=now,
            total_reserved=len(reserved),
            near_expiry=near_expiry,
        )
        if near_expiry:
            logger.warning(
                "reservations_near_expiry",
                count=len(near_expiry),
                order_ids=near_expiry,
                total_reserved=len(reserved),
            )
        else:
            logger.info("reservation_report", total_reserved=len(reserved))
        return report

    def stale_canceled(
        self,
        as_of: datetime | None = None,
        days: int = STALE_CANCELED_DAYS,
    ) -> list[int]:
        """Ids of CANCELED orders created more than *days* ago."""
        now = as_of or self._clock.now()
        cutoff = now - timedelta(days=days)
        stale = sorted(
            o.id for o in self._order_repo.list_by_status(SalesOrderStatus.CANCELED)
            if o.created_at < cutoff
        )
        if stale:
            logger.info("stale_canceled_orders", count=len(stale), days=days)
        return stale
