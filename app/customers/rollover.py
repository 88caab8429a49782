"""
Monthly ledger rollover.

Once per tick (daily via celery-beat, plus once when a worker starts) the
job opens the current period's ledger row for every active customer who
lacks one. Customers that already have the row are skipped, so running the
job any number of times in a period initializes each customer once.

The job never rewrites earlier periods. A customer that fails is logged
and counted, and is picked up again by the next tick.

States:
    idle -> running -> idle

Usage:
    from customers.rollover import MonthlyRolloverJob

    result = MonthlyRolloverJob(repository).run()
    result.processed_count
"""

from __future__ import annotations

import logging
import threading
from enum import Enum
from typing import TYPE_CHECKING

from django.utils import timezone

from customers.ledger import operations
from customers.ledger.periods import current_period, validate_period
from customers.ledger.types import RolloverResult

if TYPE_CHECKING:
    from datetime import datetime

    from customers.repositories.base import CustomerRepository

logger = logging.getLogger(__name__)


class JobState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"


class MonthlyRolloverJob:
    """
    Opens the current period for all active customers.

    Attributes:
        repository: Customer storage the job streams from and saves to
        state: JobState.IDLE or JobState.RUNNING
    """

    def __init__(self, repository: CustomerRepository, chunk_size: int | None = None):
        self.repository = repository
        self.chunk_size = chunk_size
        self.state = JobState.IDLE
        self._lock = threading.Lock()

    @property
    def is_running(self) -> bool:
        return self.state is JobState.RUNNING

    def run(
        self,
        now: datetime | None = None,
        period: str | None = None,
    ) -> RolloverResult:
        """
        Run one rollover pass.

        Args:
            now: Clock override; also the billing date of opened rows
            period: Period to open instead of the one containing `now`

        Returns:
            RolloverResult with processed / skipped / failed counts. A call
            made while a pass is already running is refused and returns an
            empty result.

        Raises:
            InvalidPeriodError: If an explicit period is malformed
        """
        now = now or timezone.now()
        period = validate_period(period) if period else current_period(now)

        with self._lock:
            if self.state is JobState.RUNNING:
                logger.warning(
                    "Monthly rollover already running, skipping",
                    extra={"period": period},
                )
                return RolloverResult(period=period)
            self.state = JobState.RUNNING

        try:
            return self._run(period, now)
        finally:
            self.state = JobState.IDLE

    def _run(self, period: str, now: datetime) -> RolloverResult:
        logger.info("Monthly rollover started", extra={"period": period})
        result = RolloverResult(period=period)

        for record in self.repository.iter_active(chunk_size=self.chunk_size):
            if record.has_period(period):
                result.skipped_count += 1
                continue
            try:
                operations.initialize_month(record, period, now, now=now)
                self.repository.save(record)
            except Exception:
                result.failed_count += 1
                logger.exception(
                    "Monthly rollover failed for customer",
                    extra={"customer_id": str(record.id), "period": period},
                )
            else:
                result.processed_count += 1

        logger.info("Monthly rollover finished", extra=result.to_dict())
        return result
