"""
Celery tasks for the customer ledger.

This module provides:
- The monthly ledger rollover (scheduled daily by celery-beat, see
  migration 0002_add_celery_beat_schedules)
- A worker_ready hook that enqueues one rollover when a worker starts

Usage:
    from customers.tasks import rollover_monthly_ledgers

    rollover_monthly_ledgers.delay()
"""

from __future__ import annotations

import logging

from celery import shared_task
from celery.signals import worker_ready
from django.conf import settings

logger = logging.getLogger(__name__)


@shared_task(acks_late=True, ignore_result=False)
def rollover_monthly_ledgers(period: str | None = None) -> dict:
    """
    Open the current period's ledger row for every active customer.

    Args:
        period: Explicit "YYYY-MM" to open instead of the current one

    Returns:
        Dict with period, processed_count, skipped_count, failed_count
    """
    # Import here to avoid circular imports
    from customers.repositories import get_customer_repository
    from customers.rollover import MonthlyRolloverJob

    job = MonthlyRolloverJob(
        get_customer_repository(),
        chunk_size=settings.LEDGER_ROLLOVER_CHUNK_SIZE,
    )
    return job.run(period=period).to_dict()


@worker_ready.connect
def enqueue_rollover_on_startup(sender=None, **kwargs) -> None:
    """Run one rollover as soon as a worker is up, before the first beat tick."""
    if not settings.LEDGER_ROLLOVER_ON_STARTUP:
        return
    logger.info("Worker ready, enqueueing monthly ledger rollover")
    rollover_monthly_ledgers.delay()
