"""
Run the monthly ledger rollover synchronously.

USAGE EXAMPLES:
===============

# Open the current period for every active customer
python manage.py rollover_ledgers

# Open a specific period (operator correction after missed ticks)
python manage.py rollover_ledgers --month 2024-03
"""

import logging

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from customers.ledger.exceptions import InvalidPeriodError
from customers.repositories import get_customer_repository
from customers.rollover import MonthlyRolloverJob

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = "Open the ledger row of the current (or given) period for all active customers"

    def add_arguments(self, parser):
        parser.add_argument(
            "--month",
            type=str,
            default=None,
            help="Period to open as YYYY-MM (defaults to the current month)",
        )

    def handle(self, *args, **options):
        job = MonthlyRolloverJob(
            get_customer_repository(),
            chunk_size=settings.LEDGER_ROLLOVER_CHUNK_SIZE,
        )
        try:
            result = job.run(period=options["month"])
        except InvalidPeriodError as e:
            raise CommandError(e.message) from e

        self.stdout.write(
            self.style.SUCCESS(
                f"Rollover {result.period}: {result.processed_count} initialized, "
                f"{result.skipped_count} already open, {result.failed_count} failed"
            )
        )
