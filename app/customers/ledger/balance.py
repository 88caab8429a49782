"""
Balance calculator: carry-over and total due for a period.

Pure functions over a CustomerRecord, no I/O.

Carry-over rule:
    The balance carried into period P is the unpaid remainder of the
    period immediately before P. A fully paid or unrecorded previous
    period carries nothing.
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING

from .periods import previous_period_key
from .types import ZERO

if TYPE_CHECKING:
    from .types import CustomerRecord


def get_previous_balance(record: CustomerRecord, period: str) -> Decimal:
    """
    Return the unpaid balance carried into `period`.

    The preceding period is looked up in the ledger rows first, then in
    legacy period-map entries. Absence is a valid zero balance.
    """
    previous = previous_period_key(period)

    entry = record.rows.get(previous) or record.legacy_payments.get(previous)
    if entry is None or entry.fully_paid:
        return ZERO
    return entry.remaining or ZERO


def calculate_total_due(record: CustomerRecord, period: str) -> Decimal:
    """Return previous balance plus the customer's monthly fee."""
    return get_previous_balance(record, period) + record.monthly_fee
