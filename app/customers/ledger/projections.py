"""
Views of the ledger exposed to API consumers.

The ledger keeps one row per period. Older consumers read the same data
as a monthly-payments list, a legacy period map, and a payment-history
list; all three are derived here at the serialization boundary, so they
cannot disagree with each other.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from .types import LegacyPayment

if TYPE_CHECKING:
    from .types import CustomerRecord, LedgerRow


@dataclass
class PaymentHistoryEntry:
    """One payment-history item: {month, amount, paid, paidDate, method, date}."""

    month: str
    amount: Decimal
    paid: Decimal
    paid_date: datetime | None
    method: str
    date: datetime | None


def monthly_payments(record: CustomerRecord) -> list[LedgerRow]:
    """Ledger rows in chronological order."""
    return [record.rows[month] for month in sorted(record.rows)]


def legacy_payments_map(record: CustomerRecord) -> dict[str, LegacyPayment]:
    """
    The legacy period map.

    Rows win over legacy entries for the same period; legacy entries
    without a row are passed through as stored.
    """
    payments = dict(record.legacy_payments)
    for month, row in record.rows.items():
        payments[month] = LegacyPayment.from_row(row)
    return {month: payments[month] for month in sorted(payments)}


def payment_history(record: CustomerRecord) -> list[PaymentHistoryEntry]:
    """History entries for every period with a recorded payment."""
    return [
        PaymentHistoryEntry(
            month=row.month,
            amount=row.history.amount,
            paid=row.paid,
            paid_date=row.paid_date,
            method=row.history.method,
            date=row.history.date,
        )
        for row in monthly_payments(record)
        if row.history is not None
    ]
