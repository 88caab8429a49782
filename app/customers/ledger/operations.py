"""
Ledger operations: the use cases that change a customer's billing state.

Every operation takes a loaded CustomerRecord and a target period, derives
the previous balance and total due with the balance calculator, applies
its transition to the period's row, re-derives the carried balance of the
rows that follow it, and returns the same record. Nothing here persists;
callers hand the record back to a repository.

Input is validated before anything is touched, so a rejected call leaves
the record exactly as it was.

Operations:
    initialize_month - Open (or refresh) a period's row
    record_payment - Set the amount paid for a period (full or explicit)
    record_partial_payment - Add an installment to the amount paid
    mark_paid - Force a period to fully paid (step of the bulk action)

Usage:
    from customers.ledger import operations, Settle

    operations.initialize_month(record, "2024-03", timezone.now())
    operations.record_partial_payment(record, "2024-03", Decimal("40"))
    operations.record_payment(record, "2024-03", Settle.full(), method="card")
"""

from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING, Any

from django.utils import timezone

from .balance import get_previous_balance
from .exceptions import InvalidPaymentAmountError, LedgerError
from .periods import next_period_key, validate_period
from .types import (
    DEFAULT_PAYMENT_METHOD,
    PAYMENT_METHODS,
    ZERO,
    LedgerRow,
    PaymentRecord,
    Settle,
    to_decimal,
)

if TYPE_CHECKING:
    from .types import CustomerRecord

logger = logging.getLogger(__name__)


# =============================================================================
# Validation helpers
# =============================================================================


def _validate_method(method: str | None) -> None:
    if method is not None and method not in PAYMENT_METHODS:
        raise LedgerError(
            f"Unsupported payment method {method!r}",
            error_code="INVALID_PAYMENT_METHOD",
            details={"method": method, "allowed": list(PAYMENT_METHODS)},
        )


def _coerce_settle(settle: Settle | Any) -> Settle:
    if isinstance(settle, Settle):
        return settle
    try:
        return Settle.from_value(settle)
    except (ValueError, InvalidOperation) as e:
        raise InvalidPaymentAmountError(
            f"Invalid paid value {settle!r}",
            details={"paid": str(settle)},
        ) from e


def _coerce_installment(amount: Any) -> Decimal:
    if amount is None or isinstance(amount, bool):
        raise InvalidPaymentAmountError("Valid payment amount is required")
    try:
        value = to_decimal(amount)
    except (ValueError, InvalidOperation) as e:
        raise InvalidPaymentAmountError("Valid payment amount is required") from e
    if not value.is_finite() or value <= ZERO:
        raise InvalidPaymentAmountError(
            "Valid payment amount is required",
            details={"amount": str(amount)},
        )
    return value


# =============================================================================
# Row helpers
# =============================================================================


def _open_row(record: CustomerRecord, month: str, date: datetime) -> LedgerRow:
    """
    Return the row for `month`, creating it if missing.

    A new row absorbs a legacy period-map entry for the same month,
    keeping what that entry says was already paid.
    """
    row = record.rows.get(month)
    if row is not None:
        return row

    legacy = record.legacy_payments.pop(month, None)
    row = LedgerRow(
        month=month,
        date=legacy.date if legacy and legacy.date else date,
        monthly_fee=record.monthly_fee,
        previous_balance=ZERO,
        total_due=record.monthly_fee,
        paid=legacy.paid if legacy else ZERO,
        paid_date=legacy.paid_date if legacy else None,
    )
    record.rows[month] = row
    return row


def _record_history(
    row: LedgerRow,
    method: str | None,
    now: datetime,
    refresh_amount: bool = False,
) -> None:
    """Create or update the payment-history details of a row."""
    if row.history is None:
        row.history = PaymentRecord(
            amount=row.total_due,
            method=method or DEFAULT_PAYMENT_METHOD,
            date=now,
        )
        return

    if method:
        row.history.method = method
    if refresh_amount:
        row.history.amount = row.total_due
    if row.history.date is None:
        row.history.date = row.paid_date or now


def _stamp_history_dates(record: CustomerRecord, now: datetime) -> None:
    """Every history entry leaves a ledger write with a date."""
    for row in record.rows.values():
        if row.history is not None and row.history.date is None:
            row.history.date = row.paid_date or now


def _carry_forward(record: CustomerRecord, month: str) -> None:
    """
    Re-derive the carried balance of the rows following `month`.

    Walks consecutive periods and stops at the first one without a row;
    what was paid on each row is kept.
    """
    following = next_period_key(month)
    while following in record.rows:
        row = record.rows[following]
        row.apply_amounts(
            row.monthly_fee, get_previous_balance(record, following), row.paid
        )
        following = next_period_key(following)


# =============================================================================
# Operations
# =============================================================================


def initialize_month(
    record: CustomerRecord,
    month: str,
    date: datetime,
    now: datetime | None = None,
) -> CustomerRecord:
    """
    Open the row for `month`, or refresh it if it already exists.

    The row's date, carried balance and total due are (re)computed; the
    amount already paid is kept. Calling this twice without a payment in
    between leaves the record unchanged by the second call.

    Args:
        record: Customer to update
        month: Period key "YYYY-MM"
        date: Billing date of the period
        now: Clock override (defaults to timezone.now())

    Raises:
        InvalidPeriodError: If month is missing or malformed
        LedgerError: If date is missing
    """
    validate_period(month)
    if date is None:
        raise LedgerError("Date is required", error_code="VALIDATION_ERROR")
    now = now or timezone.now()

    previous_balance = get_previous_balance(record, month)
    row = _open_row(record, month, date)
    row.date = date
    row.apply_amounts(record.monthly_fee, previous_balance, row.paid)

    _carry_forward(record, month)
    _stamp_history_dates(record, now)
    logger.debug(
        "Initialized ledger month",
        extra={"customer_id": str(record.id), "month": month, "total_due": str(row.total_due)},
    )
    return record


def record_payment(
    record: CustomerRecord,
    month: str,
    settle: Settle | Any,
    paid_date: datetime | None = None,
    method: str | None = None,
    now: datetime | None = None,
) -> CustomerRecord:
    """
    Set the amount paid for `month`.

    `settle` is either Settle.full() (pay the whole total due) or an
    explicit amount; raw wire values (bool or number) are accepted too.
    The amount replaces what was paid before.

    Raises:
        InvalidPeriodError: If month is missing or malformed
        InvalidPaymentAmountError: If the amount is negative or not a number
        LedgerError: If the payment method is unsupported
    """
    validate_period(month)
    settle = _coerce_settle(settle)
    _validate_method(method)
    now = now or timezone.now()

    previous_balance = get_previous_balance(record, month)
    total_due = previous_balance + record.monthly_fee
    paid = settle.resolve(total_due)

    row = _open_row(record, month, now)
    row.apply_amounts(record.monthly_fee, previous_balance, paid)
    if paid_date is not None:
        row.paid_date = paid_date
    _record_history(row, method, now)

    _carry_forward(record, month)
    _stamp_history_dates(record, now)
    return record


def record_partial_payment(
    record: CustomerRecord,
    month: str,
    amount: Any,
    paid_date: datetime | None = None,
    method: str | None = None,
    now: datetime | None = None,
) -> CustomerRecord:
    """
    Add an installment to the amount paid for `month`.

    Installments accumulate: two payments of a and b leave paid == a + b.

    Raises:
        InvalidPeriodError: If month is missing or malformed
        InvalidPaymentAmountError: If amount is missing or not positive
        LedgerError: If the payment method is unsupported
    """
    validate_period(month)
    installment = _coerce_installment(amount)
    _validate_method(method)
    now = now or timezone.now()

    previous_balance = get_previous_balance(record, month)
    row = _open_row(record, month, now)
    row.apply_amounts(record.monthly_fee, previous_balance, row.paid + installment)
    if paid_date is not None:
        row.paid_date = paid_date
    _record_history(row, method, now)

    _carry_forward(record, month)
    _stamp_history_dates(record, now)
    return record


def mark_paid(
    record: CustomerRecord,
    month: str,
    now: datetime | None = None,
) -> CustomerRecord:
    """
    Force `month` to fully paid with paid == total due and paid date now.

    A customer owing nothing (fee 0, nothing carried) is marked paid too.

    Raises:
        InvalidPeriodError: If month is missing or malformed
    """
    validate_period(month)
    now = now or timezone.now()

    previous_balance = get_previous_balance(record, month)
    total_due = previous_balance + record.monthly_fee

    row = _open_row(record, month, now)
    row.apply_amounts(record.monthly_fee, previous_balance, total_due)
    row.paid_date = now
    _record_history(row, None, now, refresh_amount=True)

    _carry_forward(record, month)
    _stamp_history_dates(record, now)
    return record
