"""
Data types for the customer billing ledger.

This module defines the dataclasses the ledger operates on. They carry no
persistence concerns: repositories translate them to and from storage.

Types:
    Settle: Tagged "paid" input (pay in full vs. explicit amount)
    PaymentRecord: Payment-history details attached to a ledger row
    LedgerRow: Authoritative per-period billing record
    LegacyPayment: Entry of the legacy period map without a ledger row
    CustomerRecord: The customer aggregate the ledger mutates
    BulkPaymentResult: Outcome of marking every active customer paid
    RolloverResult: Outcome of one monthly rollover run

Usage:
    from customers.ledger.types import CustomerRecord, Settle

    record = CustomerRecord(full_name="Amina", monthly_fee=Decimal("100"))
    settle = Settle.from_value(True)        # pay the whole total due
    settle = Settle.from_value(40)          # pay exactly 40
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any

ZERO = Decimal("0")

PAYMENT_METHODS = ("cash", "bank_transfer", "card")
DEFAULT_PAYMENT_METHOD = "cash"


def to_decimal(value: Any) -> Decimal:
    """Coerce a stored or wire number (int, float, str, Decimal) to Decimal."""
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


@dataclass(frozen=True)
class Settle:
    """
    What a "record payment" call settles for a period.

    `paid` arrives either as a boolean ("paid in full") or a number. The
    variant is resolved against the period's total due before any
    arithmetic so the rest of the ledger only ever sees amounts.

    Attributes:
        amount: Explicit amount, or None for "the whole total due"
    """

    amount: Decimal | None = None

    @classmethod
    def full(cls) -> Settle:
        """Settle the entire total due."""
        return cls(amount=None)

    @classmethod
    def of(cls, amount: Any) -> Settle:
        """Settle an explicit, non-negative amount."""
        value = to_decimal(amount)
        if not value.is_finite():
            raise ValueError("Settled amount must be a finite number")
        if value < 0:
            raise ValueError("Settled amount cannot be negative")
        return cls(amount=value)

    @classmethod
    def from_value(cls, value: Any) -> Settle:
        """
        Build from the wire value of `paid`.

        True means paid in full, False means nothing paid (amount 0),
        anything else is read as a number.
        """
        if isinstance(value, bool):
            return cls.full() if value else cls.of(ZERO)
        return cls.of(value)

    @property
    def is_full(self) -> bool:
        return self.amount is None

    def resolve(self, total_due: Decimal) -> Decimal:
        """Return the concrete amount paid for a period owing `total_due`."""
        return total_due if self.amount is None else self.amount


@dataclass
class PaymentRecord:
    """
    Payment-history details for a period.

    Present on a row once a payment (full, partial or bulk) has been
    recorded for it. The amount paid itself is the row's `paid`.

    Attributes:
        amount: Amount billed when the history entry was opened
        method: Payment method (cash, bank_transfer, card)
        date: When the entry was written; never None after a ledger write
    """

    amount: Decimal
    method: str = DEFAULT_PAYMENT_METHOD
    date: datetime | None = None


@dataclass
class LedgerRow:
    """
    The authoritative billing record of one customer for one period.

    Invariants kept by the ledger operations:
        total_due == previous_balance + monthly_fee
        remaining == max(0, total_due - paid)
        fully_paid is True iff remaining == 0
    """

    month: str
    date: datetime
    monthly_fee: Decimal
    previous_balance: Decimal
    total_due: Decimal
    paid: Decimal = ZERO
    remaining: Decimal = ZERO
    fully_paid: bool = False
    paid_date: datetime | None = None
    history: PaymentRecord | None = None

    def apply_amounts(
        self,
        monthly_fee: Decimal,
        previous_balance: Decimal,
        paid: Decimal,
    ) -> None:
        """Set the billed amounts and derive total, remainder and status."""
        self.monthly_fee = monthly_fee
        self.previous_balance = previous_balance
        self.total_due = previous_balance + monthly_fee
        self.paid = paid
        self.remaining = max(ZERO, self.total_due - paid)
        self.fully_paid = self.remaining == ZERO


@dataclass
class LegacyPayment:
    """
    A legacy period-map entry that has no ledger row yet.

    Older consumers wrote `payments[period]` directly. Such entries are only
    read: as a carry-over source for the following period, and to seed the
    amount already paid when a row is first opened for their period.
    """

    paid: Decimal = ZERO
    remaining: Decimal = ZERO
    fully_paid: bool = False
    paid_date: datetime | None = None
    date: datetime | None = None
    previous_balance: Decimal = ZERO
    total_due: Decimal = ZERO

    @classmethod
    def from_row(cls, row: LedgerRow) -> LegacyPayment:
        return cls(
            paid=row.paid,
            remaining=row.remaining,
            fully_paid=row.fully_paid,
            paid_date=row.paid_date,
            date=row.date,
            previous_balance=row.previous_balance,
            total_due=row.total_due,
        )


@dataclass
class CustomerRecord:
    """
    A customer together with their billing ledger.

    `rows` is the single source of truth for billing state, keyed by
    period. The monthly-payments list, the legacy period map and the
    payment history are projections of it (see customers.ledger.projections).

    `zone_id` and `village_id` are carried verbatim; no ledger operation
    reads or writes them.
    """

    full_name: str = ""
    phone_number: str = ""
    email: str = ""
    address: str = ""
    monthly_fee: Decimal = ZERO
    status: str = "active"
    village_id: uuid.UUID | None = None
    zone_id: uuid.UUID | None = None
    id: uuid.UUID | None = None
    rows: dict[str, LedgerRow] = field(default_factory=dict)
    legacy_payments: dict[str, LegacyPayment] = field(default_factory=dict)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_active(self) -> bool:
        return self.status == "active"

    def has_period(self, month: str) -> bool:
        return month in self.rows

    # Projections, exposed for serializers
    @property
    def monthly_payments(self) -> list[LedgerRow]:
        from customers.ledger.projections import monthly_payments

        return monthly_payments(self)

    @property
    def payments(self) -> dict[str, LegacyPayment]:
        from customers.ledger.projections import legacy_payments_map

        return legacy_payments_map(self)

    @property
    def payment_history(self) -> list:
        from customers.ledger.projections import payment_history

        return payment_history(self)


@dataclass
class BulkPaymentResult:
    """Counts reported by the mark-all-paid bulk operation."""

    month: str
    total_customers: int = 0
    updated_count: int = 0
    failed_count: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "month": self.month,
            "totalCustomers": self.total_customers,
            "updatedCount": self.updated_count,
            "failedCount": self.failed_count,
        }


@dataclass
class RolloverResult:
    """Counts reported by one run of the monthly rollover job."""

    period: str
    processed_count: int = 0
    skipped_count: int = 0
    failed_count: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "period": self.period,
            "processed_count": self.processed_count,
            "skipped_count": self.skipped_count,
            "failed_count": self.failed_count,
        }
