"""
Ledger - Monthly billing state of waste-collection customers.

Each customer owes a monthly fee per period ("YYYY-MM"). Whatever is left
unpaid at the end of a period is carried into the next one, so the total
due for a period is the previous period's remainder plus the fee.

The ledger holds one row per period. Older API consumers read it as three
views (monthly-payments list, legacy period map, payment history); these
are projections of the rows and are never stored separately.

Public API:
    Types:
        CustomerRecord - Customer aggregate with its ledger rows
        LedgerRow - One period's billing record
        Settle - "paid in full" vs. explicit amount
        BulkPaymentResult, RolloverResult - Batch outcome counters

    Balance calculator:
        get_previous_balance, calculate_total_due, previous_period_key

    Operations (module customers.ledger.operations):
        initialize_month, record_payment, record_partial_payment, mark_paid

    Exceptions:
        LedgerError - Base exception for rejected ledger input
        InvalidPeriodError - Missing or malformed period key
        InvalidPaymentAmountError - Rejected amounts
        CustomerNotFoundError - Customer lookup failures

Usage:
    from customers.ledger import operations, calculate_total_due

    operations.initialize_month(record, "2024-04", timezone.now())
    calculate_total_due(record, "2024-04")  # previous remainder + fee
"""

from . import operations
from .balance import calculate_total_due, get_previous_balance
from .exceptions import (
    CustomerNotFoundError,
    InvalidPaymentAmountError,
    InvalidPeriodError,
    LedgerError,
)
from .periods import current_period, next_period_key, previous_period_key, validate_period
from .types import (
    BulkPaymentResult,
    CustomerRecord,
    LedgerRow,
    LegacyPayment,
    PaymentRecord,
    RolloverResult,
    Settle,
)

__all__ = [
    # Operations
    "operations",
    # Balance calculator
    "calculate_total_due",
    "get_previous_balance",
    "previous_period_key",
    "next_period_key",
    "current_period",
    "validate_period",
    # Types
    "CustomerRecord",
    "LedgerRow",
    "LegacyPayment",
    "PaymentRecord",
    "Settle",
    "BulkPaymentResult",
    "RolloverResult",
    # Exceptions
    "LedgerError",
    "InvalidPeriodError",
    "InvalidPaymentAmountError",
    "CustomerNotFoundError",
]
