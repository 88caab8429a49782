"""
Ledger-specific exceptions for customer billing operations.

This module provides a hierarchy of exceptions for ledger operations,
inheriting from the core exception classes for API consistency.

Exception Hierarchy:
    LedgerError (base, a core ValidationError)
    ├── InvalidPeriodError - Missing or malformed "YYYY-MM" period key
    └── InvalidPaymentAmountError - Non-positive or negative amounts
    CustomerNotFoundError - Customer lookup failures (core NotFoundError)

Usage:
    from customers.ledger.exceptions import InvalidPeriodError

    raise InvalidPeriodError("2024-13")
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from core.exceptions import NotFoundError, ValidationError

if TYPE_CHECKING:
    from typing import Any


class LedgerError(ValidationError):
    """
    Base exception for rejected ledger input.

    Raised before any mutation, so the customer record is left untouched.
    """

    default_error_code: str = "LEDGER_ERROR"


class InvalidPeriodError(LedgerError):
    """
    Raised when a period key is missing or not a valid "YYYY-MM" month.

    Attributes:
        period: The rejected value
    """

    default_error_code: str = "INVALID_PERIOD"

    def __init__(self, period: Any, error_code: str | None = None):
        self.period = period
        if period in (None, ""):
            message = "Month is required"
        else:
            message = f"Invalid month {period!r}, expected YYYY-MM"
        super().__init__(
            message=message,
            error_code=error_code,
            details={"month": period},
        )


class InvalidPaymentAmountError(LedgerError):
    """
    Raised when a payment amount is not acceptable.

    Partial payments must be strictly positive; settled amounts
    must not be negative.
    """

    default_error_code: str = "INVALID_PAYMENT_AMOUNT"


class CustomerNotFoundError(NotFoundError):
    """Raised when no customer exists for the given id."""

    default_error_code: str = "CUSTOMER_NOT_FOUND"

    def __init__(self, customer_id: Any):
        self.customer_id = customer_id
        super().__init__(
            message="Customer not found",
            details={"customer_id": str(customer_id)},
        )
