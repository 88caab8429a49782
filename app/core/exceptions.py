"""
Base exception classes for application-wide error handling.

This module provides a standardized exception hierarchy that enables:
- Consistent error envelopes across the API
- Machine-readable error codes for client handling
- Detailed error information for debugging

Exception Hierarchy:
    BaseApplicationError (base)
    ├── ValidationError - Input validation failures
    ├── NotFoundError - Resource not found
    └── PersistenceError - Storage backend failures

Usage:
    from core.exceptions import ValidationError, NotFoundError

    # Raise with message only
    raise ValidationError("Month is required")

    # Raise with error code for client handling
    raise ValidationError("Invalid month '2024-13'", error_code="INVALID_PERIOD")

    # Raise with additional details
    raise NotFoundError(
        "Customer not found",
        error_code="CUSTOMER_NOT_FOUND",
        details={"customer_id": "5f0c..."},
    )

    # Convert to dict for API response
    try:
        ...
    except BaseApplicationError as e:
        return Response(e.to_dict(), status=400)

Note:
    These exceptions are for domain/business logic errors.
    DRF handles API-layer exceptions (serialization, authentication, etc.);
    core.exception_handler renders both in the same envelope.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Any


class BaseApplicationError(Exception):
    """
    Base exception for all application-specific errors.

    Provides a consistent interface for error handling across the application.
    All custom exceptions should inherit from this class.

    Attributes:
        message: Human-readable error description
        error_code: Machine-readable code for client-side handling
        details: Additional error context (field errors, metadata, etc.)
    """

    default_error_code: str = "APPLICATION_ERROR"

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        """
        Initialize the exception.

        Args:
            message: Human-readable error description
            error_code: Machine-readable error code (defaults to class default)
            details: Additional error context
        """
        self.message = message
        self.error_code = error_code or self.default_error_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert exception to dictionary for API response.

        Returns:
            Dict with error, error_code, and details keys

        Example:
            {
                "error": "Customer not found",
                "error_code": "CUSTOMER_NOT_FOUND",
                "details": {"customer_id": "5f0c..."}
            }
        """
        result: dict[str, Any] = {
            "error": self.message,
            "error_code": self.error_code,
        }
        if self.details:
            result["details"] = self.details
        return result

    def __str__(self) -> str:
        """Return string representation with error code."""
        return f"[{self.error_code}] {self.message}"

    def __repr__(self) -> str:
        """Return detailed representation for debugging."""
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code!r}, "
            f"details={self.details!r})"
        )


class ValidationError(BaseApplicationError):
    """
    Raised when input validation fails.

    Use for:
    - Missing required fields (month, date)
    - Malformed values (period keys, amounts)
    - Business rule violations (non-positive partial payments)

    Note:
        For request body validation, use DRF serializers.
        Use this for service-layer and domain validation logic.
    """

    default_error_code: str = "VALIDATION_ERROR"


class NotFoundError(BaseApplicationError):
    """
    Raised when a requested resource is not found.

    Example:
        customer = Customer.objects.filter(id=customer_id).first()
        if not customer:
            raise NotFoundError(
                f"Customer {customer_id} not found",
                error_code="CUSTOMER_NOT_FOUND",
                details={"customer_id": str(customer_id)},
            )
    """

    default_error_code: str = "NOT_FOUND"


class PersistenceError(BaseApplicationError):
    """
    Raised when the storage backend fails to read or write a record.

    Log the original error for debugging but don't expose
    driver internals to clients. HTTP 500 is appropriate.
    """

    default_error_code: str = "PERSISTENCE_ERROR"
