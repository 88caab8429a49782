"""
Base service layer patterns for business logic encapsulation.

This module provides foundational patterns for the service layer:
- ServiceResult: Standard result wrapper for consistent success/failure handling
- BaseService: Base class with common service utilities

Service Layer Philosophy:
    Services encapsulate business logic separate from views and models.
    Views handle HTTP concerns, repositories handle data, services handle logic.

Pattern Comparison:
    - ServiceResult: Use for expected failures (validation, missing records)
    - Exceptions: Use for unexpected failures (database errors, bugs)

Usage:
    from core.services import BaseService, ServiceResult

    class CustomerService(BaseService):
        @classmethod
        def get_customer(cls, repository, customer_id) -> ServiceResult[CustomerRecord]:
            try:
                record = repository.get(customer_id)
            except CustomerNotFoundError as e:
                return ServiceResult.failure(e.message, error_code=e.error_code)
            return ServiceResult.success(record)

    # In view
    result = CustomerService.get_customer(repository, customer_id)
    if result.success:
        return Response(result.to_response(CustomerSerializer(result.data).data))
    return Response(result.to_response(), status=404)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Generic, TypeVar

if TYPE_CHECKING:
    from typing import Any

# Generic type for ServiceResult data
T = TypeVar("T")


@dataclass
class ServiceResult(Generic[T]):
    """
    Standard result wrapper for service operations.

    Provides consistent success/failure handling without exceptions.
    Use this for expected failures (validation errors, missing records).

    Attributes:
        success: Whether the operation succeeded
        data: Result data if successful (None if failed)
        message: Human-readable summary shown to API clients
        error: Error message if failed (None if successful)
        error_code: Machine-readable error code for client handling
        errors: Field-level errors for validation failures
    """

    success: bool
    data: T | None = None
    message: str = ""
    error: str | None = None
    error_code: str | None = None
    errors: dict[str, list[str]] | None = field(default=None)

    @classmethod
    def success_with(cls, data: T, message: str = "") -> ServiceResult[T]:
        """Create a successful result carrying a client-facing message."""
        return cls(success=True, data=data, message=message)

    @classmethod
    def success(cls, data: T) -> ServiceResult[T]:
        """
        Create a successful result.

        Args:
            data: The result data

        Returns:
            ServiceResult with success=True and data set
        """
        return cls(success=True, data=data)

    @classmethod
    def failure(
        cls,
        error: str,
        error_code: str | None = None,
        errors: dict[str, list[str]] | None = None,
        message: str = "",
    ) -> ServiceResult[T]:
        """
        Create a failed result.

        Args:
            error: Human-readable error message
            error_code: Machine-readable error code for client handling
            errors: Field-level errors (for validation failures)
            message: Summary of the failed operation (defaults to error)

        Returns:
            ServiceResult with success=False and error details

        Example:
            return ServiceResult.failure(
                "Valid payment amount is required",
                error_code="INVALID_PAYMENT_AMOUNT",
                message="Error processing partial payment",
            )
        """
        return cls(
            success=False,
            message=message or error,
            error=error,
            error_code=error_code,
            errors=errors,
        )

    @classmethod
    def from_exception(
        cls,
        exc: Exception,
        error_code: str | None = None,
        message: str = "",
    ) -> ServiceResult[T]:
        """
        Create a failed result from an exception.

        Application errors keep their own code and message; anything else
        is reported under the given code or the exception class name.
        """
        error = getattr(exc, "message", None) or str(exc)
        code = error_code or getattr(exc, "error_code", None)
        return cls.failure(
            error,
            error_code=code or exc.__class__.__name__.upper(),
            message=message,
        )

    def to_response(self, data: Any = None) -> dict[str, Any]:
        """
        Convert to the API envelope.

        Args:
            data: Serialized payload to use instead of the raw result data

        Returns:
            Dict shaped as {success, data?, message, error?, error_code?}
        """
        if self.success:
            return {
                "success": True,
                "data": self.data if data is None else data,
                "message": self.message,
            }

        response: dict[str, Any] = {
            "success": False,
            "message": self.message,
            "error": self.error,
        }
        if self.error_code:
            response["error_code"] = self.error_code
        if self.errors:
            response["errors"] = self.errors
        return response

    def __bool__(self) -> bool:
        """Allow using result in boolean context."""
        return self.success


class BaseService:
    """
    Base class for service layer classes.

    Provides common utilities for services:
    - Logging setup per service
    - Exception handling patterns

    Design Notes:
        - Use @staticmethod or @classmethod (no instance state)
        - Collaborators (repositories) are passed in, never module globals
        - Use ServiceResult for expected failures
        - Raise exceptions for unexpected failures
    """

    @classmethod
    def get_logger(cls) -> logging.Logger:
        """
        Get logger for this service.

        Returns a logger named after the service class for
        easy filtering in logs.
        """
        return logging.getLogger(f"{cls.__module__}.{cls.__name__}")

    @classmethod
    def handle_exception(
        cls,
        exc: Exception,
        context: str = "",
        log_level: int = logging.ERROR,
        error_code: str | None = None,
    ) -> ServiceResult:
        """
        Convert exception to ServiceResult with logging.

        Args:
            exc: The caught exception
            context: Operation being performed, used as the client message
            log_level: Logging level (default ERROR)
            error_code: Code reported when the exception carries none

        Returns:
            ServiceResult with error details
        """
        logger = cls.get_logger()
        message = f"{context}: {exc}" if context else str(exc)
        logger.log(log_level, message, exc_info=True)
        return ServiceResult.from_exception(exc, error_code, message=context)

    @classmethod
    def validate_required(cls, **kwargs) -> ServiceResult | None:
        """
        Validate that required fields are provided.

        Returns a failure result if any required field is None or empty.
        Returns None if all fields are valid.

        Example:
            validation = cls.validate_required(month=month, date=date)
            if validation:
                return validation
        """
        errors = {}
        for field_name, value in kwargs.items():
            if value is None or (isinstance(value, str) and not value.strip()):
                errors[field_name] = ["This field is required."]

        if errors:
            missing = " and ".join(errors).capitalize()
            verb = "are" if len(errors) > 1 else "is"
            return ServiceResult.failure(
                f"{missing} {verb} required",
                error_code="VALIDATION_ERROR",
                errors=errors,
            )
        return None
