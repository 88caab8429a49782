"""
Customer and ledger services.

Services load a CustomerRecord from a repository, apply a ledger operation
or profile change, and save it back. The repository is always passed in by
the caller (views, tasks, management commands).

Failure codes returned in ServiceResult.error_code:
    VALIDATION_ERROR / INVALID_PERIOD / INVALID_PAYMENT_AMOUNT /
    INVALID_PAYMENT_METHOD - rejected input, nothing was changed
    CUSTOMER_NOT_FOUND - unknown customer id
    PERSISTENCE_ERROR - the repository failed to write

Usage:
    from customers.services import LedgerService

    result = LedgerService.record_partial_payment(
        repository, customer_id, month="2024-03", amount=Decimal("40")
    )
    if result.success:
        record = result.data
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from core.exceptions import PersistenceError
from core.services import BaseService, ServiceResult
from customers.ledger import operations
from customers.ledger.exceptions import CustomerNotFoundError, LedgerError
from customers.ledger.periods import current_period, validate_period
from customers.ledger.types import BulkPaymentResult, CustomerRecord
from customers.models import CustomerStatus

if TYPE_CHECKING:
    from collections.abc import Callable
    from datetime import datetime
    from typing import Any

    from customers.repositories.base import CustomerRepository

NOT_FOUND_CODES = frozenset({"CUSTOMER_NOT_FOUND"})
SERVER_ERROR_CODES = frozenset({"PERSISTENCE_ERROR"})

PROFILE_FIELDS = (
    "full_name",
    "phone_number",
    "email",
    "address",
    "monthly_fee",
    "status",
    "village_id",
    "zone_id",
)


class CustomerService(BaseService):
    """
    Customer registry: CRUD and summary statistics.

    Profile updates never overwrite ledger rows. Legacy `payments` entries
    supplied by older clients are kept only for periods without a row.
    """

    @classmethod
    def list_customers(
        cls, repository: CustomerRepository, status: str | None = None
    ) -> ServiceResult[list[CustomerRecord]]:
        try:
            records = repository.list(status=status)
        except PersistenceError as e:
            return cls.handle_exception(e, "Error fetching customers")
        return ServiceResult.success_with(records, "Customers fetched successfully")

    @classmethod
    def get_customer(
        cls, repository: CustomerRepository, customer_id: Any
    ) -> ServiceResult[CustomerRecord]:
        try:
            record = repository.get(customer_id)
        except CustomerNotFoundError as e:
            return ServiceResult.from_exception(e)
        return ServiceResult.success(record)

    @classmethod
    def create_customer(
        cls, repository: CustomerRepository, data: dict[str, Any]
    ) -> ServiceResult[CustomerRecord]:
        """
        Register a new customer.

        Args:
            repository: Customer storage
            data: Validated profile fields (snake_case), optionally with
                `legacy_payments` mapping period -> LegacyPayment
        """
        record = CustomerRecord(
            **{name: data[name] for name in PROFILE_FIELDS if name in data}
        )
        record.legacy_payments = dict(data.get("legacy_payments") or {})

        try:
            record = repository.add(record)
        except PersistenceError as e:
            return cls.handle_exception(e, "Error creating customer")

        cls.get_logger().info(
            "Customer created",
            extra={"customer_id": str(record.id), "zone_id": str(record.zone_id)},
        )
        return ServiceResult.success_with(record, "Customer created successfully")

    @classmethod
    def update_customer(
        cls, repository: CustomerRepository, customer_id: Any, data: dict[str, Any]
    ) -> ServiceResult[CustomerRecord]:
        """Apply the given profile fields; fields not in `data` are left as they are."""
        try:
            record = repository.get(customer_id)
            for name in PROFILE_FIELDS:
                if name in data:
                    setattr(record, name, data[name])
            for month, entry in (data.get("legacy_payments") or {}).items():
                if not record.has_period(month):
                    record.legacy_payments[month] = entry
            record = repository.save(record)
        except CustomerNotFoundError as e:
            return ServiceResult.from_exception(e)
        except PersistenceError as e:
            return cls.handle_exception(e, "Error updating customer")
        return ServiceResult.success_with(record, "Customer updated successfully")

    @classmethod
    def delete_customer(
        cls, repository: CustomerRepository, customer_id: Any
    ) -> ServiceResult[None]:
        try:
            repository.delete(customer_id)
        except CustomerNotFoundError as e:
            return ServiceResult.from_exception(e)
        except PersistenceError as e:
            return cls.handle_exception(e, "Error deleting customer")
        return ServiceResult.success_with(None, "Customer deleted successfully")

    @classmethod
    def summary_stats(
        cls, repository: CustomerRepository, now: datetime | None = None
    ) -> ServiceResult[dict[str, int]]:
        """
        Count customers, active customers, and active customers with an
        unsettled current period (no row yet, or a row not fully paid).
        """
        period = current_period(now)
        pending = 0
        for record in repository.iter_active():
            row = record.rows.get(period)
            if row is None or not row.fully_paid:
                pending += 1

        return ServiceResult.success(
            {
                "totalCustomers": repository.count(),
                "activeCustomers": repository.count(status=CustomerStatus.ACTIVE),
                "pendingPayments": pending,
            }
        )


class LedgerService(BaseService):
    """
    Ledger use cases for single customers and the bulk mark-all-paid action.

    Each single-customer call is one load / apply / save cycle. Missing
    fields are rejected before the customer is loaded; the ledger operation
    checks everything else before it touches the record.
    """

    @classmethod
    def _apply(
        cls,
        repository: CustomerRepository,
        customer_id: Any,
        operation: Callable[[CustomerRecord], Any],
        success_message: str,
        error_context: str,
    ) -> ServiceResult[CustomerRecord]:
        try:
            record = repository.get(customer_id)
            operation(record)
            record = repository.save(record)
        except LedgerError as e:
            return ServiceResult.from_exception(e)
        except CustomerNotFoundError as e:
            return ServiceResult.from_exception(e)
        except PersistenceError as e:
            return cls.handle_exception(e, error_context)
        return ServiceResult.success_with(record, success_message)

    @classmethod
    def initialize_month(
        cls,
        repository: CustomerRepository,
        customer_id: Any,
        month: str | None,
        date: datetime | None,
        now: datetime | None = None,
    ) -> ServiceResult[CustomerRecord]:
        """
        Open or refresh the ledger row of `month`.

        Returns:
            ServiceResult with the updated record, or a failure when month
            or date is missing, the month is malformed, or the customer
            does not exist
        """
        validation = cls.validate_required(month=month, date=date)
        if validation:
            return validation

        return cls._apply(
            repository,
            customer_id,
            lambda record: operations.initialize_month(record, month, date, now=now),
            "Monthly payment initialized successfully",
            "Error initializing monthly payment",
        )

    @classmethod
    def record_payment(
        cls,
        repository: CustomerRepository,
        customer_id: Any,
        month: str | None,
        paid: Any,
        paid_date: datetime | None = None,
        method: str | None = None,
        now: datetime | None = None,
    ) -> ServiceResult[CustomerRecord]:
        """
        Set what has been paid for `month`.

        `paid` is a Settle, a boolean (True pays the whole total due) or
        an amount.
        """
        validation = cls.validate_required(month=month, paid=paid)
        if validation:
            return validation

        return cls._apply(
            repository,
            customer_id,
            lambda record: operations.record_payment(
                record, month, paid, paid_date=paid_date, method=method, now=now
            ),
            "Payment updated successfully",
            "Error updating payment status",
        )

    @classmethod
    def record_partial_payment(
        cls,
        repository: CustomerRepository,
        customer_id: Any,
        month: str | None,
        amount: Any,
        paid_date: datetime | None = None,
        method: str | None = None,
        now: datetime | None = None,
    ) -> ServiceResult[CustomerRecord]:
        """Add an installment of `amount` (> 0) to what was paid for `month`."""
        validation = cls.validate_required(month=month)
        if validation:
            return validation

        return cls._apply(
            repository,
            customer_id,
            lambda record: operations.record_partial_payment(
                record, month, amount, paid_date=paid_date, method=method, now=now
            ),
            f"Partial payment of {amount} processed successfully",
            "Error processing partial payment",
        )

    @classmethod
    def mark_all_paid(
        cls,
        repository: CustomerRepository,
        month: str | None,
        now: datetime | None = None,
    ) -> ServiceResult[BulkPaymentResult]:
        """
        Mark every active customer fully paid for `month`.

        Per-customer failures are logged and counted; they never stop the
        batch. The period key is validated once up front.
        """
        validation = cls.validate_required(month=month)
        if validation:
            return validation

        try:
            validate_period(month)
        except LedgerError as e:
            return ServiceResult.from_exception(e)

        logger = cls.get_logger()
        result = BulkPaymentResult(month=month)
        for record in repository.iter_active():
            result.total_customers += 1
            try:
                operations.mark_paid(record, month, now=now)
                repository.save(record)
            except Exception:
                result.failed_count += 1
                logger.exception(
                    "Failed to mark customer paid",
                    extra={"customer_id": str(record.id), "month": month},
                )
            else:
                result.updated_count += 1

        logger.info(
            "Marked customers paid",
            extra={
                "month": month,
                "total_customers": result.total_customers,
                "updated_count": result.updated_count,
                "failed_count": result.failed_count,
            },
        )
        return ServiceResult.success_with(
            result,
            f"Successfully marked {result.updated_count} out of "
            f"{result.total_customers} customers as paid for {month}",
        )


def status_for_failure(result: ServiceResult) -> int:
    """HTTP status matching a failed result's error code."""
    if result.error_code in NOT_FOUND_CODES:
        return 404
    if result.error_code in SERVER_ERROR_CODES:
        return 500
    return 400


__all__ = [
    "CustomerService",
    "LedgerService",
    "status_for_failure",
]
