"""
Customer repository backed by the Django ORM.

Each CustomerRecord maps to one Customer row plus one MonthlyPayment row
per ledger period. Legacy period-map entries without a ledger row live in
the Customer.legacy_payments JSON column.
"""

from __future__ import annotations

import logging
from dataclasses import asdict
from decimal import InvalidOperation
from typing import TYPE_CHECKING

from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import DatabaseError, transaction
from django.db.models import Prefetch
from django.utils.dateparse import parse_datetime

from core.exceptions import PersistenceError
from customers.ledger.exceptions import CustomerNotFoundError
from customers.ledger.types import (
    DEFAULT_PAYMENT_METHOD,
    CustomerRecord,
    LedgerRow,
    LegacyPayment,
    PaymentRecord,
    to_decimal,
)
from customers.models import Customer, CustomerStatus, MonthlyPayment

from .base import CustomerRepository

if TYPE_CHECKING:
    from collections.abc import Iterator
    from datetime import datetime
    from typing import Any

logger = logging.getLogger(__name__)

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


def _parse_datetime(value: Any) -> datetime | None:
    if value is None or value == "":
        return None
    if isinstance(value, str):
        return parse_datetime(value)
    return value


# =============================================================================
# Mapping helpers
# =============================================================================


def row_from_model(payment: MonthlyPayment) -> LedgerRow:
    history = None
    if payment.history_amount is not None:
        history = PaymentRecord(
            amount=payment.history_amount,
            method=payment.payment_method or DEFAULT_PAYMENT_METHOD,
            date=payment.history_date,
        )
    return LedgerRow(
        month=payment.month,
        date=payment.date,
        monthly_fee=payment.monthly_fee,
        previous_balance=payment.previous_balance,
        total_due=payment.total_due,
        paid=payment.paid,
        remaining=payment.remaining,
        fully_paid=payment.fully_paid,
        paid_date=payment.paid_date,
        history=history,
    )


def apply_row(payment: MonthlyPayment, row: LedgerRow) -> None:
    payment.date = row.date
    payment.monthly_fee = row.monthly_fee
    payment.previous_balance = row.previous_balance
    payment.total_due = row.total_due
    payment.paid = row.paid
    payment.remaining = row.remaining
    payment.fully_paid = row.fully_paid
    payment.paid_date = row.paid_date
    if row.history is None:
        payment.history_amount = None
        payment.payment_method = None
        payment.history_date = None
    else:
        payment.history_amount = row.history.amount
        payment.payment_method = row.history.method
        payment.history_date = row.history.date


def legacy_from_json(data: dict) -> dict[str, LegacyPayment]:
    return {
        month: LegacyPayment(
            paid=to_decimal(entry.get("paid")),
            remaining=to_decimal(entry.get("remaining")),
            fully_paid=bool(entry.get("fully_paid", False)),
            paid_date=_parse_datetime(entry.get("paid_date")),
            date=_parse_datetime(entry.get("date")),
            previous_balance=to_decimal(entry.get("previous_balance")),
            total_due=to_decimal(entry.get("total_due")),
        )
        for month, entry in (data or {}).items()
    }


def legacy_to_json(payments: dict[str, LegacyPayment]) -> dict:
    # Serialized through DjangoJSONEncoder (Decimal and datetime aware)
    return {month: asdict(entry) for month, entry in payments.items()}


def record_from_model(customer: Customer) -> CustomerRecord:
    return CustomerRecord(
        id=customer.id,
        full_name=customer.full_name,
        phone_number=customer.phone_number,
        email=customer.email,
        address=customer.address,
        monthly_fee=customer.monthly_fee,
        status=customer.status,
        village_id=customer.village_id,
        zone_id=customer.zone_id,
        rows={p.month: row_from_model(p) for p in customer.monthly_payments.all()},
        legacy_payments=legacy_from_json(customer.legacy_payments),
        created_at=customer.created_at,
        updated_at=customer.updated_at,
    )


# =============================================================================
# Repository
# =============================================================================


class DjangoCustomerRepository(CustomerRepository):
    """
    Durable customer storage in the project database.

    `save` writes the customer and every ledger row in one transaction,
    so a failed write never leaves half a ledger behind.
    """

    def _queryset(self):
        return Customer.objects.prefetch_related(
            Prefetch(
                "monthly_payments",
                queryset=MonthlyPayment.objects.order_by("month"),
            )
        )

    def _load(self, customer_id: Any) -> Customer:
        try:
            return self._queryset().get(pk=customer_id)
        except (Customer.DoesNotExist, DjangoValidationError, ValueError):
            raise CustomerNotFoundError(customer_id) from None

    def get(self, customer_id: Any) -> CustomerRecord:
        return record_from_model(self._load(customer_id))

    def list(self, status: str | None = None) -> list[CustomerRecord]:
        queryset = self._queryset()
        if status:
            queryset = queryset.filter(status=status)
        return [record_from_model(customer) for customer in queryset]

    def iter_active(self, chunk_size: int | None = None) -> Iterator[CustomerRecord]:
        chunk_size = chunk_size or settings.LEDGER_ROLLOVER_CHUNK_SIZE
        queryset = (
            self._queryset()
            .filter(status=CustomerStatus.ACTIVE)
            .order_by("created_at", "id")
        )
        for customer in queryset.iterator(chunk_size=chunk_size):
            yield record_from_model(customer)

    def add(self, record: CustomerRecord) -> CustomerRecord:
        customer = Customer()
        if record.id is not None:
            customer.id = record.id
        return self._write(customer, record)

    def save(self, record: CustomerRecord) -> CustomerRecord:
        if record.id is None:
            raise CustomerNotFoundError(None)
        return self._write(self._load(record.id), record)

    def delete(self, customer_id: Any) -> None:
        customer = self._load(customer_id)
        customer.delete()
        logger.info("Customer deleted", extra={"customer_id": str(customer_id)})

    def count(self, status: str | None = None) -> int:
        queryset = Customer.objects.all()
        if status:
            queryset = queryset.filter(status=status)
        return queryset.count()

    def _write(self, customer: Customer, record: CustomerRecord) -> CustomerRecord:
        for field_name in PROFILE_FIELDS:
            setattr(customer, field_name, getattr(record, field_name))
        customer.legacy_payments = legacy_to_json(record.legacy_payments)

        try:
            with transaction.atomic():
                customer.save()
                existing = {
                    payment.month: payment
                    for payment in MonthlyPayment.objects.filter(customer=customer)
                }
                for month, row in record.rows.items():
                    payment = existing.get(month) or MonthlyPayment(
                        customer=customer, month=month
                    )
                    apply_row(payment, row)
                    payment.clean_fields(exclude=["customer"])
                    payment.save()
        except (DatabaseError, DjangoValidationError, InvalidOperation) as e:
            logger.error(
                "Failed to save customer",
                extra={"customer_id": str(customer.pk), "error": str(e)},
                exc_info=True,
            )
            raise PersistenceError(
                "Failed to save customer",
                details={"customer_id": str(customer.pk)},
            ) from e

        record.id = customer.id
        record.village_id = customer.village_id
        record.created_at = customer.created_at
        record.updated_at = customer.updated_at
        return record
