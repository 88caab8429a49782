"""
Customer and MonthlyPayment models.

These tables back the Django customer repository. The ledger itself works
on customers.ledger.types dataclasses; the repository maps rows of
MonthlyPayment to LedgerRow and back.

Models:
    Customer: A waste-collection customer with a monthly fee
    MonthlyPayment: One billing period of one customer (unique per month)
"""

from __future__ import annotations

from decimal import Decimal

from django.core.serializers.json import DjangoJSONEncoder
from django.core.validators import MinValueValidator
from django.db import models

from core.model_mixins import UUIDPrimaryKeyMixin
from core.models import BaseModel


class CustomerStatus(models.TextChoices):
    ACTIVE = "active", "Active"
    INACTIVE = "inactive", "Inactive"
    SUSPENDED = "suspended", "Suspended"


class PaymentMethod(models.TextChoices):
    CASH = "cash", "Cash"
    BANK_TRANSFER = "bank_transfer", "Bank transfer"
    CARD = "card", "Card"


MONEY = {"max_digits": 12, "decimal_places": 2}


class Customer(UUIDPrimaryKeyMixin, BaseModel):
    """
    A household or business billed monthly for collection.

    Fields:
        full_name: Customer name
        phone_number: Contact phone
        email: Contact email (optional)
        address: Service address
        village: Village the customer lives in
        zone: Collection zone (never changed by billing operations)
        monthly_fee: Fee billed every period
        status: active / inactive / suspended; only active customers
            are rolled over and bulk-marked paid
        legacy_payments: Period map entries written by older clients
            that have no MonthlyPayment row yet
    """

    full_name = models.CharField(max_length=200)
    phone_number = models.CharField(max_length=50)
    email = models.EmailField(blank=True, default="")
    address = models.CharField(max_length=255, blank=True, default="")
    village = models.ForeignKey(
        "locations.Village",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="customers",
    )
    zone = models.ForeignKey(
        "locations.Zone",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="customers",
    )
    monthly_fee = models.DecimalField(
        **MONEY,
        default=Decimal("0"),
        validators=[MinValueValidator(Decimal("0"))],
    )
    status = models.CharField(
        max_length=20,
        choices=CustomerStatus.choices,
        default=CustomerStatus.ACTIVE,
        db_index=True,
    )
    legacy_payments = models.JSONField(
        default=dict,
        blank=True,
        encoder=DjangoJSONEncoder,
    )

    class Meta(BaseModel.Meta):
        indexes = [
            models.Index(fields=["status", "-created_at"], name="customer_status_created_idx"),
        ]

    def __str__(self) -> str:
        return self.full_name


class MonthlyPayment(models.Model):
    """
    A customer's ledger row for one period.

    The history_* columns hold payment-history details and stay NULL until
    a payment is recorded for the period.
    """

    customer = models.ForeignKey(
        Customer,
        on_delete=models.CASCADE,
        related_name="monthly_payments",
    )
    month = models.CharField(max_length=7)
    date = models.DateTimeField()
    monthly_fee = models.DecimalField(**MONEY, default=Decimal("0"))
    previous_balance = models.DecimalField(**MONEY, default=Decimal("0"))
    total_due = models.DecimalField(**MONEY, default=Decimal("0"))
    paid = models.DecimalField(**MONEY, default=Decimal("0"))
    remaining = models.DecimalField(**MONEY, default=Decimal("0"))
    fully_paid = models.BooleanField(default=False)
    paid_date = models.DateTimeField(null=True, blank=True)

    history_amount = models.DecimalField(**MONEY, null=True, blank=True)
    payment_method = models.CharField(
        max_length=20,
        choices=PaymentMethod.choices,
        null=True,
        blank=True,
    )
    history_date = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["customer", "month"]
        constraints = [
            models.UniqueConstraint(
                fields=["customer", "month"],
                name="unique_customer_month",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.customer_id} {self.month}"
