"""
DRF serializers for customers and ledger requests.

Customers are CustomerRecord dataclasses, not model instances, so these are
plain Serializers. Output is camelCase. The monthly-payments list, the
legacy `payments` map and `paymentHistory` are rendered from the ledger
rows through customers.ledger.projections; village and zone summaries come
from the context built by location_summaries.

Serializers:
    CustomerSerializer: Customer output (with all three ledger views)
    CustomerWriteSerializer: Create / update payload
    MonthlyPaymentInitSerializer: {month, date}
    PaymentSerializer: {month, paid, paidDate?, method?}
    PartialPaymentSerializer: {month, amount, paidDate?, method?}
    MarkAllPaidSerializer: {month}
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation

from rest_framework import serializers

from customers.ledger.exceptions import InvalidPeriodError
from customers.ledger.periods import validate_period
from customers.ledger.types import PAYMENT_METHODS, LegacyPayment, Settle
from customers.models import CustomerStatus
from locations.models import Village, Zone

MONEY = {"max_digits": 12, "decimal_places": 2}
DATE_INPUT_FORMATS = ["iso-8601", "%Y-%m-%d"]


class SettleField(serializers.Field):
    """
    The `paid` value of a payment: `true` (pay the whole total due),
    `false` (nothing paid) or a non-negative amount within the money
    column limits.
    """

    default_error_messages = {
        "invalid": "Paid must be a boolean or a non-negative amount.",
    }

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.amount_field = serializers.DecimalField(**MONEY, min_value=Decimal("0"))

    def to_internal_value(self, data):
        if isinstance(data, str) and data.lower() in ("true", "false"):
            data = data.lower() == "true"
        if isinstance(data, bool):
            return Settle.from_value(data)
        try:
            amount = self.amount_field.run_validation(data)
            return Settle.of(amount)
        except (serializers.ValidationError, ValueError, TypeError, InvalidOperation):
            self.fail("invalid")

    def to_representation(self, value):
        return True if value.is_full else value.amount


# =============================================================================
# Ledger views
# =============================================================================


class LedgerRowSerializer(serializers.Serializer):
    month = serializers.CharField()
    date = serializers.DateTimeField()
    monthlyFee = serializers.DecimalField(source="monthly_fee", **MONEY)
    previousBalance = serializers.DecimalField(source="previous_balance", **MONEY)
    paid = serializers.DecimalField(**MONEY)
    remaining = serializers.DecimalField(**MONEY)
    fullyPaid = serializers.BooleanField(source="fully_paid")
    paidDate = serializers.DateTimeField(source="paid_date", allow_null=True)
    totalDue = serializers.DecimalField(source="total_due", **MONEY)


class LegacyPaymentSerializer(serializers.Serializer):
    """One entry of the legacy period map; also accepted on input."""

    paid = serializers.DecimalField(**MONEY, required=False, default=Decimal("0"))
    remaining = serializers.DecimalField(**MONEY, required=False, default=Decimal("0"))
    fullyPaid = serializers.BooleanField(source="fully_paid", required=False, default=False)
    paidDate = serializers.DateTimeField(
        source="paid_date",
        required=False,
        allow_null=True,
        input_formats=DATE_INPUT_FORMATS,
    )
    date = serializers.DateTimeField(
        required=False, allow_null=True, input_formats=DATE_INPUT_FORMATS
    )
    previousBalance = serializers.DecimalField(
        source="previous_balance", **MONEY, required=False, default=Decimal("0")
    )
    totalDue = serializers.DecimalField(
        source="total_due", **MONEY, required=False, default=Decimal("0")
    )

    def validate(self, attrs):
        return LegacyPayment(**attrs)


class PaymentHistorySerializer(serializers.Serializer):
    month = serializers.CharField()
    amount = serializers.DecimalField(**MONEY)
    paid = serializers.DecimalField(**MONEY)
    paidDate = serializers.DateTimeField(source="paid_date", allow_null=True)
    method = serializers.CharField()
    date = serializers.DateTimeField(allow_null=True)


# =============================================================================
# Customers
# =============================================================================


def location_summaries(records) -> dict:
    """
    Serializer context with the village and zone summaries the given
    customers reference, fetched in one query per model.
    """
    village_ids = {r.village_id for r in records if r.village_id}
    zone_ids = {r.zone_id for r in records if r.zone_id}
    villages = {}
    zones = {}
    if village_ids:
        villages = {
            v["id"]: v
            for v in Village.objects.filter(pk__in=village_ids).values("id", "name", "code")
        }
    if zone_ids:
        zones = {
            z["id"]: z
            for z in Zone.objects.filter(pk__in=zone_ids).values(
                "id", "name", "code", "village_id"
            )
        }
    return {"villages": villages, "zones": zones}


class CustomerSerializer(serializers.Serializer):
    """
    Customer with its ledger rendered as all three legacy views.

    `village` and `zone` are summaries looked up from the serializer
    context (see location_summaries); they are null when not provided.
    """

    id = serializers.UUIDField()
    fullName = serializers.CharField(source="full_name")
    phoneNumber = serializers.CharField(source="phone_number")
    email = serializers.CharField()
    address = serializers.CharField()
    villageId = serializers.UUIDField(source="village_id", allow_null=True)
    zoneId = serializers.UUIDField(source="zone_id", allow_null=True)
    village = serializers.SerializerMethodField()
    zone = serializers.SerializerMethodField()
    monthlyFee = serializers.DecimalField(source="monthly_fee", **MONEY)
    status = serializers.CharField()
    monthlyPayments = LedgerRowSerializer(source="monthly_payments", many=True)
    payments = serializers.DictField(child=LegacyPaymentSerializer())
    paymentHistory = PaymentHistorySerializer(source="payment_history", many=True)
    createdAt = serializers.DateTimeField(source="created_at")
    updatedAt = serializers.DateTimeField(source="updated_at")

    def get_village(self, obj):
        village = self.context.get("villages", {}).get(obj.village_id)
        if village is None:
            return None
        return {"id": str(village["id"]), "name": village["name"], "code": village["code"]}

    def get_zone(self, obj):
        zone = self.context.get("zones", {}).get(obj.zone_id)
        if zone is None:
            return None
        return {
            "id": str(zone["id"]),
            "name": zone["name"],
            "code": zone["code"],
            "villageId": str(zone["village_id"]),
        }


class CustomerWriteSerializer(serializers.Serializer):
    """
    Create / update payload.

    Ledger rows cannot be written here; `payments` only imports legacy
    period-map entries for periods that have no ledger row yet.
    """

    fullName = serializers.CharField(source="full_name", max_length=200, trim_whitespace=True)
    phoneNumber = serializers.CharField(source="phone_number", max_length=50)
    email = serializers.EmailField(required=False, allow_blank=True)
    address = serializers.CharField(max_length=255)
    villageId = serializers.UUIDField(source="village_id", required=False, allow_null=True)
    zoneId = serializers.UUIDField(source="zone_id", required=False, allow_null=True)
    monthlyFee = serializers.DecimalField(
        source="monthly_fee", **MONEY, min_value=Decimal("0"), required=False
    )
    status = serializers.ChoiceField(choices=CustomerStatus.choices, required=False)
    payments = serializers.DictField(
        source="legacy_payments",
        child=LegacyPaymentSerializer(),
        required=False,
    )

    def validate_email(self, value):
        return value.strip().lower()

    def validate_villageId(self, value):
        if value is not None and not Village.objects.filter(pk=value).exists():
            raise serializers.ValidationError("Village not found.")
        return value

    def validate_zoneId(self, value):
        if value is not None and not Zone.objects.filter(pk=value).exists():
            raise serializers.ValidationError("Zone not found.")
        return value

    def validate_payments(self, value):
        for month in value:
            try:
                validate_period(month)
            except InvalidPeriodError as e:
                raise serializers.ValidationError(e.message) from e
        return value


# =============================================================================
# Ledger requests
# =============================================================================


class MonthlyPaymentInitSerializer(serializers.Serializer):
    """Missing values are reported by the ledger service, not here."""

    month = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    date = serializers.DateTimeField(
        required=False, allow_null=True, input_formats=DATE_INPUT_FORMATS
    )


class PaymentSerializer(serializers.Serializer):
    month = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    paid = SettleField(required=False, allow_null=True)
    paidDate = serializers.DateTimeField(
        source="paid_date",
        required=False,
        allow_null=True,
        input_formats=DATE_INPUT_FORMATS,
    )
    method = serializers.ChoiceField(choices=PAYMENT_METHODS, required=False, allow_null=True)


class PartialPaymentSerializer(serializers.Serializer):
    month = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    amount = serializers.DecimalField(**MONEY, required=False, allow_null=True)
    paidDate = serializers.DateTimeField(
        source="paid_date",
        required=False,
        allow_null=True,
        input_formats=DATE_INPUT_FORMATS,
    )
    method = serializers.ChoiceField(choices=PAYMENT_METHODS, required=False, allow_null=True)


class MarkAllPaidSerializer(serializers.Serializer):
    month = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class BulkPaymentResultSerializer(serializers.Serializer):
    month = serializers.CharField()
    totalCustomers = serializers.IntegerField(source="total_customers")
    updatedCount = serializers.IntegerField(source="updated_count")
    failedCount = serializers.IntegerField(source="failed_count")


class CustomerStatsSerializer(serializers.Serializer):
    totalCustomers = serializers.IntegerField()
    activeCustomers = serializers.IntegerField()
    pendingPayments = serializers.IntegerField()
