"""Tests for the consumer-facing ledger projections."""

from datetime import datetime, timezone as dt_timezone
from decimal import Decimal

from customers.ledger import operations
from customers.ledger.projections import (
    legacy_payments_map,
    monthly_payments,
    payment_history,
)
from customers.ledger.types import LegacyPayment
from customers.tests.factories import CustomerRecordFactory

NOW = datetime(2024, 3, 1, 9, 0, tzinfo=dt_timezone.utc)


class TestMonthlyPayments:
    def test_rows_are_in_chronological_order(self):
        record = CustomerRecordFactory()
        for month in ("2024-03", "2023-12", "2024-01"):
            operations.initialize_month(record, month, NOW, now=NOW)

        assert [row.month for row in monthly_payments(record)] == [
            "2023-12",
            "2024-01",
            "2024-03",
        ]

    def test_empty_ledger(self):
        assert monthly_payments(CustomerRecordFactory()) == []


class TestLegacyPaymentsMap:
    def test_row_wins_over_legacy_entry(self):
        record = CustomerRecordFactory()
        operations.record_payment(record, "2024-03", True, now=NOW)
        record.legacy_payments["2024-03"] = LegacyPayment(paid=Decimal("1"))

        entry = legacy_payments_map(record)["2024-03"]

        assert entry.paid == Decimal("100")
        assert entry.fully_paid is True

    def test_legacy_entries_without_row_pass_through(self):
        record = CustomerRecordFactory()
        record.legacy_payments["2023-11"] = LegacyPayment(
            paid=Decimal("20"), remaining=Decimal("80")
        )
        operations.initialize_month(record, "2024-03", NOW, now=NOW)

        payments = legacy_payments_map(record)

        assert list(payments) == ["2023-11", "2024-03"]
        assert payments["2023-11"].remaining == Decimal("80")

    def test_map_follows_every_row_change(self):
        record = CustomerRecordFactory()
        operations.initialize_month(record, "2024-03", NOW, now=NOW)
        operations.record_partial_payment(record, "2024-03", 40, now=NOW)

        entry = legacy_payments_map(record)["2024-03"]

        assert (entry.paid, entry.remaining, entry.total_due) == (
            Decimal("40"),
            Decimal("60"),
            Decimal("100"),
        )


class TestPaymentHistory:
    def test_only_periods_with_payments_appear(self):
        record = CustomerRecordFactory()
        operations.initialize_month(record, "2024-02", NOW, now=NOW)
        operations.record_partial_payment(record, "2024-03", 25, method="card", now=NOW)

        history = payment_history(record)

        assert len(history) == 1
        entry = history[0]
        assert entry.month == "2024-03"
        assert entry.paid == Decimal("25")
        assert entry.amount == Decimal("200")
        assert entry.method == "card"
        assert entry.date == NOW

    def test_history_is_chronological(self):
        record = CustomerRecordFactory()
        operations.mark_paid(record, "2024-04", now=NOW)
        operations.mark_paid(record, "2024-02", now=NOW)

        assert [entry.month for entry in payment_history(record)] == ["2024-02", "2024-04"]
