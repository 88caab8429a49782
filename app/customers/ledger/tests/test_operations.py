"""
Tests for the ledger operations.

Covers:
1. Month initialization (creation, refresh, idempotence)
2. Settled payments (full vs. explicit amount)
3. Partial payments (accumulation, rejection of bad amounts)
4. Mark paid (bulk step)
5. Invariants holding after every operation
"""

from __future__ import annotations

import copy
from datetime import datetime, timedelta, timezone as dt_timezone
from decimal import Decimal

import pytest

from customers.ledger import operations
from customers.ledger.exceptions import (
    InvalidPaymentAmountError,
    InvalidPeriodError,
    LedgerError,
)
from customers.ledger.types import LegacyPayment, Settle
from customers.tests.factories import CustomerRecordFactory

NOW = datetime(2024, 3, 1, 9, 0, tzinfo=dt_timezone.utc)
LATER = NOW + timedelta(days=3)


def assert_row_invariants(record):
    for row in record.rows.values():
        assert row.total_due == row.previous_balance + row.monthly_fee
        assert row.remaining >= 0
        assert row.remaining == max(Decimal("0"), row.total_due - row.paid)
        assert row.fully_paid is (row.remaining == 0)
        if row.history is not None:
            assert row.history.date is not None


@pytest.fixture
def record():
    return CustomerRecordFactory(monthly_fee=Decimal("100"))


# =============================================================================
# Initialize month
# =============================================================================


class TestInitializeMonth:
    def test_creates_row_owing_the_fee(self, record):
        operations.initialize_month(record, "2024-03", NOW, now=NOW)

        row = record.rows["2024-03"]
        assert row.paid == Decimal("0")
        assert row.remaining == Decimal("100")
        assert row.total_due == Decimal("100")
        assert row.previous_balance == Decimal("0")
        assert row.fully_paid is False
        assert row.date == NOW
        assert row.history is None

    def test_twice_without_payment_is_idempotent(self, record):
        operations.initialize_month(record, "2024-03", NOW, now=NOW)
        first = copy.deepcopy(record.rows)

        operations.initialize_month(record, "2024-03", NOW, now=NOW)

        assert list(record.rows) == ["2024-03"]
        assert record.rows == first

    def test_refresh_keeps_paid_and_recomputes_remaining(self, record):
        operations.initialize_month(record, "2024-03", NOW, now=NOW)
        operations.record_partial_payment(record, "2024-03", Decimal("40"), now=NOW)

        operations.initialize_month(record, "2024-03", LATER, now=LATER)

        row = record.rows["2024-03"]
        assert row.paid == Decimal("40")
        assert row.remaining == Decimal("60")
        assert row.date == LATER

    def test_refresh_picks_up_new_carry_over(self, record):
        operations.initialize_month(record, "2024-03", NOW, now=NOW)
        operations.initialize_month(record, "2024-02", NOW, now=NOW)

        operations.initialize_month(record, "2024-03", NOW, now=NOW)

        assert record.rows["2024-03"].previous_balance == Decimal("100")
        assert record.rows["2024-03"].total_due == Decimal("200")

    def test_absorbs_legacy_entry_of_same_period(self, record):
        record.legacy_payments["2024-03"] = LegacyPayment(
            paid=Decimal("30"), remaining=Decimal("70"), total_due=Decimal("100")
        )

        operations.initialize_month(record, "2024-03", NOW, now=NOW)

        assert "2024-03" not in record.legacy_payments
        assert record.rows["2024-03"].paid == Decimal("30")
        assert record.rows["2024-03"].remaining == Decimal("70")

    def test_missing_date_is_rejected(self, record):
        with pytest.raises(LedgerError) as exc_info:
            operations.initialize_month(record, "2024-03", None)

        assert exc_info.value.message == "Date is required"
        assert record.rows == {}

    def test_invalid_month_is_rejected(self, record):
        with pytest.raises(InvalidPeriodError):
            operations.initialize_month(record, "2024-3", NOW)

        assert record.rows == {}

    def test_zone_is_never_touched(self, record):
        zone_id = record.zone_id

        operations.initialize_month(record, "2024-03", NOW, now=NOW)
        operations.record_payment(record, "2024-03", True, now=NOW)
        operations.record_partial_payment(record, "2024-04", 10, now=NOW)
        operations.mark_paid(record, "2024-05", now=NOW)

        assert record.zone_id == zone_id


# =============================================================================
# Record payment
# =============================================================================


class TestRecordPayment:
    def test_true_pays_whole_total_due(self, record):
        operations.initialize_month(record, "2024-02", NOW, now=NOW)
        operations.record_payment(record, "2024-03", Settle.full(), now=NOW)

        row = record.rows["2024-03"]
        assert row.total_due == Decimal("200")
        assert row.paid == Decimal("200")
        assert row.remaining == Decimal("0")
        assert row.fully_paid is True

    def test_explicit_amount_replaces_previous_paid(self, record):
        operations.record_payment(record, "2024-03", Decimal("80"), now=NOW)
        operations.record_payment(record, "2024-03", Decimal("30"), now=NOW)

        row = record.rows["2024-03"]
        assert row.paid == Decimal("30")
        assert row.remaining == Decimal("70")

    def test_false_means_nothing_paid(self, record):
        operations.record_payment(record, "2024-03", True, now=NOW)
        operations.record_payment(record, "2024-03", False, now=NOW)

        row = record.rows["2024-03"]
        assert row.paid == Decimal("0")
        assert row.fully_paid is False

    def test_overpayment_never_makes_remaining_negative(self, record):
        operations.record_payment(record, "2024-03", Decimal("150"), now=NOW)

        row = record.rows["2024-03"]
        assert row.remaining == Decimal("0")
        assert row.fully_paid is True

    def test_creates_row_lazily(self, record):
        operations.record_payment(record, "2024-03", Decimal("50"), now=NOW)

        assert record.rows["2024-03"].date == NOW

    def test_history_entry_created_with_defaults(self, record):
        operations.record_payment(record, "2024-03", Decimal("50"), now=NOW)

        history = record.rows["2024-03"].history
        assert history.amount == Decimal("100")
        assert history.method == "cash"
        assert history.date == NOW

    def test_method_and_paid_date_are_recorded(self, record):
        operations.record_payment(
            record, "2024-03", True, paid_date=LATER, method="card", now=NOW
        )

        row = record.rows["2024-03"]
        assert row.paid_date == LATER
        assert row.history.method == "card"

    def test_one_history_entry_per_period(self, record):
        operations.record_payment(record, "2024-03", Decimal("10"), now=NOW)
        operations.record_payment(record, "2024-03", Decimal("20"), method="bank_transfer", now=LATER)

        history = record.rows["2024-03"].history
        assert history.method == "bank_transfer"
        assert history.date == NOW
        assert len(record.payment_history) == 1

    def test_negative_amount_is_rejected(self, record):
        with pytest.raises(InvalidPaymentAmountError):
            operations.record_payment(record, "2024-03", Decimal("-1"), now=NOW)

        assert record.rows == {}

    @pytest.mark.parametrize("amount", [Decimal("Infinity"), Decimal("NaN"), "-Infinity"])
    def test_non_finite_amount_is_rejected(self, record, amount):
        with pytest.raises(InvalidPaymentAmountError):
            operations.record_payment(record, "2024-03", amount, now=NOW)

        assert record.rows == {}

    def test_unknown_method_is_rejected(self, record):
        with pytest.raises(LedgerError) as exc_info:
            operations.record_payment(record, "2024-03", True, method="cheque", now=NOW)

        assert exc_info.value.error_code == "INVALID_PAYMENT_METHOD"
        assert record.rows == {}


# =============================================================================
# Record partial payment
# =============================================================================


class TestRecordPartialPayment:
    def test_installments_accumulate(self, record):
        operations.record_partial_payment(record, "2024-03", Decimal("30"), now=NOW)
        operations.record_partial_payment(record, "2024-03", Decimal("25"), now=NOW)

        row = record.rows["2024-03"]
        assert row.paid == Decimal("55")
        assert row.remaining == Decimal("45")

    def test_accepts_plain_numbers(self, record):
        operations.record_partial_payment(record, "2024-03", 40, now=NOW)
        operations.record_partial_payment(record, "2024-03", "12.5", now=NOW)

        assert record.rows["2024-03"].paid == Decimal("52.5")

    @pytest.mark.parametrize("amount", [0, -5, None, True, "abc"])
    def test_rejects_invalid_amounts(self, record, amount):
        with pytest.raises(InvalidPaymentAmountError) as exc_info:
            operations.record_partial_payment(record, "2024-03", amount, now=NOW)

        assert exc_info.value.message == "Valid payment amount is required"
        assert record.rows == {}

    def test_paid_date_kept_when_not_given(self, record):
        operations.record_partial_payment(record, "2024-03", 10, paid_date=NOW, now=NOW)
        operations.record_partial_payment(record, "2024-03", 10, now=LATER)

        assert record.rows["2024-03"].paid_date == NOW


# =============================================================================
# Mark paid
# =============================================================================


class TestMarkPaid:
    def test_forces_fully_paid(self, record):
        operations.initialize_month(record, "2024-02", NOW, now=NOW)
        operations.record_partial_payment(record, "2024-03", 10, now=NOW)

        operations.mark_paid(record, "2024-03", now=LATER)

        row = record.rows["2024-03"]
        assert row.total_due == Decimal("200")
        assert row.paid == Decimal("200")
        assert row.remaining == Decimal("0")
        assert row.fully_paid is True
        assert row.paid_date == LATER
        assert row.history.amount == Decimal("200")

    def test_zero_fee_customer_is_fully_paid(self):
        record = CustomerRecordFactory(monthly_fee=Decimal("0"))

        operations.mark_paid(record, "2024-03", now=NOW)

        assert record.rows["2024-03"].fully_paid is True


# =============================================================================
# Scenarios and invariants
# =============================================================================


class TestLedgerScenarios:
    def test_march_paid_in_two_installments_then_april(self, record):
        operations.initialize_month(record, "2024-03", NOW, now=NOW)
        row = record.rows["2024-03"]
        assert (row.paid, row.remaining, row.total_due, row.fully_paid) == (
            Decimal("0"),
            Decimal("100"),
            Decimal("100"),
            False,
        )

        operations.record_partial_payment(record, "2024-03", 40, now=NOW)
        assert (row.paid, row.remaining, row.fully_paid) == (Decimal("40"), Decimal("60"), False)

        operations.record_partial_payment(record, "2024-03", 60, now=NOW)
        assert (row.paid, row.remaining, row.fully_paid) == (Decimal("100"), Decimal("0"), True)

        operations.initialize_month(record, "2024-04", NOW, now=NOW)
        assert record.rows["2024-04"].previous_balance == Decimal("0")
        assert record.rows["2024-04"].total_due == Decimal("100")

    def test_april_carries_march_remainder(self, record):
        operations.initialize_month(record, "2024-03", NOW, now=NOW)
        operations.record_partial_payment(record, "2024-03", 40, now=NOW)

        operations.initialize_month(record, "2024-04", NOW, now=NOW)

        assert record.rows["2024-04"].total_due == Decimal("160")

    def test_carry_over_chains_across_year_boundary(self, record):
        operations.initialize_month(record, "2023-12", NOW, now=NOW)
        operations.initialize_month(record, "2024-01", NOW, now=NOW)

        assert record.rows["2024-01"].total_due == Decimal("200")

    def test_invariants_hold_after_mixed_operations(self, record):
        operations.initialize_month(record, "2024-01", NOW, now=NOW)
        operations.record_partial_payment(record, "2024-01", 30, now=NOW)
        operations.record_payment(record, "2024-02", Decimal("500"), now=NOW)
        operations.initialize_month(record, "2024-03", NOW, now=NOW)
        operations.mark_paid(record, "2024-04", now=NOW)
        operations.record_payment(record, "2024-05", False, now=NOW)

        assert_row_invariants(record)

    def test_legacy_map_matches_rows(self, record):
        operations.initialize_month(record, "2024-01", NOW, now=NOW)
        operations.record_partial_payment(record, "2024-02", 30, now=NOW)
        operations.mark_paid(record, "2024-03", now=NOW)

        payments = record.payments
        assert set(payments) == set(record.rows)
        for month, row in record.rows.items():
            entry = payments[month]
            assert (entry.paid, entry.remaining, entry.fully_paid, entry.total_due) == (
                row.paid,
                row.remaining,
                row.fully_paid,
                row.total_due,
            )

    def test_payment_on_earlier_month_updates_opened_later_month(self, record):
        operations.initialize_month(record, "2024-03", NOW, now=NOW)
        operations.initialize_month(record, "2024-04", LATER, now=LATER)

        operations.record_partial_payment(record, "2024-03", 40, now=LATER)

        april = record.rows["2024-04"]
        assert april.previous_balance == Decimal("60")
        assert april.total_due == Decimal("160")
        assert april.remaining == Decimal("160")

    def test_settling_earlier_month_clears_carry_over_chain(self, record):
        for month in ("2024-03", "2024-04", "2024-05"):
            operations.initialize_month(record, month, NOW, now=NOW)
        assert record.rows["2024-05"].total_due == Decimal("300")

        operations.record_payment(record, "2024-03", True, now=NOW)

        assert record.rows["2024-04"].total_due == Decimal("100")
        assert record.rows["2024-05"].total_due == Decimal("200")
        assert_row_invariants(record)

    def test_carry_forward_keeps_later_payments(self, record):
        operations.initialize_month(record, "2024-03", NOW, now=NOW)
        operations.record_partial_payment(record, "2024-04", 50, now=NOW)

        operations.mark_paid(record, "2024-03", now=NOW)

        april = record.rows["2024-04"]
        assert april.paid == Decimal("50")
        assert april.total_due == Decimal("100")
        assert april.remaining == Decimal("50")

    def test_carry_forward_stops_at_first_gap(self, record):
        operations.initialize_month(record, "2024-03", NOW, now=NOW)
        operations.initialize_month(record, "2024-05", NOW, now=NOW)
        may_before = copy.deepcopy(record.rows["2024-05"])

        operations.record_partial_payment(record, "2024-03", 10, now=NOW)

        assert record.rows["2024-05"] == may_before
