"""
Tests for the customer repositories.

Both backends must behave the same, so most tests run against each of
them through the parametrized `repository` fixture.
"""

import uuid
from datetime import datetime, timezone as dt_timezone
from decimal import Decimal

import pytest
from django.core.exceptions import ImproperlyConfigured
from django.db import DatabaseError

from core.exceptions import PersistenceError
from customers.ledger import operations
from customers.ledger.exceptions import CustomerNotFoundError
from customers.ledger.types import LegacyPayment
from customers.models import Customer, MonthlyPayment
from customers.repositories import (
    DjangoCustomerRepository,
    InMemoryCustomerRepository,
    get_customer_repository,
    get_memory_repository,
)
from customers.tests.factories import CustomerFactory, CustomerRecordFactory
from locations.tests.factories import ZoneFactory

NOW = datetime(2024, 3, 1, 9, 0, tzinfo=dt_timezone.utc)


@pytest.fixture(params=["database", "memory"])
def repository(request, db):
    if request.param == "database":
        return DjangoCustomerRepository()
    return InMemoryCustomerRepository()


def new_record(**kwargs):
    kwargs.setdefault("id", None)
    kwargs.setdefault("zone_id", None)
    return CustomerRecordFactory(**kwargs)


class TestCustomerRepository:
    def test_add_assigns_id_and_timestamps(self, repository):
        record = repository.add(new_record(full_name="Amina"))

        assert record.id is not None
        assert record.created_at is not None
        assert repository.get(record.id).full_name == "Amina"

    def test_get_unknown_id_raises_not_found(self, repository):
        with pytest.raises(CustomerNotFoundError):
            repository.get(uuid.uuid4())

    def test_get_malformed_id_raises_not_found(self, repository):
        with pytest.raises(CustomerNotFoundError):
            repository.get("not-a-uuid")

    def test_ledger_round_trip(self, repository):
        record = repository.add(new_record(monthly_fee=Decimal("100")))
        operations.initialize_month(record, "2024-02", NOW, now=NOW)
        operations.record_partial_payment(
            record, "2024-03", Decimal("40"), paid_date=NOW, method="card", now=NOW
        )
        repository.save(record)

        loaded = repository.get(record.id)

        assert list(loaded.rows) == ["2024-02", "2024-03"]
        row = loaded.rows["2024-03"]
        assert row.previous_balance == Decimal("100")
        assert row.total_due == Decimal("200")
        assert row.paid == Decimal("40")
        assert row.remaining == Decimal("160")
        assert row.fully_paid is False
        assert row.paid_date == NOW
        assert row.history.method == "card"
        assert row.history.amount == Decimal("200")
        assert loaded.rows["2024-02"].history is None

    def test_legacy_entries_round_trip(self, repository):
        record = new_record()
        record.legacy_payments["2023-12"] = LegacyPayment(
            paid=Decimal("20"), remaining=Decimal("80"), paid_date=NOW
        )

        loaded = repository.get(repository.add(record).id)

        entry = loaded.legacy_payments["2023-12"]
        assert entry.paid == Decimal("20")
        assert entry.remaining == Decimal("80")
        assert entry.paid_date == NOW

    def test_loaded_record_is_detached(self, repository):
        record = repository.add(new_record())
        loaded = repository.get(record.id)

        operations.initialize_month(loaded, "2024-03", NOW, now=NOW)

        assert repository.get(record.id).rows == {}

    def test_list_filters_by_status(self, repository):
        repository.add(new_record(status="active"))
        repository.add(new_record(status="inactive"))

        assert len(repository.list()) == 2
        assert [r.status for r in repository.list(status="inactive")] == ["inactive"]

    def test_iter_active_skips_inactive(self, repository):
        active = repository.add(new_record(status="active"))
        repository.add(new_record(status="suspended"))

        assert [r.id for r in repository.iter_active(chunk_size=1)] == [active.id]

    def test_count(self, repository):
        repository.add(new_record(status="active"))
        repository.add(new_record(status="active"))
        repository.add(new_record(status="inactive"))

        assert repository.count() == 3
        assert repository.count(status="active") == 2

    def test_delete(self, repository):
        record = repository.add(new_record())

        repository.delete(record.id)

        with pytest.raises(CustomerNotFoundError):
            repository.get(record.id)

    def test_delete_unknown_raises_not_found(self, repository):
        with pytest.raises(CustomerNotFoundError):
            repository.delete(uuid.uuid4())

    def test_save_deleted_customer_raises_not_found(self, repository):
        record = repository.add(new_record())
        repository.delete(record.id)

        with pytest.raises(CustomerNotFoundError):
            repository.save(record)


@pytest.mark.django_db
class TestDjangoCustomerRepository:
    def test_one_monthly_payment_row_per_period(self):
        repository = DjangoCustomerRepository()
        record = repository.add(new_record())
        operations.initialize_month(record, "2024-03", NOW, now=NOW)
        repository.save(record)
        operations.record_payment(record, "2024-03", True, now=NOW)
        repository.save(record)

        payments = MonthlyPayment.objects.filter(customer_id=record.id)
        assert payments.count() == 1
        assert payments.get().fully_paid is True

    def test_zone_fills_village(self):
        zone = ZoneFactory()
        repository = DjangoCustomerRepository()

        record = repository.add(new_record(zone_id=zone.id))

        assert record.village_id == zone.village_id
        assert Customer.objects.get(pk=record.id).village_id == zone.village_id

    def test_reads_customers_created_outside_repository(self):
        customer = CustomerFactory(monthly_fee=Decimal("75.00"))

        record = DjangoCustomerRepository().get(customer.id)

        assert record.monthly_fee == Decimal("75.00")
        assert record.rows == {}

    def test_database_error_becomes_persistence_error(self, mocker):
        repository = DjangoCustomerRepository()
        record = repository.add(new_record())
        mocker.patch.object(Customer, "save", side_effect=DatabaseError("disk full"))

        with pytest.raises(PersistenceError):
            repository.save(record)

    def test_amount_outside_money_column_becomes_persistence_error(self):
        repository = DjangoCustomerRepository()
        record = repository.add(new_record())
        operations.record_payment(record, "2024-03", True, now=NOW)
        record.rows["2024-03"].paid = Decimal("Infinity")

        with pytest.raises(PersistenceError):
            repository.save(record)

        assert not MonthlyPayment.objects.filter(customer_id=record.id).exists()


class TestRepositoryFactory:
    def test_database_backend(self, settings):
        settings.CUSTOMER_REPOSITORY_BACKEND = "database"

        assert isinstance(get_customer_repository(), DjangoCustomerRepository)

    def test_memory_backend_is_shared(self, settings):
        settings.CUSTOMER_REPOSITORY_BACKEND = "memory"

        assert get_customer_repository() is get_memory_repository()

    def test_unknown_backend(self, settings):
        settings.CUSTOMER_REPOSITORY_BACKEND = "mongo"

        with pytest.raises(ImproperlyConfigured):
            get_customer_repository()
