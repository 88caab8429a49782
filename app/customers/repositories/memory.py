"""
Process-local customer repository.

Records are deep-copied on the way in and out, so callers mutating a
loaded record never change the stored one until they call `save`,
matching the database-backed repository.
"""

from __future__ import annotations

import copy
import threading
import uuid
from typing import TYPE_CHECKING

from django.utils import timezone

from customers.ledger.exceptions import CustomerNotFoundError

from .base import CustomerRepository

if TYPE_CHECKING:
    from collections.abc import Iterator
    from typing import Any

    from customers.ledger.types import CustomerRecord


def _key(customer_id: Any) -> uuid.UUID | None:
    if isinstance(customer_id, uuid.UUID):
        return customer_id
    try:
        return uuid.UUID(str(customer_id))
    except ValueError:
        return None


class InMemoryCustomerRepository(CustomerRepository):
    """Dict-backed repository for tests and database-less deployments."""

    def __init__(self, records: list[CustomerRecord] | None = None):
        self._records: dict[uuid.UUID, CustomerRecord] = {}
        self._lock = threading.Lock()
        for record in records or []:
            self.add(record)

    def get(self, customer_id: Any) -> CustomerRecord:
        record = self._records.get(_key(customer_id))
        if record is None:
            raise CustomerNotFoundError(customer_id)
        return copy.deepcopy(record)

    def list(self, status: str | None = None) -> list[CustomerRecord]:
        records = [
            copy.deepcopy(record)
            for record in self._records.values()
            if status is None or record.status == status
        ]
        return sorted(records, key=lambda r: r.created_at, reverse=True)

    def iter_active(self, chunk_size: int | None = None) -> Iterator[CustomerRecord]:
        for customer_id in list(self._records):
            record = self._records.get(customer_id)
            if record is not None and record.is_active:
                yield copy.deepcopy(record)

    def add(self, record: CustomerRecord) -> CustomerRecord:
        now = timezone.now()
        stored = copy.deepcopy(record)
        stored.id = stored.id or uuid.uuid4()
        stored.created_at = stored.created_at or now
        stored.updated_at = now
        with self._lock:
            self._records[stored.id] = stored
        return copy.deepcopy(stored)

    def save(self, record: CustomerRecord) -> CustomerRecord:
        key = _key(record.id)
        with self._lock:
            if key not in self._records:
                raise CustomerNotFoundError(record.id)
            stored = copy.deepcopy(record)
            stored.updated_at = timezone.now()
            self._records[key] = stored
        return copy.deepcopy(stored)

    def delete(self, customer_id: Any) -> None:
        with self._lock:
            if self._records.pop(_key(customer_id), None) is None:
                raise CustomerNotFoundError(customer_id)

    def count(self, status: str | None = None) -> int:
        return sum(
            1
            for record in self._records.values()
            if status is None or record.status == status
        )

    def clear(self) -> None:
        with self._lock:
            self._records.clear()
