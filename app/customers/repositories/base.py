"""
Abstract base class for customer repositories.

A repository loads and stores whole CustomerRecord aggregates, ledger
rows included. Ledger operations never talk to storage; services load a
record, apply an operation, and hand the record back to `save`.

Saves are per-record with last-write-wins semantics: two writers racing
on the same customer do not see each other's changes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator
    from typing import Any

    from customers.ledger.types import CustomerRecord


class CustomerRepository(ABC):
    """
    Storage interface for customer records.

    Implementations:
        DjangoCustomerRepository - Customer / MonthlyPayment tables
        InMemoryCustomerRepository - Process-local dict
    """

    @abstractmethod
    def get(self, customer_id: Any) -> CustomerRecord:
        """
        Load one customer with its ledger.

        Raises:
            CustomerNotFoundError: If no customer has this id
        """

    @abstractmethod
    def list(self, status: str | None = None) -> list[CustomerRecord]:
        """Load every customer, optionally filtered by status."""

    @abstractmethod
    def iter_active(self, chunk_size: int | None = None) -> Iterator[CustomerRecord]:
        """
        Stream active customers without loading the whole collection.

        Args:
            chunk_size: Records fetched per round trip (backend default if None)
        """

    @abstractmethod
    def add(self, record: CustomerRecord) -> CustomerRecord:
        """Store a new customer and return it with id and timestamps set."""

    @abstractmethod
    def save(self, record: CustomerRecord) -> CustomerRecord:
        """
        Write back an existing customer and all of its ledger rows.

        Raises:
            CustomerNotFoundError: If the customer was deleted meanwhile
            PersistenceError: If the backend rejects the write
        """

    @abstractmethod
    def delete(self, customer_id: Any) -> None:
        """
        Remove a customer and its ledger.

        Raises:
            CustomerNotFoundError: If no customer has this id
        """

    @abstractmethod
    def count(self, status: str | None = None) -> int:
        """Number of customers, optionally filtered by status."""
