"""
Factory function for customer repository backend selection.

The backend is chosen by the CUSTOMER_REPOSITORY_BACKEND setting:
    "database" - DjangoCustomerRepository (default)
    "memory"   - one process-wide InMemoryCustomerRepository
"""

from __future__ import annotations

from functools import lru_cache
from typing import TYPE_CHECKING

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

if TYPE_CHECKING:
    from customers.repositories.base import CustomerRepository
    from customers.repositories.memory import InMemoryCustomerRepository


@lru_cache(maxsize=1)
def get_memory_repository() -> InMemoryCustomerRepository:
    from customers.repositories.memory import InMemoryCustomerRepository

    return InMemoryCustomerRepository()


def get_customer_repository() -> CustomerRepository:
    """
    Get the customer repository for the configured backend.

    Usage:
        repository = get_customer_repository()
        record = repository.get(customer_id)
    """
    backend = settings.CUSTOMER_REPOSITORY_BACKEND
    if backend == "memory":
        return get_memory_repository()
    if backend == "database":
        from customers.repositories.orm import DjangoCustomerRepository

        return DjangoCustomerRepository()
    raise ImproperlyConfigured(
        f"Unknown CUSTOMER_REPOSITORY_BACKEND {backend!r} (expected 'database' or 'memory')"
    )
