"""
Customer repositories: storage of CustomerRecord aggregates.

Exports:
    CustomerRepository: Abstract interface
    DjangoCustomerRepository: Database-backed implementation
    InMemoryCustomerRepository: Process-local implementation
    get_customer_repository: Backend selected by settings
    get_memory_repository: Shared process-wide in-memory repository
"""

from customers.repositories.base import CustomerRepository
from customers.repositories.factory import get_customer_repository, get_memory_repository
from customers.repositories.memory import InMemoryCustomerRepository
from customers.repositories.orm import DjangoCustomerRepository

__all__ = [
    "CustomerRepository",
    "DjangoCustomerRepository",
    "InMemoryCustomerRepository",
    "get_customer_repository",
    "get_memory_repository",
]
