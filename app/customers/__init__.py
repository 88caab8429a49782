"""
Customers - Customer registry and monthly billing ledger.

Public API:
    Ledger (customers.ledger):
        CustomerRecord, LedgerRow, Settle and the ledger operations

    Repositories (customers.repositories):
        CustomerRepository - Storage abstraction for customer records
        DjangoCustomerRepository - Backed by Customer / MonthlyPayment tables
        InMemoryCustomerRepository - Process-local store for tests and tools
        get_customer_repository - Backend selected by settings

    Services (customers.services):
        CustomerService - CRUD and summary statistics
        LedgerService - Month initialization and payment recording

    Rollover (customers.rollover):
        MonthlyRolloverJob - Opens the current period for active customers

Usage:
    from customers.repositories import get_customer_repository
    from customers.services import LedgerService

    repository = get_customer_repository()
    result = LedgerService.record_partial_payment(
        repository, customer_id, month="2024-03", amount=40
    )
"""
