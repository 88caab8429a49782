"""
Customers app configuration.

This app provides the customer registry and the monthly billing ledger:
- Customer CRUD and summary statistics
- Per-period ledger rows with balance carry-over
- Monthly rollover scheduled through celery-beat
"""

from django.apps import AppConfig


class CustomersConfig(AppConfig):
    """Configuration for the customers application."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "customers"
    verbose_name = "Customers"

    def ready(self):
        # Connect signal handlers and the worker startup hook
        from customers import signals, tasks  # noqa: F401
