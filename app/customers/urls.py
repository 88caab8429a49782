"""
URL configuration for customers app.

Customers:
    GET/POST /customers/                          - List / create customers
    GET/PUT/PATCH/DELETE /customers/{id}/         - Customer detail
    GET /customers/stats/summary/                 - Summary statistics

Customers - Ledger:
    POST /customers/{id}/monthly-payment/         - Initialize a period
    PATCH /customers/{id}/payment/                - Record payment
    POST /customers/{id}/partial-payment/         - Record installment
    PATCH /customers/payments/mark-all-paid/      - Bulk mark paid
"""

from rest_framework.routers import SimpleRouter

from customers.views import CustomerViewSet

app_name = "customers"

router = SimpleRouter()
router.register("customers", CustomerViewSet, basename="customer")

urlpatterns = router.urls
