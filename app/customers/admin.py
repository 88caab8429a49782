"""
Django admin configuration for customers and their ledger rows.

Ledger rows are read-only here: they are written through the ledger
operations only.
"""

from django.contrib import admin

from customers.models import Customer, MonthlyPayment


class MonthlyPaymentInline(admin.TabularInline):
    model = MonthlyPayment
    extra = 0
    can_delete = False
    fields = [
        "month",
        "monthly_fee",
        "previous_balance",
        "total_due",
        "paid",
        "remaining",
        "fully_paid",
        "paid_date",
        "payment_method",
    ]
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = ["full_name", "phone_number", "village", "zone", "monthly_fee", "status"]
    list_filter = ["status", "village", "zone"]
    search_fields = ["full_name", "phone_number", "email"]
    inlines = [MonthlyPaymentInline]
