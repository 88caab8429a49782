"""
ViewSet for customers and their billing ledger.

URL Structure:
    /api/v1/customers/                            GET, POST
    /api/v1/customers/{id}/                       GET, PUT, PATCH, DELETE
    /api/v1/customers/stats/summary/              GET
    /api/v1/customers/{id}/monthly-payment/       POST
    /api/v1/customers/{id}/payment/               PATCH
    /api/v1/customers/{id}/partial-payment/       POST
    /api/v1/customers/payments/mark-all-paid/     PATCH

Design Decisions:
    - Customers live behind a CustomerRepository, so this is a plain
      ViewSet rather than a ModelViewSet
    - The repository is injectable (`repository` attribute); it defaults
      to the backend configured in settings
    - All operations go through CustomerService / LedgerService and
      answer with the {success, data, message} envelope
    - PUT behaves like PATCH: only the fields sent are changed
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiResponse, extend_schema, extend_schema_view
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from customers.repositories import get_customer_repository
from customers.serializers import (
    BulkPaymentResultSerializer,
    CustomerSerializer,
    CustomerStatsSerializer,
    CustomerWriteSerializer,
    MarkAllPaidSerializer,
    MonthlyPaymentInitSerializer,
    PartialPaymentSerializer,
    PaymentSerializer,
    location_summaries,
)
from customers.services import CustomerService, LedgerService, status_for_failure

TAGS = ["Customers"]
LEDGER_TAGS = ["Customers - Ledger"]


@extend_schema_view(
    list=extend_schema(
        operation_id="list_customers",
        summary="List customers",
        tags=TAGS,
        responses=CustomerSerializer(many=True),
    ),
    create=extend_schema(
        operation_id="create_customer",
        summary="Create customer",
        tags=TAGS,
        request=CustomerWriteSerializer,
        responses={201: CustomerSerializer},
    ),
    retrieve=extend_schema(
        operation_id="get_customer",
        summary="Get customer",
        tags=TAGS,
        responses=CustomerSerializer,
    ),
    update=extend_schema(
        operation_id="replace_customer",
        summary="Update customer",
        tags=TAGS,
        request=CustomerWriteSerializer,
        responses=CustomerSerializer,
    ),
    partial_update=extend_schema(
        operation_id="update_customer",
        summary="Update customer",
        tags=TAGS,
        request=CustomerWriteSerializer,
        responses=CustomerSerializer,
    ),
    destroy=extend_schema(
        operation_id="delete_customer",
        summary="Delete customer",
        tags=TAGS,
        responses={200: OpenApiResponse(description="Customer deleted")},
    ),
)
class CustomerViewSet(viewsets.ViewSet):
    """
    ViewSet for customers.

    list:
        All customers with their ledger (optionally ?status=active).

    create:
        Register a customer. `payments` may carry legacy period-map entries.

    monthly_payment:
        Open or refresh a period's ledger row. Body: {month, date}.

    payment:
        Set what was paid for a period. Body: {month, paid, paidDate?, method?};
        `paid` is true (whole total due), false, or an amount.

    partial_payment:
        Add an installment. Body: {month, amount, paidDate?, method?}.

    mark_all_paid:
        Mark every active customer fully paid. Body: {month}.
    """

    permission_classes = [IsAuthenticated]
    repository = None

    def get_repository(self):
        return self.repository or get_customer_repository()

    def _respond(
        self,
        result,
        success_status=status.HTTP_200_OK,
        serializer_class=CustomerSerializer,
        many=False,
    ):
        if not result.success:
            return Response(result.to_response(), status=status_for_failure(result))
        context = {}
        if serializer_class is CustomerSerializer:
            context = location_summaries(result.data if many else [result.data])
        data = serializer_class(result.data, many=many, context=context).data
        return Response(result.to_response(data), status=success_status)

    # =========================================================================
    # CRUD
    # =========================================================================

    def list(self, request):
        result = CustomerService.list_customers(
            self.get_repository(),
            status=request.query_params.get("status") or None,
        )
        return self._respond(result, many=True)

    def create(self, request):
        serializer = CustomerWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = CustomerService.create_customer(
            self.get_repository(), serializer.validated_data
        )
        return self._respond(result, success_status=status.HTTP_201_CREATED)

    def retrieve(self, request, pk=None):
        result = CustomerService.get_customer(self.get_repository(), pk)
        return self._respond(result)

    def update(self, request, pk=None):
        serializer = CustomerWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        result = CustomerService.update_customer(
            self.get_repository(), pk, serializer.validated_data
        )
        return self._respond(result)

    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk)

    def destroy(self, request, pk=None):
        result = CustomerService.delete_customer(self.get_repository(), pk)
        if not result.success:
            return Response(result.to_response(), status=status_for_failure(result))
        return Response({"success": True, "message": result.message})

    @extend_schema(
        operation_id="customer_stats_summary",
        summary="Customer summary statistics",
        tags=TAGS,
        responses=CustomerStatsSerializer,
    )
    @action(detail=False, methods=["get"], url_path="stats/summary", url_name="stats-summary")
    def stats_summary(self, request):
        result = CustomerService.summary_stats(self.get_repository())
        return self._respond(result, serializer_class=CustomerStatsSerializer)

    # =========================================================================
    # Ledger
    # =========================================================================

    @extend_schema(
        operation_id="initialize_monthly_payment",
        summary="Initialize monthly payment",
        tags=LEDGER_TAGS,
        request=MonthlyPaymentInitSerializer,
        responses=CustomerSerializer,
    )
    @action(detail=True, methods=["post"], url_path="monthly-payment", url_name="monthly-payment")
    def monthly_payment(self, request, pk=None):
        serializer = MonthlyPaymentInitSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        result = LedgerService.initialize_month(
            self.get_repository(),
            pk,
            month=data.get("month"),
            date=data.get("date"),
        )
        return self._respond(result)

    @extend_schema(
        operation_id="record_payment",
        summary="Record payment",
        tags=LEDGER_TAGS,
        request=PaymentSerializer,
        responses=CustomerSerializer,
    )
    @action(detail=True, methods=["patch"], url_path="payment", url_name="payment")
    def payment(self, request, pk=None):
        serializer = PaymentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        result = LedgerService.record_payment(
            self.get_repository(),
            pk,
            month=data.get("month"),
            paid=data.get("paid"),
            paid_date=data.get("paid_date"),
            method=data.get("method"),
        )
        return self._respond(result)

    @extend_schema(
        operation_id="record_partial_payment",
        summary="Record partial payment",
        tags=LEDGER_TAGS,
        request=PartialPaymentSerializer,
        responses=CustomerSerializer,
    )
    @action(detail=True, methods=["post"], url_path="partial-payment", url_name="partial-payment")
    def partial_payment(self, request, pk=None):
        serializer = PartialPaymentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        result = LedgerService.record_partial_payment(
            self.get_repository(),
            pk,
            month=data.get("month"),
            amount=data.get("amount"),
            paid_date=data.get("paid_date"),
            method=data.get("method"),
        )
        return self._respond(result)

    @extend_schema(
        operation_id="mark_all_paid",
        summary="Mark all active customers paid",
        tags=LEDGER_TAGS,
        request=MarkAllPaidSerializer,
        responses=BulkPaymentResultSerializer,
    )
    @action(
        detail=False,
        methods=["patch"],
        url_path="payments/mark-all-paid",
        url_name="mark-all-paid",
    )
    def mark_all_paid(self, request):
        serializer = MarkAllPaidSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = LedgerService.mark_all_paid(
            self.get_repository(),
            month=serializer.validated_data.get("month"),
        )
        return self._respond(result, serializer_class=BulkPaymentResultSerializer)
