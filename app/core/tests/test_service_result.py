"""
Tests for ServiceResult and BaseService helpers.

These tests verify that:
- Results render into the {success, data, message, error} envelope
- Exceptions keep their own code and message
- validate_required reports every missing field in one message
"""

from __future__ import annotations

from core.exceptions import NotFoundError, PersistenceError
from core.services import BaseService, ServiceResult


class TestServiceResult:
    def test_success_envelope(self):
        result = ServiceResult.success_with({"id": 1}, "Done")

        assert result.to_response() == {"success": True, "data": {"id": 1}, "message": "Done"}

    def test_serialized_data_replaces_raw_data(self):
        result = ServiceResult.success(object())

        assert result.to_response({"id": 1})["data"] == {"id": 1}

    def test_failure_envelope(self):
        result = ServiceResult.failure("Month is required", error_code="VALIDATION_ERROR")

        assert result.to_response() == {
            "success": False,
            "message": "Month is required",
            "error": "Month is required",
            "error_code": "VALIDATION_ERROR",
        }
        assert not result

    def test_from_application_error(self):
        result = ServiceResult.from_exception(
            NotFoundError("Customer not found", error_code="CUSTOMER_NOT_FOUND")
        )

        assert result.error == "Customer not found"
        assert result.error_code == "CUSTOMER_NOT_FOUND"

    def test_from_plain_exception(self):
        result = ServiceResult.from_exception(RuntimeError("boom"))

        assert result.error == "boom"
        assert result.error_code == "RUNTIMEERROR"


class TestBaseService:
    def test_validate_required_passes(self):
        assert BaseService.validate_required(month="2024-03", date="2024-03-01") is None

    def test_validate_required_single_field(self):
        result = BaseService.validate_required(month="  ")

        assert result.error == "Month is required"
        assert result.errors == {"month": ["This field is required."]}

    def test_validate_required_several_fields(self):
        result = BaseService.validate_required(month=None, date=None)

        assert result.error == "Month and date are required"

    def test_zero_is_not_missing(self):
        assert BaseService.validate_required(paid=0) is None

    def test_handle_exception_uses_context_as_message(self):
        result = BaseService.handle_exception(
            PersistenceError("Failed to save customer"), "Error updating payment status"
        )

        assert result.message == "Error updating payment status"
        assert result.error == "Failed to save customer"
        assert result.error_code == "PERSISTENCE_ERROR"
