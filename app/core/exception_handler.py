"""
DRF exception handler rendering every API error in the response envelope.

Every endpoint answers with {success, data?, message, error?}. Views build
success envelopes themselves; this handler covers everything raised instead:
DRF's own exceptions (validation, authentication, 404) and application
errors from core.exceptions that escape a view.

Configured in settings:
    REST_FRAMEWORK = {
        "EXCEPTION_HANDLER": "core.exception_handler.envelope_exception_handler",
    }
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from core.exceptions import BaseApplicationError, NotFoundError, ValidationError

if TYPE_CHECKING:
    from typing import Any

logger = logging.getLogger(__name__)

APPLICATION_ERROR_STATUS = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    NotFoundError: status.HTTP_404_NOT_FOUND,
}


def _status_for(exc: BaseApplicationError) -> int:
    for error_class, status_code in APPLICATION_ERROR_STATUS.items():
        if isinstance(exc, error_class):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def _flatten_detail(detail: Any) -> str:
    """Reduce a DRF error detail (str, list or dict) to one readable line."""
    if isinstance(detail, dict):
        parts = []
        for field_name, value in detail.items():
            text = _flatten_detail(value)
            parts.append(text if field_name in ("detail", "non_field_errors") else f"{field_name}: {text}")
        return "; ".join(parts)
    if isinstance(detail, (list, tuple)):
        return ", ".join(_flatten_detail(item) for item in detail)
    return str(detail)


def envelope_exception_handler(exc: Exception, context: dict) -> Response | None:
    """
    Wrap DRF's default handler and reshape its output into the envelope.

    Returns None for exceptions DRF doesn't know about, letting Django
    produce a 500 as usual.
    """
    if isinstance(exc, BaseApplicationError):
        status_code = _status_for(exc)
        if status_code >= 500:
            logger.error("Unhandled application error: %s", exc, exc_info=exc)
        body = {"success": False, "message": exc.message, **exc.to_dict()}
        return Response(body, status=status_code)

    response = exception_handler(exc, context)
    if response is None:
        return None

    detail = response.data
    body: dict[str, Any] = {
        "success": False,
        "message": _flatten_detail(detail),
        "error": _flatten_detail(detail),
    }
    if isinstance(detail, dict) and set(detail) != {"detail"}:
        body["errors"] = detail
    response.data = body
    return response
