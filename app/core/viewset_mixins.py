"""
ViewSet mixins for common DRF functionality.

This module provides generic, non-domain-specific mixins for viewsets:
- EnvelopeResponseMixin: Wrap successful responses in the API envelope

Usage:
    from core.viewset_mixins import EnvelopeResponseMixin

    class VillageViewSet(EnvelopeResponseMixin, viewsets.ModelViewSet):
        queryset = Village.objects.all()
        serializer_class = VillageSerializer
        envelope_messages = {"create": "Village created successfully"}

Note:
    Error responses are shaped by core.exception_handler and pass
    through this mixin untouched.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from rest_framework import status

if TYPE_CHECKING:
    from typing import Any

    from rest_framework.request import Request
    from rest_framework.response import Response

logger = logging.getLogger(__name__)


class EnvelopeResponseMixin:
    """
    Wrap successful viewset responses as {success, data, message}.

    Subclasses may set `envelope_messages`, a mapping of action name to
    the message returned with that action's responses.

    A 204 from destroy becomes a 200 carrying only success and message,
    so every endpoint answers with a JSON body.
    """

    envelope_messages: dict[str, str] = {}

    def get_envelope_message(self) -> str:
        return self.envelope_messages.get(getattr(self, "action", None), "")

    def finalize_response(
        self, request: Request, response: Response, *args: Any, **kwargs: Any
    ) -> Response:
        if response.status_code < 400 and not self._is_enveloped(response.data):
            if response.status_code == status.HTTP_204_NO_CONTENT:
                response.status_code = status.HTTP_200_OK
                response.data = {"success": True, "message": self.get_envelope_message()}
            else:
                response.data = {
                    "success": True,
                    "data": response.data,
                    "message": self.get_envelope_message(),
                }
        return super().finalize_response(request, response, *args, **kwargs)

    @staticmethod
    def _is_enveloped(data: Any) -> bool:
        return isinstance(data, dict) and "success" in data
