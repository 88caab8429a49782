"""
ViewSets for villages and zones.

URL Structure:
    /api/v1/villages/        GET, POST
    /api/v1/villages/{id}/   GET, PUT, PATCH, DELETE
    /api/v1/zones/           GET, POST
    /api/v1/zones/{id}/      GET, PUT, PATCH, DELETE
"""

from __future__ import annotations

from drf_spectacular.utils import extend_schema, extend_schema_view
from rest_framework import viewsets
from rest_framework.permissions import IsAuthenticated

from core.viewset_mixins import EnvelopeResponseMixin
from locations.models import Village, Zone
from locations.serializers import VillageSerializer, ZoneSerializer


@extend_schema_view(
    list=extend_schema(summary="List villages", tags=["Locations - Villages"]),
    create=extend_schema(summary="Create village", tags=["Locations - Villages"]),
    retrieve=extend_schema(summary="Get village", tags=["Locations - Villages"]),
    update=extend_schema(summary="Replace village", tags=["Locations - Villages"]),
    partial_update=extend_schema(summary="Update village", tags=["Locations - Villages"]),
    destroy=extend_schema(summary="Delete village", tags=["Locations - Villages"]),
)
class VillageViewSet(EnvelopeResponseMixin, viewsets.ModelViewSet):
    """CRUD for villages."""

    permission_classes = [IsAuthenticated]
    queryset = Village.objects.all()
    serializer_class = VillageSerializer
    envelope_messages = {
        "list": "Villages fetched successfully",
        "create": "Village created successfully",
        "update": "Village updated successfully",
        "partial_update": "Village updated successfully",
        "destroy": "Village deleted successfully",
    }


@extend_schema_view(
    list=extend_schema(summary="List zones", tags=["Locations - Zones"]),
    create=extend_schema(summary="Create zone", tags=["Locations - Zones"]),
    retrieve=extend_schema(summary="Get zone", tags=["Locations - Zones"]),
    update=extend_schema(summary="Replace zone", tags=["Locations - Zones"]),
    partial_update=extend_schema(summary="Update zone", tags=["Locations - Zones"]),
    destroy=extend_schema(summary="Delete zone", tags=["Locations - Zones"]),
)
class ZoneViewSet(EnvelopeResponseMixin, viewsets.ModelViewSet):
    """CRUD for zones."""

    permission_classes = [IsAuthenticated]
    queryset = Zone.objects.select_related("village")
    serializer_class = ZoneSerializer
    envelope_messages = {
        "list": "Zones fetched successfully",
        "create": "Zone created successfully",
        "update": "Zone updated successfully",
        "partial_update": "Zone updated successfully",
        "destroy": "Zone deleted successfully",
    }
