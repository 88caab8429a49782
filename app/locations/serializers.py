"""
DRF serializers for villages and zones.

Field names are camelCase on the wire, matching the rest of the API.
"""

from __future__ import annotations

from decimal import Decimal

from rest_framework import serializers

from locations.models import Village, Zone


class VillageSerializer(serializers.ModelSerializer):
    """Village payload: {id, name, code, location, monthlyFee, status, description, ...}."""

    monthlyFee = serializers.DecimalField(
        source="monthly_fee",
        max_digits=12,
        decimal_places=2,
        min_value=Decimal("0"),
        required=False,
    )
    totalCustomers = serializers.SerializerMethodField()
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Village
        fields = [
            "id",
            "name",
            "code",
            "location",
            "monthlyFee",
            "totalCustomers",
            "status",
            "description",
            "createdAt",
            "updatedAt",
        ]
        read_only_fields = ["id"]

    def get_totalCustomers(self, obj: Village) -> int:
        return obj.customers.count()


class ZoneSerializer(serializers.ModelSerializer):
    """Zone payload, with the owning village as `villageId`."""

    zoneNumber = serializers.IntegerField(source="zone_number", min_value=1)
    villageId = serializers.PrimaryKeyRelatedField(
        source="village",
        queryset=Village.objects.all(),
        required=False,
        allow_null=True,
    )
    contactNumber = serializers.CharField(
        source="contact_number", required=False, allow_blank=True
    )
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Zone
        fields = [
            "id",
            "name",
            "zoneNumber",
            "code",
            "villageId",
            "description",
            "supervisor",
            "contactNumber",
            "notes",
            "status",
            "createdAt",
            "updatedAt",
        ]
        read_only_fields = ["id"]
