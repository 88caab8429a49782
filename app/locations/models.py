"""
Village and Zone models.

Plain reference data for the collection service: a village has a default
monthly fee, zones split villages into collection rounds.
"""

from __future__ import annotations

from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models

from core.model_mixins import UUIDPrimaryKeyMixin
from core.models import BaseModel


class LocationStatus(models.TextChoices):
    ACTIVE = "active", "Active"
    INACTIVE = "inactive", "Inactive"


class Village(UUIDPrimaryKeyMixin, BaseModel):
    """
    A village served by the collection trucks.

    Fields:
        name: Unique village name
        code: Unique short code, stored uppercase
        location: Free-text location description
        monthly_fee: Default fee for customers in this village
        status: active / inactive
    """

    name = models.CharField(max_length=200, unique=True)
    code = models.CharField(max_length=20, unique=True)
    location = models.CharField(max_length=255)
    monthly_fee = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0"),
        validators=[MinValueValidator(Decimal("0"))],
    )
    status = models.CharField(
        max_length=20,
        choices=LocationStatus.choices,
        default=LocationStatus.ACTIVE,
    )
    description = models.TextField(blank=True, default="")

    class Meta(BaseModel.Meta):
        ordering = ["name"]

    def save(self, *args, **kwargs):
        self.name = self.name.strip()
        self.code = self.code.strip().upper()
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.name} ({self.code})"


class Zone(UUIDPrimaryKeyMixin, BaseModel):
    """
    A collection zone, optionally attached to a village.

    Fields:
        name: Zone name
        zone_number: Unique zone number
        code: Unique short code
        village: Village the zone belongs to (optional)
        supervisor / contact_number / notes / description: Free text
        status: active / inactive
    """

    name = models.CharField(max_length=200)
    zone_number = models.PositiveIntegerField(unique=True)
    code = models.CharField(max_length=20, unique=True)
    village = models.ForeignKey(
        Village,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="zones",
    )
    description = models.TextField(blank=True, default="")
    supervisor = models.CharField(max_length=200, blank=True, default="")
    contact_number = models.CharField(max_length=50, blank=True, default="")
    notes = models.TextField(blank=True, default="")
    status = models.CharField(
        max_length=20,
        choices=LocationStatus.choices,
        default=LocationStatus.ACTIVE,
    )

    class Meta(BaseModel.Meta):
        ordering = ["zone_number"]

    def __str__(self) -> str:
        return f"Zone {self.zone_number} - {self.name}"
