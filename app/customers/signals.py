"""
Django signals for customers app.

Handlers:
    fill_village_from_zone: A customer placed in a zone without an explicit
        village inherits the zone's village.

Usage:
    Signals are automatically connected when app is ready.
    See apps.py for registration.
"""

from __future__ import annotations

import logging

from django.db.models.signals import pre_save
from django.dispatch import receiver

from customers.models import Customer
from locations.models import Zone

logger = logging.getLogger(__name__)


@receiver(pre_save, sender=Customer)
def fill_village_from_zone(sender, instance: Customer, **kwargs) -> None:
    if instance.village_id is not None or instance.zone_id is None:
        return

    village_id = (
        Zone.objects.filter(pk=instance.zone_id)
        .values_list("village_id", flat=True)
        .first()
    )
    if village_id is not None:
        instance.village_id = village_id
        logger.debug(
            "Customer village filled from zone",
            extra={"customer_id": str(instance.pk), "zone_id": str(instance.zone_id)},
        )
