"""
Django admin configuration for villages and zones.
"""

from django.contrib import admin

from locations.models import Village, Zone


@admin.register(Village)
class VillageAdmin(admin.ModelAdmin):
    list_display = ["name", "code", "location", "monthly_fee", "status", "created_at"]
    list_filter = ["status"]
    search_fields = ["name", "code", "location"]


@admin.register(Zone)
class ZoneAdmin(admin.ModelAdmin):
    list_display = ["zone_number", "name", "code", "village", "status"]
    list_filter = ["status", "village"]
    search_fields = ["name", "code", "supervisor"]
    autocomplete_fields = ["village"]
