"""
URL configuration for locations app.

Locations - Villages:
    GET/POST /villages/                  - List / create villages
    GET/PUT/PATCH/DELETE /villages/{id}/ - Village detail

Locations - Zones:
    GET/POST /zones/                     - List / create zones
    GET/PUT/PATCH/DELETE /zones/{id}/    - Zone detail
"""

from rest_framework.routers import SimpleRouter

from locations.views import VillageViewSet, ZoneViewSet

app_name = "locations"

router = SimpleRouter()
router.register("villages", VillageViewSet, basename="village")
router.register("zones", ZoneViewSet, basename="zone")

urlpatterns = router.urls
