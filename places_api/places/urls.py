"""
URL configuration for places app API endpoints.
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import PlaceViewSet

router = DefaultRouter()
router.register(r"places", PlaceViewSet, basename="place")

app_name = "places"

urlpatterns = [
    path("", include(router.urls)),
]
