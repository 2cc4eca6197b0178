"""
Admin configuration for the places app.
"""

import logging
from typing import Any

from django.contrib import admin
from django.db import transaction
from django.db.models import QuerySet
from django.http import HttpRequest

from .models import LANGUAGE_FIELDS, MinPlace, Place

logger = logging.getLogger(__name__)


@admin.register(Place)
class PlaceAdmin(admin.ModelAdmin):
    """
    Admin interface for Place model.

    Search functionality:
    - Code: Use exact code (e.g., "P001")
    - Name: Use partial text search (e.g., "tower")

    Filters available:
    - Country, Level, Tag

    Saving or deleting here keeps the min_places row in sync.
    """

    list_display = ("code", "name", "country", "province", "tag", "level")
    search_fields = ("=code", "name")
    list_filter = ("country", "level", "tag")
    ordering = ("code",)
    list_per_page = 50
    list_display_links = ("code", "name")

    search_help_text = (
        "Search by: Code (exact match) or Name (partial match). "
        "Examples: 'P001' for code, 'tower' for name."
    )

    preserve_filters = True
    show_full_result_count = True

    fieldsets = (
        (
            "Basic Information",
            {"fields": ("code", "name", "sources", "level", "tag")},
        ),
        (
            "Location",
            {"fields": ("coordinates", "province", "country")},
        ),
        ("Contact", {"fields": ("image", "web", "phone")}),
        (
            "Translations",
            {"fields": LANGUAGE_FIELDS, "classes": ("collapse",)},
        ),
    )

    def get_readonly_fields(self, request: HttpRequest, obj: Any = None):
        # The code is the shared key of both tables
        if obj is not None:
            return ("code",)
        return ()

    def save_model(
        self, request: HttpRequest, obj: Place, form: Any, change: bool
    ) -> None:
        """
        Save the place and refresh its min_places projection.
        """
        with transaction.atomic():
            super().save_model(request, obj, form, change)
            obj.to_min_place().save()

        if change:
            logger.info(f"Updated place {obj.code} ({obj.name}) via admin interface")
        else:
            logger.info(f"Created new place {obj.code} ({obj.name}) via admin interface")

    def delete_model(self, request: HttpRequest, obj: Place) -> None:
        with transaction.atomic():
            MinPlace.objects.filter(code=obj.code).delete()
            super().delete_model(request, obj)
        logger.info(f"Deleted place {obj.code} via admin interface")

    def delete_queryset(self, request: HttpRequest, queryset: QuerySet[Place]) -> None:
        codes = list(queryset.values_list("code", flat=True))
        with transaction.atomic():
            MinPlace.objects.filter(code__in=codes).delete()
            super().delete_queryset(request, queryset)
        logger.info(f"Deleted {len(codes)} places via admin interface")


@admin.register(MinPlace)
class MinPlaceAdmin(admin.ModelAdmin):
    """
    Read-only view of the min_places projection.

    Rows are written only alongside their Place.
    """

    list_display = ("code", "name", "country", "province", "tag", "level")
    search_fields = ("=code", "name")
    list_filter = ("country", "level", "tag")
    ordering = ("code",)
    list_per_page = 50

    def has_add_permission(self, request: HttpRequest) -> bool:
        return False

    def has_change_permission(self, request: HttpRequest, obj: Any = None) -> bool:
        return False

    def has_delete_permission(self, request: HttpRequest, obj: Any = None) -> bool:
        return False
