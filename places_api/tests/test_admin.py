"""
Tests for Django admin functionality.
"""

from django.contrib.admin.sites import AdminSite
from django.contrib.auth import get_user_model
from django.test import RequestFactory, TestCase

from places.admin import MinPlaceAdmin, PlaceAdmin
from places.models import MinPlace, Place
from .factories import PlaceFactory

User = get_user_model()


class TestPlaceAdminSearchAndFilters(TestCase):
    """Test admin search and filter functionality."""

    def setUp(self):
        self.factory = RequestFactory()
        self.site = AdminSite()
        self.admin = PlaceAdmin(Place, self.site)

        PlaceFactory(code="FR01", name="Eiffel Tower", country="France", tag="landmark")
        PlaceFactory(code="FR02", name="Louvre", country="France", tag="museum")
        PlaceFactory(code="TR01", name="Galata Tower", country="Turkey", tag="landmark")

        self.superuser = User.objects.create_superuser(
            username="admin", email="admin@test.com", password="testpass123"
        )

    def changelist_queryset(self, query: str):
        request = self.factory.get(f"/admin/places/place/{query}")
        request.user = self.superuser
        changelist = self.admin.get_changelist_instance(request)
        return changelist.get_queryset(request)

    def test_search_by_exact_code(self):
        queryset = self.changelist_queryset("?q=FR01")

        self.assertEqual(list(queryset.values_list("code", flat=True)), ["FR01"])

    def test_search_code_is_not_partial(self):
        """Test that a code prefix does not match on its own."""
        self.assertEqual(self.changelist_queryset("?q=FR").count(), 0)

    def test_search_by_partial_name(self):
        queryset = self.changelist_queryset("?q=tower")

        self.assertEqual(
            sorted(queryset.values_list("code", flat=True)), ["FR01", "TR01"]
        )

    def test_country_filter(self):
        queryset = self.changelist_queryset("?country=France")

        self.assertEqual(queryset.count(), 2)
        for place in queryset:
            self.assertEqual(place.country, "France")

    def test_tag_filter(self):
        queryset = self.changelist_queryset("?tag=landmark")

        self.assertEqual(
            sorted(queryset.values_list("code", flat=True)), ["FR01", "TR01"]
        )

    def test_code_readonly_on_change(self):
        request = self.factory.get("/admin/places/place/FR01/change/")
        request.user = self.superuser

        self.assertEqual(self.admin.get_readonly_fields(request), ())
        self.assertEqual(
            self.admin.get_readonly_fields(request, Place.objects.get(code="FR01")),
            ("code",),
        )


class TestPlaceAdminSync(TestCase):
    """Test that admin writes keep min_places in sync."""

    def setUp(self):
        self.factory = RequestFactory()
        self.admin = PlaceAdmin(Place, AdminSite())
        self.superuser = User.objects.create_superuser(
            username="admin", email="admin@test.com", password="testpass123"
        )
        self.request = self.factory.post("/admin/places/place/")
        self.request.user = self.superuser

    def test_save_model_creates_min_place(self):
        place = PlaceFactory.build(code="NEW1", name="Fresh")

        self.admin.save_model(self.request, place, form=None, change=False)

        self.assertTrue(Place.objects.filter(code="NEW1").exists())
        self.assertEqual(MinPlace.objects.get(code="NEW1").name, "Fresh")

    def test_save_model_updates_min_place(self):
        place = PlaceFactory(code="FR01", name="Old")
        place.name = "New"
        place.level = 7

        self.admin.save_model(self.request, place, form=None, change=True)

        min_place = MinPlace.objects.get(code="FR01")
        self.assertEqual(min_place.name, "New")
        self.assertEqual(min_place.level, 7)

    def test_delete_model_removes_min_place(self):
        place = PlaceFactory(code="FR01")

        self.admin.delete_model(self.request, place)

        self.assertFalse(Place.objects.exists())
        self.assertFalse(MinPlace.objects.exists())

    def test_delete_queryset_removes_min_places(self):
        PlaceFactory(code="FR01")
        PlaceFactory(code="FR02")
        PlaceFactory(code="TR01")

        self.admin.delete_queryset(
            self.request, Place.objects.filter(code__startswith="FR")
        )

        self.assertEqual(list(MinPlace.objects.values_list("code", flat=True)), ["TR01"])
        self.assertEqual(Place.objects.count(), 1)


class TestMinPlaceAdmin(TestCase):
    def test_min_places_are_read_only(self):
        admin = MinPlaceAdmin(MinPlace, AdminSite())
        request = RequestFactory().get("/admin/places/minplace/")
        request.user = User.objects.create_superuser(
            username="admin", email="admin@test.com", password="testpass123"
        )

        self.assertFalse(admin.has_add_permission(request))
        self.assertFalse(admin.has_change_permission(request))
        self.assertFalse(admin.has_delete_permission(request))
