"""
Tests for the per-environment settings modules.
"""

import importlib

from django.conf import settings
from django.test import SimpleTestCase

from places_api.settings import base


class TestEnvironmentSettings(SimpleTestCase):
    """Test that development-only apps stay out of other environments."""

    def test_active_settings_have_no_debug_toolbar(self):
        self.assertNotIn("debug_toolbar", settings.INSTALLED_APPS)
        self.assertFalse(settings.DEBUG)

    def test_test_and_production_settings_have_no_debug_toolbar(self):
        for name in ("places_api.settings.test", "places_api.settings.production"):
            with self.subTest(module=name):
                module = importlib.import_module(name)
                self.assertNotIn("debug_toolbar", module.INSTALLED_APPS)
                self.assertFalse(module.DEBUG)

    def test_production_keeps_base_renderers(self):
        """Test that production overrides do not leak back into base."""
        production = importlib.import_module("places_api.settings.production")

        self.assertEqual(
            production.REST_FRAMEWORK["DEFAULT_RENDERER_CLASSES"],
            ["rest_framework.renderers.JSONRenderer"],
        )
        self.assertIn(
            "rest_framework.renderers.BrowsableAPIRenderer",
            base.REST_FRAMEWORK["DEFAULT_RENDERER_CLASSES"],
        )
        self.assertNotIn("debug_toolbar", base.INSTALLED_APPS)
