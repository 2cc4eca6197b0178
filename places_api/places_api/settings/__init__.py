"""
Settings package for places_api project.

Pick an environment with DJANGO_SETTINGS_MODULE:
places_api.settings.local (default for manage.py and wsgi),
places_api.settings.production or places_api.settings.test.
"""
