"""
WSGI config for places_api project.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "places_api.settings.local")

application = get_wsgi_application()
