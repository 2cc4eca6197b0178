"""
Local development settings for places_api project.

Adds the debug toolbar and a development log file on top of base.
"""

import copy
import os

from .base import *  # noqa: F401, F403

DEBUG = True

ALLOWED_HOSTS = ["localhost", "127.0.0.1", "testserver"]

INSTALLED_APPS = [*INSTALLED_APPS, "debug_toolbar"]  # noqa: F405

MIDDLEWARE = [  # noqa: F405
    "debug_toolbar.middleware.DebugToolbarMiddleware",
    *MIDDLEWARE,  # noqa: F405
]

INTERNAL_IPS = ["127.0.0.1"]

DEBUG_TOOLBAR_CONFIG = {
    "SHOW_TOOLBAR_CALLBACK": lambda request: DEBUG,
}

LOGS_DIR = BASE_DIR / "logs"  # noqa: F405
os.makedirs(LOGS_DIR, exist_ok=True)

LOGGING = copy.deepcopy(LOGGING)  # noqa: F405
LOGGING["handlers"]["file"] = {
    "class": "logging.FileHandler",
    "filename": LOGS_DIR / "development.log",
    "formatter": "structured",
    "level": "DEBUG",
    "encoding": "utf-8",
}
LOGGING["loggers"]["places"]["handlers"] = ["console", "file"]
LOGGING["loggers"]["places"]["level"] = "DEBUG"
