"""
ASGI entry point for the arena API.
"""

from __future__ import annotations

import os

import structlog
from django.core.asgi import get_asgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings.local")

application = get_asgi_application()

structlog.get_logger(__name__).info("asgi application ready", settings=os.environ["DJANGO_SETTINGS_MODULE"])
