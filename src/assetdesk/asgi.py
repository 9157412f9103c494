"""ASGI config for assetdesk project."""

import os

from django.core.asgi import get_asgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "assetdesk.settings")

application = get_asgi_application()
