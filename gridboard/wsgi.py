"""WSGI config for the gridboard project."""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "gridboard.settings")

application = get_wsgi_application()
