# backend/wsgi.py
"""
WSGI entrypoint for the distribution backend.

Defaults to dev settings; deployments must set
DJANGO_SETTINGS_MODULE=backend.settings.prod.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "backend.settings.dev")

application = get_wsgi_application()
