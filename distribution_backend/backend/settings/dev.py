# backend/settings/dev.py
"""
PATH: backend/settings/dev.py

LOCAL DEVELOPMENT + TEST SETTINGS

SQLite by default (DATABASE_URL overrides), the Vite dev server as the only
browser origin, and service loggers at DEBUG unless LOG_LEVEL says otherwise.
"""

from __future__ import annotations

from .base import *  # noqa: F403
from .base import LOGGING, TESTING, env

DEBUG = True

ALLOWED_HOSTS = env.list("ALLOWED_HOSTS", default=["localhost", "127.0.0.1", "testserver"])

_frontend = env.list("CORS_ALLOWED_ORIGINS", default=["http://localhost:5173"])
CORS_ALLOWED_ORIGINS = _frontend
CSRF_TRUSTED_ORIGINS = env.list("CSRF_TRUSTED_ORIGINS", default=_frontend)
CORS_ALLOW_CREDENTIALS = True

if not TESTING:
    for _app in ("orders", "products", "parties", "investors", "users"):
        LOGGING["loggers"][_app]["level"] = env("LOG_LEVEL", default="DEBUG").upper()

if TESTING:
    PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]
    LOGGING["root"]["level"] = "ERROR"
