# backend/settings/prod.py
"""
PATH: backend/settings/prod.py

PRODUCTION SETTINGS

Fails closed: the process refuses to start unless secrets, hosts, a Postgres
DATABASE_URL and https-only CORS/CSRF origins are configured, and unless the
distribution reserve rates parse as fractions below 1.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation

from django.core.exceptions import ImproperlyConfigured

from .base import *  # noqa: F403
from .base import BASE_DIR, CHARITY_RESERVE_RATE, EXPENSE_RESERVE_RATE, MIDDLEWARE, env

DEBUG = False


def _required(name: str) -> str:
    value = (env(name, default="") or "").strip()
    if not value:
        raise ImproperlyConfigured(f"{name} must be set in production.")
    return value


def _https_origins(name: str) -> list[str]:
    origins = env.list(name, default=[])
    if not origins:
        raise ImproperlyConfigured(f"{name} must be set in production.")
    for origin in origins:
        if not origin.startswith("https://") or "localhost" in origin or "127.0.0.1" in origin:
            raise ImproperlyConfigured(f"{name} must list public https:// origins only (got {origin}).")
    return origins


# ----------------------------
# SECRETS / HOSTS
# ----------------------------
SECRET_KEY = _required("SECRET_KEY")
if SECRET_KEY == "dev-insecure-change-me":
    raise ImproperlyConfigured("SECRET_KEY must be set to a strong value in production.")

ALLOWED_HOSTS = env.list("ALLOWED_HOSTS", default=[])
if not ALLOWED_HOSTS:
    raise ImproperlyConfigured("ALLOWED_HOSTS must be set in production.")

# ----------------------------
# DATABASE (Postgres only)
# ----------------------------
if _required("DATABASE_URL").startswith("sqlite"):
    raise ImproperlyConfigured("Refusing to start in production with SQLite DATABASE_URL.")

DATABASES = {"default": env.db("DATABASE_URL")}
DATABASES["default"]["CONN_MAX_AGE"] = env.int("DB_CONN_MAX_AGE", default=60)

# ----------------------------
# DISTRIBUTION RULES
# ----------------------------
for _name, _raw in (("EXPENSE_RESERVE_RATE", EXPENSE_RESERVE_RATE), ("CHARITY_RESERVE_RATE", CHARITY_RESERVE_RATE)):
    try:
        _rate = Decimal(str(_raw))
    except InvalidOperation as exc:
        raise ImproperlyConfigured(f"{_name} must be a decimal fraction.") from exc
    if not Decimal("0") <= _rate < Decimal("1"):
        raise ImproperlyConfigured(f"{_name} must be between 0 and 1.")

# ----------------------------
# STATIC (WhiteNoise)
# ----------------------------
STATIC_ROOT = env("STATIC_ROOT", default=str(BASE_DIR / "staticfiles"))
MIDDLEWARE.insert(1, "whitenoise.middleware.WhiteNoiseMiddleware")
STORAGES = {
    "default": {"backend": "django.core.files.storage.FileSystemStorage"},
    "staticfiles": {"backend": "whitenoise.storage.CompressedManifestStaticFilesStorage"},
}

# ----------------------------
# TLS / COOKIES / HEADERS
# ----------------------------
SECURE_PROXY_SSL_HEADER = ("HTTP_X_FORWARDED_PROTO", "https")
SECURE_SSL_REDIRECT = env.bool("SECURE_SSL_REDIRECT", default=True)
SECURE_HSTS_SECONDS = env.int("SECURE_HSTS_SECONDS", default=3600)
SECURE_HSTS_INCLUDE_SUBDOMAINS = env.bool("SECURE_HSTS_INCLUDE_SUBDOMAINS", default=True)
SECURE_HSTS_PRELOAD = env.bool("SECURE_HSTS_PRELOAD", default=False)

SESSION_COOKIE_SECURE = CSRF_COOKIE_SECURE = True
SESSION_COOKIE_HTTPONLY = CSRF_COOKIE_HTTPONLY = True
SESSION_COOKIE_SAMESITE = CSRF_COOKIE_SAMESITE = "Lax"

SECURE_CONTENT_TYPE_NOSNIFF = True
SECURE_REFERRER_POLICY = "same-origin"
SECURE_CROSS_ORIGIN_OPENER_POLICY = "same-origin"
X_FRAME_OPTIONS = "DENY"

# ----------------------------
# CORS / CSRF
# ----------------------------
CORS_ALLOWED_ORIGINS = _https_origins("CORS_ALLOWED_ORIGINS")
CSRF_TRUSTED_ORIGINS = _https_origins("CSRF_TRUSTED_ORIGINS")
CORS_ALLOW_CREDENTIALS = False
