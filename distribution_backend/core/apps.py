# core/apps.py

"""
CORE APP CONFIG

Shared distribution primitives:
- Domain error kinds (stable codes for API clients)
- Money / quantity normalizers
- Transaction retry wrapper
"""

from django.apps import AppConfig


class CoreConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "core"
    verbose_name = "Distribution Core"
