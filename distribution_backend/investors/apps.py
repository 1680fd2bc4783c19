# investors/apps.py

from django.apps import AppConfig


class InvestorsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "investors"
    verbose_name = "Investors & Profit Sharing"
