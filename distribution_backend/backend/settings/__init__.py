# backend/settings/__init__.py
"""
Select a module with DJANGO_SETTINGS_MODULE:

- backend.settings.dev   local development and the test suite
- backend.settings.prod  production
"""
