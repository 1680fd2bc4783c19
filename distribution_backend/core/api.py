# core/api.py

"""
API ERROR NORMALIZATION

Canonical error envelope for every endpoint:
    {"error": {"code": "...", "message": "...", "details": ...}}
"""

from __future__ import annotations

import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

from core.exceptions import DistributionError

logger = logging.getLogger("core.api")


def error_response(*, code: str, message: str, http_status: int, details=None):
    """
    Canonical API error response.
    """
    payload = {"code": code, "message": message}
    if details is not None:
        payload["details"] = details
    return Response({"error": payload}, status=http_status)


def exception_handler(exc, context):
    """
    DRF exception handler.

    - DistributionError subclasses map to their own code + status.
    - DRF's own errors (validation, auth, 404) keep DRF status codes but are
      wrapped in the same envelope.
    - Anything else propagates (Django 500 handling / Sentry).
    """
    if isinstance(exc, DistributionError):
        view = context.get("view")
        logger.info(
            "Domain error returned to client",
            extra={"code": exc.code, "view": view.__class__.__name__ if view else None},
        )
        return error_response(
            code=exc.code,
            message=exc.message,
            http_status=exc.http_status,
            details=exc.details,
        )

    response = drf_exception_handler(exc, context)
    if response is None:
        return None

    code = "VALIDATION_ERROR" if response.status_code == status.HTTP_400_BAD_REQUEST else (
        getattr(exc, "default_code", "error") or "error"
    ).upper()
    data = response.data
    message = data.get("detail") if isinstance(data, dict) and "detail" in data else "Invalid request"
    details = None if isinstance(data, dict) and set(data.keys()) == {"detail"} else data

    response.data = {"error": {"code": code, "message": str(message)}}
    if details is not None:
        response.data["error"]["details"] = details
    return response
