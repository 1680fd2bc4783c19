# core/exceptions.py

"""
DISTRIBUTION DOMAIN ERRORS

Centralized error kinds raised by every service in this project.

Rules:
- Every error carries a stable `code` (API clients switch on it) and the
  HTTP status the API layer should answer with.
- Services raise these INSIDE transaction.atomic(), so a raised error always
  means "nothing was written".
"""

from __future__ import annotations


class DistributionError(Exception):
    """Base exception for all distribution service failures."""

    code = "DISTRIBUTION_ERROR"
    http_status = 400

    def __init__(self, message: str = "", *, details=None):
        super().__init__(message or self.__class__.__name__)
        self.message = message or self.__class__.__name__
        self.details = details

    def as_dict(self) -> dict:
        payload = {"code": self.code, "message": self.message}
        if self.details is not None:
            payload["details"] = self.details
        return payload


class InputValidationError(DistributionError):
    """Raised when a request is missing required fields or carries bad values."""

    code = "VALIDATION_ERROR"
    http_status = 400


class NotFoundError(DistributionError):
    """Raised when a referenced entity does not exist."""

    code = "NOT_FOUND"
    http_status = 404


class InsufficientStockError(DistributionError):
    """
    Raised when requested units exceed what the batches hold.

    `shortfall` is the number of units that could not be covered.
    `batch_number` / `available` are set when a single named batch is short.
    """

    code = "INSUFFICIENT_STOCK"
    http_status = 409

    def __init__(self, message: str = "", *, shortfall: int = 0, batch_number=None, available=None, details=None):
        self.shortfall = int(shortfall or 0)
        self.batch_number = batch_number
        self.available = available
        if details is None:
            details = {"shortfall": self.shortfall}
            if batch_number is not None:
                details["batch_number"] = batch_number
            if available is not None:
                details["available"] = available
        super().__init__(message, details=details)


class ConflictError(DistributionError):
    """Raised on duplicates (invoice numbers, product names) and lost races."""

    code = "CONFLICT"
    http_status = 409


class InvariantViolationError(DistributionError):
    """Raised when an operation would break a business invariant."""

    code = "INVARIANT_VIOLATION"
    http_status = 422
