# core/transactions.py

"""
TRANSACTION RETRY

Orchestrator entry points run as one transaction.atomic() unit. When two
requests race for the same batch or counterparty row, the database may abort
one of them with a serialization failure or deadlock. Nothing was committed,
so the unit is re-run a bounded number of times before a ConflictError
surfaces.
"""

from __future__ import annotations

import functools
import logging
import time

from django.conf import settings
from django.db import OperationalError, transaction

from core.exceptions import ConflictError

logger = logging.getLogger("core.transactions")

_RETRYABLE_MARKERS = (
    "deadlock",
    "could not serialize",
    "serialization failure",
    "database is locked",
    "lock wait timeout",
)


def _is_retryable(exc: OperationalError) -> bool:
    text = str(exc).lower()
    return any(marker in text for marker in _RETRYABLE_MARKERS)


def retry_on_conflict(func=None, *, attempts: int | None = None, base_delay: float = 0.05):
    """
    Run `func` inside transaction.atomic(), retrying on lock conflicts.

    Usable bare (@retry_on_conflict) or configured
    (@retry_on_conflict(attempts=5)). Nested calls inside an already open
    transaction do not retry; only the outermost unit can be re-run.
    """

    def decorator(fn):
        @functools.wraps(fn)
        def wrapper(*args, **kwargs):
            max_attempts = attempts or int(getattr(settings, "CONFLICT_RETRY_ATTEMPTS", 3) or 1)
            if transaction.get_connection().in_atomic_block:
                with transaction.atomic():
                    return fn(*args, **kwargs)

            for attempt in range(1, max_attempts + 1):
                try:
                    with transaction.atomic():
                        return fn(*args, **kwargs)
                except OperationalError as exc:
                    if not _is_retryable(exc):
                        raise
                    logger.warning(
                        "Transaction conflict, retrying",
                        extra={"operation": fn.__name__, "attempt": attempt, "error": str(exc)},
                    )
                    if attempt >= max_attempts:
                        raise ConflictError(
                            f"{fn.__name__} could not complete due to concurrent updates. Please retry."
                        ) from exc
                    time.sleep(base_delay * (2 ** (attempt - 1)))

        return wrapper

    if func is not None:
        return decorator(func)
    return decorator
