# core/lookups.py

from __future__ import annotations

import uuid

from django.core.exceptions import ValidationError as DjangoValidationError

from core.exceptions import NotFoundError


def get_or_not_found(queryset, pk, *, label: str):
    """
    Fetch by primary key or raise NotFoundError.
    Malformed UUIDs are treated as "not found" rather than a 500.
    """
    try:
        return queryset.get(pk=pk)
    except (queryset.model.DoesNotExist, DjangoValidationError, ValueError, TypeError) as exc:
        raise NotFoundError(f"{label} not found: {pk}") from exc


def _canonical_uuid(value):
    try:
        return str(uuid.UUID(str(value)))
    except (ValueError, TypeError, AttributeError):
        return None


def require_all(queryset, pks, *, label: str) -> None:
    """
    Raise NotFoundError naming every pk with no row in `queryset`.
    Malformed UUIDs count as missing instead of escaping as a 500.
    """
    canonical = {str(pk): _canonical_uuid(pk) for pk in pks}
    valid = {c for c in canonical.values() if c is not None}
    found = {str(pk) for pk in queryset.filter(pk__in=valid).values_list("pk", flat=True)} if valid else set()
    missing = sorted(raw for raw, c in canonical.items() if c is None or c not in found)
    if missing:
        raise NotFoundError(f"{label} not found: {', '.join(missing)}", details={"ids": missing})
