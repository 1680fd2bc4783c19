# users/services/ledger_service.py

"""
STAFF LEDGER

Per-user account of incentives, advances and settlements.

- Each entry carries debit and/or credit; balance = sum(credit) - sum(debit).
- Balances render as "<amount> CR" (credit side, including zero) or
  "<amount> DB".
- Listing walks the entries oldest first to attach a running balance, then
  returns them newest first.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.db import transaction
from django.db.models import Sum
from django.utils import timezone

from core.exceptions import InputValidationError
from core.lookups import get_or_not_found
from core.money import ZERO, money
from users.models import UserLedgerEntry

logger = logging.getLogger("users.ledger")

AMOUNT_FIELDS = ("debit", "credit", "incentive_amount")


def format_balance(value: Decimal) -> str:
    value = money(value)
    side = "CR" if value >= ZERO else "DB"
    return f"{abs(value)} {side}"


def _amounts(data: dict, *, current: UserLedgerEntry | None = None) -> dict:
    amounts = {}
    for field in AMOUNT_FIELDS:
        if data.get(field) is not None:
            amounts[field] = money(data[field])
        else:
            amounts[field] = getattr(current, field) if current is not None else ZERO
        if amounts[field] < ZERO:
            raise InputValidationError(f"{field} cannot be negative")

    if all(v == ZERO for v in amounts.values()):
        raise InputValidationError("One of debit, credit or incentive_amount must be greater than zero")
    return amounts


@transaction.atomic
def add_ledger_entry(*, user_id, data: dict) -> UserLedgerEntry:
    user = get_or_not_found(get_user_model().objects.all(), user_id, label="User")
    entry = UserLedgerEntry.objects.create(
        user=user,
        date=data.get("date") or timezone.localdate(),
        description=(data.get("description") or "").strip(),
        invoice_number=(data.get("invoice_number") or "").strip(),
        **_amounts(data),
    )
    logger.info(
        "User ledger entry added",
        extra={"user_id": str(user.id), "entry_id": str(entry.id), "net": str(entry.net)},
    )
    return entry


def user_ledger(*, user_id) -> dict:
    """Entries newest first, each with the balance as of that entry, plus totals."""
    user = get_or_not_found(get_user_model().objects.all(), user_id, label="User")
    entries = list(UserLedgerEntry.objects.filter(user=user).order_by("date", "created_at"))

    running = ZERO
    for entry in entries:
        running += entry.net
        entry.running_balance = running
        entry.balance_display = format_balance(running)
    entries.reverse()

    totals = UserLedgerEntry.objects.filter(user=user).aggregate(
        credit=Sum("credit"), debit=Sum("debit"), incentive=Sum("incentive_amount")
    )
    total_credit = money(totals["credit"])
    total_debit = money(totals["debit"])
    return {
        "user": user,
        "entries": entries,
        "total_credit": total_credit,
        "total_debit": total_debit,
        "total_incentive": money(totals["incentive"]),
        "balance": total_credit - total_debit,
        "balance_display": format_balance(total_credit - total_debit),
    }


@transaction.atomic
def edit_ledger_entry(*, entry_id, changes: dict) -> UserLedgerEntry:
    entry = get_or_not_found(UserLedgerEntry.objects.select_for_update(), entry_id, label="Ledger entry")

    for field, value in _amounts(changes, current=entry).items():
        setattr(entry, field, value)
    for field in ("description", "invoice_number"):
        if changes.get(field) is not None:
            setattr(entry, field, changes[field].strip())
    if changes.get("date"):
        entry.date = changes["date"]
    entry.save()

    logger.info(
        "User ledger entry edited",
        extra={"user_id": str(entry.user_id), "entry_id": str(entry.id), "net": str(entry.net)},
    )
    return entry
