# investors/services/investor_service.py

"""
INVESTOR SERVICE

Purpose:
- Onboard investors with their first capital contribution.
- Record further contributions and keep ownership shares in sync.
- Manual debit / credit ledger entries (payouts, corrections); editing or
  deleting one re-derives credit/debit from the net position.
- Read-side summary (balances, capital, profit history).

Rules:
- shares = investor capital / total active capital * 100, recomputed for
  every active non-house investor whenever capital changes.
- Shares are truncated (ROUND_DOWN, 4dp) so they never sum above 100.
"""

from __future__ import annotations

import logging
from decimal import ROUND_DOWN, Decimal

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from django.db.models import Sum
from django.utils import timezone

from core.exceptions import InputValidationError, InvariantViolationError
from core.lookups import get_or_not_found
from core.money import ZERO, money
from investors.models import (
    Investor,
    InvestorInvestment,
    InvestorLedgerEntry,
    InvestorProfitRecord,
)
from investors.services.profit_distribution import credit_investor, debit_investor

logger = logging.getLogger("investors.service")

SHARE_PLACES = Decimal("0.0001")

UPDATABLE_FIELDS = frozenset(
    {
        "name",
        "status",
        "join_date",
        "profit_percentage",
        "mobile_number",
        "father_name",
        "address",
        "cnic_number",
    }
)


def get_investor(investor_id, *, for_update: bool = False) -> Investor:
    qs = Investor.objects.all()
    if for_update:
        qs = qs.select_for_update()
    return get_or_not_found(qs, investor_id, label="Investor")


def _capital_by_investor(investor_ids) -> dict:
    rows = (
        InvestorInvestment.objects.filter(investor_id__in=investor_ids)
        .values("investor_id")
        .annotate(total=Sum("amount"))
    )
    return {r["investor_id"]: money(r["total"]) for r in rows}


@transaction.atomic
def recalculate_shares() -> dict:
    """
    Recompute shares for every active, non-house investor.

    Returns {investor_id: shares}. Inactive investors drop to 0.
    """
    active = list(
        Investor.objects.select_for_update()
        .filter(status=Investor.STATUS_ACTIVE, is_house=False)
        .order_by("id")
    )
    capital = _capital_by_investor([inv.id for inv in active])
    total_capital = sum(capital.values(), ZERO)

    out = {}
    for inv in active:
        invested = capital.get(inv.id, ZERO)
        shares = (
            (invested / total_capital * Decimal("100")).quantize(SHARE_PLACES, rounding=ROUND_DOWN)
            if total_capital > ZERO
            else Decimal("0.0000")
        )
        if inv.shares != shares:
            inv.shares = shares
            inv.save(update_fields=["shares", "updated_at"])
        out[inv.id] = shares

    Investor.objects.filter(status=Investor.STATUS_INACTIVE, is_house=False).exclude(
        shares=Decimal("0")
    ).update(shares=Decimal("0"))

    logger.info(
        "Investor shares recalculated",
        extra={"investors": len(out), "total_capital": str(total_capital)},
    )
    return out


@transaction.atomic
def add_investor(*, data: dict) -> Investor:
    """
    Create an investor with its initial capital contribution.
    """
    missing = [f for f in ("name", "amount", "join_date") if not data.get(f)]
    if missing:
        raise InputValidationError(
            f"Missing required fields: {', '.join(missing)}",
            details={"missing": missing},
        )

    amount = money(data["amount"])
    if amount <= ZERO:
        raise InputValidationError("amount must be greater than zero")

    inv_type = data.get("type") or Investor.TYPE_INVESTOR
    if inv_type not in dict(Investor.TYPE_CHOICES):
        raise InputValidationError(f"Invalid investor type: {inv_type}")

    try:
        investor = Investor.objects.create(
            name=str(data["name"]).strip(),
            type=inv_type,
            join_date=data["join_date"],
            profit_percentage=data.get("profit_percentage"),
            mobile_number=(data.get("mobile_number") or "").strip(),
            father_name=(data.get("father_name") or "").strip(),
            address=(data.get("address") or "").strip(),
            cnic_number=(data.get("cnic_number") or "").strip(),
        )
    except DjangoValidationError as exc:
        raise InputValidationError("Invalid investor", details=exc.message_dict) from exc

    InvestorInvestment.objects.create(investor=investor, amount=amount, date=data["join_date"])
    recalculate_shares()
    investor.refresh_from_db()

    logger.info(
        "Investor added",
        extra={"investor_id": str(investor.id), "amount": str(amount), "shares": str(investor.shares)},
    )
    return investor


@transaction.atomic
def add_investment(*, investor_id, amount, date=None) -> InvestorInvestment:
    amount = money(amount)
    if amount <= ZERO:
        raise InputValidationError("amount must be greater than zero")

    investor = get_investor(investor_id, for_update=True)
    if investor.is_house:
        raise InvariantViolationError("The house account does not hold capital shares")

    investment = InvestorInvestment.objects.create(
        investor=investor,
        amount=amount,
        date=date or timezone.localdate(),
    )
    recalculate_shares()
    return investment


@transaction.atomic
def update_investor(*, investor_id, changes: dict) -> Investor:
    rejected = sorted(set(changes) - UPDATABLE_FIELDS)
    if rejected:
        raise InputValidationError(
            f"Fields not updatable: {', '.join(rejected)}",
            details={"rejected": rejected},
        )

    investor = get_investor(investor_id, for_update=True)
    status_changed = "status" in changes and changes["status"] != investor.status

    for field, value in changes.items():
        setattr(investor, field, value)

    try:
        investor.save()
    except DjangoValidationError as exc:
        raise InputValidationError("Invalid investor update", details=exc.message_dict) from exc

    if status_changed:
        recalculate_shares()
        investor.refresh_from_db()
    return investor


@transaction.atomic
def record_ledger_entry(*, investor_id, entry_type: str, amount, note: str = "", date=None) -> InvestorLedgerEntry:
    """
    credit: adds to credit.
    debit:  consumes credit first, remainder accrues as debit.
    """
    if entry_type not in dict(InvestorLedgerEntry.TYPE_CHOICES):
        raise InputValidationError("Invalid type. Must be 'debit' or 'credit'")

    amount = money(amount)
    if amount <= ZERO:
        raise InputValidationError("amount must be greater than zero")

    investor = get_investor(investor_id, for_update=True)
    entry = InvestorLedgerEntry.objects.create(
        investor=investor,
        entry_type=entry_type,
        amount=amount,
        note=(note or "").strip(),
        date=date or timezone.localdate(),
    )

    if entry_type == InvestorLedgerEntry.TYPE_CREDIT:
        credit_investor(investor, amount)
    else:
        debit_investor(investor, amount)

    logger.info(
        "Investor ledger entry recorded",
        extra={"investor_id": str(investor.id), "entry_type": entry_type, "amount": str(amount)},
    )
    return entry


def investor_summary(*, investor_id) -> dict:
    investor = get_investor(investor_id)
    capital = (
        InvestorInvestment.objects.filter(investor=investor).aggregate(total=Sum("amount")).get("total")
        or ZERO
    )
    profit_rows = (
        InvestorProfitRecord.objects.filter(investor=investor)
        .values("month")
        .annotate(investor_share=Sum("investor_share"), owner_share=Sum("owner_share"))
        .order_by("-month")
    )

    return {
        "investor": investor,
        "capital": money(capital),
        "net_balance": investor.net_balance,
        "monthly_profit": [
            {
                "month": row["month"],
                "investor_share": money(row["investor_share"]),
                "owner_share": money(row["owner_share"]),
            }
            for row in profit_rows
        ],
        "ledger": list(InvestorLedgerEntry.objects.filter(investor=investor)),
    }


def _signed(entry_type: str, amount: Decimal) -> Decimal:
    return amount if entry_type == InvestorLedgerEntry.TYPE_CREDIT else -amount


def _shift_net_balance(investor: Investor, delta: Decimal) -> None:
    """Move the investor's net position by `delta` and re-derive credit/debit from it."""
    net = money(investor.credit) - money(investor.debit) + delta
    investor.credit = net if net > ZERO else ZERO
    investor.debit = -net if net < ZERO else ZERO
    investor.save(update_fields=["credit", "debit", "updated_at"])


def _get_ledger_entry(investor_id, entry_id) -> InvestorLedgerEntry:
    return get_or_not_found(
        InvestorLedgerEntry.objects.select_for_update().filter(investor_id=investor_id),
        entry_id,
        label="Ledger entry",
    )


@transaction.atomic
def edit_ledger_entry(*, investor_id, entry_id, changes: dict) -> InvestorLedgerEntry:
    """
    Change type, amount, note or date of a manual entry. The investor's
    balance is re-derived by backing out the old effect and applying the new.
    """
    investor = get_investor(investor_id, for_update=True)
    entry = _get_ledger_entry(investor.id, entry_id)

    new_type = changes.get("type") or entry.entry_type
    if new_type not in dict(InvestorLedgerEntry.TYPE_CHOICES):
        raise InputValidationError("Invalid type. Must be 'debit' or 'credit'")
    new_amount = money(changes["amount"]) if changes.get("amount") is not None else entry.amount
    if new_amount <= ZERO:
        raise InputValidationError("amount must be greater than zero")

    delta = _signed(new_type, new_amount) - _signed(entry.entry_type, entry.amount)

    entry.entry_type = new_type
    entry.amount = new_amount
    if "note" in changes:
        entry.note = (changes["note"] or "").strip()
    if changes.get("date"):
        entry.date = changes["date"]
    entry.save()

    if delta != ZERO:
        _shift_net_balance(investor, delta)

    logger.info(
        "Investor ledger entry edited",
        extra={"investor_id": str(investor.id), "entry_id": str(entry.id), "delta": str(delta)},
    )
    return entry


@transaction.atomic
def delete_ledger_entry(*, investor_id, entry_id) -> None:
    investor = get_investor(investor_id, for_update=True)
    entry = _get_ledger_entry(investor.id, entry_id)

    delta = -_signed(entry.entry_type, entry.amount)
    entry.delete()
    _shift_net_balance(investor, delta)

    logger.info(
        "Investor ledger entry deleted",
        extra={"investor_id": str(investor.id), "entry_id": str(entry_id), "delta": str(delta)},
    )
