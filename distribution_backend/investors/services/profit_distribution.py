# investors/services/profit_distribution.py

"""
PROFIT DISTRIBUTION ENGINE

Runs inside the sale's transaction, after the order and its items are
written. A failure here rolls the whole sale back.

Formula (per sale order):
- expense       = gross_sale * EXPENSE_RESERVE_RATE   (2%)
- charity       = profit * CHARITY_RESERVE_RATE       (10%)
- distributable = profit - charity - expense

Per eligible investor:
- base_share     = distributable * shares / 100
- investor_share = base_share * (profit_percentage or 100) / 100
- owner_share    = base_share - investor_share  -> credited to the house account

Eligibility (month of `today`):
- active capital holders, not the house. A type=company holder keeps
  nothing itself: its whole base_share is owner_share.
- joined on or before the first day of the month, OR joined between the
  1st and MID_MONTH_CUTOFF_DAY of this month and today is on/after the cutoff

Rounding:
- reserves are 2dp ROUND_HALF_UP; shares are 2dp ROUND_DOWN, so the sum of
  all shares handed out never exceeds distributable.
- distributable <= 0 (a loss-making sale) distributes nothing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import ROUND_DOWN, Decimal

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from core.exceptions import InvariantViolationError
from core.money import TWOPLACES, ZERO, money
from investors.models import Investor, InvestorProfitRecord

logger = logging.getLogger("investors.distribution")

HUNDRED = Decimal("100")


# ============================================================
# RESULT TYPES
# ============================================================

@dataclass(frozen=True)
class Reserves:
    gross_sale: Decimal
    profit: Decimal
    expense: Decimal
    charity: Decimal
    distributable: Decimal


@dataclass
class DistributionResult:
    reserves: Reserves
    month: str
    records: list = field(default_factory=list)
    owner_total: Decimal = ZERO

    @property
    def investor_total(self) -> Decimal:
        return sum((r.investor_share for r in self.records), ZERO)


# ============================================================
# PURE RULES
# ============================================================

def _rate(name: str, default: str) -> Decimal:
    return Decimal(str(getattr(settings, name, default) or default))


def _round_down(value: Decimal) -> Decimal:
    return value.quantize(TWOPLACES, rounding=ROUND_DOWN)


def compute_reserves(*, gross_sale, profit) -> Reserves:
    gross_sale = money(gross_sale)
    profit = money(profit)
    expense = money(gross_sale * _rate("EXPENSE_RESERVE_RATE", "0.02"))
    charity = money(profit * _rate("CHARITY_RESERVE_RATE", "0.10"))
    return Reserves(
        gross_sale=gross_sale,
        profit=profit,
        expense=expense,
        charity=charity,
        distributable=profit - charity - expense,
    )


def month_key(day) -> str:
    return day.strftime("%Y-%m")


def is_eligible(*, join_date, today) -> bool:
    """
    Mid-month cutoff rule.

    Joined before this month (or on the 1st): eligible.
    Joined in this month up to the cutoff day: eligible once today reaches
    the cutoff. Joined after the cutoff: deferred to next month.
    """
    if join_date is None:
        return False

    first_of_month = today.replace(day=1)
    if join_date <= first_of_month:
        return True

    cutoff = int(getattr(settings, "MID_MONTH_CUTOFF_DAY", 15) or 15)
    same_month = join_date.year == today.year and join_date.month == today.month
    return same_month and join_date.day <= cutoff and today.day >= cutoff


def split_share(*, distributable: Decimal, shares, profit_percentage) -> tuple[Decimal, Decimal, Decimal]:
    """
    Returns (base_share, investor_share, owner_share).
    """
    base = _round_down(distributable * Decimal(str(shares or 0)) / HUNDRED)
    pct = HUNDRED if profit_percentage is None else Decimal(str(profit_percentage))
    investor_share = _round_down(base * pct / HUNDRED)
    return base, investor_share, base - investor_share


# ============================================================
# HOUSE ACCOUNT
# ============================================================

def get_house_account(*, for_update: bool = False) -> Investor:
    """
    The business's own account. Created on first use.
    """
    qs = Investor.objects.filter(is_house=True)
    if for_update:
        qs = qs.select_for_update()
    house = qs.first()
    if house is not None:
        return house

    house, _ = Investor.objects.get_or_create(
        is_house=True,
        defaults={
            "name": getattr(settings, "HOUSE_ACCOUNT_NAME", "House") or "House",
            "type": Investor.TYPE_COMPANY,
            "join_date": timezone.localdate(),
        },
    )
    if for_update:
        house = Investor.objects.select_for_update().get(pk=house.pk)
    return house


def eligible_investors(*, today, for_update: bool = False) -> list[Investor]:
    """
    Every active capital holder (investor or company) past the cutoff.
    """
    qs = Investor.objects.filter(
        status=Investor.STATUS_ACTIVE,
        is_house=False,
        join_date__lte=today,
    ).order_by("join_date", "id")
    if for_update:
        qs = qs.select_for_update()
    return [inv for inv in qs if is_eligible(join_date=inv.join_date, today=today)]


# ============================================================
# BALANCE HELPERS
# ============================================================

def credit_investor(investor: Investor, amount: Decimal) -> None:
    investor.credit = money(investor.credit) + money(amount)
    investor.save(update_fields=["credit", "updated_at"])


def debit_investor(investor: Investor, amount: Decimal) -> None:
    """
    Debit consumes credit first; whatever is left accrues as debit.
    """
    amount = money(amount)
    credit = money(investor.credit)
    if credit >= amount:
        investor.credit = credit - amount
    else:
        investor.debit = money(investor.debit) + (amount - credit)
        investor.credit = ZERO
    investor.save(update_fields=["credit", "debit", "updated_at"])


# ============================================================
# DISTRIBUTION
# ============================================================

@transaction.atomic
def distribute_order_profit(*, order, today=None) -> DistributionResult:
    """
    Distribute one sale order's profit.

    Writes one InvestorProfitRecord per eligible investor, credits each
    investor with investor_share and the house with the owner shares.
    """
    today = today or timezone.localdate()
    reserves = compute_reserves(gross_sale=order.total, profit=order.profit)
    result = DistributionResult(reserves=reserves, month=month_key(today))

    if reserves.distributable <= ZERO:
        logger.info(
            "Nothing to distribute",
            extra={"order_id": str(order.id), "distributable": str(reserves.distributable)},
        )
        return result

    investors = eligible_investors(today=today, for_update=True)
    total_shares = sum((Decimal(str(inv.shares or 0)) for inv in investors), Decimal("0"))
    if total_shares > HUNDRED:
        raise InvariantViolationError(
            f"Eligible investor shares total {total_shares}%, which exceeds 100%"
        )

    for investor in investors:
        base, investor_share, owner_share = split_share(
            distributable=reserves.distributable,
            shares=investor.shares,
            profit_percentage=investor.profit_percentage,
        )
        if investor.type == Investor.TYPE_COMPANY:
            # company holders pass their whole share to the house
            investor_share, owner_share = ZERO, base

        result.records.append(
            InvestorProfitRecord.objects.create(
                order=order,
                invoice_number=order.invoice_number,
                investor=investor,
                month=result.month,
                sales=reserves.gross_sale,
                gross_profit=reserves.profit,
                expense=reserves.expense,
                charity=reserves.charity,
                net_profit=reserves.distributable,
                investor_share=investor_share,
                owner_share=owner_share,
                total=base,
            )
        )
        if investor_share > ZERO:
            credit_investor(investor, investor_share)
        result.owner_total += owner_share

    if result.owner_total > ZERO:
        credit_investor(get_house_account(for_update=True), result.owner_total)

    logger.info(
        "Order profit distributed",
        extra={
            "order_id": str(order.id),
            "month": result.month,
            "distributable": str(reserves.distributable),
            "investors": len(result.records),
            "investor_total": str(result.investor_total),
            "owner_total": str(result.owner_total),
        },
    )
    return result


@transaction.atomic
def reverse_order_distribution(*, order) -> list[InvestorProfitRecord]:
    """
    Undo an order's distribution with compensating records.

    Each investor is debited what they were credited; the house is debited
    the owner shares. Idempotent: a second call finds nothing to reverse.
    """
    records = list(
        InvestorProfitRecord.objects.select_related("investor")
        .filter(order=order, is_reversal=False)
    )
    if not records or InvestorProfitRecord.objects.filter(order=order, is_reversal=True).exists():
        return []

    month = month_key(timezone.localdate())
    reversals = []
    owner_total = ZERO

    for record in records:
        investor = Investor.objects.select_for_update().get(pk=record.investor_id)
        reversals.append(
            InvestorProfitRecord.objects.create(
                order=order,
                invoice_number=record.invoice_number,
                investor=investor,
                month=month,
                sales=-record.sales,
                gross_profit=-record.gross_profit,
                expense=-record.expense,
                charity=-record.charity,
                net_profit=-record.net_profit,
                investor_share=-record.investor_share,
                owner_share=-record.owner_share,
                total=-record.total,
                is_reversal=True,
            )
        )
        if record.investor_share > ZERO:
            debit_investor(investor, record.investor_share)
        owner_total += record.owner_share

    if owner_total > ZERO:
        debit_investor(get_house_account(for_update=True), owner_total)

    logger.info(
        "Order profit distribution reversed",
        extra={"order_id": str(order.id), "records": len(reversals), "owner_total": str(owner_total)},
    )
    return reversals
