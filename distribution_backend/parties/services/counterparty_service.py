# parties/services/counterparty_service.py

"""
COUNTERPARTY SERVICE

Purpose:
- Create / update customers and suppliers.
- Manual balance entries (opening balances, adjustments) through the same
  netting primitive the orchestrator uses.

Hard rules:
- Updates are allow-listed: pay / receive / opening_balance are never
  writable through update_counterparty().
- Balance math goes through parties.services.balance.net_balance only.
"""

from __future__ import annotations

import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction

from core.exceptions import InputValidationError
from core.lookups import get_or_not_found
from core.money import ZERO, money
from parties.models import Counterparty
from parties.services.balance import net_balance

logger = logging.getLogger("parties.counterparty")

UPDATABLE_FIELDS = frozenset(
    {
        "name",
        "role",
        "status",
        "phone",
        "email",
        "address",
        "area",
        "credit_period",
        "credit_limit",
    }
)

BALANCE_TYPE_PAY = "pay"
BALANCE_TYPE_RECEIVE = "receive"


def get_counterparty(counterparty_id, *, for_update: bool = False) -> Counterparty:
    qs = Counterparty.objects.all()
    if for_update:
        qs = qs.select_for_update()
    return get_or_not_found(qs, counterparty_id, label="Counterparty")


def _balance_deltas(balance_type: str, amount):
    if balance_type == BALANCE_TYPE_PAY:
        return amount, ZERO
    if balance_type == BALANCE_TYPE_RECEIVE:
        return ZERO, amount
    raise InputValidationError("balance_type must be either 'pay' or 'receive'")


@transaction.atomic
def create_counterparty(*, data: dict) -> Counterparty:
    """
    Create a counterparty.

    opening_balance + opening_balance_type ("pay" | "receive") seeds the
    running balance on the matching side.
    """
    name = (data.get("name") or "").strip()
    if not name:
        raise InputValidationError("name is required", details={"missing": ["name"]})

    role = data.get("role") or Counterparty.ROLE_CUSTOMER
    if role not in dict(Counterparty.ROLE_CHOICES):
        raise InputValidationError(f"Invalid role: {role}")

    opening = money(data.get("opening_balance"))
    if opening < ZERO:
        raise InputValidationError("opening_balance cannot be negative")

    opening_type = data.get("opening_balance_type") or (
        BALANCE_TYPE_PAY if role == Counterparty.ROLE_SUPPLIER else BALANCE_TYPE_RECEIVE
    )
    delta_pay, delta_receive = _balance_deltas(opening_type, opening)
    pay, receive = net_balance(ZERO, ZERO, delta_pay, delta_receive)

    counterparty = Counterparty.objects.create(
        name=name,
        role=role,
        phone=(data.get("phone") or "").strip(),
        email=(data.get("email") or "").strip(),
        address=(data.get("address") or "").strip(),
        area=(data.get("area") or "").strip(),
        credit_period=int(data.get("credit_period") or 0),
        credit_limit=money(data.get("credit_limit")),
        opening_balance=opening,
        pay=pay,
        receive=receive,
    )

    logger.info(
        "Counterparty created",
        extra={"counterparty_id": str(counterparty.id), "role": role, "opening_balance": str(opening)},
    )
    return counterparty


@transaction.atomic
def update_counterparty(*, counterparty_id, changes: dict) -> Counterparty:
    rejected = sorted(set(changes) - UPDATABLE_FIELDS)
    if rejected:
        raise InputValidationError(
            f"Fields not updatable: {', '.join(rejected)}",
            details={"rejected": rejected},
        )

    counterparty = get_counterparty(counterparty_id, for_update=True)

    for field, value in changes.items():
        if field == "credit_limit":
            value = money(value)
        setattr(counterparty, field, value)

    try:
        counterparty.save()
    except DjangoValidationError as exc:
        raise InputValidationError("Invalid counterparty update", details=exc.message_dict) from exc
    return counterparty


@transaction.atomic
def add_balance(*, counterparty_id, balance_type: str, amount) -> Counterparty:
    """
    Manual ledger entry: adds `amount` to the `balance_type` side and nets.
    """
    amount = money(amount)
    if amount <= ZERO:
        raise InputValidationError("amount must be greater than zero")

    delta_pay, delta_receive = _balance_deltas(balance_type, amount)
    counterparty = get_counterparty(counterparty_id, for_update=True)

    counterparty.pay, counterparty.receive = net_balance(
        counterparty.pay, counterparty.receive, delta_pay, delta_receive
    )
    counterparty.save(update_fields=["pay", "receive", "updated_at"])

    logger.info(
        "Manual counterparty balance entry",
        extra={
            "counterparty_id": str(counterparty.id),
            "balance_type": balance_type,
            "amount": str(amount),
        },
    )
    return counterparty

