# parties/services/balance.py

"""
COUNTERPARTY BALANCE PRIMITIVES

Single source of truth for pay / receive math.

Rules:
- A purchase on credit raises `pay` (we owe them).
- A sale on credit raises `receive` (they owe us).
- After every adjustment the two sides are netted so at most one is non-zero.
- Reversal of an order is modelled as the opposite order type for the same
  amount, which nets out exactly what the original added.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from core.exceptions import InvariantViolationError
from core.money import ZERO, money

logger = logging.getLogger("parties.balance")

ORDER_TYPE_PURCHASE = "purchase"
ORDER_TYPE_SALE = "sale"

_OPPOSITE = {
    ORDER_TYPE_PURCHASE: ORDER_TYPE_SALE,
    ORDER_TYPE_SALE: ORDER_TYPE_PURCHASE,
}


def net_balance(current_pay, current_receive, delta_pay=0, delta_receive=0) -> tuple[Decimal, Decimal]:
    """
    Add deltas to both running balances, then net them.

    Returns (pay, receive) with at most one side non-zero.
    """
    pay = money(current_pay) + money(delta_pay)
    receive = money(current_receive) + money(delta_receive)

    if pay > receive:
        return pay - receive, ZERO
    return ZERO, receive - pay


def deltas_for(order_type: str, amount) -> tuple[Decimal, Decimal]:
    """
    (delta_pay, delta_receive) that an order of `order_type` contributes.
    """
    amount = money(amount)
    if order_type == ORDER_TYPE_PURCHASE:
        return amount, ZERO
    if order_type == ORDER_TYPE_SALE:
        return ZERO, amount
    raise InvariantViolationError(
        f"Unsupported transaction type for balance adjustment: {order_type!r}"
    )


def adjust_for_order(counterparty, amount, order_type: str) -> tuple[Decimal, Decimal]:
    """
    Balance after an order of `order_type` for `amount` (pure; no writes).
    """
    delta_pay, delta_receive = deltas_for(order_type, amount)
    return net_balance(counterparty.pay, counterparty.receive, delta_pay, delta_receive)


def reverse_adjustment(counterparty, amount, original_type: str) -> tuple[Decimal, Decimal]:
    """
    Balance as if the opposite transaction of `amount` had occurred.

    Used when deleting or returning an order to undo its prior effect.
    """
    opposite = _OPPOSITE.get(original_type)
    if opposite is None:
        raise InvariantViolationError(
            f"Cannot reverse unsupported transaction type: {original_type!r}"
        )
    return adjust_for_order(counterparty, amount, opposite)


def apply_order_adjustment(counterparty, amount, order_type: str, *, reverse: bool = False):
    """
    Persist the adjusted balance on an already locked counterparty row.

    Callers must have loaded `counterparty` with select_for_update() inside
    the surrounding transaction.
    """
    before = (counterparty.pay, counterparty.receive)
    if reverse:
        pay, receive = reverse_adjustment(counterparty, amount, order_type)
    else:
        pay, receive = adjust_for_order(counterparty, amount, order_type)

    counterparty.pay = pay
    counterparty.receive = receive
    counterparty.save(update_fields=["pay", "receive", "updated_at"])

    logger.info(
        "Counterparty balance adjusted",
        extra={
            "counterparty_id": str(counterparty.id),
            "order_type": order_type,
            "reverse": reverse,
            "amount": str(money(amount)),
            "before": [str(v) for v in before],
            "after": [str(pay), str(receive)],
        },
    )
    return counterparty
