# orders/services/recovery_service.py

"""
RECOVERY ALLOCATOR

One payment spread over several open orders of ONE counterparty,
oldest order first:

    payment = min(order.due_amount, remaining)

- all orders must exist, share the counterparty and be of one type
  (sale or purchase)
- amount must be > 0 and <= the sum of their due amounts
- an order whose due reaches zero becomes `recovered`
- counterparty receive (sales) / pay (purchases) drops by the total,
  floored at zero
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal

from django.core.exceptions import ValidationError as DjangoValidationError
from django.utils import timezone

from core.exceptions import InputValidationError, InvariantViolationError, NotFoundError
from core.money import ZERO, money
from core.transactions import retry_on_conflict
from orders.models import Order, Recovery
from orders.services.order_lifecycle import can_transition
from parties.services.counterparty_service import get_counterparty

logger = logging.getLogger("orders.recovery")

RECOVERABLE_TYPES = (Order.TYPE_SALE, Order.TYPE_PURCHASE)


@dataclass
class RecoveryResult:
    counterparty_id: object
    total_amount: Decimal
    recoveries: list = field(default_factory=list)
    remaining_unallocated: Decimal = ZERO

    @property
    def allocated(self) -> Decimal:
        return sum((r.amount for r in self.recoveries), ZERO)


def _load_orders(order_ids) -> list[Order]:
    if not isinstance(order_ids, (list, tuple, set)) or not order_ids:
        raise InputValidationError("order_ids must be a non-empty list")

    ids = list(dict.fromkeys(str(oid) for oid in order_ids))
    try:
        orders = list(
            Order.objects.select_for_update()
            .filter(pk__in=ids)
            .order_by("created_at", "id")
        )
    except (DjangoValidationError, ValueError, TypeError) as exc:
        raise NotFoundError("One or more orders were not found") from exc

    found = {str(o.pk) for o in orders}
    missing = [oid for oid in ids if oid not in found]
    if missing:
        raise NotFoundError("One or more orders were not found", details={"order_ids": missing})
    return orders


@retry_on_conflict
def apply_recovery(*, order_ids, total_amount, date=None, recorded_by=None) -> RecoveryResult:
    amount = money(total_amount)
    if amount <= ZERO:
        raise InputValidationError("Recovery amount must be greater than zero")

    orders = _load_orders(order_ids)

    counterparties = {o.counterparty_id for o in orders}
    if len(counterparties) != 1 or None in counterparties:
        raise InvariantViolationError("Selected orders must belong to one counterparty")

    types = {o.type for o in orders}
    if len(types) != 1 or not types <= set(RECOVERABLE_TYPES):
        raise InvariantViolationError("Selected orders must all be sales or all be purchases")
    order_type = types.pop()

    total_due = sum((money(o.due_amount) for o in orders), ZERO)
    if amount > total_due:
        raise InputValidationError(
            f"Recovery amount {amount} exceeds total due {total_due}",
            details={"amount": str(amount), "total_due": str(total_due)},
        )

    day = date or timezone.localdate()
    counterparty = get_counterparty(counterparties.pop(), for_update=True)
    result = RecoveryResult(counterparty_id=counterparty.id, total_amount=amount)

    remaining = amount
    for order in orders:
        if remaining <= ZERO:
            break
        due = money(order.due_amount)
        if due <= ZERO:
            continue

        payment = min(due, remaining)
        remaining -= payment

        order.due_amount = due - payment
        order.recovered_amount = money(order.recovered_amount) + payment
        order.recovered_date = day
        order.recovered_by = recorded_by
        update_fields = ["due_amount", "recovered_amount", "recovered_date", "recovered_by", "updated_at"]
        if order.due_amount == ZERO and can_transition(from_status=order.status, to_status=Order.STATUS_RECOVERED):
            order.status = Order.STATUS_RECOVERED
            update_fields.append("status")
        order.save(update_fields=update_fields)

        result.recoveries.append(
            Recovery.objects.create(
                order=order,
                invoice_number=order.invoice_number,
                counterparty=counterparty,
                amount=payment,
                due_before=due,
                due_after=order.due_amount,
                recovered_date=day,
                recovered_by=recorded_by,
            )
        )

    result.remaining_unallocated = remaining

    if order_type == Order.TYPE_SALE:
        counterparty.receive = max(money(counterparty.receive) - amount, ZERO)
    else:
        counterparty.pay = max(money(counterparty.pay) - amount, ZERO)
    counterparty.save(update_fields=["pay", "receive", "updated_at"])

    logger.info(
        "Recovery applied",
        extra={
            "counterparty_id": str(counterparty.id),
            "amount": str(amount),
            "orders": [str(r.order_id) for r in result.recoveries],
            "remaining_unallocated": str(remaining),
        },
    )
    return result
