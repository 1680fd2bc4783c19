# orders/services/deletion_service.py

"""
ORDER DELETION (COMPENSATING TRANSACTION)

Deleting an order undoes everything creating it did, then removes the rows:

- sale      stock restored to the originating batches, investor
            distribution reversed, counterparty reversed
- purchase  received units removed from their batches (fails if they were
            already sold), counterparty reversed
- estimated rows removed; nothing else was touched

cancel_order runs the same compensation but keeps the order on record with
status cancelled and a zero due. complete_order only moves pending orders
to completed.

The counterparty is reversed by the order's ORIGINAL due (total - paid).
Recoveries applied since then already moved the ledger; they stay as credit
and their Recovery rows survive with order = NULL.
"""

from __future__ import annotations

import logging

from core.exceptions import InvariantViolationError
from core.lookups import get_or_not_found
from core.money import ZERO, money
from core.transactions import retry_on_conflict
from investors.services.profit_distribution import reverse_order_distribution
from orders.models import Order, OrderItem
from orders.services.order_lifecycle import InvalidOrderTransitionError, is_deletable, validate_transition
from parties.services.balance import apply_order_adjustment
from parties.services.counterparty_service import get_counterparty
from products.services.inventory import remove_from_batch
from products.services.stock_fifo import restore_stock

logger = logging.getLogger("orders.deletion")


def _reverse_stock(order: Order, items) -> None:
    for item in items:
        units = item.remaining_units
        if units <= 0 or not item.product_id:
            continue
        if order.type == Order.TYPE_SALE:
            restore_stock(
                product_id=item.product_id,
                batch_number=item.batch_number,
                units=units,
                expiry_date=item.expiry_date,
                unit_cost=item.unit_cost,
            )
        else:
            remove_from_batch(product_id=item.product_id, batch_number=item.batch_number, units=units)


def _guard_compensation(order: Order, action: str) -> None:
    if order.is_return:
        raise InvariantViolationError(
            f"Return order {order.invoice_number} cannot be {action}"
        )
    if order.return_orders.exists():
        raise InvariantViolationError(
            f"Order {order.invoice_number} has returns and cannot be {action}"
        )
    if not is_deletable(order):
        raise InvalidOrderTransitionError(
            f"Order {order.invoice_number} in status '{order.status}' cannot be {action}"
        )


def _unwind(order: Order):
    """
    Undo the stock, balance and distribution effects of a sale or purchase.
    Returns the reversed due.
    """
    items = list(OrderItem.objects.select_for_update().filter(order=order))
    _reverse_stock(order, items)

    original_due = money(order.total) - money(order.paid_amount)
    if original_due > ZERO:
        counterparty = get_counterparty(order.counterparty_id, for_update=True)
        apply_order_adjustment(counterparty, original_due, order.type, reverse=True)

    if order.type == Order.TYPE_SALE:
        reverse_order_distribution(order=order)
    return original_due


@retry_on_conflict
def delete_order(*, order_id, user=None) -> bool:
    order = get_or_not_found(Order.objects.select_for_update(), order_id, label="Order")

    if order.type == Order.TYPE_ESTIMATED:
        order.delete()
        logger.info("Estimated order deleted", extra={"order_id": str(order_id)})
        return True

    _guard_compensation(order, "deleted")
    original_due = _unwind(order)

    invoice_number = order.invoice_number
    order.delete()

    logger.info(
        "Order deleted",
        extra={
            "order_id": str(order_id),
            "invoice_number": invoice_number,
            "type": order.type,
            "reversed_due": str(original_due),
            "deleted_by": getattr(user, "pk", None),
        },
    )
    return True


@retry_on_conflict
def cancel_order(*, order_id, user=None) -> Order:
    """
    Same compensation as delete_order, but the order and its lines stay on
    record with status 'cancelled' and no outstanding due.
    """
    order = get_or_not_found(Order.objects.select_for_update(), order_id, label="Order")

    validate_transition(order=order, target_status=Order.STATUS_CANCELLED)

    original_due = ZERO
    if order.type != Order.TYPE_ESTIMATED:
        _guard_compensation(order, "cancelled")
        original_due = _unwind(order)

    order.status = Order.STATUS_CANCELLED
    order.due_amount = ZERO
    order.save(update_fields=["status", "due_amount", "updated_at"])

    logger.info(
        "Order cancelled",
        extra={
            "order_id": str(order.id),
            "invoice_number": order.invoice_number,
            "type": order.type,
            "reversed_due": str(original_due),
            "cancelled_by": getattr(user, "pk", None),
        },
    )
    return order


@retry_on_conflict
def complete_order(*, order_id, user=None) -> Order:
    """
    pending -> completed. Stock and balances were booked at creation, so
    only the status moves.
    """
    order = get_or_not_found(Order.objects.select_for_update(), order_id, label="Order")
    validate_transition(order=order, target_status=Order.STATUS_COMPLETED)

    order.status = Order.STATUS_COMPLETED
    order.save(update_fields=["status", "updated_at"])
    logger.info(
        "Order completed",
        extra={"order_id": str(order.id), "completed_by": getattr(user, "pk", None)},
    )
    return order
