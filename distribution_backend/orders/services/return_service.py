# orders/services/return_service.py

"""
RETURN BY INVOICE

A return is a NEW order (sale_return / purchase_return) linked to the
original through original_order. The original keeps its lines; each line's
returned_units grows until it reaches units.

Per returned line:
    refund = original_line_total / original_units * returned_units

Effects:
- sale return      stock restored to the originating batch
- purchase return  stock removed from the received batch
- counterparty     reversed by the refund total (opposite order type)
- original         due lowered by the refund (never below zero); marked
                   returned once every line came back

Investor distributions are NOT touched by returns.
"""

from __future__ import annotations

import logging
from collections import OrderedDict

from core.exceptions import InputValidationError, NotFoundError
from core.money import ZERO, money, to_int_qty
from core.transactions import retry_on_conflict
from orders.models import Order, OrderItem
from orders.services.order_lifecycle import InvalidOrderTransitionError, can_transition, validate_transition
from parties.services.balance import apply_order_adjustment
from parties.services.counterparty_service import get_counterparty
from products.services.inventory import deduct_from_batch
from products.services.stock_fifo import restore_stock

logger = logging.getLogger("orders.returns")

RETURNABLE_TYPES = (Order.TYPE_SALE, Order.TYPE_PURCHASE)


def _requested_units(items) -> "OrderedDict[tuple[str, str], int]":
    if not isinstance(items, (list, tuple)) or not items:
        raise InputValidationError("items must be a non-empty list")

    requested = OrderedDict()
    errors = {}
    for idx, raw in enumerate(items):
        if not isinstance(raw, dict):
            errors[idx] = "item must be an object"
            continue
        product_id = raw.get("product_id")
        batch_number = (raw.get("batch_number") or "").strip()
        if not product_id or not batch_number:
            errors[idx] = "product_id and batch_number are required"
            continue
        try:
            units = to_int_qty(raw.get("units"))
        except InputValidationError as exc:
            errors[idx] = exc.message
            continue
        if units <= 0:
            errors[idx] = "units must be greater than zero"
            continue
        key = (str(product_id), batch_number)
        requested[key] = requested.get(key, 0) + units

    if errors:
        raise InputValidationError("Invalid return items", details={"items": errors})
    return requested


def _next_return_invoice(original: Order) -> str:
    n = original.return_orders.count() + 1
    return f"{original.invoice_number}-R{n}"


@retry_on_conflict
def return_by_invoice(*, invoice_number, items, order_type: str = Order.TYPE_SALE, user=None, note: str = "") -> dict:
    """
    Return units of an existing sale or purchase.

    Returns {"return_order", "items", "refund_total"}.
    """
    if order_type not in RETURNABLE_TYPES:
        raise InputValidationError(
            f"order_type must be one of: {', '.join(RETURNABLE_TYPES)}"
        )
    invoice_number = (str(invoice_number or "")).strip()
    if not invoice_number:
        raise InputValidationError("invoice_number is required")

    requested = _requested_units(items)

    original = (
        Order.objects.select_for_update()
        .filter(invoice_number=invoice_number, type=order_type)
        .first()
    )
    if original is None:
        raise NotFoundError(f"{order_type.capitalize()} invoice {invoice_number} not found")
    if not can_transition(from_status=original.status, to_status=Order.STATUS_RETURNED):
        raise InvalidOrderTransitionError(
            f"Order {original.invoice_number} in status '{original.status}' cannot be returned"
        )

    lines = list(OrderItem.objects.select_for_update().filter(order=original).order_by("created_at", "id"))
    by_key = OrderedDict()
    for line in lines:
        by_key.setdefault((str(line.product_id), line.batch_number), []).append(line)

    # Validate every requested line before any write.
    errors = {}
    for key, units in requested.items():
        candidates = by_key.get(key)
        label = f"{key[0]}/{key[1]}"
        if not candidates:
            errors[label] = "not present on the original order"
            continue
        remaining = sum(line.remaining_units for line in candidates)
        if units > remaining:
            errors[label] = f"return of {units} exceeds remaining {remaining}"
    if errors:
        raise InputValidationError("Invalid return quantities", details={"items": errors})

    return_type = Order.RETURN_TYPE_FOR[order_type]
    counterparty = get_counterparty(original.counterparty_id, for_update=True)

    return_order = Order.objects.create(
        invoice_number=_next_return_invoice(original),
        type=return_type,
        status=Order.STATUS_COMPLETED,
        counterparty=counterparty,
        original_order=original,
        created_by=user,
        note=(note or "").strip(),
    )

    return_items = []
    refund_total = ZERO
    profit_total = ZERO

    for key, units in requested.items():
        left = units
        for line in by_key[key]:
            if left <= 0:
                break
            take = min(line.remaining_units, left)
            if take <= 0:
                continue
            left -= take

            refund = money(line.total / line.units * take)
            profit = -money(line.profit / line.units * take) if order_type == Order.TYPE_SALE else ZERO
            refund_total += refund
            profit_total += profit

            if order_type == Order.TYPE_SALE:
                restore_stock(
                    product_id=line.product_id,
                    batch_number=line.batch_number,
                    units=take,
                    expiry_date=line.expiry_date,
                    unit_cost=line.unit_cost,
                )
            else:
                deduct_from_batch(product_id=line.product_id, batch_number=line.batch_number, units=take)

            line.returned_units = int(line.returned_units) + take
            line.save(update_fields=["returned_units"])

            return_items.append(
                OrderItem.objects.create(
                    order=return_order,
                    product_id=line.product_id,
                    batch_number=line.batch_number,
                    expiry_date=line.expiry_date,
                    units=take,
                    unit_price=line.unit_price,
                    total=refund,
                    unit_cost=line.unit_cost,
                    profit=profit,
                )
            )

    return_order.subtotal = refund_total
    return_order.total = refund_total
    return_order.net_value = refund_total
    return_order.profit = profit_total
    return_order.save(update_fields=["subtotal", "total", "net_value", "profit", "updated_at"])

    if refund_total > ZERO:
        apply_order_adjustment(counterparty, refund_total, order_type, reverse=True)

    update_fields = ["updated_at"]
    if original.due_amount > ZERO and refund_total > ZERO:
        original.due_amount = original.due_amount - min(original.due_amount, refund_total)
        update_fields.append("due_amount")
    if all(line.remaining_units == 0 for line in lines):
        validate_transition(order=original, target_status=Order.STATUS_RETURNED)
        original.status = Order.STATUS_RETURNED
        update_fields.append("status")
    original.save(update_fields=update_fields)

    logger.info(
        "Order returned",
        extra={
            "original_order_id": str(original.id),
            "return_order_id": str(return_order.id),
            "invoice_number": return_order.invoice_number,
            "refund_total": str(refund_total),
            "lines": len(return_items),
        },
    )

    return {"return_order": return_order, "items": return_items, "refund_total": refund_total}
