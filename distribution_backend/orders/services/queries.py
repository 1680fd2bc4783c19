# orders/services/queries.py

"""
ORDER READ SIDE

Explicit loaders for the API layer; write-side services never depend on
these.
"""

from __future__ import annotations

from django.db.models import Sum

from core.exceptions import InputValidationError
from core.lookups import get_or_not_found
from core.money import money
from orders.models import Order, OrderItem
from products.services.product_service import get_product


def order_queryset():
    return (
        Order.objects.select_related("counterparty", "booker", "original_order")
        .prefetch_related("items__product")
    )


def load_order(order_id) -> Order:
    """Order with counterparty, booker and items (with products) loaded."""
    return get_or_not_found(order_queryset(), order_id, label="Order")


def orders_for_counterparty(counterparty_id, *, order_type: str | None = None, open_only: bool = False):
    qs = order_queryset().filter(counterparty_id=counterparty_id)
    if order_type:
        qs = qs.filter(type=order_type)
    if open_only:
        qs = qs.filter(due_amount__gt=0)
    return qs.order_by("created_at")


HISTORY_TYPES = (Order.TYPE_SALE, Order.TYPE_PURCHASE)


def product_order_history(*, product_id, order_type: str) -> dict:
    """
    Every sale (or purchase) line for one product, newest first, with totals
    and the product's current on-hand stock.

    Lines of cancelled orders are listed but left out of the totals.
    """
    if order_type not in HISTORY_TYPES:
        raise InputValidationError(
            f"order_type must be one of: {', '.join(HISTORY_TYPES)}",
            details={"allowed": list(HISTORY_TYPES)},
        )

    product = get_product(product_id)
    lines = (
        OrderItem.objects.select_related("order", "order__counterparty")
        .filter(product=product, order__type=order_type)
        .order_by("-order__created_at", "-created_at")
    )
    totals = lines.exclude(order__status=Order.STATUS_CANCELLED).aggregate(
        units=Sum("units"),
        returned_units=Sum("returned_units"),
        amount=Sum("total"),
    )
    units = totals["units"] or 0
    returned = totals["returned_units"] or 0
    on_hand = product.stock_batches.aggregate(stock=Sum("stock"))["stock"] or 0

    return {
        "product": product,
        "lines": lines,
        "units": units,
        "returned_units": returned,
        "net_units": units - returned,
        "amount": money(totals["amount"]),
        "stock_on_hand": on_hand,
    }
