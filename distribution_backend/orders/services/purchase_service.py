# orders/services/purchase_service.py

"""
PURCHASE ORCHESTRATOR

Mirror of the sale flow for goods coming IN:
- every line is received into its named batch (created when new)
- unit cost of the batch = line_total / units
- counterparty pay += due_amount (netted)
- no profit distribution
"""

from __future__ import annotations

import logging

from django.core.exceptions import ValidationError as DjangoValidationError

from core.exceptions import InputValidationError
from core.lookups import require_all
from core.money import ZERO, money
from core.transactions import retry_on_conflict
from orders.models import Order, OrderItem
from orders.services.order_input import (
    ensure_unique_invoice,
    normalize_amounts,
    normalize_lines,
    require_fields,
    resolve_booker,
    resolve_initial_status,
)
from parties.services.balance import apply_order_adjustment
from parties.services.counterparty_service import get_counterparty
from products.models import Product
from products.services.inventory import receive_into_batch

logger = logging.getLogger("orders.purchase")

REQUIRED_FIELDS = (
    "invoice_number",
    "counterparty_id",
    "subtotal",
    "total",
    "paid_amount",
    "items",
)


@retry_on_conflict
def create_purchase(*, data: dict, user=None) -> dict:
    """
    Create a purchase order and receive its stock.

    Returns {"order", "items"}.
    """
    require_fields(data, REQUIRED_FIELDS)
    invoice_number = str(data["invoice_number"]).strip()
    amounts = normalize_amounts(data)
    lines = normalize_lines(data["items"])
    status = resolve_initial_status(data)
    counterparty = get_counterparty(data["counterparty_id"], for_update=True)
    booker = resolve_booker(data.get("booker_id"))
    ensure_unique_invoice(invoice_number=invoice_number, order_type=Order.TYPE_PURCHASE)

    require_all(Product.objects.all(), {line.product_id for line in lines}, label="Product")

    try:
        order = Order.objects.create(
            invoice_number=invoice_number,
            type=Order.TYPE_PURCHASE,
            status=status,
            counterparty=counterparty,
            booker=booker,
            created_by=user,
            due_date=data.get("due_date") or None,
            note=(data.get("note") or "").strip(),
            **amounts,
        )
    except DjangoValidationError as exc:
        raise InputValidationError("Invalid purchase order", details=exc.message_dict) from exc

    items = []
    for line in lines:
        unit_cost = money(line.total / line.units)
        batch, _ = receive_into_batch(
            product_id=line.product_id,
            batch_number=line.batch_number,
            units=line.units,
            expiry_date=line.expiry_date,
            unit_cost=unit_cost,
            purchase_price=line.unit_price,
            mrp=line.mrp,
            discount_per_unit=money(line.discount / line.units),
        )
        items.append(
            OrderItem.objects.create(
                order=order,
                product_id=line.product_id,
                batch_number=batch.batch_number,
                expiry_date=batch.expiry_date,
                units=line.units,
                unit_price=line.unit_price,
                discount=line.discount,
                total=line.total,
                unit_cost=unit_cost,
            )
        )

    if amounts["due_amount"] > ZERO:
        apply_order_adjustment(counterparty, amounts["due_amount"], Order.TYPE_PURCHASE)

    logger.info(
        "Purchase created",
        extra={
            "order_id": str(order.id),
            "invoice_number": invoice_number,
            "counterparty_id": str(counterparty.id),
            "total": str(order.total),
            "due_amount": str(order.due_amount),
            "lines": len(items),
        },
    )

    return {"order": order, "items": items}
