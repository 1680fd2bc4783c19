# orders/services/estimate_service.py

"""
ESTIMATED SALES (QUOTATIONS)

Orders of type `estimated` record what a customer was quoted. Lines may name
a catalogue product or just carry a free-text product name. No stock,
counterparty balance or investor profit is touched.
"""

from __future__ import annotations

import logging

from django.db import transaction

from core.exceptions import InputValidationError
from core.lookups import get_or_not_found
from core.money import ZERO
from orders.models import Order, OrderItem
from orders.services.order_input import (
    ensure_unique_invoice,
    normalize_amounts,
    normalize_lines,
    require_fields,
    resolve_booker,
)
from orders.services.order_lifecycle import validate_transition
from parties.services.counterparty_service import get_counterparty

logger = logging.getLogger("orders.estimate")


@transaction.atomic
def create_estimated_sale(*, data: dict, user=None) -> dict:
    require_fields(data, ("invoice_number", "total", "items"))
    invoice_number = str(data["invoice_number"]).strip()
    amounts = normalize_amounts(
        {**data, "subtotal": data.get("subtotal") or data.get("total"), "paid_amount": data.get("paid_amount") or 0}
    )
    # Quotations carry no receivable.
    amounts["due_amount"] = ZERO
    lines = normalize_lines(data["items"], require_batch=False, require_product=False)

    counterparty = None
    if data.get("counterparty_id"):
        counterparty = get_counterparty(data["counterparty_id"])
    customer_name = (data.get("estimate_customer_name") or "").strip()
    if counterparty is None and not customer_name:
        raise InputValidationError("counterparty_id or estimate_customer_name is required")

    ensure_unique_invoice(invoice_number=invoice_number, order_type=Order.TYPE_ESTIMATED)

    order = Order.objects.create(
        invoice_number=invoice_number,
        type=Order.TYPE_ESTIMATED,
        status=Order.STATUS_PENDING,
        counterparty=counterparty,
        estimate_customer_name=customer_name,
        booker=resolve_booker(data.get("booker_id")),
        created_by=user,
        note=(data.get("note") or "").strip(),
        **amounts,
    )

    items = [
        OrderItem.objects.create(
            order=order,
            product_id=line.product_id,
            estimate_product_name=line.estimate_product_name,
            batch_number=line.batch_number,
            units=line.units,
            unit_price=line.unit_price,
            discount=line.discount,
            total=line.total,
        )
        for line in lines
    ]

    logger.info(
        "Estimated sale created",
        extra={"order_id": str(order.id), "invoice_number": invoice_number, "lines": len(items)},
    )
    return {"order": order, "items": items}


UPDATABLE_FIELDS = ("estimate_customer_name", "due_date", "note")


@transaction.atomic
def update_estimated_sale(*, order_id, data: dict, user=None) -> dict:
    """
    Patch a quotation in place. Fields absent from `data` keep their value;
    when `items` is given the lines are replaced wholesale.
    """
    order = get_or_not_found(
        Order.objects.select_for_update(), order_id, label="Estimated sale"
    )
    if order.type != Order.TYPE_ESTIMATED:
        raise InputValidationError("Only estimated sales can be updated")

    if data.get("invoice_number"):
        invoice_number = str(data["invoice_number"]).strip()
        if invoice_number != order.invoice_number:
            ensure_unique_invoice(invoice_number=invoice_number, order_type=Order.TYPE_ESTIMATED)
        order.invoice_number = invoice_number

    for field in UPDATABLE_FIELDS:
        if field in data and data[field] is not None:
            value = data[field]
            setattr(order, field, value.strip() if isinstance(value, str) else value)

    if "counterparty_id" in data:
        order.counterparty = get_counterparty(data["counterparty_id"]) if data["counterparty_id"] else None
    if order.counterparty_id is None and not order.estimate_customer_name:
        raise InputValidationError("counterparty_id or estimate_customer_name is required")

    merged = {
        "subtotal": order.subtotal,
        "total": order.total,
        "paid_amount": order.paid_amount,
        "net_value": order.net_value,
    }
    merged.update({k: data[k] for k in merged if data.get(k) is not None})
    amounts = normalize_amounts(merged)
    amounts["due_amount"] = ZERO
    for field, value in amounts.items():
        setattr(order, field, value)

    status = data.get("status")
    if status and status != order.status:
        validate_transition(order=order, target_status=status)
        order.status = status

    order.save()

    if data.get("items") is not None:
        lines = normalize_lines(data["items"], require_batch=False, require_product=False)
        order.items.all().delete()
        for line in lines:
            OrderItem.objects.create(
                order=order,
                product_id=line.product_id,
                estimate_product_name=line.estimate_product_name,
                batch_number=line.batch_number,
                units=line.units,
                unit_price=line.unit_price,
                discount=line.discount,
                total=line.total,
            )

    items = list(order.items.all())
    logger.info(
        "Estimated sale updated",
        extra={"order_id": str(order.id), "fields": sorted(data.keys()), "lines": len(items)},
    )
    return {"order": order, "items": items}
