# orders/services/sale_service.py

"""
SALE ORCHESTRATOR (APPLICATION SERVICE)

Purpose:
- Turn a booked sale into Order + OrderItems, deduct the named batches,
  book the receivable on the counterparty, and distribute profit to
  investors, as ONE atomic unit.

Phases (any raised error aborts and rolls back everything):
1. validating   required fields, counterparty / booker exist, unique invoice
2. allocating   every named batch is locked and must hold the units
3. persisting   order + items, batch deductions, per-line profit
4. balancing    counterparty receive += due_amount (netted)
5. distributing investor profit records + credits

Hard rules:
- Quantities are integer units.
- Stock is validated for ALL lines before the first write.
- line profit = line_total - batch.unit_cost * units
"""

from __future__ import annotations

import logging
from collections import OrderedDict

from django.core.exceptions import ValidationError as DjangoValidationError

from core.exceptions import InputValidationError, InsufficientStockError
from core.lookups import require_all
from core.money import ZERO, money
from core.transactions import retry_on_conflict
from investors.services.profit_distribution import distribute_order_profit
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
from products.services.inventory import deduct_from_batch, lock_batch

logger = logging.getLogger("orders.sale")

REQUIRED_FIELDS = (
    "invoice_number",
    "counterparty_id",
    "subtotal",
    "total",
    "paid_amount",
    "net_value",
    "items",
)


def _validate_stock(lines) -> dict:
    """
    Lock every named batch and check it covers the requested units,
    aggregated across lines. Returns {(product_id, batch_number): batch}.
    """
    needed = OrderedDict()
    for line in lines:
        key = (str(line.product_id), line.batch_number)
        needed[key] = needed.get(key, 0) + line.units

    require_all(Product.objects.all(), {pid for pid, _ in needed}, label="Product")

    batches = {}
    for (product_id, batch_number), units in needed.items():
        batch = lock_batch(product_id=product_id, batch_number=batch_number)
        available = int(batch.stock) if batch is not None else 0
        if batch is None or available < units:
            raise InsufficientStockError(
                f"Insufficient stock in batch {batch_number}. Requested: {units}, Available: {available}",
                shortfall=units - available,
                batch_number=batch_number,
                available=available,
            )
        batches[(product_id, batch_number)] = batch
    return batches


@retry_on_conflict
def create_sale(*, data: dict, user=None, today=None) -> dict:
    """
    Create a sale order.

    Returns {"order", "items", "total_profit", "distributable", "distribution"}.
    """
    # 1. validating
    require_fields(data, REQUIRED_FIELDS)
    invoice_number = str(data["invoice_number"]).strip()
    amounts = normalize_amounts(data)
    lines = normalize_lines(data["items"])
    status = resolve_initial_status(data)

    counterparty = get_counterparty(data["counterparty_id"], for_update=True)
    booker = resolve_booker(data.get("booker_id"))
    ensure_unique_invoice(invoice_number=invoice_number, order_type=Order.TYPE_SALE)

    # 2. allocating
    batches = _validate_stock(lines)

    # 3. persisting
    try:
        order = Order.objects.create(
            invoice_number=invoice_number,
            type=Order.TYPE_SALE,
            status=status,
            counterparty=counterparty,
            booker=booker,
            created_by=user,
            due_date=data.get("due_date") or None,
            note=(data.get("note") or "").strip(),
            **amounts,
        )
    except DjangoValidationError as exc:
        raise InputValidationError("Invalid sale order", details=exc.message_dict) from exc

    items = []
    total_profit = ZERO
    for line in lines:
        batch = batches[(str(line.product_id), line.batch_number)]
        deduct_from_batch(product_id=line.product_id, batch_number=line.batch_number, units=line.units)

        unit_cost = money(batch.unit_cost)
        line_profit = money(line.total - unit_cost * line.units)
        total_profit += line_profit

        items.append(
            OrderItem.objects.create(
                order=order,
                product_id=line.product_id,
                batch_number=line.batch_number,
                expiry_date=batch.expiry_date,
                units=line.units,
                unit_price=line.unit_price,
                discount=line.discount,
                total=line.total,
                unit_cost=unit_cost,
                profit=line_profit,
            )
        )

    order.profit = total_profit
    order.save(update_fields=["profit", "updated_at"])

    # 4. balancing
    if amounts["due_amount"] > ZERO:
        apply_order_adjustment(counterparty, amounts["due_amount"], Order.TYPE_SALE)

    # 5. distributing
    distribution = distribute_order_profit(order=order, today=today)

    logger.info(
        "Sale created",
        extra={
            "order_id": str(order.id),
            "invoice_number": invoice_number,
            "counterparty_id": str(counterparty.id),
            "total": str(order.total),
            "due_amount": str(order.due_amount),
            "profit": str(total_profit),
            "lines": len(items),
        },
    )

    return {
        "order": order,
        "items": items,
        "total_profit": total_profit,
        "distributable": distribution.reserves.distributable,
        "distribution": distribution,
    }
