# orders/services/order_input.py

"""
ORDER INPUT NORMALIZATION

Shared by the sale / purchase / estimate services. Everything here is
read-only: it validates and normalizes request payloads before the first
write of a transaction.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from django.contrib.auth import get_user_model

from core.exceptions import ConflictError, InputValidationError
from core.lookups import get_or_not_found
from core.money import ZERO, money, to_int_qty
from orders.models import Order
from orders.services.order_lifecycle import INITIAL_STATES


@dataclass
class OrderLine:
    product_id: object
    batch_number: str
    units: int
    unit_price: Decimal
    discount: Decimal
    total: Decimal
    expiry_date: object = None
    estimate_product_name: str = ""
    mrp: Decimal = ZERO


def _is_blank(value) -> bool:
    if value is None:
        return True
    if isinstance(value, str) and not value.strip():
        return True
    if isinstance(value, (list, tuple)) and not value:
        return True
    return False


def require_fields(data: dict, fields) -> None:
    missing = [f for f in fields if _is_blank(data.get(f))]
    if missing:
        raise InputValidationError(
            f"Missing required fields: {', '.join(missing)}",
            details={"missing": missing},
        )


def normalize_amounts(data: dict, *, net_value_default=None) -> dict:
    subtotal = money(data.get("subtotal"))
    total = money(data.get("total"))
    paid = money(data.get("paid_amount"))
    net_value = money(data.get("net_value")) if not _is_blank(data.get("net_value")) else money(
        net_value_default if net_value_default is not None else total
    )

    for name, value in (("subtotal", subtotal), ("total", total), ("paid_amount", paid)):
        if value < ZERO:
            raise InputValidationError(f"{name} cannot be negative")

    if paid > total:
        raise InputValidationError(
            f"paid_amount ({paid}) cannot exceed total ({total})",
            details={"paid_amount": str(paid), "total": str(total)},
        )

    return {
        "subtotal": subtotal,
        "total": total,
        "paid_amount": paid,
        "due_amount": total - paid,
        "net_value": net_value,
    }


def normalize_lines(items, *, require_batch: bool = True, require_product: bool = True) -> list[OrderLine]:
    if not isinstance(items, (list, tuple)) or not items:
        raise InputValidationError("items must be a non-empty list")

    lines = []
    errors = {}

    for idx, raw in enumerate(items):
        if not isinstance(raw, dict):
            errors[idx] = "item must be an object"
            continue

        product_id = raw.get("product_id")
        name = (raw.get("estimate_product_name") or "").strip()
        batch_number = (raw.get("batch_number") or "").strip()

        if require_product and _is_blank(product_id):
            errors[idx] = "product_id is required"
            continue
        if not require_product and _is_blank(product_id) and not name:
            errors[idx] = "product_id or estimate_product_name is required"
            continue
        if require_batch and not batch_number:
            errors[idx] = "batch_number is required"
            continue

        try:
            units = to_int_qty(raw.get("units"))
        except InputValidationError as exc:
            errors[idx] = exc.message
            continue
        if units <= 0:
            errors[idx] = "units must be greater than zero"
            continue

        unit_price = money(raw.get("unit_price"))
        discount = money(raw.get("discount"))
        if _is_blank(raw.get("total")):
            total = money(unit_price * units - discount)
        else:
            total = money(raw.get("total"))
        if total < ZERO:
            errors[idx] = "line total cannot be negative"
            continue

        lines.append(
            OrderLine(
                product_id=product_id or None,
                batch_number=batch_number,
                units=units,
                unit_price=unit_price,
                discount=discount,
                total=total,
                expiry_date=raw.get("expiry_date") or None,
                estimate_product_name=name,
                mrp=money(raw.get("mrp")),
            )
        )

    if errors:
        raise InputValidationError("Invalid order items", details={"items": errors})
    return lines


def ensure_unique_invoice(*, invoice_number: str, order_type: str) -> None:
    if Order.objects.filter(invoice_number=invoice_number, type=order_type).exists():
        raise ConflictError(
            f"{order_type.capitalize()} invoice {invoice_number} already exists"
        )


def resolve_booker(booker_id):
    if _is_blank(booker_id):
        return None
    User = get_user_model()
    return get_or_not_found(User.objects.all(), booker_id, label="Booker")


def resolve_initial_status(data: dict) -> str:
    status = data.get("status") or Order.STATUS_COMPLETED
    if status not in INITIAL_STATES:
        raise InputValidationError(
            f"Orders cannot be created with status '{status}'",
            details={"allowed": sorted(INITIAL_STATES)},
        )
    return status
