# products/services/product_service.py

"""
PRODUCT CATALOG SERVICE

Rules:
- Product names are unique (case-insensitive). Duplicates raise ConflictError.
- Updates are allow-listed; stock never changes through here.
"""

from __future__ import annotations

import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction

from core.exceptions import ConflictError, InputValidationError
from core.lookups import get_or_not_found
from core.money import money
from products.models import Product

logger = logging.getLogger("products.catalog")

CREATABLE_FIELDS = frozenset(
    {
        "name",
        "item_code",
        "company",
        "generic",
        "pack_size",
        "product_type",
        "carton_size",
        "retail_price",
        "trade_price",
        "wholesale_price",
        "federal_tax",
        "gst",
        "sales_tax",
        "quantity_alert",
    }
)

UPDATABLE_FIELDS = CREATABLE_FIELDS | {"status"}

_MONEY_FIELDS = frozenset(
    {"retail_price", "trade_price", "wholesale_price", "federal_tax", "gst", "sales_tax"}
)


def get_product(product_id, *, for_update: bool = False) -> Product:
    qs = Product.objects.all()
    if for_update:
        qs = qs.select_for_update()
    return get_or_not_found(qs, product_id, label="Product")


def _normalize(data: dict) -> dict:
    out = {}
    for key, value in data.items():
        if key in _MONEY_FIELDS:
            value = money(value)
        elif isinstance(value, str):
            value = value.strip()
        out[key] = value
    return out


def _ensure_unique_name(name: str, *, exclude_id=None) -> None:
    qs = Product.objects.filter(name__iexact=name)
    if exclude_id is not None:
        qs = qs.exclude(pk=exclude_id)
    if qs.exists():
        raise ConflictError(f"Product with name '{name}' already exists")


@transaction.atomic
def create_product(*, data: dict) -> Product:
    rejected = sorted(set(data) - CREATABLE_FIELDS)
    if rejected:
        raise InputValidationError(
            f"Unknown product fields: {', '.join(rejected)}",
            details={"rejected": rejected},
        )

    values = _normalize(data)
    name = values.get("name") or ""
    if not name:
        raise InputValidationError("name is required", details={"missing": ["name"]})

    _ensure_unique_name(name)

    try:
        product = Product.objects.create(**values)
    except DjangoValidationError as exc:
        raise InputValidationError("Invalid product", details=exc.message_dict) from exc

    logger.info("Product created", extra={"product_id": str(product.id), "product_name": product.name})
    return product


@transaction.atomic
def update_product(*, product_id, changes: dict) -> Product:
    rejected = sorted(set(changes) - UPDATABLE_FIELDS)
    if rejected:
        raise InputValidationError(
            f"Fields not updatable: {', '.join(rejected)}",
            details={"rejected": rejected},
        )

    product = get_product(product_id, for_update=True)
    values = _normalize(changes)

    if "name" in values:
        if not values["name"]:
            raise InputValidationError("name cannot be blank")
        _ensure_unique_name(values["name"], exclude_id=product.pk)

    for field, value in values.items():
        setattr(product, field, value)

    try:
        product.save()
    except DjangoValidationError as exc:
        raise InputValidationError("Invalid product update", details=exc.message_dict) from exc
    return product


def last_purchase_for_product(*, product_id):
    """
    Most recent purchase line for a product, or None when it was never bought.

    "No purchase yet" is a successful empty result, not an error.
    """
    # orders depends on products; import at call time.
    from orders.models import Order, OrderItem

    get_product(product_id)
    return (
        OrderItem.objects.select_related("order", "order__counterparty")
        .filter(product_id=product_id, order__type=Order.TYPE_PURCHASE)
        .order_by("-order__created_at", "-created_at")
        .first()
    )
