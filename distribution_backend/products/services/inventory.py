# products/services/inventory.py

"""
======================================================
PATH: products/services/inventory.py
======================================================
EXACT-BATCH INVENTORY SERVICES

Purpose:
- Sales and purchase returns name the batch they move; these helpers
  deduct from / credit to that exact batch under a row lock.
- Purchases receive into a batch (upsert by product + batch_number).
- Purchase deletion removes received units again.

Rules:
- Quantities are integer units.
- Every mutation locks the batch row (select_for_update) first.
- A deduction that would drive stock below zero raises InsufficientStockError
  naming the batch and what it actually holds.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from django.db import transaction

from core.exceptions import InputValidationError, InsufficientStockError
from core.money import money, to_int_qty
from products.models import StockBatch

logger = logging.getLogger("products.inventory")


def _require_positive_units(units) -> int:
    qty = to_int_qty(units)
    if qty <= 0:
        raise InputValidationError("units must be greater than zero")
    return qty


def _require_batch_number(batch_number) -> str:
    bn = (batch_number or "").strip()
    if not bn:
        raise InputValidationError("batch_number is required")
    return bn


def lock_batch(*, product_id, batch_number) -> StockBatch | None:
    return (
        StockBatch.objects.select_for_update()
        .filter(product_id=product_id, batch_number=batch_number)
        .first()
    )


def available_in_batch(*, product_id, batch_number) -> int:
    batch = StockBatch.objects.filter(product_id=product_id, batch_number=batch_number).first()
    return int(batch.stock) if batch is not None else 0


@transaction.atomic
def deduct_from_batch(*, product_id, batch_number, units) -> StockBatch:
    qty = _require_positive_units(units)
    bn = _require_batch_number(batch_number)

    batch = lock_batch(product_id=product_id, batch_number=bn)
    available = int(batch.stock) if batch is not None else 0
    if batch is None or available < qty:
        raise InsufficientStockError(
            f"Insufficient stock in batch {bn}. Requested: {qty}, Available: {available}",
            shortfall=qty - available,
            batch_number=bn,
            available=available,
        )

    batch.stock = available - qty
    batch.save(update_fields=["stock", "updated_at"])
    return batch


@transaction.atomic
def receive_into_batch(
    *,
    product_id,
    batch_number,
    units,
    expiry_date,
    unit_cost,
    purchase_price=None,
    mrp=None,
    discount_per_unit=None,
) -> tuple[StockBatch, bool]:
    """
    Receive purchased units.

    Existing batch: stock is topped up, cost basis is kept (set only when the
    batch never had one). New batch: created with the given cost basis.

    Returns (batch, created).
    """
    qty = _require_positive_units(units)
    bn = _require_batch_number(batch_number)
    cost = money(unit_cost)
    if cost < Decimal("0.00"):
        raise InputValidationError("unit_cost cannot be negative")

    batch = lock_batch(product_id=product_id, batch_number=bn)
    if batch is not None:
        batch.stock = int(batch.stock or 0) + qty
        update_fields = ["stock", "updated_at"]
        if not batch.unit_cost and cost > Decimal("0.00"):
            batch.unit_cost = cost
            update_fields.append("unit_cost")
        batch.save(update_fields=update_fields)
        return batch, False

    if not expiry_date:
        raise InputValidationError(f"expiry_date is required for new batch {bn}")

    batch = StockBatch.objects.create(
        product_id=product_id,
        batch_number=bn,
        expiry_date=expiry_date,
        stock=qty,
        unit_cost=cost,
        purchase_price=money(purchase_price if purchase_price is not None else cost),
        mrp=money(mrp),
        discount_per_unit=money(discount_per_unit),
    )
    logger.info(
        "Batch created from intake",
        extra={"product_id": str(product_id), "batch_number": bn, "units": qty},
    )
    return batch, True


@transaction.atomic
def remove_from_batch(*, product_id, batch_number, units, delete_when_empty: bool = True) -> StockBatch | None:
    """
    Take previously received units back out of a batch.

    Returns the batch, or None when it was emptied and deleted.
    """
    batch = deduct_from_batch(product_id=product_id, batch_number=batch_number, units=units)

    if delete_when_empty and int(batch.stock) == 0:
        logger.info(
            "Emptied batch removed",
            extra={"product_id": str(product_id), "batch_number": batch.batch_number},
        )
        batch.delete()
        return None
    return batch
