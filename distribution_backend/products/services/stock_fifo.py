# products/services/stock_fifo.py

"""
FIFO STOCK ENGINE

Purpose:
- Plan a deduction across a product's batches, earliest expiry first
  (then oldest batch), without touching the database (allocate_stock).
- Apply such a plan under row locks (deduct_stock_fifo).
- Restore stock to its originating batch; when that batch no longer exists,
  recreate it so stock is never silently lost (restore_stock).

Rules:
- Quantities are integer units.
- allocate_stock() is a pure dry run; it raises InsufficientStockError with
  the uncovered shortfall when the batches cannot cover the request.
- Expired batches are NOT skipped: the allocator only orders by expiry.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import timedelta

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from core.exceptions import InputValidationError, InsufficientStockError
from core.money import to_int_qty
from products.models import Product, StockBatch

logger = logging.getLogger("products.stock_fifo")

RESTORED_BATCH_PREFIX = "RESTORED"


# ============================================================
# ALLOCATION PLAN
# ============================================================

@dataclass(frozen=True)
class BatchAllocation:
    batch_id: object
    batch_number: str
    expiry_date: object
    units: int


@dataclass
class AllocationPlan:
    product_id: object
    requested: int
    allocations: list = field(default_factory=list)
    shortfall: int = 0

    @property
    def allocated(self) -> int:
        return sum(a.units for a in self.allocations)

    def as_dict(self) -> dict:
        return {
            "product_id": str(self.product_id),
            "requested": self.requested,
            "allocated": self.allocated,
            "shortfall": self.shortfall,
            "allocations": [
                {
                    "batch_number": a.batch_number,
                    "expiry_date": a.expiry_date.isoformat() if a.expiry_date else None,
                    "units": a.units,
                }
                for a in self.allocations
            ],
        }


def _require_units(units) -> int:
    qty = to_int_qty(units)
    if qty <= 0:
        raise InputValidationError("units must be greater than zero")
    return qty


def _batches_in_fifo_order(product_id, *, lock: bool):
    qs = StockBatch.objects.filter(product_id=product_id, stock__gt=0)
    if lock:
        qs = qs.select_for_update()
    return list(qs.order_by("expiry_date", "created_at", "id"))


def _plan(product_id, requested: int, batches) -> AllocationPlan:
    plan = AllocationPlan(product_id=product_id, requested=requested)
    remaining = requested

    for batch in batches:
        if remaining <= 0:
            break
        available = int(batch.stock or 0)
        if available <= 0:
            continue
        take = available if available <= remaining else remaining
        plan.allocations.append(
            BatchAllocation(
                batch_id=batch.id,
                batch_number=batch.batch_number,
                expiry_date=batch.expiry_date,
                units=take,
            )
        )
        remaining -= take

    plan.shortfall = remaining
    return plan


def allocate_stock(*, product_id, requested_units) -> AllocationPlan:
    """
    Dry-run FIFO-by-expiry allocation.

    Raises InsufficientStockError(shortfall=...) when batches cannot cover
    `requested_units`. Never writes.
    """
    requested = _require_units(requested_units)
    plan = _plan(product_id, requested, _batches_in_fifo_order(product_id, lock=False))

    if plan.shortfall > 0:
        raise InsufficientStockError(
            f"Insufficient stock for product {product_id}. "
            f"Requested: {requested}, Available: {plan.allocated}",
            shortfall=plan.shortfall,
            available=plan.allocated,
        )
    return plan


# ============================================================
# FIFO DEDUCTION
# ============================================================

@transaction.atomic
def deduct_stock_fifo(*, product_id, units) -> AllocationPlan:
    """
    Lock the product's batches, re-plan, and apply the deductions.

    Re-planning under the lock means a concurrent deduction can never push a
    batch below zero.
    """
    requested = _require_units(units)
    batches = _batches_in_fifo_order(product_id, lock=True)
    plan = _plan(product_id, requested, batches)

    if plan.shortfall > 0:
        raise InsufficientStockError(
            f"Insufficient stock for product {product_id}. "
            f"Requested: {requested}, Available: {plan.allocated}",
            shortfall=plan.shortfall,
            available=plan.allocated,
        )

    by_id = {b.id: b for b in batches}
    for allocation in plan.allocations:
        batch = by_id[allocation.batch_id]
        batch.stock = int(batch.stock) - allocation.units
        batch.save(update_fields=["stock", "updated_at"])

    logger.info(
        "FIFO deduction applied",
        extra={
            "product_id": str(product_id),
            "units": requested,
            "batches": [a.batch_number for a in plan.allocations],
        },
    )
    return plan


# ============================================================
# STOCK RESTORATION
# ============================================================

def _restored_batch_number() -> str:
    stamp = timezone.now().strftime("%Y%m%d%H%M%S%f")
    return f"{RESTORED_BATCH_PREFIX}-{stamp}"


@transaction.atomic
def restore_stock(*, product_id, batch_number, units, expiry_date=None, unit_cost=None) -> StockBatch:
    """
    Return `units` to the batch they were taken from.

    If the batch still exists it is credited in place. Otherwise the units go
    to the product's RESTORED-* batch with the same expiry, which is created
    on first use. An unknown original expiry defaults to one year out.
    """
    qty = _require_units(units)
    bn = (batch_number or "").strip()

    batch = None
    if bn:
        batch = (
            StockBatch.objects.select_for_update()
            .filter(product_id=product_id, batch_number=bn)
            .first()
        )

    if batch is not None:
        batch.stock = int(batch.stock or 0) + qty
        batch.save(update_fields=["stock", "updated_at"])
        logger.info(
            "Stock restored to batch",
            extra={"product_id": str(product_id), "batch_number": bn, "units": qty},
        )
        return batch

    if not Product.objects.filter(pk=product_id).exists():
        raise InputValidationError(f"Cannot restore stock for unknown product {product_id}")

    shelf_life = int(getattr(settings, "RESTORED_BATCH_SHELF_LIFE_DAYS", 365) or 365)
    expiry = expiry_date or (timezone.localdate() + timedelta(days=shelf_life))

    batch = (
        StockBatch.objects.select_for_update()
        .filter(
            product_id=product_id,
            batch_number__startswith=f"{RESTORED_BATCH_PREFIX}-",
            expiry_date=expiry,
        )
        .order_by("created_at")
        .first()
    )
    if batch is not None:
        batch.stock = int(batch.stock or 0) + qty
        batch.save(update_fields=["stock", "updated_at"])
        logger.warning(
            "Originating batch missing; stock restored into existing restored batch",
            extra={
                "product_id": str(product_id),
                "original_batch_number": bn or None,
                "batch_number": batch.batch_number,
                "units": qty,
            },
        )
        return batch

    new_number = _restored_batch_number()
    batch = StockBatch.objects.create(
        product_id=product_id,
        batch_number=new_number,
        expiry_date=expiry,
        stock=qty,
        unit_cost=unit_cost or 0,
    )

    logger.warning(
        "Originating batch missing; stock restored into a new batch",
        extra={
            "product_id": str(product_id),
            "original_batch_number": bn or None,
            "batch_number": new_number,
            "units": qty,
        },
    )
    return batch
