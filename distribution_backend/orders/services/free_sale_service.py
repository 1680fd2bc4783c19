# orders/services/free_sale_service.py

"""
FREE SALES

Promotional units leave stock FIFO-by-expiry. The batches drawn from are
stored as FreeSaleAllocation rows so deletion can give back exactly what was
taken.
"""

from __future__ import annotations

import logging

from django.utils import timezone

from core.exceptions import InputValidationError
from core.lookups import get_or_not_found
from core.money import money, to_int_qty
from core.transactions import retry_on_conflict
from orders.models import FreeSale, FreeSaleAllocation
from parties.services.counterparty_service import get_counterparty
from products.services.product_service import get_product
from products.services.stock_fifo import deduct_stock_fifo, restore_stock

logger = logging.getLogger("orders.free_sale")


@retry_on_conflict
def create_free_sale(*, data: dict, user=None) -> FreeSale:
    product_id = data.get("product_id")
    if not product_id:
        raise InputValidationError("product_id is required")
    sale_person = (data.get("sale_person") or "").strip()
    if not sale_person:
        raise InputValidationError("sale_person is required")
    units = to_int_qty(data.get("units"))
    if units <= 0:
        raise InputValidationError("units must be greater than zero")

    product = get_product(product_id)
    counterparty = get_counterparty(data["counterparty_id"]) if data.get("counterparty_id") else None

    plan = deduct_stock_fifo(product_id=product.id, units=units)

    free_sale = FreeSale.objects.create(
        product=product,
        counterparty=counterparty,
        description=(data.get("description") or "").strip(),
        sale_person=sale_person,
        sale_date=data.get("sale_date") or timezone.localdate(),
        units=units,
        sub_total=money(data.get("sub_total")),
        created_by=user,
    )
    FreeSaleAllocation.objects.bulk_create(
        [
            FreeSaleAllocation(
                free_sale=free_sale,
                batch_number=a.batch_number,
                expiry_date=a.expiry_date,
                units=a.units,
            )
            for a in plan.allocations
        ]
    )

    logger.info(
        "Free sale created",
        extra={"free_sale_id": str(free_sale.id), "product_id": str(product.id), "units": units},
    )
    return free_sale


@retry_on_conflict
def delete_free_sale(*, free_sale_id) -> bool:
    free_sale = get_or_not_found(FreeSale.objects.select_for_update(), free_sale_id, label="Free sale")

    for allocation in free_sale.allocations.all():
        restore_stock(
            product_id=free_sale.product_id,
            batch_number=allocation.batch_number,
            units=allocation.units,
            expiry_date=allocation.expiry_date,
        )

    free_sale.delete()
    logger.info("Free sale deleted", extra={"free_sale_id": str(free_sale_id)})
    return True
