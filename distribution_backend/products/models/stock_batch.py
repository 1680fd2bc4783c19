# products/models/stock_batch.py

"""
STOCK BATCH

One manufacturer batch of a product, identified by batch_number.

Rules:
- (product, batch_number) is unique: purchases of an existing batch number
  top up the same row.
- stock is mutated ONLY via products.services (inventory / stock_fifo).
- stock can never go negative (DB check constraint + service validation).
- unit_cost is the cost basis used for sale profit.
"""

import uuid
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q

from .product import Product


class StockBatch(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    product = models.ForeignKey(
        Product,
        on_delete=models.CASCADE,
        related_name="stock_batches",
    )

    batch_number = models.CharField(
        max_length=128,
        help_text="Manufacturer / supplier batch reference",
    )

    expiry_date = models.DateField()

    stock = models.PositiveIntegerField(
        default=0,
        help_text="Units on hand (service-managed only)",
    )

    unit_cost = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
        help_text="Cost basis per unit (used for sale profit)",
    )
    purchase_price = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    mrp = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    discount_per_unit = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["expiry_date", "created_at"]
        indexes = [
            models.Index(fields=["product", "expiry_date"], name="products_st_product_a41c2e_idx"),
            models.Index(fields=["expiry_date"], name="products_st_expiry__9e0b7f_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["product", "batch_number"],
                name="unique_batch_number_per_product",
            ),
            models.CheckConstraint(
                condition=Q(stock__gte=0),
                name="chk_stockbatch_stock_gte_zero",
            ),
            models.CheckConstraint(
                condition=Q(unit_cost__gte=0),
                name="chk_stockbatch_unit_cost_gte_zero",
            ),
        ]

    def clean(self):
        if not (self.batch_number or "").strip():
            raise ValidationError({"batch_number": "batch_number is required"})

        if self.stock is not None and self.stock < 0:
            raise ValidationError({"stock": "stock cannot be negative"})

        if not self.expiry_date:
            raise ValidationError({"expiry_date": "expiry_date is required"})

        if self.unit_cost is not None and self.unit_cost < Decimal("0.00"):
            raise ValidationError({"unit_cost": "unit_cost cannot be negative"})

    def save(self, *args, **kwargs):
        self.batch_number = (self.batch_number or "").strip()
        self.full_clean()
        super().save(*args, **kwargs)

    @property
    def stock_value(self) -> Decimal:
        return (self.unit_cost or Decimal("0.00")) * Decimal(int(self.stock or 0))

    def __str__(self):
        product_name = getattr(self.product, "name", "Product")
        return f"{product_name} | Batch {self.batch_number} | {self.stock} units"
