# products/models/product.py

import uuid
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Sum


class Product(models.Model):
    """
    Represents a sellable pharmaceutical product.

    STOCK MODEL (IMPORTANT):
    - Product itself does NOT store stock
    - Stock lives in StockBatch (one row per batch_number)
    - Total stock = sum of batch stock

    Classification (company, generic, pack size, product type) is reference
    data maintained elsewhere; we keep the labels as plain strings.
    """

    STATUS_ACTIVE = "active"
    STATUS_INACTIVE = "inactive"

    STATUS_CHOICES = [
        (STATUS_ACTIVE, "Active"),
        (STATUS_INACTIVE, "Inactive"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    name = models.CharField(max_length=255, unique=True, db_index=True)
    item_code = models.CharField(max_length=64, blank=True, default="", db_index=True)

    company = models.CharField(max_length=255, blank=True, default="")
    generic = models.CharField(max_length=255, blank=True, default="")
    pack_size = models.CharField(max_length=64, blank=True, default="")
    product_type = models.CharField(max_length=64, blank=True, default="")
    carton_size = models.PositiveIntegerField(default=0)

    retail_price = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    trade_price = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    wholesale_price = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))

    federal_tax = models.DecimalField(max_digits=6, decimal_places=2, default=Decimal("0.00"))
    gst = models.DecimalField(max_digits=6, decimal_places=2, default=Decimal("0.00"))
    sales_tax = models.DecimalField(max_digits=6, decimal_places=2, default=Decimal("0.00"))

    quantity_alert = models.PositiveIntegerField(default=0)

    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_ACTIVE)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]
        indexes = [
            models.Index(fields=["item_code"], name="products_pr_item_co_3f9a1c_idx"),
            models.Index(fields=["status", "name"], name="products_pr_status_7d2b4e_idx"),
        ]

    def __str__(self):
        return self.name

    def clean(self):
        if not (self.name or "").strip():
            raise ValidationError({"name": "name is required"})

        for field in ("retail_price", "trade_price", "wholesale_price"):
            value = getattr(self, field)
            if value is not None and Decimal(value) < Decimal("0.00"):
                raise ValidationError({field: f"{field} cannot be negative"})

    def save(self, *args, **kwargs):
        self.name = (self.name or "").strip()
        self.full_clean()
        super().save(*args, **kwargs)

    @property
    def total_stock(self) -> int:
        return self.stock_batches.aggregate(total=Sum("stock")).get("total") or 0

    @property
    def is_low_stock(self) -> bool:
        return self.total_stock <= int(self.quantity_alert or 0)
