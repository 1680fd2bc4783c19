# orders/models/order_item.py

"""
ORDER ITEM (ONE LINE OF AN ORDER)

- References Product by FK and the batch by batch_number (batches can be
  deleted and recreated, the line keeps the number it moved).
- returned_units tracks how much of this line came back through returns;
  it can never exceed units.
- unit_cost / profit are snapshots taken when the order was written.
"""

import uuid
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import F, Q

from products.models import Product

from .order import Order


class OrderItem(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="items")

    product = models.ForeignKey(
        Product,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="order_items",
    )
    estimate_product_name = models.CharField(max_length=255, blank=True, default="")

    batch_number = models.CharField(max_length=128, blank=True, default="")
    expiry_date = models.DateField(null=True, blank=True)

    units = models.PositiveIntegerField()
    returned_units = models.PositiveIntegerField(default=0)

    unit_price = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    discount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    total = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))

    unit_cost = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    profit = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at"]
        indexes = [
            models.Index(fields=["product", "batch_number"], name="orders_orde_product_4c2a9b_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(units__gt=0),
                name="chk_orderitem_units_gt_zero",
            ),
            models.CheckConstraint(
                condition=Q(returned_units__lte=F("units")),
                name="chk_orderitem_returned_lte_units",
            ),
        ]

    def clean(self):
        if not self.product_id and not (self.estimate_product_name or "").strip():
            raise ValidationError({"product": "product or estimate_product_name is required"})

        if self.units is not None and self.returned_units is not None and self.returned_units > self.units:
            raise ValidationError({"returned_units": "returned_units cannot exceed units"})

    def save(self, *args, **kwargs):
        self.full_clean()
        super().save(*args, **kwargs)

    @property
    def remaining_units(self) -> int:
        return int(self.units or 0) - int(self.returned_units or 0)

    @property
    def display_name(self) -> str:
        if self.product_id:
            return getattr(self.product, "name", "")
        return self.estimate_product_name

    def __str__(self):
        return f"{self.display_name} x {self.units} ({self.batch_number or '-'})"
