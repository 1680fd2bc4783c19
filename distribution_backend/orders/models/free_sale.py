# orders/models/free_sale.py

"""
FREE SALE (PROMOTIONAL STOCK ISSUE)

Stock leaves the warehouse without an invoice or balance effect. The batches
it was drawn from (FIFO by expiry) are recorded so deletion can return the
units to exactly those batches.
"""

import uuid
from decimal import Decimal

from django.conf import settings
from django.db import models

from parties.models import Counterparty
from products.models import Product


class FreeSale(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    product = models.ForeignKey(Product, on_delete=models.PROTECT, related_name="free_sales")
    counterparty = models.ForeignKey(
        Counterparty,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="free_sales",
    )

    description = models.CharField(max_length=255, blank=True, default="")
    sale_person = models.CharField(max_length=255)
    sale_date = models.DateField()

    units = models.PositiveIntegerField()
    sub_total = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="free_sales",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        return f"Free issue {self.product} x {self.units}"


class FreeSaleAllocation(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    free_sale = models.ForeignKey(FreeSale, on_delete=models.CASCADE, related_name="allocations")
    batch_number = models.CharField(max_length=128)
    expiry_date = models.DateField(null=True, blank=True)
    units = models.PositiveIntegerField()

    class Meta:
        ordering = ["expiry_date", "batch_number"]

    def __str__(self):
        return f"{self.batch_number} x {self.units}"
