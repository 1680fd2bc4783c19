# orders/models/recovery.py

"""
RECOVERY (APPEND-ONLY PAYMENT RECORD)

One row per order touched by a recovery. Order.recovered_amount is the
running sum of these rows.
"""

import uuid
from decimal import Decimal

from django.conf import settings
from django.db import models
from django.db.models import Q

from parties.models import Counterparty

from .order import Order


class Recovery(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    # Kept when the order is deleted; the counterparty ledger already moved.
    order = models.ForeignKey(
        Order, on_delete=models.SET_NULL, null=True, blank=True, related_name="recoveries"
    )
    invoice_number = models.CharField(max_length=64, blank=True)
    counterparty = models.ForeignKey(Counterparty, on_delete=models.PROTECT, related_name="recoveries")

    amount = models.DecimalField(max_digits=14, decimal_places=2)
    due_before = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    due_after = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))

    recovered_date = models.DateField()
    recovered_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="recoveries",
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at"]
        constraints = [
            models.CheckConstraint(
                condition=Q(amount__gt=0),
                name="chk_recovery_amount_gt_zero",
            ),
        ]

    def __str__(self):
        return f"Recovery {self.amount} on {self.invoice_number or '-'}"
