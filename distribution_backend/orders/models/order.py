# orders/models/order.py

"""
ORDER (ONE COMMERCIAL TRANSACTION)

Types:
- sale / purchase               stock + counterparty balance effects
- sale_return / purchase_return linked to the original via original_order
- estimated                     quotation only; no stock, balance or profit

Money rules:
- due_amount = total - paid_amount at creation; recoveries lower it.
- profit is the sum of line profits (sales only; negative on sale returns).

Immutability:
- Orders are created and deleted only through orders.services.
- (invoice_number, type) is unique for sale and purchase orders.
"""

import uuid
from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q

from parties.models import Counterparty


class Order(models.Model):
    TYPE_PURCHASE = "purchase"
    TYPE_SALE = "sale"
    TYPE_PURCHASE_RETURN = "purchase_return"
    TYPE_SALE_RETURN = "sale_return"
    TYPE_ESTIMATED = "estimated"

    TYPE_CHOICES = [
        (TYPE_PURCHASE, "Purchase"),
        (TYPE_SALE, "Sale"),
        (TYPE_PURCHASE_RETURN, "Purchase Return"),
        (TYPE_SALE_RETURN, "Sale Return"),
        (TYPE_ESTIMATED, "Estimated Sale"),
    ]

    STATUS_PENDING = "pending"
    STATUS_COMPLETED = "completed"
    STATUS_CANCELLED = "cancelled"
    STATUS_RECOVERED = "recovered"
    STATUS_RETURNED = "returned"

    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_COMPLETED, "Completed"),
        (STATUS_CANCELLED, "Cancelled"),
        (STATUS_RECOVERED, "Recovered"),
        (STATUS_RETURNED, "Returned"),
    ]

    RETURN_TYPE_FOR = {
        TYPE_SALE: TYPE_SALE_RETURN,
        TYPE_PURCHASE: TYPE_PURCHASE_RETURN,
    }

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    invoice_number = models.CharField(max_length=64, db_index=True)
    type = models.CharField(max_length=20, choices=TYPE_CHOICES)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_COMPLETED)

    counterparty = models.ForeignKey(
        Counterparty,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="orders",
    )
    booker = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="booked_orders",
    )
    original_order = models.ForeignKey(
        "self",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="return_orders",
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="created_orders",
    )

    subtotal = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    total = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    paid_amount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    due_amount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    net_value = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    profit = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))

    due_date = models.DateField(null=True, blank=True)
    estimate_customer_name = models.CharField(max_length=255, blank=True, default="")

    recovered_amount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    recovered_date = models.DateField(null=True, blank=True)
    recovered_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="recovered_orders",
    )

    note = models.TextField(blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["type", "status"], name="orders_orde_type_3b8d21_idx"),
            models.Index(fields=["counterparty", "created_at"], name="orders_orde_counter_6e4f90_idx"),
            models.Index(fields=["created_at"], name="orders_orde_created_1a7c55_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["invoice_number", "type"],
                condition=Q(type__in=["sale", "purchase"]),
                name="unique_invoice_per_order_type",
            ),
            models.CheckConstraint(
                condition=Q(due_amount__gte=0),
                name="chk_order_due_amount_gte_zero",
            ),
            models.CheckConstraint(
                condition=Q(paid_amount__gte=0),
                name="chk_order_paid_amount_gte_zero",
            ),
        ]

    def clean(self):
        if not (self.invoice_number or "").strip():
            raise ValidationError({"invoice_number": "invoice_number is required"})

        if self.type != self.TYPE_ESTIMATED and not self.counterparty_id:
            raise ValidationError({"counterparty": "counterparty is required"})

        if self.type in (self.TYPE_SALE_RETURN, self.TYPE_PURCHASE_RETURN) and not self.original_order_id:
            raise ValidationError({"original_order": "return orders must reference the original order"})

    def save(self, *args, **kwargs):
        self.invoice_number = (self.invoice_number or "").strip()
        self.full_clean()
        super().save(*args, **kwargs)

    @property
    def is_return(self) -> bool:
        return self.type in (self.TYPE_SALE_RETURN, self.TYPE_PURCHASE_RETURN)

    @property
    def balance_type(self) -> str | None:
        """
        Which side of the counterparty ledger this order moved:
        sale / sale_return -> "sale", purchase / purchase_return -> "purchase".
        """
        if self.type in (self.TYPE_SALE, self.TYPE_SALE_RETURN):
            return self.TYPE_SALE
        if self.type in (self.TYPE_PURCHASE, self.TYPE_PURCHASE_RETURN):
            return self.TYPE_PURCHASE
        return None

    def __str__(self):
        return f"{self.get_type_display()} {self.invoice_number} ({self.status})"
