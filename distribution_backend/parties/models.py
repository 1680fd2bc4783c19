# parties/models.py

"""
COUNTERPARTY (CUSTOMER / SUPPLIER LEDGER HOLDER)

One row per trading partner. A partner may be a supplier, a customer, or both.

Running balance:
- pay      what WE owe the counterparty (purchases on credit)
- receive  what the counterparty owes US (sales on credit)

NETTING INVARIANT:
- After any service adjustment, at most one of pay / receive is non-zero.
- pay / receive are mutated ONLY via parties.services.balance.
"""

import uuid
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q


class Counterparty(models.Model):
    ROLE_SUPPLIER = "supplier"
    ROLE_CUSTOMER = "customer"
    ROLE_BOTH = "both"

    ROLE_CHOICES = [
        (ROLE_SUPPLIER, "Supplier"),
        (ROLE_CUSTOMER, "Customer"),
        (ROLE_BOTH, "Supplier & Customer"),
    ]

    STATUS_ACTIVE = "active"
    STATUS_INACTIVE = "inactive"

    STATUS_CHOICES = [
        (STATUS_ACTIVE, "Active"),
        (STATUS_INACTIVE, "Inactive"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    name = models.CharField(max_length=255, db_index=True)
    role = models.CharField(max_length=16, choices=ROLE_CHOICES, default=ROLE_CUSTOMER)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_ACTIVE)

    phone = models.CharField(max_length=32, blank=True, default="")
    email = models.EmailField(blank=True, default="")
    address = models.TextField(blank=True, default="")
    area = models.CharField(max_length=128, blank=True, default="")

    credit_period = models.PositiveIntegerField(default=0, help_text="Days")
    credit_limit = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    opening_balance = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))

    # Running balance (service-managed only)
    pay = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    receive = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]
        indexes = [
            models.Index(fields=["role", "status"], name="parties_cou_role_8c1f3a_idx"),
            models.Index(fields=["name"], name="parties_cou_name_5b2e7d_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(pay__gte=0),
                name="chk_counterparty_pay_gte_zero",
            ),
            models.CheckConstraint(
                condition=Q(receive__gte=0),
                name="chk_counterparty_receive_gte_zero",
            ),
        ]

    def clean(self):
        if not (self.name or "").strip():
            raise ValidationError({"name": "name is required"})
        if self.credit_limit is not None and self.credit_limit < Decimal("0.00"):
            raise ValidationError({"credit_limit": "credit_limit cannot be negative"})

    def save(self, *args, **kwargs):
        self.name = (self.name or "").strip()
        self.full_clean()
        super().save(*args, **kwargs)

    @property
    def net_position(self) -> Decimal:
        """
        Positive: counterparty owes us. Negative: we owe the counterparty.
        """
        return (self.receive or Decimal("0.00")) - (self.pay or Decimal("0.00"))

    def __str__(self):
        return f"{self.name} ({self.role})"
