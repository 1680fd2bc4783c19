# investors/models.py

"""
INVESTOR PROFIT-SHARING MODELS

- Investor: capital partner (type=investor) or the business itself
  (type=company). Exactly one company row is flagged is_house and receives
  the owner share of every distribution.
- InvestorInvestment: capital contributions; shares are derived from them.
- InvestorLedgerEntry: manual debit / credit entries (payouts, corrections).
- InvestorProfitRecord: append-only, one row per investor per sale order.

Running balance:
- credit  what the business owes the investor
- debit   what the investor owes the business (payouts beyond credit)
"""

import uuid
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q


class Investor(models.Model):
    TYPE_INVESTOR = "investor"
    TYPE_COMPANY = "company"

    TYPE_CHOICES = [
        (TYPE_INVESTOR, "Investor"),
        (TYPE_COMPANY, "Company"),
    ]

    STATUS_ACTIVE = "active"
    STATUS_INACTIVE = "inactive"

    STATUS_CHOICES = [
        (STATUS_ACTIVE, "Active"),
        (STATUS_INACTIVE, "Inactive"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    name = models.CharField(max_length=255)
    type = models.CharField(max_length=16, choices=TYPE_CHOICES, default=TYPE_INVESTOR)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_ACTIVE)
    is_house = models.BooleanField(default=False)

    join_date = models.DateField()

    shares = models.DecimalField(
        max_digits=9,
        decimal_places=4,
        default=Decimal("0.0000"),
        help_text="Percent of total active capital (service-managed)",
    )
    profit_percentage = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        null=True,
        blank=True,
        help_text="Percent of the base share paid to the investor (null = 100)",
    )

    credit = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    debit = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))

    mobile_number = models.CharField(max_length=32, blank=True, default="")
    father_name = models.CharField(max_length=255, blank=True, default="")
    address = models.TextField(blank=True, default="")
    cnic_number = models.CharField(max_length=32, blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["join_date", "name"]
        constraints = [
            models.UniqueConstraint(
                fields=["is_house"],
                condition=Q(is_house=True),
                name="unique_house_investor",
            ),
            models.CheckConstraint(
                condition=Q(credit__gte=0),
                name="chk_investor_credit_gte_zero",
            ),
            models.CheckConstraint(
                condition=Q(debit__gte=0),
                name="chk_investor_debit_gte_zero",
            ),
        ]

    def clean(self):
        if not (self.name or "").strip():
            raise ValidationError({"name": "name is required"})

        if self.profit_percentage is not None and not (
            Decimal("0") <= self.profit_percentage <= Decimal("100")
        ):
            raise ValidationError({"profit_percentage": "profit_percentage must be between 0 and 100"})

        if self.is_house and self.type != self.TYPE_COMPANY:
            raise ValidationError({"is_house": "the house account must be of type company"})

    def save(self, *args, **kwargs):
        self.full_clean()
        super().save(*args, **kwargs)

    @property
    def net_balance(self) -> Decimal:
        return (self.credit or Decimal("0.00")) - (self.debit or Decimal("0.00"))

    def __str__(self):
        return f"{self.name} ({self.type})"


class InvestorInvestment(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    investor = models.ForeignKey(Investor, on_delete=models.CASCADE, related_name="investments")
    amount = models.DecimalField(max_digits=14, decimal_places=2)
    date = models.DateField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["date", "created_at"]
        constraints = [
            models.CheckConstraint(
                condition=Q(amount__gt=0),
                name="chk_investment_amount_gt_zero",
            ),
        ]


class InvestorLedgerEntry(models.Model):
    TYPE_DEBIT = "debit"
    TYPE_CREDIT = "credit"

    TYPE_CHOICES = [
        (TYPE_DEBIT, "Debit"),
        (TYPE_CREDIT, "Credit"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    investor = models.ForeignKey(Investor, on_delete=models.CASCADE, related_name="ledger_entries")
    entry_type = models.CharField(max_length=8, choices=TYPE_CHOICES)
    amount = models.DecimalField(max_digits=14, decimal_places=2)
    note = models.CharField(max_length=255, blank=True, default="")
    date = models.DateField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-date", "-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=Q(amount__gt=0),
                name="chk_ledger_entry_amount_gt_zero",
            ),
        ]


class InvestorProfitRecord(models.Model):
    """
    Append-only record of one investor's share of one sale order.

    Reversals (sale deleted) are new rows with negated amounts and
    is_reversal=True; existing rows are never edited or deleted.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    order = models.ForeignKey(
        "orders.Order",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="profit_records",
    )
    invoice_number = models.CharField(max_length=64, blank=True, default="")
    investor = models.ForeignKey(Investor, on_delete=models.PROTECT, related_name="profit_records")

    month = models.CharField(max_length=7, help_text="YYYY-MM")

    sales = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    gross_profit = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    expense = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    charity = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    net_profit = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    investor_share = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    owner_share = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    total = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))

    is_reversal = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["investor", "month"], name="investors_i_investo_5d0e3a_idx"),
            models.Index(fields=["order"], name="investors_i_order_i_8b7f12_idx"),
        ]

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError("InvestorProfitRecord is append-only")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("InvestorProfitRecord is append-only")

    def __str__(self):
        return f"{self.investor} {self.month} {self.investor_share}"
