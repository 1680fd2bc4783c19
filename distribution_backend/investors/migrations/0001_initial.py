"""
======================================================
PATH: investors/migrations/0001_initial.py
======================================================
MIGRATION: CREATE Investor, InvestorInvestment, InvestorLedgerEntry,
           InvestorProfitRecord
"""

from __future__ import annotations

import uuid
from decimal import Decimal

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("orders", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Investor",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        primary_key=True,
                        default=uuid.uuid4,
                        editable=False,
                        serialize=False,
                    ),
                ),
                ("name", models.CharField(max_length=255)),
                (
                    "type",
                    models.CharField(
                        choices=[("investor", "Investor"), ("company", "Company")],
                        default="investor",
                        max_length=16,
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[("active", "Active"), ("inactive", "Inactive")],
                        default="active",
                        max_length=16,
                    ),
                ),
                ("is_house", models.BooleanField(default=False)),
                ("join_date", models.DateField()),
                (
                    "shares",
                    models.DecimalField(
                        decimal_places=4,
                        default=Decimal("0.0000"),
                        help_text="Percent of total active capital (service-managed)",
                        max_digits=9,
                    ),
                ),
                (
                    "profit_percentage",
                    models.DecimalField(
                        blank=True,
                        decimal_places=2,
                        help_text="Percent of the base share paid to the investor (null = 100)",
                        max_digits=5,
                        null=True,
                    ),
                ),
                ("credit", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("debit", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("mobile_number", models.CharField(blank=True, default="", max_length=32)),
                ("father_name", models.CharField(blank=True, default="", max_length=255)),
                ("address", models.TextField(blank=True, default="")),
                ("cnic_number", models.CharField(blank=True, default="", max_length=32)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["join_date", "name"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("is_house",),
                        condition=models.Q(is_house=True),
                        name="unique_house_investor",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(credit__gte=0),
                        name="chk_investor_credit_gte_zero",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(debit__gte=0),
                        name="chk_investor_debit_gte_zero",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="InvestorInvestment",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        primary_key=True,
                        default=uuid.uuid4,
                        editable=False,
                        serialize=False,
                    ),
                ),
                (
                    "investor",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="investments",
                        to="investors.investor",
                    ),
                ),
                ("amount", models.DecimalField(decimal_places=2, max_digits=14)),
                ("date", models.DateField()),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "ordering": ["date", "created_at"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(amount__gt=0),
                        name="chk_investment_amount_gt_zero",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="InvestorLedgerEntry",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        primary_key=True,
                        default=uuid.uuid4,
                        editable=False,
                        serialize=False,
                    ),
                ),
                (
                    "investor",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="ledger_entries",
                        to="investors.investor",
                    ),
                ),
                (
                    "entry_type",
                    models.CharField(
                        choices=[("debit", "Debit"), ("credit", "Credit")],
                        max_length=8,
                    ),
                ),
                ("amount", models.DecimalField(decimal_places=2, max_digits=14)),
                ("note", models.CharField(blank=True, default="", max_length=255)),
                ("date", models.DateField()),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "ordering": ["-date", "-created_at"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(amount__gt=0),
                        name="chk_ledger_entry_amount_gt_zero",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="InvestorProfitRecord",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        primary_key=True,
                        default=uuid.uuid4,
                        editable=False,
                        serialize=False,
                    ),
                ),
                (
                    "order",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="profit_records",
                        to="orders.order",
                    ),
                ),
                ("invoice_number", models.CharField(blank=True, default="", max_length=64)),
                (
                    "investor",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="profit_records",
                        to="investors.investor",
                    ),
                ),
                ("month", models.CharField(help_text="YYYY-MM", max_length=7)),
                ("sales", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("gross_profit", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("expense", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("charity", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("net_profit", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("investor_share", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("owner_share", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("total", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("is_reversal", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["investor", "month"], name="investors_i_investo_5d0e3a_idx"),
                    models.Index(fields=["order"], name="investors_i_order_i_8b7f12_idx"),
                ],
            },
        ),
    ]
