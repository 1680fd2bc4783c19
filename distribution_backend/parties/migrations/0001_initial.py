"""
======================================================
PATH: parties/migrations/0001_initial.py
======================================================
MIGRATION: CREATE Counterparty
"""

from __future__ import annotations

import uuid
from decimal import Decimal

from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Counterparty",
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
                ("name", models.CharField(db_index=True, max_length=255)),
                (
                    "role",
                    models.CharField(
                        choices=[
                            ("supplier", "Supplier"),
                            ("customer", "Customer"),
                            ("both", "Supplier & Customer"),
                        ],
                        default="customer",
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
                ("phone", models.CharField(blank=True, default="", max_length=32)),
                ("email", models.EmailField(blank=True, default="", max_length=254)),
                ("address", models.TextField(blank=True, default="")),
                ("area", models.CharField(blank=True, default="", max_length=128)),
                ("credit_period", models.PositiveIntegerField(default=0, help_text="Days")),
                ("credit_limit", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("opening_balance", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("pay", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("receive", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["name"],
                "indexes": [
                    models.Index(fields=["role", "status"], name="parties_cou_role_8c1f3a_idx"),
                    models.Index(fields=["name"], name="parties_cou_name_5b2e7d_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(pay__gte=0),
                        name="chk_counterparty_pay_gte_zero",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(receive__gte=0),
                        name="chk_counterparty_receive_gte_zero",
                    ),
                ],
            },
        ),
    ]
