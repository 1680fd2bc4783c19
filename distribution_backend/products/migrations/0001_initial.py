"""
======================================================
PATH: products/migrations/0001_initial.py
======================================================
MIGRATION: CREATE Product + StockBatch
"""

from __future__ import annotations

import uuid
from decimal import Decimal

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Product",
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
                ("name", models.CharField(db_index=True, max_length=255, unique=True)),
                ("item_code", models.CharField(blank=True, db_index=True, default="", max_length=64)),
                ("company", models.CharField(blank=True, default="", max_length=255)),
                ("generic", models.CharField(blank=True, default="", max_length=255)),
                ("pack_size", models.CharField(blank=True, default="", max_length=64)),
                ("product_type", models.CharField(blank=True, default="", max_length=64)),
                ("carton_size", models.PositiveIntegerField(default=0)),
                ("retail_price", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12)),
                ("trade_price", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12)),
                ("wholesale_price", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12)),
                ("federal_tax", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=6)),
                ("gst", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=6)),
                ("sales_tax", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=6)),
                ("quantity_alert", models.PositiveIntegerField(default=0)),
                (
                    "status",
                    models.CharField(
                        choices=[("active", "Active"), ("inactive", "Inactive")],
                        default="active",
                        max_length=16,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["name"],
                "indexes": [
                    models.Index(fields=["item_code"], name="products_pr_item_co_3f9a1c_idx"),
                    models.Index(fields=["status", "name"], name="products_pr_status_7d2b4e_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="StockBatch",
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
                    "batch_number",
                    models.CharField(
                        help_text="Manufacturer / supplier batch reference",
                        max_length=128,
                    ),
                ),
                ("expiry_date", models.DateField()),
                (
                    "stock",
                    models.PositiveIntegerField(
                        default=0,
                        help_text="Units on hand (service-managed only)",
                    ),
                ),
                (
                    "unit_cost",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("0.00"),
                        help_text="Cost basis per unit (used for sale profit)",
                        max_digits=12,
                    ),
                ),
                ("purchase_price", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12)),
                ("mrp", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12)),
                ("discount_per_unit", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "product",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="stock_batches",
                        to="products.product",
                    ),
                ),
            ],
            options={
                "ordering": ["expiry_date", "created_at"],
                "indexes": [
                    models.Index(fields=["product", "expiry_date"], name="products_st_product_a41c2e_idx"),
                    models.Index(fields=["expiry_date"], name="products_st_expiry__9e0b7f_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("product", "batch_number"),
                        name="unique_batch_number_per_product",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(stock__gte=0),
                        name="chk_stockbatch_stock_gte_zero",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(unit_cost__gte=0),
                        name="chk_stockbatch_unit_cost_gte_zero",
                    ),
                ],
            },
        ),
    ]
