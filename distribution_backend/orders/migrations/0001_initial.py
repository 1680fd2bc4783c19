"""
======================================================
PATH: orders/migrations/0001_initial.py
======================================================
MIGRATION: CREATE Order, OrderItem, Recovery, FreeSale, FreeSaleAllocation
"""

from __future__ import annotations

import uuid
from decimal import Decimal

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


def _money(**kwargs):
    return models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14, **kwargs)


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ("parties", "0001_initial"),
        ("products", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Order",
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
                ("invoice_number", models.CharField(db_index=True, max_length=64)),
                (
                    "type",
                    models.CharField(
                        choices=[
                            ("purchase", "Purchase"),
                            ("sale", "Sale"),
                            ("purchase_return", "Purchase Return"),
                            ("sale_return", "Sale Return"),
                            ("estimated", "Estimated Sale"),
                        ],
                        max_length=20,
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("pending", "Pending"),
                            ("completed", "Completed"),
                            ("cancelled", "Cancelled"),
                            ("recovered", "Recovered"),
                            ("returned", "Returned"),
                        ],
                        default="completed",
                        max_length=16,
                    ),
                ),
                (
                    "counterparty",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="orders",
                        to="parties.counterparty",
                    ),
                ),
                (
                    "booker",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="booked_orders",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "original_order",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="return_orders",
                        to="orders.order",
                    ),
                ),
                (
                    "created_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="created_orders",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                ("subtotal", _money()),
                ("total", _money()),
                ("paid_amount", _money()),
                ("due_amount", _money()),
                ("net_value", _money()),
                ("profit", _money()),
                ("due_date", models.DateField(blank=True, null=True)),
                ("estimate_customer_name", models.CharField(blank=True, default="", max_length=255)),
                ("recovered_amount", _money()),
                ("recovered_date", models.DateField(blank=True, null=True)),
                (
                    "recovered_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="recovered_orders",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                ("note", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["type", "status"], name="orders_orde_type_3b8d21_idx"),
                    models.Index(fields=["counterparty", "created_at"], name="orders_orde_counter_6e4f90_idx"),
                    models.Index(fields=["created_at"], name="orders_orde_created_1a7c55_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("invoice_number", "type"),
                        condition=models.Q(type__in=["sale", "purchase"]),
                        name="unique_invoice_per_order_type",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(due_amount__gte=0),
                        name="chk_order_due_amount_gte_zero",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(paid_amount__gte=0),
                        name="chk_order_paid_amount_gte_zero",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="OrderItem",
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
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="items",
                        to="orders.order",
                    ),
                ),
                (
                    "product",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="order_items",
                        to="products.product",
                    ),
                ),
                ("estimate_product_name", models.CharField(blank=True, default="", max_length=255)),
                ("batch_number", models.CharField(blank=True, default="", max_length=128)),
                ("expiry_date", models.DateField(blank=True, null=True)),
                ("units", models.PositiveIntegerField()),
                ("returned_units", models.PositiveIntegerField(default=0)),
                ("unit_price", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12)),
                ("discount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12)),
                ("total", _money()),
                ("unit_cost", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12)),
                ("profit", _money()),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "ordering": ["created_at"],
                "indexes": [
                    models.Index(fields=["product", "batch_number"], name="orders_orde_product_4c2a9b_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(units__gt=0),
                        name="chk_orderitem_units_gt_zero",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(returned_units__lte=models.F("units")),
                        name="chk_orderitem_returned_lte_units",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Recovery",
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
                        related_name="recoveries",
                        to="orders.order",
                    ),
                ),
                ("invoice_number", models.CharField(blank=True, max_length=64)),
                (
                    "counterparty",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="recoveries",
                        to="parties.counterparty",
                    ),
                ),
                ("amount", models.DecimalField(decimal_places=2, max_digits=14)),
                ("due_before", _money()),
                ("due_after", _money()),
                ("recovered_date", models.DateField()),
                (
                    "recovered_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="recoveries",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "ordering": ["created_at"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(amount__gt=0),
                        name="chk_recovery_amount_gt_zero",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="FreeSale",
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
                    "product",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="free_sales",
                        to="products.product",
                    ),
                ),
                (
                    "counterparty",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="free_sales",
                        to="parties.counterparty",
                    ),
                ),
                ("description", models.CharField(blank=True, default="", max_length=255)),
                ("sale_person", models.CharField(max_length=255)),
                ("sale_date", models.DateField()),
                ("units", models.PositiveIntegerField()),
                ("sub_total", _money()),
                (
                    "created_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="free_sales",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="FreeSaleAllocation",
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
                    "free_sale",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="allocations",
                        to="orders.freesale",
                    ),
                ),
                ("batch_number", models.CharField(max_length=128)),
                ("expiry_date", models.DateField(blank=True, null=True)),
                ("units", models.PositiveIntegerField()),
            ],
            options={
                "ordering": ["expiry_date", "batch_number"],
            },
        ),
    ]
