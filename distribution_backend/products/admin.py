# products/admin.py
"""
=====================================================
PATH: products/admin.py
=====================================================

Admin rules:
- Products are editable.
- Batch stock is service-managed (purchases, sales, returns, free issues),
  so batches are shown read-only.
"""

from __future__ import annotations

from django.contrib import admin

from products.models import Product, StockBatch


class StockBatchInline(admin.TabularInline):
    model = StockBatch
    extra = 0
    can_delete = False
    fields = ("batch_number", "expiry_date", "stock", "unit_cost", "mrp")
    readonly_fields = fields
    ordering = ("expiry_date", "created_at")

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ("name", "item_code", "company", "trade_price", "retail_price", "status")
    list_filter = ("status", "company", "product_type")
    search_fields = ("name", "item_code", "generic")
    inlines = [StockBatchInline]


@admin.register(StockBatch)
class StockBatchAdmin(admin.ModelAdmin):
    list_display = ("product", "batch_number", "expiry_date", "stock", "unit_cost")
    list_filter = ("expiry_date",)
    search_fields = ("batch_number", "product__name")
    readonly_fields = ("stock", "unit_cost", "created_at", "updated_at")
