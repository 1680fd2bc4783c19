# orders/admin.py

from django.contrib import admin

from orders.models import FreeSale, FreeSaleAllocation, Order, OrderItem, Recovery


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    can_delete = False
    readonly_fields = (
        "product",
        "estimate_product_name",
        "batch_number",
        "expiry_date",
        "units",
        "returned_units",
        "unit_price",
        "discount",
        "total",
        "unit_cost",
        "profit",
    )


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    """
    Read-mostly: stock, balances and distributions only move through
    orders.services, so every money field is read-only here.
    """

    list_display = ("invoice_number", "type", "status", "counterparty", "total", "paid_amount", "due_amount", "created_at")
    list_filter = ("type", "status")
    search_fields = ("invoice_number", "counterparty__name", "estimate_customer_name")
    readonly_fields = (
        "type",
        "counterparty",
        "original_order",
        "subtotal",
        "total",
        "paid_amount",
        "due_amount",
        "net_value",
        "profit",
        "recovered_amount",
        "recovered_date",
        "recovered_by",
        "created_by",
        "created_at",
        "updated_at",
    )
    inlines = [OrderItemInline]

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(Recovery)
class RecoveryAdmin(admin.ModelAdmin):
    list_display = ("invoice_number", "counterparty", "amount", "due_before", "due_after", "recovered_date")
    search_fields = ("invoice_number", "counterparty__name")

    def has_change_permission(self, request, obj=None):
        return False


class FreeSaleAllocationInline(admin.TabularInline):
    model = FreeSaleAllocation
    extra = 0
    can_delete = False
    readonly_fields = ("batch_number", "expiry_date", "units")


@admin.register(FreeSale)
class FreeSaleAdmin(admin.ModelAdmin):
    list_display = ("product", "units", "sale_person", "sale_date", "counterparty")
    readonly_fields = ("product", "units", "created_by", "created_at")
    inlines = [FreeSaleAllocationInline]
