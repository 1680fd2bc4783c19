# orders/api/serializers.py

from rest_framework import serializers

from orders.models import FreeSale, FreeSaleAllocation, Order, OrderItem, Recovery


# ============================================================
# READ SERIALIZERS
# ============================================================

class OrderItemSerializer(serializers.ModelSerializer):
    """
    Order line (read-only).
    product_name falls back to the free-text name on estimates.
    """

    product_name = serializers.SerializerMethodField()
    remaining_units = serializers.IntegerField(read_only=True)

    class Meta:
        model = OrderItem
        fields = [
            "id",
            "product",
            "product_name",
            "batch_number",
            "expiry_date",
            "units",
            "returned_units",
            "remaining_units",
            "unit_price",
            "discount",
            "total",
            "unit_cost",
            "profit",
        ]
        read_only_fields = fields

    def get_product_name(self, obj):
        return obj.display_name or "Item"


class OrderSerializer(serializers.ModelSerializer):
    counterparty_name = serializers.SerializerMethodField()
    items = OrderItemSerializer(many=True, read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "invoice_number",
            "type",
            "status",
            "counterparty",
            "counterparty_name",
            "estimate_customer_name",
            "booker",
            "original_order",
            "subtotal",
            "total",
            "paid_amount",
            "due_amount",
            "net_value",
            "profit",
            "due_date",
            "recovered_amount",
            "recovered_date",
            "note",
            "items",
            "created_at",
        ]
        read_only_fields = fields

    def get_counterparty_name(self, obj):
        cp = getattr(obj, "counterparty", None)
        return getattr(cp, "name", None)


class ProductHistoryLineSerializer(OrderItemSerializer):
    """One line of a product's sale or purchase history, with its order."""

    order = serializers.UUIDField(source="order.id", read_only=True)
    invoice_number = serializers.CharField(source="order.invoice_number", read_only=True)
    order_status = serializers.CharField(source="order.status", read_only=True)
    counterparty_name = serializers.CharField(source="order.counterparty.name", read_only=True, default=None)
    ordered_at = serializers.DateTimeField(source="order.created_at", read_only=True)

    class Meta(OrderItemSerializer.Meta):
        fields = OrderItemSerializer.Meta.fields + [
            "order",
            "invoice_number",
            "order_status",
            "counterparty_name",
            "ordered_at",
        ]
        read_only_fields = fields


class RecoverySerializer(serializers.ModelSerializer):
    class Meta:
        model = Recovery
        fields = [
            "id",
            "order",
            "invoice_number",
            "counterparty",
            "amount",
            "due_before",
            "due_after",
            "recovered_date",
        ]
        read_only_fields = fields


class FreeSaleAllocationSerializer(serializers.ModelSerializer):
    class Meta:
        model = FreeSaleAllocation
        fields = ["batch_number", "expiry_date", "units"]
        read_only_fields = fields


class FreeSaleSerializer(serializers.ModelSerializer):
    allocations = FreeSaleAllocationSerializer(many=True, read_only=True)

    class Meta:
        model = FreeSale
        fields = [
            "id",
            "product",
            "counterparty",
            "description",
            "sale_person",
            "sale_date",
            "units",
            "sub_total",
            "allocations",
            "created_at",
        ]
        read_only_fields = fields


# ============================================================
# COMMAND SERIALIZERS
# ============================================================

class OrderLineInputSerializer(serializers.Serializer):
    product_id = serializers.UUIDField(required=False, allow_null=True)
    estimate_product_name = serializers.CharField(max_length=255, required=False, allow_blank=True)
    batch_number = serializers.CharField(max_length=128, required=False, allow_blank=True)
    expiry_date = serializers.DateField(required=False, allow_null=True)
    units = serializers.IntegerField(min_value=1)
    unit_price = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, default=0)
    discount = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, default=0)
    total = serializers.DecimalField(max_digits=14, decimal_places=2, required=False, allow_null=True)
    mrp = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, default=0)


class OrderCommandSerializer(serializers.Serializer):
    """
    Payload shared by sales, purchases and estimates.
    Presence of business fields is enforced by the services so the error
    lists every missing field at once.
    """

    invoice_number = serializers.CharField(max_length=64, required=False, allow_blank=True)
    counterparty_id = serializers.UUIDField(required=False, allow_null=True)
    booker_id = serializers.UUIDField(required=False, allow_null=True)
    estimate_customer_name = serializers.CharField(max_length=255, required=False, allow_blank=True)
    status = serializers.ChoiceField(choices=Order.STATUS_CHOICES, required=False)
    subtotal = serializers.DecimalField(max_digits=14, decimal_places=2, required=False, allow_null=True)
    total = serializers.DecimalField(max_digits=14, decimal_places=2, required=False, allow_null=True)
    paid_amount = serializers.DecimalField(max_digits=14, decimal_places=2, required=False, allow_null=True)
    net_value = serializers.DecimalField(max_digits=14, decimal_places=2, required=False, allow_null=True)
    due_date = serializers.DateField(required=False, allow_null=True)
    note = serializers.CharField(required=False, allow_blank=True)
    items = OrderLineInputSerializer(many=True, required=False)


class ReturnLineInputSerializer(serializers.Serializer):
    product_id = serializers.UUIDField()
    batch_number = serializers.CharField(max_length=128)
    units = serializers.IntegerField(min_value=1)


class ReturnCommandSerializer(serializers.Serializer):
    invoice_number = serializers.CharField(max_length=64)
    order_type = serializers.ChoiceField(choices=[Order.TYPE_SALE, Order.TYPE_PURCHASE], default=Order.TYPE_SALE)
    note = serializers.CharField(required=False, allow_blank=True, default="")
    items = ReturnLineInputSerializer(many=True)


class RecoveryCommandSerializer(serializers.Serializer):
    order_ids = serializers.ListField(child=serializers.UUIDField(), allow_empty=False)
    amount = serializers.DecimalField(max_digits=14, decimal_places=2)
    date = serializers.DateField(required=False, allow_null=True)


class FreeSaleCommandSerializer(serializers.Serializer):
    product_id = serializers.UUIDField()
    counterparty_id = serializers.UUIDField(required=False, allow_null=True)
    description = serializers.CharField(max_length=255, required=False, allow_blank=True)
    sale_person = serializers.CharField(max_length=255)
    sale_date = serializers.DateField(required=False, allow_null=True)
    units = serializers.IntegerField(min_value=1)
    sub_total = serializers.DecimalField(max_digits=14, decimal_places=2, required=False, default=0)
