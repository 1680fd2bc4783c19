# products/serializers/stock_batch.py

"""
STOCK BATCH SERIALIZERS

Batches are read-only over the API: stock changes only through purchases,
sales, returns and free issues.
"""

from rest_framework import serializers

from products.models import StockBatch


class StockBatchSerializer(serializers.ModelSerializer):
    product = serializers.CharField(source="product.name", read_only=True)
    product_id = serializers.UUIDField(read_only=True)

    class Meta:
        model = StockBatch
        fields = [
            "id",
            "product_id",
            "product",
            "batch_number",
            "expiry_date",
            "stock",
            "unit_cost",
            "purchase_price",
            "mrp",
            "discount_per_unit",
            "created_at",
        ]
        read_only_fields = fields


class AllocationQuerySerializer(serializers.Serializer):
    units = serializers.IntegerField(min_value=1)
