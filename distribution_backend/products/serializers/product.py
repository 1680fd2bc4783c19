# products/serializers/product.py

from rest_framework import serializers

from products.models import Product


class ProductSerializer(serializers.ModelSerializer):
    total_stock = serializers.IntegerField(read_only=True)
    is_low_stock = serializers.BooleanField(read_only=True)

    class Meta:
        model = Product
        fields = [
            "id",
            "name",
            "item_code",
            "company",
            "generic",
            "pack_size",
            "product_type",
            "carton_size",
            "retail_price",
            "trade_price",
            "wholesale_price",
            "federal_tax",
            "gst",
            "sales_tax",
            "quantity_alert",
            "status",
            "total_stock",
            "is_low_stock",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "total_stock", "is_low_stock", "created_at", "updated_at"]


class ProductWriteSerializer(serializers.Serializer):
    """
    Input validation only. Allow-listing happens in the service.
    """

    name = serializers.CharField(max_length=255)
    item_code = serializers.CharField(max_length=64, required=False, allow_blank=True)
    company = serializers.CharField(max_length=255, required=False, allow_blank=True)
    generic = serializers.CharField(max_length=255, required=False, allow_blank=True)
    pack_size = serializers.CharField(max_length=64, required=False, allow_blank=True)
    product_type = serializers.CharField(max_length=64, required=False, allow_blank=True)
    carton_size = serializers.IntegerField(min_value=0, required=False)
    retail_price = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0, required=False)
    trade_price = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0, required=False)
    wholesale_price = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0, required=False)
    federal_tax = serializers.DecimalField(max_digits=6, decimal_places=2, min_value=0, required=False)
    gst = serializers.DecimalField(max_digits=6, decimal_places=2, min_value=0, required=False)
    sales_tax = serializers.DecimalField(max_digits=6, decimal_places=2, min_value=0, required=False)
    quantity_alert = serializers.IntegerField(min_value=0, required=False)
