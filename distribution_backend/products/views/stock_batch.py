# products/views/stock_batch.py

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from products.models import StockBatch
from products.serializers import StockBatchSerializer
from products.services.product_service import get_product


class ProductBatchListView(GenericAPIView):
    """
    Batches of one product in FIFO order (earliest expiry first).
    """

    permission_classes = [IsAuthenticated]
    serializer_class = StockBatchSerializer

    @extend_schema(tags=["products"], responses=StockBatchSerializer(many=True))
    def get(self, request, product_id):
        product = get_product(product_id)
        qs = (
            StockBatch.objects.select_related("product")
            .filter(product=product)
            .order_by("expiry_date", "created_at")
        )
        if request.query_params.get("in_stock") == "true":
            qs = qs.filter(stock__gt=0)
        return Response(StockBatchSerializer(qs, many=True).data, status=status.HTTP_200_OK)
