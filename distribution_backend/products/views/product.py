# products/views/product.py

"""
PRODUCT ENDPOINTS

- list / create / retrieve / partial update (allow-listed)
- allocation preview: which batches a request for N units would draw from
- last purchase lookup (empty result when never purchased)
"""

from django.db.models import Q
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from products.models import Product
from products.serializers import (
    AllocationQuerySerializer,
    ProductSerializer,
    ProductWriteSerializer,
)
from products.services.product_service import (
    create_product,
    get_product,
    last_purchase_for_product,
    update_product,
)
from products.services.stock_fifo import allocate_stock


class ProductListCreateView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = ProductSerializer

    @extend_schema(
        tags=["products"],
        parameters=[OpenApiParameter("q", str, required=False)],
        responses=ProductSerializer(many=True),
    )
    def get(self, request):
        qs = Product.objects.all().order_by("name")
        q = (request.query_params.get("q") or "").strip()
        if q:
            qs = qs.filter(Q(name__icontains=q) | Q(item_code__icontains=q) | Q(generic__icontains=q))

        page = self.paginate_queryset(qs)
        if page is not None:
            return self.get_paginated_response(ProductSerializer(page, many=True).data)
        return Response(ProductSerializer(qs, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["products"], request=ProductWriteSerializer, responses={201: ProductSerializer})
    def post(self, request):
        s = ProductWriteSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        product = create_product(data=dict(s.validated_data))
        return Response(ProductSerializer(product).data, status=status.HTTP_201_CREATED)


class ProductDetailView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = ProductSerializer

    @extend_schema(tags=["products"], responses=ProductSerializer)
    def get(self, request, product_id):
        return Response(ProductSerializer(get_product(product_id)).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["products"], request=ProductWriteSerializer, responses=ProductSerializer)
    def patch(self, request, product_id):
        s = ProductWriteSerializer(data=request.data, partial=True)
        s.is_valid(raise_exception=True)
        # Unknown keys are dropped by the serializer; pass raw keys so the
        # service can reject them explicitly.
        changes = dict(s.validated_data)
        for key in request.data.keys():
            if key not in changes:
                changes[key] = request.data[key]
        product = update_product(product_id=product_id, changes=changes)
        return Response(ProductSerializer(product).data, status=status.HTTP_200_OK)


class ProductAllocationView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = AllocationQuerySerializer

    @extend_schema(
        tags=["products"],
        parameters=[OpenApiParameter("units", int, required=True)],
    )
    def get(self, request, product_id):
        s = AllocationQuerySerializer(data=request.query_params)
        s.is_valid(raise_exception=True)
        get_product(product_id)
        plan = allocate_stock(product_id=product_id, requested_units=s.validated_data["units"])
        return Response(plan.as_dict(), status=status.HTTP_200_OK)


class ProductLastPurchaseView(GenericAPIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["products"])
    def get(self, request, product_id):
        item = last_purchase_for_product(product_id=product_id)
        if item is None:
            return Response({"last_purchase": None}, status=status.HTTP_200_OK)

        order = item.order
        return Response(
            {
                "last_purchase": {
                    "order_id": str(order.id),
                    "invoice_number": order.invoice_number,
                    "counterparty": getattr(order.counterparty, "name", None),
                    "batch_number": item.batch_number,
                    "expiry_date": item.expiry_date,
                    "units": item.units,
                    "unit_price": str(item.unit_price),
                    "created_at": order.created_at,
                }
            },
            status=status.HTTP_200_OK,
        )
