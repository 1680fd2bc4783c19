# orders/api/views.py

"""
ORDER ENDPOINTS

Thin HTTP layer: parse with a command serializer, call ONE service, shape
the result. Service errors (core.exceptions) are rendered by
core.api.exception_handler.
"""

from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.generics import GenericAPIView, ListAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from orders.api.filters import OrderFilter
from orders.api.serializers import (
    FreeSaleCommandSerializer,
    FreeSaleSerializer,
    OrderCommandSerializer,
    OrderItemSerializer,
    OrderSerializer,
    ProductHistoryLineSerializer,
    RecoveryCommandSerializer,
    RecoverySerializer,
    ReturnCommandSerializer,
)
from orders.services import (
    apply_recovery,
    cancel_order,
    complete_order,
    create_estimated_sale,
    create_free_sale,
    create_purchase,
    create_sale,
    delete_free_sale,
    delete_order,
    load_order,
    product_order_history,
    return_by_invoice,
    update_estimated_sale,
)
from orders.services.queries import order_queryset
from users.permissions import CanBookOrders, CanManageLedgers


def _order_payload(order, items) -> dict:
    data = OrderSerializer(order).data
    data["items"] = OrderItemSerializer(items, many=True).data
    return data


# ============================================================
# READ
# ============================================================

class OrderListView(ListAPIView):
    """
    GET /api/orders/?type=sale&status=completed&counterparty=<uuid>
    """

    permission_classes = [IsAuthenticated]
    serializer_class = OrderSerializer
    filter_backends = [DjangoFilterBackend]
    filterset_class = OrderFilter

    def get_queryset(self):
        return order_queryset().order_by("-created_at")

    @extend_schema(tags=["orders"])
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)


class OrderDetailView(GenericAPIView):
    serializer_class = OrderSerializer

    def get_permissions(self):
        if self.request.method == "DELETE":
            return [CanBookOrders()]
        return [IsAuthenticated()]

    @extend_schema(tags=["orders"], responses=OrderSerializer)
    def get(self, request, order_id):
        return Response(OrderSerializer(load_order(order_id)).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["orders"], responses={204: None})
    def delete(self, request, order_id):
        delete_order(order_id=order_id, user=request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)


# ============================================================
# WRITE
# ============================================================

class SaleCreateView(GenericAPIView):
    permission_classes = [CanBookOrders]
    serializer_class = OrderCommandSerializer

    @extend_schema(tags=["orders"], request=OrderCommandSerializer, responses={201: OrderSerializer})
    def post(self, request):
        s = OrderCommandSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        result = create_sale(data=s.validated_data, user=request.user)

        payload = _order_payload(result["order"], result["items"])
        payload["total_profit"] = str(result["total_profit"])
        payload["distributable"] = str(result["distributable"])
        return Response(payload, status=status.HTTP_201_CREATED)


class PurchaseCreateView(GenericAPIView):
    permission_classes = [CanBookOrders]
    serializer_class = OrderCommandSerializer

    @extend_schema(tags=["orders"], request=OrderCommandSerializer, responses={201: OrderSerializer})
    def post(self, request):
        s = OrderCommandSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        result = create_purchase(data=s.validated_data, user=request.user)
        return Response(_order_payload(result["order"], result["items"]), status=status.HTTP_201_CREATED)


class EstimateCreateView(GenericAPIView):
    permission_classes = [CanBookOrders]
    serializer_class = OrderCommandSerializer

    @extend_schema(tags=["orders"], request=OrderCommandSerializer, responses={201: OrderSerializer})
    def post(self, request):
        s = OrderCommandSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        result = create_estimated_sale(data=s.validated_data, user=request.user)
        return Response(_order_payload(result["order"], result["items"]), status=status.HTTP_201_CREATED)


class ReturnCreateView(GenericAPIView):
    permission_classes = [CanBookOrders]
    serializer_class = ReturnCommandSerializer

    @extend_schema(tags=["orders"], request=ReturnCommandSerializer, responses={201: OrderSerializer})
    def post(self, request):
        s = ReturnCommandSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        v = s.validated_data
        result = return_by_invoice(
            invoice_number=v["invoice_number"],
            items=[dict(item) for item in v["items"]],
            order_type=v["order_type"],
            user=request.user,
            note=v.get("note", ""),
        )
        payload = _order_payload(result["return_order"], result["items"])
        payload["refund_total"] = str(result["refund_total"])
        return Response(payload, status=status.HTTP_201_CREATED)


class RecoveryCreateView(GenericAPIView):
    permission_classes = [CanManageLedgers]
    serializer_class = RecoveryCommandSerializer

    @extend_schema(tags=["orders"], request=RecoveryCommandSerializer)
    def post(self, request):
        s = RecoveryCommandSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        v = s.validated_data
        result = apply_recovery(
            order_ids=v["order_ids"],
            total_amount=v["amount"],
            date=v.get("date"),
            recorded_by=request.user,
        )
        return Response(
            {
                "counterparty": str(result.counterparty_id),
                "total_amount": str(result.total_amount),
                "remaining_unallocated": str(result.remaining_unallocated),
                "recoveries": RecoverySerializer(result.recoveries, many=True).data,
            },
            status=status.HTTP_201_CREATED,
        )


class FreeSaleCreateView(GenericAPIView):
    permission_classes = [CanBookOrders]
    serializer_class = FreeSaleCommandSerializer

    @extend_schema(tags=["orders"], request=FreeSaleCommandSerializer, responses={201: FreeSaleSerializer})
    def post(self, request):
        s = FreeSaleCommandSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        free_sale = create_free_sale(data=s.validated_data, user=request.user)
        return Response(FreeSaleSerializer(free_sale).data, status=status.HTTP_201_CREATED)


class FreeSaleDetailView(GenericAPIView):
    permission_classes = [CanBookOrders]
    serializer_class = FreeSaleSerializer

    @extend_schema(tags=["orders"], responses={204: None})
    def delete(self, request, free_sale_id):
        delete_free_sale(free_sale_id=free_sale_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class EstimateDetailView(GenericAPIView):
    permission_classes = [CanBookOrders]
    serializer_class = OrderCommandSerializer

    @extend_schema(tags=["orders"], request=OrderCommandSerializer, responses=OrderSerializer)
    def patch(self, request, order_id):
        s = OrderCommandSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = dict(s.validated_data)
        if "items" in data:
            data["items"] = [dict(item) for item in data["items"]]
        result = update_estimated_sale(order_id=order_id, data=data, user=request.user)
        return Response(_order_payload(result["order"], result["items"]), status=status.HTTP_200_OK)


# ============================================================
# STATUS COMMANDS
# ============================================================

class OrderCancelView(GenericAPIView):
    permission_classes = [CanBookOrders]
    serializer_class = OrderSerializer

    @extend_schema(tags=["orders"], request=None, responses=OrderSerializer)
    def post(self, request, order_id):
        cancel_order(order_id=order_id, user=request.user)
        return Response(OrderSerializer(load_order(order_id)).data, status=status.HTTP_200_OK)


class OrderCompleteView(GenericAPIView):
    permission_classes = [CanBookOrders]
    serializer_class = OrderSerializer

    @extend_schema(tags=["orders"], request=None, responses=OrderSerializer)
    def post(self, request, order_id):
        complete_order(order_id=order_id, user=request.user)
        return Response(OrderSerializer(load_order(order_id)).data, status=status.HTTP_200_OK)


# ============================================================
# PRODUCT HISTORY
# ============================================================

class ProductOrderHistoryView(GenericAPIView):
    """
    GET /api/orders/products/<uuid>/sales/
    GET /api/orders/products/<uuid>/purchases/
    """

    permission_classes = [IsAuthenticated]
    serializer_class = ProductHistoryLineSerializer
    order_type = None

    @extend_schema(tags=["orders"])
    def get(self, request, product_id):
        history = product_order_history(product_id=product_id, order_type=self.order_type)
        return Response(
            {
                "product": str(history["product"].id),
                "product_name": history["product"].name,
                "units": history["units"],
                "returned_units": history["returned_units"],
                "net_units": history["net_units"],
                "amount": str(history["amount"]),
                "stock_on_hand": history["stock_on_hand"],
                "lines": ProductHistoryLineSerializer(history["lines"], many=True).data,
            },
            status=status.HTTP_200_OK,
        )
