# orders/api/urls.py

"""
ORDERS API URLS

Explicit command routes are listed BEFORE the <uuid> detail route.
"""

from django.urls import path

from orders.api.views import (
    EstimateCreateView,
    EstimateDetailView,
    FreeSaleCreateView,
    FreeSaleDetailView,
    OrderCancelView,
    OrderCompleteView,
    OrderDetailView,
    OrderListView,
    ProductOrderHistoryView,
    PurchaseCreateView,
    RecoveryCreateView,
    ReturnCreateView,
    SaleCreateView,
)
from orders.models import Order

app_name = "orders"

urlpatterns = [
    path("sales/", SaleCreateView.as_view(), name="sale-create"),
    path("purchases/", PurchaseCreateView.as_view(), name="purchase-create"),
    path("estimates/", EstimateCreateView.as_view(), name="estimate-create"),
    path("estimates/<uuid:order_id>/", EstimateDetailView.as_view(), name="estimate-detail"),
    path("returns/", ReturnCreateView.as_view(), name="return-create"),
    path("recoveries/", RecoveryCreateView.as_view(), name="recovery-create"),
    path("free-sales/", FreeSaleCreateView.as_view(), name="free-sale-create"),
    path("free-sales/<uuid:free_sale_id>/", FreeSaleDetailView.as_view(), name="free-sale-detail"),
    path(
        "products/<uuid:product_id>/sales/",
        ProductOrderHistoryView.as_view(order_type=Order.TYPE_SALE),
        name="product-sales",
    ),
    path(
        "products/<uuid:product_id>/purchases/",
        ProductOrderHistoryView.as_view(order_type=Order.TYPE_PURCHASE),
        name="product-purchases",
    ),
    path("", OrderListView.as_view(), name="order-list"),
    path("<uuid:order_id>/", OrderDetailView.as_view(), name="order-detail"),
    path("<uuid:order_id>/cancel/", OrderCancelView.as_view(), name="order-cancel"),
    path("<uuid:order_id>/complete/", OrderCompleteView.as_view(), name="order-complete"),
]
