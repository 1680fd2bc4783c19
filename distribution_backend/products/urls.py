# products/urls.py

"""
PRODUCTS URLS

Registered under /api/products/
"""

from django.urls import path

from products.views import (
    ProductAllocationView,
    ProductBatchListView,
    ProductDetailView,
    ProductLastPurchaseView,
    ProductListCreateView,
)

app_name = "products"

urlpatterns = [
    path("", ProductListCreateView.as_view(), name="product-list"),
    path("<uuid:product_id>/", ProductDetailView.as_view(), name="product-detail"),
    path("<uuid:product_id>/batches/", ProductBatchListView.as_view(), name="product-batches"),
    path("<uuid:product_id>/allocation/", ProductAllocationView.as_view(), name="product-allocation"),
    path("<uuid:product_id>/last-purchase/", ProductLastPurchaseView.as_view(), name="product-last-purchase"),
]
