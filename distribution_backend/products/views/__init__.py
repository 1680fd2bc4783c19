# products/views/__init__.py

from .product import (
    ProductAllocationView,
    ProductDetailView,
    ProductLastPurchaseView,
    ProductListCreateView,
)
from .stock_batch import ProductBatchListView

__all__ = [
    "ProductListCreateView",
    "ProductDetailView",
    "ProductAllocationView",
    "ProductLastPurchaseView",
    "ProductBatchListView",
]
