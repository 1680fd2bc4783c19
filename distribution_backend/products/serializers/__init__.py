# products/serializers/__init__.py

from .product import ProductSerializer, ProductWriteSerializer
from .stock_batch import AllocationQuerySerializer, StockBatchSerializer

__all__ = [
    "ProductSerializer",
    "ProductWriteSerializer",
    "StockBatchSerializer",
    "AllocationQuerySerializer",
]
