# orders/models/__init__.py

"""
ORDERS MODELS PACKAGE EXPORTS
"""

from .free_sale import FreeSale, FreeSaleAllocation
from .order import Order
from .order_item import OrderItem
from .recovery import Recovery

__all__ = [
    "Order",
    "OrderItem",
    "Recovery",
    "FreeSale",
    "FreeSaleAllocation",
]
