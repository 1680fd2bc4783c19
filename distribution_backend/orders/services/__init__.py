# orders/services/__init__.py

from .deletion_service import cancel_order, complete_order, delete_order
from .estimate_service import create_estimated_sale, update_estimated_sale
from .free_sale_service import create_free_sale, delete_free_sale
from .purchase_service import create_purchase
from .queries import load_order, orders_for_counterparty, product_order_history
from .recovery_service import apply_recovery
from .return_service import return_by_invoice
from .sale_service import create_sale

__all__ = [
    "create_sale",
    "create_purchase",
    "create_estimated_sale",
    "update_estimated_sale",
    "return_by_invoice",
    "delete_order",
    "cancel_order",
    "complete_order",
    "apply_recovery",
    "create_free_sale",
    "delete_free_sale",
    "load_order",
    "orders_for_counterparty",
    "product_order_history",
]
