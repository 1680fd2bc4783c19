from .inventory import deduct_from_batch, receive_into_batch, remove_from_batch
from .stock_fifo import allocate_stock, deduct_stock_fifo, restore_stock

__all__ = [
    "allocate_stock",
    "deduct_stock_fifo",
    "restore_stock",
    "deduct_from_batch",
    "receive_into_batch",
    "remove_from_batch",
]
