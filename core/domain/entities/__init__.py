"""Domain entities."""

from .order import ALLOWED_TRANSITIONS, Order, OrderItem, RefundRecord
from .product import Product
from .return_request import ReturnItem, ReturnRequest
from .store_settings import StoreSettings

__all__ = [
    "ALLOWED_TRANSITIONS",
    "Order",
    "OrderItem",
    "Product",
    "RefundRecord",
    "ReturnItem",
    "ReturnRequest",
    "StoreSettings",
]
