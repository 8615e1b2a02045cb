"""Domain layer - pure domain models and interfaces."""

from .entities import Order, OrderItem, ReturnItem, ReturnRequest
from .repositories import OrderRepository, ReturnRepository
from .value_objects import Money, OrderCode, Requester

__all__ = [
    "Money",
    "Order",
    "OrderCode",
    "OrderItem",
    "OrderRepository",
    "Requester",
    "ReturnItem",
    "ReturnRequest",
    "ReturnRepository",
]
