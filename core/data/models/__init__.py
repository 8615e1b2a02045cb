"""Database models."""

from .base import Base
from .catalog_model import CartModel, ProductModel
from .order_model import OrderModel
from .return_model import ReturnModel
from .system_model import EventModel, SequenceModel, StoreSettingsModel

__all__ = [
    "Base",
    "CartModel",
    "EventModel",
    "OrderModel",
    "ProductModel",
    "ReturnModel",
    "SequenceModel",
    "StoreSettingsModel",
]
