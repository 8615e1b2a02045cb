"""Repository interfaces."""

from .cart_repository import CartRepository
from .catalog_repository import CatalogRepository
from .event_store import EventStore
from .order_repository import OrderQuery, OrderRepository
from .return_repository import ReturnRepository
from .sequence_repository import SequenceRepository
from .store_settings_repository import StoreSettingsRepository

__all__ = [
    "CartRepository",
    "CatalogRepository",
    "EventStore",
    "OrderQuery",
    "OrderRepository",
    "ReturnRepository",
    "SequenceRepository",
    "StoreSettingsRepository",
]
