"""SQLAlchemy repository implementations."""

from .event_store_impl import SqlAlchemyEventStore
from .order_repository_impl import SqlAlchemyOrderRepository
from .product_repository_impl import SqlAlchemyCartRepository, SqlAlchemyCatalogRepository
from .return_repository_impl import SqlAlchemyReturnRepository
from .sequence_repository_impl import SqlAlchemySequenceRepository
from .store_settings_repository_impl import SqlAlchemyStoreSettingsRepository

__all__ = [
    "SqlAlchemyCartRepository",
    "SqlAlchemyCatalogRepository",
    "SqlAlchemyEventStore",
    "SqlAlchemyOrderRepository",
    "SqlAlchemyReturnRepository",
    "SqlAlchemySequenceRepository",
    "SqlAlchemyStoreSettingsRepository",
]
