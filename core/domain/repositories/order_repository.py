"""Repository interfaces for Order aggregate."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Tuple

from ..entities.order import Order
from ..enums import OrderStatus


@dataclass(frozen=True)
class OrderQuery:
    """Listing filters. ``user_id`` set means the listing is owner-scoped."""
    user_id: Optional[str] = None
    search: Optional[str] = None
    status: Optional[OrderStatus] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None


class OrderRepository(ABC):
    """Abstract repository for Order aggregate persistence."""

    @abstractmethod
    async def add(self, order: Order) -> None:
        """Insert a new order.

        Raises:
            Conflict: order code or payment id already taken
        """
        pass

    @abstractmethod
    async def update(self, order: Order) -> None:
        """Persist changes to an existing order.

        Raises:
            ConcurrencyError: row changed since ``order`` was loaded
        """
        pass

    @abstractmethod
    async def get(self, order_id: str) -> Optional[Order]:
        """Retrieve order by id, None when absent."""
        pass

    @abstractmethod
    async def get_by_payment_id(self, payment_id: str) -> Optional[Order]:
        """Retrieve the order correlated with a provider payment reference."""
        pass

    @abstractmethod
    async def search(self, query: OrderQuery, offset: int, limit: int) -> Tuple[List[Order], int]:
        """Page through orders newest first.

        Returns:
            (page of orders, total matching count)
        """
        pass

    @abstractmethod
    async def count(self) -> int:
        """Number of orders ever stored."""
        pass
