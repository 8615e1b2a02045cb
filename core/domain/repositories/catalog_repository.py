"""Catalog read-model interface."""

from abc import ABC, abstractmethod
from typing import Dict, Iterable, Optional

from ..entities.product import Product


class CatalogRepository(ABC):
    """Read-only product lookup used for pricing and line snapshots."""

    @abstractmethod
    async def get_product(self, product_id: str) -> Optional[Product]:
        pass

    @abstractmethod
    async def get_products(self, product_ids: Iterable[str]) -> Dict[str, Product]:
        """Bulk lookup; missing ids are simply absent from the result."""
        pass
