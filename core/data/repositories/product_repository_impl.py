"""SQLAlchemy catalog lookup and cart clearing."""

import logging
from typing import Dict, Iterable, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from core.domain.entities.product import Product
from core.domain.repositories import CartRepository, CatalogRepository

from ..mappers import ProductMapper
from ..models.catalog_model import CartModel, ProductModel

logger = logging.getLogger(__name__)


class SqlAlchemyCatalogRepository(CatalogRepository):

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_product(self, product_id: str) -> Optional[Product]:
        model = await self._session.get(ProductModel, product_id)
        return ProductMapper.to_domain(model) if model else None

    async def get_products(self, product_ids: Iterable[str]) -> Dict[str, Product]:
        ids = {pid for pid in product_ids if pid}
        if not ids:
            return {}
        result = await self._session.execute(select(ProductModel).where(ProductModel.id.in_(ids)))
        return {model.id: ProductMapper.to_domain(model) for model in result.scalars().all()}


class SqlAlchemyCartRepository(CartRepository):

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def clear(self, user_id: str) -> None:
        await self._session.execute(delete(CartModel).where(CartModel.user_id == user_id))
        logger.debug(f"Cart cleared for user {user_id}")
