"""SQLAlchemy implementation of OrderRepository."""

import logging
from typing import List, Optional, Tuple

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from core.domain.entities.order import Order
from core.domain.errors import ConcurrencyError, Conflict, DuplicateOrderCode, NotFound
from core.domain.repositories.order_repository import OrderQuery, OrderRepository

from ..mappers import OrderMapper
from ..models.order_model import OrderModel

logger = logging.getLogger(__name__)


class SqlAlchemyOrderRepository(OrderRepository):
    """Concrete implementation of OrderRepository using SQLAlchemy."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with SQLAlchemy session.

        Args:
            session: SQLAlchemy async session
        """
        self._session = session

    async def add(self, order: Order) -> None:
        """Insert a new order aggregate.

        Raises:
            DuplicateOrderCode: the order code is taken
            Conflict: duplicate id or payment id
        """
        model = OrderMapper.to_persistence(order)
        self._session.add(model)
        try:
            await self._session.flush()  # Propagate to DB without committing
        except IntegrityError as e:
            logger.warning(f"Order insert rejected for {order.order_code}: {e.orig}")
            if "order_code" in str(e.orig):
                raise DuplicateOrderCode(f"Order code {order.order_code} already exists")
            raise Conflict(f"Order {order.order_code} conflicts with an existing order")
        order.version = model.version

    async def update(self, order: Order) -> None:
        """Persist aggregate changes guarded by the version column.

        Raises:
            ConcurrencyError: another transaction changed the row first
        """
        model = await self._session.get(OrderModel, order.id)
        if model is None:
            raise NotFound(f"Order not found: {order.id}")
        if model.version != order.version:
            raise ConcurrencyError(f"Order {order.id} was modified concurrently")

        OrderMapper.update_persistence(order, model)
        try:
            await self._session.flush()
        except StaleDataError:
            raise ConcurrencyError(f"Order {order.id} was modified concurrently")
        except IntegrityError as e:
            raise Conflict(f"Order {order.id} update conflicts with existing data: {e.orig}")
        order.version = model.version

    async def get(self, order_id: str) -> Optional[Order]:
        """Retrieve order by unique identifier."""
        model = await self._session.get(OrderModel, order_id)
        if model is None:
            return None
        return OrderMapper.to_domain(model)

    async def get_by_payment_id(self, payment_id: str) -> Optional[Order]:
        """Retrieve the order correlated with a provider payment reference."""
        if not payment_id:
            return None
        result = await self._session.execute(
            select(OrderModel).where(OrderModel.payment_id == payment_id)
        )
        model = result.scalar_one_or_none()

        if not model:
            return None

        return OrderMapper.to_domain(model)

    async def search(self, query: OrderQuery, offset: int, limit: int) -> Tuple[List[Order], int]:
        """Filtered page of orders, newest first (ties broken by id)."""
        conditions = []
        if query.user_id is not None:
            conditions.append(OrderModel.user_id == query.user_id)
        if query.status is not None:
            conditions.append(OrderModel.status == query.status.value)
        if query.start_date is not None:
            conditions.append(OrderModel.created_at >= query.start_date)
        if query.end_date is not None:
            conditions.append(OrderModel.created_at <= query.end_date)
        if query.search:
            pattern = f"%{query.search.strip()}%"
            conditions.append(
                or_(
                    OrderModel.order_code.ilike(pattern),
                    OrderModel.customer_name.ilike(pattern),
                    OrderModel.customer_email.ilike(pattern),
                )
            )

        total = await self._session.scalar(
            select(func.count()).select_from(OrderModel).where(*conditions)
        )
        result = await self._session.execute(
            select(OrderModel)
            .where(*conditions)
            .order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
            .offset(offset)
            .limit(limit)
        )
        models = result.scalars().all()

        return [OrderMapper.to_domain(model) for model in models], int(total or 0)

    async def count(self) -> int:
        total = await self._session.scalar(select(func.count()).select_from(OrderModel))
        return int(total or 0)
