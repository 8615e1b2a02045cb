"""SQLAlchemy implementation of ReturnRepository."""

import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.domain.entities.return_request import ReturnRequest
from core.domain.enums import ReturnStatus
from core.domain.errors import Conflict, NotFound
from core.domain.repositories.return_repository import ReturnRepository

from ..mappers import ReturnMapper
from ..models.return_model import ReturnModel

logger = logging.getLogger(__name__)


class SqlAlchemyReturnRepository(ReturnRepository):

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(self, request: ReturnRequest) -> None:
        self._session.add(ReturnMapper.to_persistence(request))
        try:
            await self._session.flush()
        except IntegrityError as e:
            logger.warning(f"Return insert rejected for {request.rma_number}: {e.orig}")
            raise Conflict(f"RMA {request.rma_number} already exists")

    async def update(self, request: ReturnRequest) -> None:
        model = await self._session.get(ReturnModel, request.id)
        if model is None:
            raise NotFound(f"Return not found: {request.id}")
        ReturnMapper.update_persistence(request, model)
        await self._session.flush()

    async def get(self, return_id: str) -> Optional[ReturnRequest]:
        model = await self._session.get(ReturnModel, return_id)
        return ReturnMapper.to_domain(model) if model else None

    async def rma_exists(self, rma_number: str) -> bool:
        result = await self._session.execute(
            select(ReturnModel.id).where(ReturnModel.rma_number == rma_number)
        )
        return result.scalar_one_or_none() is not None

    async def list_for_user(self, user_id: str) -> List[ReturnRequest]:
        result = await self._session.execute(
            select(ReturnModel)
            .where(ReturnModel.user_id == user_id)
            .order_by(ReturnModel.created_at.desc(), ReturnModel.id.desc())
        )
        return [ReturnMapper.to_domain(model) for model in result.scalars().all()]

    async def list_all(self, status: Optional[ReturnStatus] = None) -> List[ReturnRequest]:
        query = select(ReturnModel)
        if status is not None:
            query = query.where(ReturnModel.status == status.value)
        result = await self._session.execute(
            query.order_by(ReturnModel.created_at.desc(), ReturnModel.id.desc())
        )
        return [ReturnMapper.to_domain(model) for model in result.scalars().all()]
