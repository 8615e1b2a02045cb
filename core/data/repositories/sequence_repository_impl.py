"""Atomic named counters backed by a single-row-per-name table."""

import logging
from typing import Optional

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.domain.errors import Conflict
from core.domain.repositories import SequenceRepository

from ..models.system_model import SequenceModel

logger = logging.getLogger(__name__)


class SqlAlchemySequenceRepository(SequenceRepository):
    """
    ``UPDATE ... RETURNING`` keeps allocation atomic per row.

    Must run in a transaction of its own: seeding a fresh counter may roll the
    session back when another worker seeds it first.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def next_value(self, name: str, seed: int = 0) -> int:
        value = await self._increment(name)
        if value is not None:
            return value

        logger.info(f"Seeding sequence '{name}' at {seed}")
        self._session.add(SequenceModel(name=name, value=seed))
        try:
            await self._session.flush()
        except IntegrityError:
            # Seeded concurrently; the counter exists now.
            await self._session.rollback()

        value = await self._increment(name)
        if value is None:
            raise Conflict(f"Sequence '{name}' could not be allocated")
        return value

    async def _increment(self, name: str) -> Optional[int]:
        table = SequenceModel.__table__
        result = await self._session.execute(
            update(table)
            .where(table.c.name == name)
            .values(value=table.c.value + 1)
            .returning(table.c.value)
        )
        return result.scalar_one_or_none()
