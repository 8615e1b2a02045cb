"""
Event Store Implementation.

Append-only storage for domain events. Events are written in the caller's
transaction so the audit trail commits (or rolls back) with the aggregate.
"""
import logging
from typing import List, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.domain.events.base import DomainEvent
from core.domain.repositories import EventStore
from core.utils.clock import ensure_utc

from ..models.system_model import EventModel

logger = logging.getLogger(__name__)


class SqlAlchemyEventStore(EventStore):
    """
    Event Store for domain events.

    Usage:
        async with create_uow(session_factory) as uow:
            await uow.events.append_all(order.get_domain_events())
            await uow.commit()
    """

    def __init__(self, session: AsyncSession):
        self._session = session

    async def append_all(self, events: Sequence[DomainEvent]) -> None:
        """Append events in order. Events are immutable once written."""
        for event in events:
            self._session.add(
                EventModel(
                    event_id=event.event_id,
                    event_type=event.event_type,
                    event_version=event.event_version,
                    aggregate_type=event.aggregate_type,
                    aggregate_id=event.aggregate_id,
                    user_id=event.user_id,
                    data=event.get_event_data(),
                    occurred_at=event.occurred_at,
                )
            )
        if events:
            await self._session.flush()
            logger.debug(f"Appended {len(events)} event(s)")

    async def get_events(self, aggregate_type: str, aggregate_id: str) -> List[dict]:
        """Events for one aggregate in append order."""
        result = await self._session.execute(
            select(EventModel)
            .where(
                EventModel.aggregate_type == aggregate_type,
                EventModel.aggregate_id == aggregate_id,
            )
            .order_by(EventModel.id)
        )
        return [
            {
                "event_id": model.event_id,
                "event_type": model.event_type,
                "aggregate_type": model.aggregate_type,
                "aggregate_id": model.aggregate_id,
                "user_id": model.user_id,
                "occurred_at": ensure_utc(model.occurred_at),
                "data": model.data or {},
            }
            for model in result.scalars().all()
        ]
