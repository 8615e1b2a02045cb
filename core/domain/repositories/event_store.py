"""Append-only domain event log interface."""

from abc import ABC, abstractmethod
from typing import List, Sequence

from ..events.base import DomainEvent


class EventStore(ABC):

    @abstractmethod
    async def append_all(self, events: Sequence[DomainEvent]) -> None:
        """Append events in the caller's transaction."""
        pass

    @abstractmethod
    async def get_events(self, aggregate_type: str, aggregate_id: str) -> List[dict]:
        """Stored events for one aggregate, oldest first, as dictionaries."""
        pass
