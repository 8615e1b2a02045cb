"""
Base Domain Event.

All domain events inherit from this base class. Events are appended to the
event store in the same transaction as the aggregate mutation that raised
them, which gives every order and return an audit trail.
"""
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional
import uuid

from ...utils.clock import utc_now

_METADATA_FIELDS = (
    "event_id", "event_type", "event_version",
    "aggregate_id", "aggregate_type", "user_id", "occurred_at",
)


@dataclass
class DomainEvent:
    """
    Base class for all domain events.

    Events are immutable records of things that have happened.
    """

    # Event metadata
    event_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    event_type: str = field(init=False)
    event_version: int = 1

    # Aggregate information
    aggregate_id: str = field(default="")
    aggregate_type: str = field(init=False)

    # Who caused it (None for provider-driven changes such as webhooks)
    user_id: Optional[str] = None

    occurred_at: datetime = field(default_factory=utc_now)

    def __post_init__(self):
        """Set event type and aggregate type from class name."""
        if not getattr(self, "event_type", None):
            object.__setattr__(self, "event_type", self.__class__.__name__)

        if not getattr(self, "aggregate_type", None):
            object.__setattr__(self, "aggregate_type", self._get_aggregate_type())

    def _get_aggregate_type(self) -> str:
        """
        Extract aggregate type from event type.

        Example: OrderCreatedEvent -> Order
        """
        event_name = self.__class__.__name__

        if event_name.endswith("Event"):
            event_name = event_name[:-5]

        for i, char in enumerate(event_name):
            if i > 0 and char.isupper():
                return event_name[:i]

        return event_name

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary for the event store and API responses."""
        return {
            "event_id": self.event_id,
            "event_type": self.event_type,
            "event_version": self.event_version,
            "aggregate_id": self.aggregate_id,
            "aggregate_type": self.aggregate_type,
            "user_id": self.user_id,
            "occurred_at": self.occurred_at.isoformat(),
            "data": self.get_event_data(),
        }

    def get_event_data(self) -> Dict[str, Any]:
        """Event-specific payload, JSON-safe."""
        data = {}

        for key, value in self.__dict__.items():
            if key in _METADATA_FIELDS:
                continue
            if isinstance(value, Decimal):
                data[key] = str(value)
            elif isinstance(value, Enum):
                data[key] = value.value
            elif isinstance(value, datetime):
                data[key] = value.isoformat()
            elif hasattr(value, "to_dict"):
                data[key] = value.to_dict()
            else:
                data[key] = value

        return data
