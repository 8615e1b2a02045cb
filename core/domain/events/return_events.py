"""Return request domain events."""
from dataclasses import dataclass
from typing import Optional

from .base import DomainEvent


@dataclass
class _ReturnEvent(DomainEvent):
    return_id: str = ""

    def __post_init__(self):
        if not self.aggregate_id and self.return_id:
            object.__setattr__(self, "aggregate_id", self.return_id)
        super().__post_init__()


@dataclass
class ReturnRequestedEvent(_ReturnEvent):
    """Customer opened a return against one of their orders."""

    order_id: str = ""
    rma_number: str = ""
    items_count: int = 0


@dataclass
class ReturnUpdatedEvent(_ReturnEvent):
    """Admin changed the return's status, refund amount or shipping details."""

    previous_status: str = ""
    new_status: str = ""
    updated_fields: Optional[dict] = None
