"""Domain events for the event store and realtime fan-out."""
from .base import DomainEvent
from .order_events import (
    OrderCancelledEvent,
    OrderCreatedEvent,
    OrderPaymentStatusChangedEvent,
    OrderRefundedEvent,
    OrderStatusChangedEvent,
)
from .return_events import ReturnRequestedEvent, ReturnUpdatedEvent

__all__ = [
    "DomainEvent",
    "OrderCancelledEvent",
    "OrderCreatedEvent",
    "OrderPaymentStatusChangedEvent",
    "OrderRefundedEvent",
    "OrderStatusChangedEvent",
    "ReturnRequestedEvent",
    "ReturnUpdatedEvent",
]
