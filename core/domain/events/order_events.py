"""
Order Domain Events.

Events that occur during the order lifecycle: creation, fulfilment status
changes, payment reconciliation, cancellation and refunds.
"""
from dataclasses import dataclass
from typing import Optional

from .base import DomainEvent


@dataclass
class _OrderEvent(DomainEvent):
    order_id: str = ""

    def __post_init__(self):
        """Set aggregate_id to order_id."""
        if not self.aggregate_id and self.order_id:
            object.__setattr__(self, "aggregate_id", self.order_id)
        super().__post_init__()


@dataclass
class OrderCreatedEvent(_OrderEvent):
    """
    Order was placed.

    Trigger: checkout (direct, Stripe or PayPal)
    Consumers: analytics snapshot, cart clearing
    """

    order_code: str = ""
    total: str = ""
    payment_method: str = ""
    payment_id: Optional[str] = None


@dataclass
class OrderStatusChangedEvent(_OrderEvent):
    """
    Fulfilment status changed (pending -> processing -> shipped -> delivered).
    """

    previous_status: str = ""
    new_status: str = ""
    tracking_number: Optional[str] = None
    reason: Optional[str] = None


@dataclass
class OrderPaymentStatusChangedEvent(_OrderEvent):
    """
    Payment status changed.

    Raised by reconciliation against the provider, by cancellation and by
    refunds (admin or return-driven).
    """

    previous_payment_status: str = ""
    new_payment_status: str = ""
    payment_id: Optional[str] = None
    source: Optional[str] = None


@dataclass
class OrderCancelledEvent(_OrderEvent):
    """Order was cancelled by its owner or an admin."""

    previous_status: str = ""


@dataclass
class OrderRefundedEvent(_OrderEvent):
    """An admin refund was recorded against the order."""

    amount: str = ""
    reason: str = ""
    processed_by: Optional[str] = None
