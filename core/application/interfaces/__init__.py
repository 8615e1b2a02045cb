"""Application layer interfaces."""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from core.domain.entities.order import OrderItem
from core.domain.enums import PaymentOutcome
from core.domain.value_objects import Money


@dataclass(frozen=True)
class PaymentDraft:
    """Everything a provider needs to open a payment for a priced order."""
    order_id: str
    user_id: str
    amount: Money
    subtotal: Money
    shipping: Money
    tax: Money
    items: List[OrderItem] = field(default_factory=list)
    customer_email: Optional[str] = None
    description: Optional[str] = None


@dataclass(frozen=True)
class PaymentHandle:
    """Provider-side payment created for a draft."""
    payment_id: str
    client_secret: Optional[str] = None
    approval_url: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class PaymentConfirmation:
    """
    Provider answer when asked for the state of a payment.

    ``accepted`` is False when the provider refused the request (non-2xx);
    then ``outcome`` carries no information and nothing must be changed.
    """
    payment_id: str
    outcome: PaymentOutcome
    accepted: bool = True
    message: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict)


class PaymentGateway(ABC):
    """
    Capability shared by payment providers.

    Transport errors and timeouts raise ``BadGateway``; missing credentials
    raise ``ServiceUnavailable``.
    """

    name: str = "provider"

    @abstractmethod
    async def create_payment(self, draft: PaymentDraft) -> PaymentHandle:
        """
        Open a payment with the provider.

        Raises:
            BadGateway: provider rejected the request or was unreachable
        """
        pass

    @abstractmethod
    async def confirm(self, payment_id: str) -> PaymentConfirmation:
        """Ask the provider for (or trigger) the final state of a payment."""
        pass


class WebhookVerifier(ABC):
    """Provider that signs its webhook deliveries."""

    @abstractmethod
    def construct_event(self, payload: bytes, signature_header: Optional[str]) -> Dict[str, Any]:
        """
        Verify a delivery and decode its event.

        Raises:
            WebhookSignatureError: signature missing, wrong or stale
            ValidationError: signed body is not a JSON event
        """
        pass


class RealtimeNotifier(ABC):
    """
    Fan-out of state changes to subscribed clients.

    Topics: ``order:<id>``, ``return:<id>``, ``analytics``.
    Delivery is best-effort; callers never depend on it succeeding.
    """

    @abstractmethod
    async def publish(self, topic: str, payload: Dict[str, Any]) -> None:
        pass


class AnalyticsSnapshotBuilder(ABC):
    """Computes the aggregate figures pushed to the ``analytics`` room."""

    @abstractmethod
    async def compute_snapshot(
        self,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        """
        Returns:
            Dictionary with camelCase keys, JSON-safe values
        """
        pass


__all__ = [
    "AnalyticsSnapshotBuilder",
    "PaymentConfirmation",
    "PaymentDraft",
    "PaymentGateway",
    "PaymentHandle",
    "RealtimeNotifier",
    "WebhookVerifier",
]
