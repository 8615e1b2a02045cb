"""Stripe webhook handling."""
import logging
from typing import Optional

from core.application.interfaces import WebhookVerifier
from core.domain.enums import PaymentOutcome
from core.domain.errors import NotFound

from .order_ledger import OrderLedger

logger = logging.getLogger(__name__)

EVENT_OUTCOMES = {
    "payment_intent.succeeded": PaymentOutcome.SUCCEEDED,
    "payment_intent.payment_failed": PaymentOutcome.FAILED,
}


class StripeWebhookHandler:
    """
    Verifies and applies Stripe webhook deliveries.

    No deduplication here: reconciliation is idempotent, so redelivered
    events are harmless.
    """

    def __init__(self, gateway: WebhookVerifier, ledger: OrderLedger) -> None:
        self._gateway = gateway
        self._ledger = ledger

    async def handle(self, raw_body: bytes, signature: Optional[str]) -> dict:
        """
        Returns:
            Acknowledgement body

        Raises:
            WebhookSignatureError: payload not signed with our secret
        """
        event = self._gateway.construct_event(raw_body, signature)
        event_type = event.get("type")
        outcome = EVENT_OUTCOMES.get(event_type)
        if outcome is None:
            logger.info(f"Stripe webhook {event.get('id')} ({event_type}) acknowledged without action")
            return {"received": True}

        payment_id = ((event.get("data") or {}).get("object") or {}).get("id")
        if not payment_id:
            logger.warning(f"Stripe webhook {event.get('id')} ({event_type}) has no payment intent id")
            return {"received": True}

        try:
            await self._ledger.reconcile_payment(payment_id, outcome)
        except NotFound:
            logger.warning(f"Stripe webhook for unknown payment {payment_id} ({event_type}) acknowledged")
        return {"received": True}
