"""
Stripe payment gateway.

Talks to the Stripe REST API directly over aiohttp (form-encoded requests,
bearer auth) and verifies webhook signatures locally.
"""
import asyncio
import hashlib
import hmac
import json
import logging
import time
from typing import Any, Dict, Optional, Tuple

import aiohttp

from core.application.interfaces import (
    PaymentConfirmation,
    PaymentDraft,
    PaymentGateway,
    PaymentHandle,
    WebhookVerifier,
)
from core.domain.enums import PaymentOutcome
from core.domain.errors import BadGateway, ServiceUnavailable, ValidationError, WebhookSignatureError
from core.settings.sections.payments import StripeSettings

from .responses import decode_body

logger = logging.getLogger(__name__)

SIGNATURE_SCHEME = "v1"


def intent_outcome(intent: Dict[str, Any]) -> PaymentOutcome:
    """Map a PaymentIntent onto a reconciliation outcome."""
    status = intent.get("status")
    if status == "succeeded":
        return PaymentOutcome.SUCCEEDED
    if status == "canceled":
        return PaymentOutcome.FAILED
    if status == "requires_payment_method" and intent.get("last_payment_error"):
        return PaymentOutcome.FAILED
    return PaymentOutcome.PENDING


def verify_signature(
    payload: bytes,
    header: Optional[str],
    secret: str,
    tolerance: int = 300,
    now: Optional[float] = None,
) -> None:
    """
    Check a ``Stripe-Signature`` header (``t=<ts>,v1=<hex>[,v1=...]``).

    The signed message is ``"<ts>." + payload`` under HMAC-SHA256 with the
    endpoint secret. Timestamps outside ``tolerance`` seconds are refused.

    Raises:
        WebhookSignatureError: on any mismatch, including a missing secret
    """
    if not secret or not header:
        raise WebhookSignatureError()

    timestamp = None
    signatures = []
    for part in header.split(","):
        key, _, value = part.strip().partition("=")
        if key == "t":
            timestamp = value
        elif key == SIGNATURE_SCHEME:
            signatures.append(value)

    if timestamp is None or not signatures:
        raise WebhookSignatureError()
    try:
        timestamp_value = int(timestamp)
    except ValueError:
        raise WebhookSignatureError()

    signed = f"{timestamp_value}.".encode("utf-8") + payload
    expected = hmac.new(secret.encode("utf-8"), signed, hashlib.sha256).hexdigest()
    if not any(hmac.compare_digest(expected, candidate) for candidate in signatures):
        raise WebhookSignatureError()

    current = time.time() if now is None else now
    if tolerance and abs(current - timestamp_value) > tolerance:
        raise WebhookSignatureError()


class StripeGateway(PaymentGateway, WebhookVerifier):
    """
    Stripe implementation of the payment gateway.

    PaymentIntents are created with the internal order id as idempotency key,
    so a retried checkout never opens two intents for the same order.
    """

    name = "Stripe"

    def __init__(self, settings: StripeSettings):
        self.settings = settings
        self.api_base = settings.api_base.rstrip("/")
        self.timeout = aiohttp.ClientTimeout(total=settings.timeout_seconds)
        logger.info("StripeGateway initialized")

    async def create_payment(self, draft: PaymentDraft) -> PaymentHandle:
        form = {
            "amount": str(draft.amount.to_minor_units()),
            "currency": draft.amount.currency.lower(),
            "automatic_payment_methods[enabled]": "true",
            "metadata[orderId]": draft.order_id,
            "metadata[userId]": draft.user_id,
        }
        if draft.description:
            form["description"] = draft.description
        if draft.customer_email:
            form["receipt_email"] = draft.customer_email

        status, body = await self._request(
            "POST", "/v1/payment_intents", data=form, idempotency_key=draft.order_id
        )
        if status >= 300:
            message = _error_message(body) or f"Stripe responded with HTTP {status}"
            logger.error(f"Stripe PaymentIntent creation failed: {status} - {message}")
            raise BadGateway(message, provider_response=body)
        if not body.get("id"):
            logger.error(f"Stripe PaymentIntent creation returned no id: {body}")
            raise BadGateway("Stripe returned an unreadable response", provider_response=body)

        logger.info(f"Stripe PaymentIntent created: {body.get('id')} for order {draft.order_id}")
        return PaymentHandle(
            payment_id=body["id"],
            client_secret=body.get("client_secret"),
            raw=body,
        )

    async def confirm(self, payment_id: str) -> PaymentConfirmation:
        status, body = await self._request("GET", f"/v1/payment_intents/{payment_id}")
        if status >= 300:
            return PaymentConfirmation(
                payment_id=payment_id,
                outcome=PaymentOutcome.PENDING,
                accepted=False,
                message=_error_message(body) or f"Stripe responded with HTTP {status}",
                raw=body,
            )
        return PaymentConfirmation(payment_id=payment_id, outcome=intent_outcome(body), raw=body)

    def construct_event(self, payload: bytes, signature_header: Optional[str]) -> Dict[str, Any]:
        """Verify a webhook delivery and decode its event."""
        verify_signature(
            payload,
            signature_header,
            self.settings.webhook_secret,
            tolerance=self.settings.webhook_tolerance_seconds,
        )
        try:
            event = json.loads(payload)
        except ValueError:
            raise ValidationError("Invalid webhook payload")
        if not isinstance(event, dict):
            raise ValidationError("Invalid webhook payload")
        return event

    async def _request(
        self,
        method: str,
        path: str,
        data: Optional[Dict[str, str]] = None,
        idempotency_key: Optional[str] = None,
    ) -> Tuple[int, Dict[str, Any]]:
        """
        Send one API request.

        Returns:
            (HTTP status, decoded JSON body)
        """
        if not self.settings.secret_key:
            raise ServiceUnavailable("Stripe is not configured")

        headers = {"Authorization": f"Bearer {self.settings.secret_key}"}
        if idempotency_key:
            headers["Idempotency-Key"] = idempotency_key

        try:
            async with aiohttp.ClientSession(timeout=self.timeout) as session:
                async with session.request(
                    method, f"{self.api_base}{path}", data=data, headers=headers
                ) as response:
                    return response.status, decode_body(await response.text())
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"Stripe request {method} {path} failed: {e}")
            raise BadGateway("Could not reach Stripe")


def _error_message(body: Dict[str, Any]) -> Optional[str]:
    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict):
        return error.get("message")
    return None
