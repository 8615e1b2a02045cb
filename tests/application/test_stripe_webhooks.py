"""Tests for Stripe webhook handling."""
import hashlib
import hmac
import json
import time

import pytest

from core.application.services import StripeWebhookHandler
from core.domain.enums import PaymentStatus
from core.domain.errors import WebhookSignatureError
from core.infrastructure.adapters.payments import StripeGateway
from core.settings.sections.payments import StripeSettings
from tests.conftest import order_request

SECRET = "whsec_test"


def signed(event: dict):
    payload = json.dumps(event).encode()
    timestamp = int(time.time())
    digest = hmac.new(SECRET.encode(), f"{timestamp}.".encode() + payload, hashlib.sha256).hexdigest()
    return payload, f"t={timestamp},v1={digest}"


def intent_event(event_type: str, payment_id: str) -> dict:
    return {"id": "evt_1", "type": event_type, "data": {"object": {"id": payment_id, "object": "payment_intent"}}}


@pytest.fixture
def handler(order_ledger) -> StripeWebhookHandler:
    gateway = StripeGateway(StripeSettings(secret_key="sk_test", webhook_secret=SECRET))
    return StripeWebhookHandler(gateway, order_ledger)


@pytest.mark.asyncio
async def test_succeeded_event_marks_order_paid(handler, order_ledger, customer):
    await order_ledger.create_order(customer, order_request(), payment_id="pi_hook")

    ack = await handler.handle(*signed(intent_event("payment_intent.succeeded", "pi_hook")))

    assert ack == {"received": True}
    order = await order_ledger.find_for_payment("pi_hook", customer)
    assert order.payment_status == PaymentStatus.PAID


@pytest.mark.asyncio
async def test_redelivery_is_harmless(handler, order_ledger, customer):
    created = await order_ledger.create_order(customer, order_request(), payment_id="pi_hook")
    payload, header = signed(intent_event("payment_intent.succeeded", "pi_hook"))

    await handler.handle(payload, header)
    await handler.handle(payload, header)

    history = await order_ledger.order_history(created.id, customer)
    assert [e.event_type for e in history].count("OrderPaymentStatusChangedEvent") == 1


@pytest.mark.asyncio
async def test_failed_event_after_success_is_ignored(handler, order_ledger, customer):
    await order_ledger.create_order(customer, order_request(), payment_id="pi_hook")
    await handler.handle(*signed(intent_event("payment_intent.succeeded", "pi_hook")))

    await handler.handle(*signed(intent_event("payment_intent.payment_failed", "pi_hook")))

    order = await order_ledger.find_for_payment("pi_hook", customer)
    assert order.payment_status == PaymentStatus.PAID


@pytest.mark.asyncio
async def test_unknown_payment_is_acknowledged(handler):
    ack = await handler.handle(*signed(intent_event("payment_intent.succeeded", "pi_nobody")))
    assert ack == {"received": True}


@pytest.mark.asyncio
async def test_unrelated_event_type_is_acknowledged(handler, order_ledger, customer):
    await order_ledger.create_order(customer, order_request(), payment_id="pi_hook")

    ack = await handler.handle(*signed(intent_event("charge.refunded", "pi_hook")))

    assert ack == {"received": True}
    order = await order_ledger.find_for_payment("pi_hook", customer)
    assert order.payment_status == PaymentStatus.PENDING


@pytest.mark.asyncio
async def test_bad_signature_is_rejected(handler):
    payload, _ = signed(intent_event("payment_intent.succeeded", "pi_hook"))
    with pytest.raises(WebhookSignatureError):
        await handler.handle(payload, "t=1,v1=deadbeef")
