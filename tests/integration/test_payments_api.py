"""Integration tests for provider checkouts and the Stripe webhook."""
import hashlib
import hmac
import json
import time
from unittest.mock import AsyncMock

import pytest

from core.data.models import CartModel
from tests.integration.conftest import (
    ADMIN_HEADERS,
    CUSTOMER_HEADERS,
    OTHER_HEADERS,
    WEBHOOK_SECRET,
    checkout_payload,
)


def stripe_signature(payload: bytes) -> str:
    timestamp = int(time.time())
    digest = hmac.new(WEBHOOK_SECRET.encode(), f"{timestamp}.".encode() + payload, hashlib.sha256).hexdigest()
    return f"t={timestamp},v1={digest}"


@pytest.mark.asyncio
async def test_stripe_checkout_and_confirm(client, stripe_gateway):
    created = await client.post(
        "/api/v1/orders/stripe/create-payment-intent", json=checkout_payload(), headers=CUSTOMER_HEADERS
    )
    assert created.status_code == 200, created.text
    body = created.json()
    assert body["clientSecret"] == "pi_api_secret"
    assert body["readableOrderId"].startswith("ORD-")
    assert body["amount"] == 118.8

    stripe_gateway._request = AsyncMock(return_value=(200, {"id": "pi_api", "status": "succeeded"}))
    confirmed = await client.post(
        "/api/v1/orders/stripe/confirm", json={"paymentIntentId": "pi_api"}, headers=CUSTOMER_HEADERS
    )

    result = confirmed.json()
    assert result["success"] is True
    assert result["order"]["paymentStatus"] == "paid"
    assert result["order"]["status"] == "processing"


@pytest.mark.asyncio
async def test_stripe_confirm_provider_refusal(client, stripe_gateway):
    await client.post("/api/v1/orders/stripe/create-payment-intent", json=checkout_payload(), headers=CUSTOMER_HEADERS)
    stripe_gateway._request = AsyncMock(return_value=(404, {"error": {"message": "No such payment_intent"}}))

    confirmed = await client.post(
        "/api/v1/orders/stripe/confirm", json={"paymentIntentId": "pi_api"}, headers=CUSTOMER_HEADERS
    )

    result = confirmed.json()
    assert result["success"] is False
    assert result["message"] == "No such payment_intent"
    assert result["providerResponse"] == {"error": {"message": "No such payment_intent"}}


@pytest.mark.asyncio
async def test_stripe_confirm_foreign_payment_is_404(client):
    await client.post("/api/v1/orders/stripe/create-payment-intent", json=checkout_payload(), headers=CUSTOMER_HEADERS)

    response = await client.post(
        "/api/v1/orders/stripe/confirm", json={"paymentIntentId": "pi_api"}, headers=OTHER_HEADERS
    )

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_stripe_creation_failure_is_502(client, stripe_gateway):
    stripe_gateway._request = AsyncMock(return_value=(402, {"error": {"message": "Your card was declined."}}))

    response = await client.post(
        "/api/v1/orders/stripe/create-payment-intent", json=checkout_payload(), headers=CUSTOMER_HEADERS
    )

    assert response.status_code == 502
    assert response.json()["detail"] == "Your card was declined."
    listing = await client.get("/api/v1/orders", headers=ADMIN_HEADERS)
    assert listing.json()["total"] == 0


@pytest.mark.asyncio
async def test_stripe_disabled_by_admin_is_503(client):
    toggled = await client.patch("/api/v1/admin/settings", json={"stripeEnabled": False}, headers=ADMIN_HEADERS)
    assert toggled.json()["stripeEnabled"] is False

    response = await client.post(
        "/api/v1/orders/stripe/create-payment-intent", json=checkout_payload(), headers=CUSTOMER_HEADERS
    )

    assert response.status_code == 503


@pytest.mark.asyncio
async def test_paypal_create_and_capture(client, paypal_gateway):
    created = await client.post("/api/v1/orders/paypal/create", json=checkout_payload(), headers=CUSTOMER_HEADERS)
    body = created.json()
    assert body["id"] == "PP-API"
    assert body["approvalUrl"] == "https://paypal/approve/PP-API"

    paypal_gateway._request = AsyncMock(return_value=(201, {"id": "PP-API", "status": "COMPLETED"}))
    captured = await client.post(
        "/api/v1/orders/paypal/capture", json={"paypalOrderId": "PP-API"}, headers=CUSTOMER_HEADERS
    )

    result = captured.json()
    assert result["success"] is True
    assert result["order"]["paymentMethod"] == "paypal"
    assert result["order"]["paymentStatus"] == "paid"


@pytest.mark.asyncio
async def test_webhook_marks_order_paid(client, notifier, seed_cart, session_factory):
    created = await client.post(
        "/api/v1/orders/stripe/create-payment-intent", json=checkout_payload(), headers=CUSTOMER_HEADERS
    )
    order_id = created.json()["orderId"]
    await seed_cart("user-1")
    notifier.clear()
    payload = json.dumps(
        {"id": "evt_1", "type": "payment_intent.succeeded", "data": {"object": {"id": "pi_api"}}}
    ).encode()

    response = await client.post(
        "/api/v1/stripe/webhook",
        content=payload,
        headers={"Stripe-Signature": stripe_signature(payload), "Content-Type": "application/json"},
    )

    assert response.status_code == 200
    assert response.json() == {"received": True}
    order = await client.get(f"/api/v1/orders/{order_id}", headers=CUSTOMER_HEADERS)
    assert order.json()["paymentStatus"] == "paid"
    pushes = notifier.for_topic(f"order:{order_id}")
    assert len(pushes) == 1
    assert pushes[0]["paymentStatus"] == "paid"
    async with session_factory() as session:
        assert await session.get(CartModel, "user-1") is None


@pytest.mark.asyncio
async def test_replayed_webhook_leaves_new_cart_alone(client, seed_cart, session_factory):
    created = await client.post(
        "/api/v1/orders/stripe/create-payment-intent", json=checkout_payload(), headers=CUSTOMER_HEADERS
    )
    payload = json.dumps(
        {"id": "evt_1", "type": "payment_intent.succeeded", "data": {"object": {"id": "pi_api"}}}
    ).encode()
    headers = {"Stripe-Signature": stripe_signature(payload), "Content-Type": "application/json"}
    await client.post("/api/v1/stripe/webhook", content=payload, headers=headers)

    await seed_cart("user-1")
    replay = await client.post("/api/v1/stripe/webhook", content=payload, headers=headers)

    assert replay.json() == {"received": True}
    history = await client.get(f"/api/v1/orders/{created.json()['orderId']}/history", headers=CUSTOMER_HEADERS)
    assert [e["eventType"] for e in history.json()].count("OrderPaymentStatusChangedEvent") == 1
    async with session_factory() as session:
        assert await session.get(CartModel, "user-1") is not None


@pytest.mark.asyncio
async def test_webhook_bad_signature_is_400(client):
    response = await client.post(
        "/api/v1/stripe/webhook",
        content=b'{"type": "payment_intent.succeeded"}',
        headers={"Stripe-Signature": "t=1,v1=bad"},
    )

    assert response.status_code == 400
    assert response.json() == {"detail": "Webhook signature verification failed"}
