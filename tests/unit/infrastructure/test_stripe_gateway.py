"""Tests for the Stripe gateway (HTTP mocked)."""
import hashlib
import hmac
import json
import time
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock, patch

import aiohttp
import pytest

from core.application.interfaces import PaymentDraft, PaymentGateway, WebhookVerifier
from core.domain.enums import PaymentOutcome
from core.domain.errors import BadGateway, ServiceUnavailable, ValidationError, WebhookSignatureError
from core.domain.value_objects import Money
from core.infrastructure.adapters.payments import StripeGateway, intent_outcome, verify_signature
from core.settings.sections.payments import StripeSettings

WEBHOOK_SECRET = "whsec_test"


def sign(payload: bytes, secret: str = WEBHOOK_SECRET, timestamp: int | None = None) -> str:
    timestamp = int(time.time()) if timestamp is None else timestamp
    digest = hmac.new(secret.encode(), f"{timestamp}.".encode() + payload, hashlib.sha256).hexdigest()
    return f"t={timestamp},v1={digest}"


@pytest.fixture
def gateway() -> StripeGateway:
    return StripeGateway(StripeSettings(secret_key="sk_test_123", webhook_secret=WEBHOOK_SECRET))


@pytest.fixture
def draft() -> PaymentDraft:
    return PaymentDraft(
        order_id="order-1",
        user_id="user-1",
        amount=Money(Decimal("118.80")),
        subtotal=Money(Decimal("110.00")),
        shipping=Money(Decimal("0.00")),
        tax=Money(Decimal("8.80")),
        customer_email="ada@example.com",
        description="Order order-1",
    )


@pytest.mark.asyncio
async def test_create_payment_sends_minor_units_and_idempotency_key(gateway, draft):
    gateway._request = AsyncMock(return_value=(200, {"id": "pi_1", "client_secret": "pi_1_secret"}))

    handle = await gateway.create_payment(draft)

    assert handle.payment_id == "pi_1"
    assert handle.client_secret == "pi_1_secret"
    method, path = gateway._request.call_args.args
    kwargs = gateway._request.call_args.kwargs
    assert (method, path) == ("POST", "/v1/payment_intents")
    assert kwargs["data"]["amount"] == "11880"
    assert kwargs["data"]["currency"] == "usd"
    assert kwargs["data"]["metadata[orderId]"] == "order-1"
    assert kwargs["idempotency_key"] == "order-1"


@pytest.mark.asyncio
async def test_create_payment_rejection_is_bad_gateway(gateway, draft):
    body = {"error": {"message": "Invalid API Key provided"}}
    gateway._request = AsyncMock(return_value=(401, body))

    with pytest.raises(BadGateway) as exc_info:
        await gateway.create_payment(draft)

    assert exc_info.value.message == "Invalid API Key provided"
    assert exc_info.value.provider_response == body


@pytest.mark.asyncio
async def test_confirm_maps_intent_status(gateway):
    gateway._request = AsyncMock(return_value=(200, {"id": "pi_1", "status": "succeeded"}))

    confirmation = await gateway.confirm("pi_1")

    assert confirmation.accepted
    assert confirmation.outcome == PaymentOutcome.SUCCEEDED
    gateway._request.assert_awaited_once_with("GET", "/v1/payment_intents/pi_1")


@pytest.mark.asyncio
async def test_confirm_non_2xx_is_not_accepted(gateway):
    gateway._request = AsyncMock(return_value=(404, {"error": {"message": "No such payment_intent"}}))

    confirmation = await gateway.confirm("pi_missing")

    assert confirmation.accepted is False
    assert confirmation.message == "No such payment_intent"


@pytest.mark.parametrize(
    "intent, outcome",
    [
        ({"status": "succeeded"}, PaymentOutcome.SUCCEEDED),
        ({"status": "canceled"}, PaymentOutcome.FAILED),
        ({"status": "requires_payment_method", "last_payment_error": {"code": "card_declined"}}, PaymentOutcome.FAILED),
        ({"status": "requires_payment_method"}, PaymentOutcome.PENDING),
        ({"status": "processing"}, PaymentOutcome.PENDING),
    ],
)
def test_intent_outcome(intent, outcome):
    assert intent_outcome(intent) == outcome


@pytest.mark.asyncio
async def test_missing_secret_key_is_service_unavailable(draft):
    gateway = StripeGateway(StripeSettings(secret_key=""))
    with pytest.raises(ServiceUnavailable):
        await gateway.create_payment(draft)


@pytest.mark.asyncio
async def test_request_uses_aiohttp_session(gateway):
    """Real _request path against a mocked aiohttp session."""
    mock_response = MagicMock()
    mock_response.status = 200
    mock_response.text = AsyncMock(return_value=json.dumps({"id": "pi_1", "status": "processing"}))

    mock_session_instance = MagicMock()
    mock_session_instance.request.return_value.__aenter__.return_value = mock_response

    with patch("core.infrastructure.adapters.payments.stripe_gateway.aiohttp.ClientSession") as mock_session:
        mock_session.return_value.__aenter__.return_value = mock_session_instance

        confirmation = await gateway.confirm("pi_1")

    assert confirmation.outcome == PaymentOutcome.PENDING
    args, kwargs = mock_session_instance.request.call_args
    assert args == ("GET", "https://api.stripe.com/v1/payment_intents/pi_1")
    assert kwargs["headers"]["Authorization"] == "Bearer sk_test_123"


@pytest.mark.asyncio
async def test_transport_error_is_bad_gateway(gateway):
    mock_session_instance = MagicMock()
    mock_session_instance.request.side_effect = aiohttp.ClientConnectionError("refused")

    with patch("core.infrastructure.adapters.payments.stripe_gateway.aiohttp.ClientSession") as mock_session:
        mock_session.return_value.__aenter__.return_value = mock_session_instance
        with pytest.raises(BadGateway):
            await gateway.confirm("pi_1")


def _html_session(mock_session, status):
    mock_response = MagicMock()
    mock_response.status = status
    mock_response.text = AsyncMock(return_value="<html><body>502 Bad Gateway</body></html>")
    mock_session_instance = MagicMock()
    mock_session_instance.request.return_value.__aenter__.return_value = mock_response
    mock_session.return_value.__aenter__.return_value = mock_session_instance


@pytest.mark.asyncio
async def test_html_error_page_on_confirm_is_not_accepted(gateway):
    with patch("core.infrastructure.adapters.payments.stripe_gateway.aiohttp.ClientSession") as mock_session:
        _html_session(mock_session, 502)

        confirmation = await gateway.confirm("pi_1")

    assert confirmation.accepted is False
    assert confirmation.message == "Stripe responded with HTTP 502"
    assert confirmation.raw == {"raw": "<html><body>502 Bad Gateway</body></html>"}


@pytest.mark.asyncio
async def test_html_error_page_on_create_is_bad_gateway(gateway, draft):
    with patch("core.infrastructure.adapters.payments.stripe_gateway.aiohttp.ClientSession") as mock_session:
        _html_session(mock_session, 502)

        with pytest.raises(BadGateway) as exc_info:
            await gateway.create_payment(draft)

    assert exc_info.value.provider_response == {"raw": "<html><body>502 Bad Gateway</body></html>"}


@pytest.mark.asyncio
async def test_unreadable_success_on_create_is_bad_gateway(gateway, draft):
    with patch("core.infrastructure.adapters.payments.stripe_gateway.aiohttp.ClientSession") as mock_session:
        _html_session(mock_session, 200)

        with pytest.raises(BadGateway):
            await gateway.create_payment(draft)


# =============================================================================
# WEBHOOK SIGNATURES
# =============================================================================

def test_valid_signature_decodes_event(gateway):
    payload = json.dumps({"id": "evt_1", "type": "payment_intent.succeeded"}).encode()

    event = gateway.construct_event(payload, sign(payload))

    assert event["id"] == "evt_1"


def test_tampered_payload_is_rejected(gateway):
    payload = b'{"id": "evt_1"}'
    header = sign(payload)

    with pytest.raises(WebhookSignatureError):
        gateway.construct_event(b'{"id": "evt_2"}', header)


def test_wrong_secret_is_rejected(gateway):
    payload = b'{"id": "evt_1"}'
    with pytest.raises(WebhookSignatureError):
        gateway.construct_event(payload, sign(payload, secret="whsec_other"))


def test_stale_timestamp_is_rejected():
    payload = b"{}"
    header = sign(payload, timestamp=1_000)
    with pytest.raises(WebhookSignatureError):
        verify_signature(payload, header, WEBHOOK_SECRET, tolerance=300, now=2_000)


def test_any_matching_v1_signature_is_enough():
    payload = b"{}"
    header = sign(payload, timestamp=1_000)
    with_rotated = header.replace(",v1=", ",v1=deadbeef,v1=")
    verify_signature(payload, with_rotated, WEBHOOK_SECRET, tolerance=300, now=1_100)


@pytest.mark.parametrize("header", [None, "", "garbage", "t=abc,v1=00", "v1=00"])
def test_malformed_headers_are_rejected(header):
    with pytest.raises(WebhookSignatureError):
        verify_signature(b"{}", header, WEBHOOK_SECRET)


def test_unset_webhook_secret_fails_closed():
    gateway = StripeGateway(StripeSettings(secret_key="sk_test", webhook_secret=""))
    payload = b"{}"
    with pytest.raises(WebhookSignatureError):
        gateway.construct_event(payload, sign(payload))


def test_signed_non_json_body_is_invalid(gateway):
    payload = b"not json"
    with pytest.raises(ValidationError):
        gateway.construct_event(payload, sign(payload))


def test_gateway_declares_payment_and_webhook_capabilities(gateway):
    assert isinstance(gateway, PaymentGateway)
    assert isinstance(gateway, WebhookVerifier)
