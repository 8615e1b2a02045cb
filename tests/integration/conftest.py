"""Fixtures for API tests: the FastAPI app wired to the test database."""
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from api import dependencies
from api.main import app
from core.infrastructure.adapters.payments import PayPalGateway, StripeGateway
from core.infrastructure.realtime import InMemoryRealtimeNotifier
from core.settings.sections.payments import PayPalSettings, StripeSettings
from tests.conftest import SHIPPING_ADDRESS

WEBHOOK_SECRET = "whsec_api"

CUSTOMER_HEADERS = {"X-User-Id": "user-1", "X-User-Name": "Ada Lovelace", "X-User-Email": "ada@example.com"}
OTHER_HEADERS = {"X-User-Id": "user-2", "X-User-Name": "Grace Hopper"}
ADMIN_HEADERS = {"X-User-Id": "admin-1", "X-User-Role": "admin"}


def checkout_payload(**overrides) -> dict:
    payload = {
        "items": [{"productId": "prod-shirt", "quantity": 2}],
        "shippingAddress": dict(SHIPPING_ADDRESS),
        "paymentMethod": "credit_card",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def stripe_gateway() -> StripeGateway:
    gateway = StripeGateway(StripeSettings(secret_key="sk_test", webhook_secret=WEBHOOK_SECRET))
    gateway._request = AsyncMock(return_value=(200, {"id": "pi_api", "client_secret": "pi_api_secret"}))
    return gateway


@pytest.fixture
def paypal_gateway() -> PayPalGateway:
    gateway = PayPalGateway(PayPalSettings(client_id="client", client_secret="secret"))
    gateway._get_access_token = AsyncMock(return_value="token")
    gateway._request = AsyncMock(
        return_value=(201, {"id": "PP-API", "links": [{"rel": "approve", "href": "https://paypal/approve/PP-API"}]})
    )
    return gateway


@pytest.fixture
def realtime_hub() -> InMemoryRealtimeNotifier:
    return InMemoryRealtimeNotifier()


@pytest.fixture
def api_overrides(session_factory, notifier, side_effects, stripe_gateway, paypal_gateway, realtime_hub):
    """Point every process-wide dependency at test doubles."""
    app.dependency_overrides[dependencies.get_db_session_factory] = lambda: session_factory
    app.dependency_overrides[dependencies.get_realtime_notifier] = lambda: notifier
    app.dependency_overrides[dependencies.get_side_effects] = lambda: side_effects
    app.dependency_overrides[dependencies.get_stripe_gateway] = lambda: stripe_gateway
    app.dependency_overrides[dependencies.get_paypal_gateway] = lambda: paypal_gateway
    app.dependency_overrides[dependencies.get_realtime_hub] = lambda: realtime_hub
    yield app
    app.dependency_overrides.clear()
    dependencies.reset_dependencies()


@pytest_asyncio.fixture
async def client(api_overrides):
    async with AsyncClient(transport=ASGITransport(app=api_overrides), base_url="http://test") as http:
        yield http
