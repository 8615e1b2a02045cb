"""Shared fixtures: in-memory database, seeded catalog, ledgers."""
from decimal import Decimal

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from core.application.dtos import CreateOrderRequest
from core.application.services import (
    OrderLedger,
    PricingCalculator,
    ReturnLedger,
    SideEffectRunner,
    StoreSettingsService,
)
from core.data.models import Base, CartModel, ProductModel
from core.domain.enums import Role
from core.domain.value_objects import Requester
from core.infrastructure.analytics import SqlAnalyticsSnapshotBuilder
from core.settings.sections.pricing import PricingSettings
from tests.mocks import RecordingNotifier

# Use in-memory SQLite for testing
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

SHIPPING_ADDRESS = {
    "firstName": "Ada",
    "lastName": "Lovelace",
    "address": "12 Analytical Row",
    "city": "London",
    "state": "LDN",
    "zip": "N1 9GU",
    "country": "UK",
}

PRODUCTS = [
    {"id": "prod-shirt", "name": "Oxford Shirt", "brand": "Tailor", "price": Decimal("55.00"), "size": "M"},
    {"id": "prod-socks", "name": "Wool Socks", "brand": "Knit", "price": Decimal("49.99"), "size": "L"},
    {"id": "prod-coat", "name": "Rain Coat", "brand": "Tailor", "price": Decimal("115.55"), "size": "XL"},
]


def order_request(items=None, **overrides) -> CreateOrderRequest:
    """Checkout payload with sensible defaults."""
    payload = {
        "items": items if items is not None else [{"productId": "prod-shirt", "quantity": 2}],
        "shippingAddress": dict(SHIPPING_ADDRESS),
        "paymentMethod": "credit_card",
        "customerInfo": {"name": "Ada Lovelace", "email": "ada@example.com", "phone": "555-0100"},
    }
    payload.update(overrides)
    return CreateOrderRequest.model_validate(payload)


@pytest_asyncio.fixture
async def engine():
    """Create test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    """Session factory with the catalog seeded."""
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        for product in PRODUCTS:
            session.add(ProductModel(image=f"/img/{product['id']}.png", stock_count=10, **product))
        await session.commit()
    yield factory


@pytest_asyncio.fixture
async def seed_cart(session_factory):
    async def _seed(user_id: str):
        async with session_factory() as session:
            session.add(CartModel(user_id=user_id, items=[{"productId": "prod-shirt", "quantity": 1}]))
            await session.commit()

    return _seed


@pytest.fixture
def customer() -> Requester:
    return Requester(user_id="user-1", name="Ada Lovelace", email="ada@example.com")


@pytest.fixture
def other_customer() -> Requester:
    return Requester(user_id="user-2", name="Grace Hopper", email="grace@example.com")


@pytest.fixture
def admin() -> Requester:
    return Requester(user_id="admin-1", role=Role.ADMIN, name="Store Admin")


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def side_effects() -> SideEffectRunner:
    return SideEffectRunner(detached=False)


@pytest.fixture
def pricing_settings() -> PricingSettings:
    return PricingSettings()


@pytest.fixture
def order_ledger(session_factory, notifier, side_effects, pricing_settings) -> OrderLedger:
    return OrderLedger(
        session_factory=session_factory,
        pricing=PricingCalculator(pricing_settings),
        notifier=notifier,
        analytics=SqlAnalyticsSnapshotBuilder(session_factory),
        side_effects=side_effects,
    )


@pytest.fixture
def return_ledger(session_factory, order_ledger, notifier, side_effects) -> ReturnLedger:
    return ReturnLedger(
        session_factory=session_factory,
        orders=order_ledger,
        notifier=notifier,
        side_effects=side_effects,
    )


@pytest.fixture
def store_settings_service(session_factory) -> StoreSettingsService:
    return StoreSettingsService(session_factory)
