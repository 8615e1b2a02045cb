"""
FastAPI Dependencies.

Provides dependency injection for ledgers, checkouts and adapters.
Process-wide adapters are singletons; ledgers are cheap and built per request.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from fastapi import Depends
from sqlalchemy.ext.asyncio import async_sessionmaker

# Load environment variables ONCE before any settings objects are created
_PROJECT_ROOT = Path(__file__).resolve().parents[1]
load_dotenv(dotenv_path=_PROJECT_ROOT / ".env")

from core.application.interfaces import AnalyticsSnapshotBuilder, RealtimeNotifier
from core.application.services import (
    CheckoutService,
    OrderLedger,
    PricingCalculator,
    ReturnLedger,
    RoomAccessPolicy,
    SideEffectRunner,
    StoreSettingsService,
    StripeWebhookHandler,
)
from core.domain.enums import PaymentMethod
from core.infrastructure.adapters.payments import PayPalGateway, StripeGateway
from core.infrastructure.analytics import SqlAnalyticsSnapshotBuilder
from core.infrastructure.database.config import get_session_factory
from core.infrastructure.realtime import (
    InMemoryRealtimeNotifier,
    NullRealtimeNotifier,
    RedisRealtimeNotifier,
)
from core.settings import AppSettings, get_app_settings

logger = logging.getLogger(__name__)


# =============================================================================
# SINGLETON INSTANCES
# =============================================================================

_side_effects: Optional[SideEffectRunner] = None
_realtime_hub: Optional[InMemoryRealtimeNotifier] = None
_realtime_notifier: Optional[RealtimeNotifier] = None
_stripe_gateway: Optional[StripeGateway] = None
_paypal_gateway: Optional[PayPalGateway] = None


# =============================================================================
# INFRASTRUCTURE
# =============================================================================

def get_settings() -> AppSettings:
    return get_app_settings()


def get_db_session_factory() -> async_sessionmaker:
    return get_session_factory()


def get_side_effects() -> SideEffectRunner:
    global _side_effects
    if _side_effects is None:
        _side_effects = SideEffectRunner()
    return _side_effects


def get_realtime_hub() -> InMemoryRealtimeNotifier:
    """Local websocket rooms of this worker."""
    global _realtime_hub
    if _realtime_hub is None:
        _realtime_hub = InMemoryRealtimeNotifier(queue_size=get_app_settings().realtime.queue_size)
        logger.info("Created InMemoryRealtimeNotifier hub")
    return _realtime_hub


def get_realtime_notifier() -> RealtimeNotifier:
    global _realtime_notifier
    if _realtime_notifier is None:
        settings = get_app_settings().realtime
        if settings.backend == "redis":
            _realtime_notifier = RedisRealtimeNotifier(
                redis_url=settings.redis_url,
                channel_prefix=settings.channel_prefix,
            )
            logger.info("Using RedisRealtimeNotifier")
        elif settings.backend == "none":
            _realtime_notifier = NullRealtimeNotifier()
            logger.info("Realtime notifications disabled")
        else:
            _realtime_notifier = get_realtime_hub()
            logger.info("Using in-process realtime hub")
    return _realtime_notifier


def get_stripe_gateway() -> StripeGateway:
    global _stripe_gateway
    if _stripe_gateway is None:
        _stripe_gateway = StripeGateway(get_app_settings().stripe)
    return _stripe_gateway


def get_paypal_gateway() -> PayPalGateway:
    global _paypal_gateway
    if _paypal_gateway is None:
        _paypal_gateway = PayPalGateway(get_app_settings().paypal)
    return _paypal_gateway


# =============================================================================
# APPLICATION SERVICES
# =============================================================================

def get_analytics_builder(
    session_factory: async_sessionmaker = Depends(get_db_session_factory),
) -> AnalyticsSnapshotBuilder:
    return SqlAnalyticsSnapshotBuilder(session_factory)


def get_order_ledger(
    session_factory: async_sessionmaker = Depends(get_db_session_factory),
    notifier: RealtimeNotifier = Depends(get_realtime_notifier),
    analytics: AnalyticsSnapshotBuilder = Depends(get_analytics_builder),
    side_effects: SideEffectRunner = Depends(get_side_effects),
    settings: AppSettings = Depends(get_settings),
) -> OrderLedger:
    return OrderLedger(
        session_factory=session_factory,
        pricing=PricingCalculator(settings.pricing),
        notifier=notifier,
        analytics=analytics,
        side_effects=side_effects,
    )


def get_return_ledger(
    session_factory: async_sessionmaker = Depends(get_db_session_factory),
    orders: OrderLedger = Depends(get_order_ledger),
    notifier: RealtimeNotifier = Depends(get_realtime_notifier),
    side_effects: SideEffectRunner = Depends(get_side_effects),
) -> ReturnLedger:
    return ReturnLedger(
        session_factory=session_factory,
        orders=orders,
        notifier=notifier,
        side_effects=side_effects,
    )


def get_room_access(
    orders: OrderLedger = Depends(get_order_ledger),
    returns: ReturnLedger = Depends(get_return_ledger),
) -> RoomAccessPolicy:
    return RoomAccessPolicy(orders, returns)


def get_store_settings_service(
    session_factory: async_sessionmaker = Depends(get_db_session_factory),
) -> StoreSettingsService:
    return StoreSettingsService(session_factory)


def get_stripe_checkout(
    ledger: OrderLedger = Depends(get_order_ledger),
    gateway: StripeGateway = Depends(get_stripe_gateway),
    store_settings: StoreSettingsService = Depends(get_store_settings_service),
) -> CheckoutService:
    return CheckoutService(
        ledger,
        gateway,
        PaymentMethod.STRIPE,
        enabled_check=store_settings.is_stripe_enabled,
    )


def get_paypal_checkout(
    ledger: OrderLedger = Depends(get_order_ledger),
    gateway: PayPalGateway = Depends(get_paypal_gateway),
) -> CheckoutService:
    return CheckoutService(ledger, gateway, PaymentMethod.PAYPAL)


def get_stripe_webhook_handler(
    gateway: StripeGateway = Depends(get_stripe_gateway),
    ledger: OrderLedger = Depends(get_order_ledger),
) -> StripeWebhookHandler:
    return StripeWebhookHandler(gateway, ledger)


# =============================================================================
# LIFECYCLE
# =============================================================================

async def shutdown_dependencies() -> None:
    """Finish side effects and release adapter connections."""
    if _side_effects is not None:
        await _side_effects.drain()
    if isinstance(_realtime_notifier, RedisRealtimeNotifier):
        await _realtime_notifier.disconnect()


def reset_dependencies():
    global _side_effects, _realtime_hub, _realtime_notifier
    global _stripe_gateway, _paypal_gateway

    _side_effects = None
    _realtime_hub = None
    _realtime_notifier = None
    _stripe_gateway = None
    _paypal_gateway = None

    logger.info("Dependencies reset")
