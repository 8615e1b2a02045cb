"""Application services."""
from .address_normalizer import normalize_address
from .checkout_service import CheckoutResult, CheckoutService
from .order_ledger import OrderLedger, PreparedOrder
from .pricing import PricingCalculator, compute_totals
from .return_ledger import ReturnLedger
from .room_access import RoomAccessPolicy
from .side_effects import SideEffectRunner
from .store_settings_service import StoreSettingsService
from .stripe_webhooks import StripeWebhookHandler

__all__ = [
    "CheckoutResult",
    "CheckoutService",
    "OrderLedger",
    "PreparedOrder",
    "PricingCalculator",
    "ReturnLedger",
    "RoomAccessPolicy",
    "SideEffectRunner",
    "StoreSettingsService",
    "StripeWebhookHandler",
    "compute_totals",
    "normalize_address",
]
