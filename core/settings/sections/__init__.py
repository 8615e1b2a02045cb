from core.settings.sections.logging import LoggingSettings
from core.settings.sections.payments import PayPalSettings, StripeSettings
from core.settings.sections.pricing import PricingSettings
from core.settings.sections.realtime import RealtimeSettings

__all__ = [
    "LoggingSettings",
    "PayPalSettings",
    "PricingSettings",
    "RealtimeSettings",
    "StripeSettings",
]
