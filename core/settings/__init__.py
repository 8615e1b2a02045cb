# Settings package
from core.settings.app import AppSettings, get_app_settings
from core.settings.sections import (
    LoggingSettings,
    PayPalSettings,
    PricingSettings,
    RealtimeSettings,
    StripeSettings,
)

__all__ = [
    "AppSettings",
    "get_app_settings",
    "LoggingSettings",
    "PayPalSettings",
    "PricingSettings",
    "RealtimeSettings",
    "StripeSettings",
]
