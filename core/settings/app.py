# core/settings/app.py
from functools import lru_cache

from pydantic import BaseModel, ConfigDict

from core.settings.sections import (
    LoggingSettings,
    PayPalSettings,
    PricingSettings,
    RealtimeSettings,
    StripeSettings,
)


class AppSettings(BaseModel):
    """Central application settings aggregator."""

    model_config = ConfigDict(arbitrary_types_allowed=True, extra="ignore")

    pricing: PricingSettings
    stripe: StripeSettings
    paypal: PayPalSettings
    realtime: RealtimeSettings
    logging: LoggingSettings


@lru_cache()
def get_app_settings() -> AppSettings:
    """Return cached global settings for the entire app."""
    return AppSettings(
        pricing=PricingSettings(),
        stripe=StripeSettings(),
        paypal=PayPalSettings(),
        realtime=RealtimeSettings(),
        logging=LoggingSettings(),
    )
