from pydantic import Field

from core.settings.base import StoreBaseSettings


class StripeSettings(StoreBaseSettings):
    """
    Stripe integration settings.
    Loaded from .env file with exact variable name matching.
    """

    secret_key: str = Field(default="", alias="STRIPE_SECRET_KEY")
    webhook_secret: str = Field(default="", alias="STRIPE_WEBHOOK_SECRET")
    api_base: str = Field(default="https://api.stripe.com", alias="STRIPE_API_BASE")
    webhook_tolerance_seconds: int = Field(default=300, alias="STRIPE_WEBHOOK_TOLERANCE")
    timeout_seconds: float = Field(default=15.0, alias="STRIPE_TIMEOUT_SECONDS")

    @property
    def configured(self) -> bool:
        return bool(self.secret_key)


class PayPalSettings(StoreBaseSettings):
    """
    PayPal REST settings.
    Loaded from .env file with exact variable name matching.
    """

    client_id: str = Field(default="", alias="PAYPAL_CLIENT_ID")
    client_secret: str = Field(default="", alias="PAYPAL_CLIENT_SECRET")
    api_base: str = Field(
        default="https://api-m.sandbox.paypal.com", alias="PAYPAL_API_BASE"
    )
    return_url: str = Field(
        default="http://localhost:3000/checkout/success", alias="PAYPAL_RETURN_URL"
    )
    cancel_url: str = Field(
        default="http://localhost:3000/checkout/cancel", alias="PAYPAL_CANCEL_URL"
    )
    brand_name: str = Field(default="Storefront", alias="PAYPAL_BRAND_NAME")
    timeout_seconds: float = Field(default=15.0, alias="PAYPAL_TIMEOUT_SECONDS")

    @property
    def configured(self) -> bool:
        return bool(self.client_id and self.client_secret)
