from decimal import Decimal

from pydantic import Field

from core.settings.base import StoreBaseSettings


class PricingSettings(StoreBaseSettings):
    """
    Shipping tiers, tax and currency used by the pricing calculator.
    Loaded from .env file with exact variable name matching.
    """

    currency: str = Field(default="USD", alias="STORE_CURRENCY")
    tax_rate: Decimal = Field(default=Decimal("0.08"), alias="STORE_TAX_RATE")
    free_shipping_threshold: Decimal = Field(
        default=Decimal("100"), alias="STORE_FREE_SHIPPING_THRESHOLD"
    )
    standard_shipping_fee: Decimal = Field(
        default=Decimal("9.99"), alias="STORE_STANDARD_SHIPPING_FEE"
    )
    express_shipping_fee: Decimal = Field(
        default=Decimal("15.99"), alias="STORE_EXPRESS_SHIPPING_FEE"
    )
    overnight_shipping_fee: Decimal = Field(
        default=Decimal("29.99"), alias="STORE_OVERNIGHT_SHIPPING_FEE"
    )
