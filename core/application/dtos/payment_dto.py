"""DTOs for provider checkouts and confirmations."""

from typing import Any, Dict, Optional

from pydantic import Field

from .common import CamelModel, MoneyValue
from .order_dto import OrderDTO


class StripeCheckoutResponse(CamelModel):
    client_secret: Optional[str] = None
    order_id: str
    readable_order_id: str
    amount: MoneyValue


class PayPalCheckoutResponse(CamelModel):
    id: str = Field(..., description="PayPal order id")
    order_id: str
    readable_order_id: str
    approval_url: Optional[str] = None


class ConfirmStripePaymentRequest(CamelModel):
    payment_intent_id: str


class CapturePayPalRequest(CamelModel):
    paypal_order_id: str


class PaymentResultDTO(CamelModel):
    """Outcome of a confirm/capture call; ``success`` False is not an error."""

    success: bool
    message: Optional[str] = None
    order: Optional[OrderDTO] = None
    provider_response: Optional[Dict[str, Any]] = None
