"""
PayPal payment gateway (Orders v2 REST API over aiohttp).

Access tokens come from the OAuth client-credentials flow and are cached
until shortly before they expire.
"""
import asyncio
import logging
import time
from typing import Any, Dict, Optional, Tuple

import aiohttp

from core.application.interfaces import (
    PaymentConfirmation,
    PaymentDraft,
    PaymentGateway,
    PaymentHandle,
)
from core.domain.enums import PaymentOutcome
from core.domain.errors import BadGateway, ServiceUnavailable
from core.domain.value_objects import Money
from core.settings.sections.payments import PayPalSettings

from .responses import decode_body

logger = logging.getLogger(__name__)

TOKEN_EXPIRY_MARGIN = 60  # seconds
APPROVAL_RELS = ("approve", "payer-action")


def _amount(money: Money) -> Dict[str, str]:
    return {"currency_code": money.currency, "value": f"{money.amount:.2f}"}


class PayPalGateway(PaymentGateway):
    """PayPal implementation of the payment gateway."""

    name = "PayPal"

    def __init__(self, settings: PayPalSettings):
        self.settings = settings
        self.api_base = settings.api_base.rstrip("/")
        self.timeout = aiohttp.ClientTimeout(total=settings.timeout_seconds)
        self._access_token: Optional[str] = None
        self._token_expires_at: float = 0.0
        logger.info("PayPalGateway initialized")

    async def create_payment(self, draft: PaymentDraft) -> PaymentHandle:
        currency = draft.amount.currency
        body = {
            "intent": "CAPTURE",
            "purchase_units": [
                {
                    "reference_id": draft.order_id,
                    "custom_id": draft.order_id,
                    "invoice_id": draft.order_id,
                    "description": draft.description or f"Order {draft.order_id}",
                    "amount": {
                        **_amount(draft.amount),
                        "breakdown": {
                            "item_total": _amount(draft.subtotal),
                            "shipping": _amount(draft.shipping),
                            "tax_total": _amount(draft.tax),
                        },
                    },
                    "items": [
                        {
                            "name": item.name[:127],
                            "sku": item.product_id,
                            "quantity": str(item.quantity),
                            "unit_amount": _amount(Money(item.price, currency)),
                        }
                        for item in draft.items
                    ],
                }
            ],
            "application_context": {
                "brand_name": self.settings.brand_name,
                "return_url": self.settings.return_url,
                "cancel_url": self.settings.cancel_url,
                "user_action": "PAY_NOW",
                "shipping_preference": "NO_SHIPPING",
            },
        }

        status, data = await self._request(
            "POST", "/v2/checkout/orders", json_body=body, request_id=draft.order_id
        )
        if status >= 300:
            message = _error_message(data) or f"PayPal responded with HTTP {status}"
            logger.error(f"PayPal order creation failed: {status} - {message}")
            raise BadGateway(message, provider_response=data)
        if not data.get("id"):
            logger.error(f"PayPal order creation returned no id: {data}")
            raise BadGateway("PayPal returned an unreadable response", provider_response=data)

        approval_url = next(
            (link.get("href") for link in data.get("links", []) if link.get("rel") in APPROVAL_RELS),
            None,
        )
        logger.info(f"PayPal order created: {data.get('id')} for order {draft.order_id}")
        return PaymentHandle(payment_id=data["id"], approval_url=approval_url, raw=data)

    async def confirm(self, payment_id: str) -> PaymentConfirmation:
        """Capture an approved PayPal order."""
        status, data = await self._request(
            "POST",
            f"/v2/checkout/orders/{payment_id}/capture",
            json_body={},
            request_id=f"capture-{payment_id}",
        )
        if status >= 300:
            return PaymentConfirmation(
                payment_id=payment_id,
                outcome=PaymentOutcome.PENDING,
                accepted=False,
                message=_error_message(data) or f"PayPal responded with HTTP {status}",
                raw=data,
            )
        outcome = PaymentOutcome.SUCCEEDED if data.get("status") == "COMPLETED" else PaymentOutcome.FAILED
        return PaymentConfirmation(payment_id=payment_id, outcome=outcome, raw=data)

    async def _get_access_token(self) -> str:
        """Cached OAuth token, refreshed shortly before expiry."""
        if self._access_token and time.monotonic() < self._token_expires_at:
            return self._access_token

        if not self.settings.configured:
            raise ServiceUnavailable("PayPal is not configured")

        auth = aiohttp.BasicAuth(self.settings.client_id, self.settings.client_secret)
        try:
            async with aiohttp.ClientSession(timeout=self.timeout) as session:
                async with session.post(
                    f"{self.api_base}/v1/oauth2/token",
                    data={"grant_type": "client_credentials"},
                    auth=auth,
                ) as response:
                    data = decode_body(await response.text())
                    if response.status != 200:
                        logger.error(f"PayPal token request failed: {response.status} - {data}")
                        raise BadGateway("PayPal authentication failed", provider_response=data)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"PayPal token request failed: {e}")
            raise BadGateway("Could not reach PayPal")

        if not data.get("access_token"):
            logger.error(f"PayPal token response carried no access_token: {data}")
            raise BadGateway("PayPal authentication failed", provider_response=data)

        self._access_token = data["access_token"]
        expires_in = int(data.get("expires_in", 0))
        self._token_expires_at = time.monotonic() + max(expires_in - TOKEN_EXPIRY_MARGIN, 0)
        return self._access_token

    async def _request(
        self,
        method: str,
        path: str,
        json_body: Optional[Dict[str, Any]] = None,
        request_id: Optional[str] = None,
    ) -> Tuple[int, Dict[str, Any]]:
        """
        Send one authenticated API request.

        Returns:
            (HTTP status, decoded JSON body)
        """
        token = await self._get_access_token()
        headers = {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
        }
        if request_id:
            headers["PayPal-Request-Id"] = request_id

        try:
            async with aiohttp.ClientSession(timeout=self.timeout) as session:
                async with session.request(
                    method, f"{self.api_base}{path}", json=json_body, headers=headers
                ) as response:
                    return response.status, decode_body(await response.text())
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"PayPal request {method} {path} failed: {e}")
            raise BadGateway("Could not reach PayPal")


def _error_message(body: Dict[str, Any]) -> Optional[str]:
    if not isinstance(body, dict):
        return None
    details = body.get("details") or []
    if details and isinstance(details[0], dict) and details[0].get("description"):
        return details[0]["description"]
    return body.get("message")
