"""
Provider checkout endpoints.

Mounted under the orders prefix ahead of the ``/{order_id}`` routes.
"""
import logging

from fastapi import APIRouter, Depends

from api.dependencies import get_paypal_checkout, get_stripe_checkout
from api.security import get_requester
from core.application.dtos import (
    CapturePayPalRequest,
    ConfirmStripePaymentRequest,
    CreateOrderRequest,
    PaymentResultDTO,
    PayPalCheckoutResponse,
    StripeCheckoutResponse,
)
from core.application.services import CheckoutService
from core.domain.value_objects import Requester

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post(
    "/stripe/create-payment-intent",
    response_model=StripeCheckoutResponse,
    summary="Start a Stripe checkout",
)
async def create_payment_intent(
    request: CreateOrderRequest,
    requester: Requester = Depends(get_requester),
    checkout: CheckoutService = Depends(get_stripe_checkout),
):
    result = await checkout.start_checkout(requester, request)
    return StripeCheckoutResponse(
        client_secret=result.payment.client_secret,
        order_id=result.order.id,
        readable_order_id=result.order.order_code,
        amount=result.order.total,
    )


@router.post("/stripe/confirm", response_model=PaymentResultDTO, summary="Confirm a Stripe payment")
async def confirm_stripe_payment(
    request: ConfirmStripePaymentRequest,
    requester: Requester = Depends(get_requester),
    checkout: CheckoutService = Depends(get_stripe_checkout),
):
    return await checkout.confirm_payment(request.payment_intent_id, requester)


@router.post("/paypal/create", response_model=PayPalCheckoutResponse, summary="Start a PayPal checkout")
async def create_paypal_order(
    request: CreateOrderRequest,
    requester: Requester = Depends(get_requester),
    checkout: CheckoutService = Depends(get_paypal_checkout),
):
    result = await checkout.start_checkout(requester, request)
    return PayPalCheckoutResponse(
        id=result.payment.payment_id,
        order_id=result.order.id,
        readable_order_id=result.order.order_code,
        approval_url=result.payment.approval_url,
    )


@router.post("/paypal/capture", response_model=PaymentResultDTO, summary="Capture an approved PayPal order")
async def capture_paypal_order(
    request: CapturePayPalRequest,
    requester: Requester = Depends(get_requester),
    checkout: CheckoutService = Depends(get_paypal_checkout),
):
    return await checkout.confirm_payment(request.paypal_order_id, requester)
