"""Provider webhooks. Unauthenticated; trust comes from the signature."""
from typing import Optional

from fastapi import APIRouter, Depends, Header, Request

from api.dependencies import get_stripe_webhook_handler
from core.application.services import StripeWebhookHandler

router = APIRouter()


@router.post("/stripe/webhook", summary="Stripe webhook receiver")
async def stripe_webhook(
    request: Request,
    stripe_signature: Optional[str] = Header(default=None),
    handler: StripeWebhookHandler = Depends(get_stripe_webhook_handler),
):
    # Signature covers the exact bytes, so the body must not be re-parsed first.
    payload = await request.body()
    return await handler.handle(payload, stripe_signature)
