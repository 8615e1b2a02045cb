"""Payment provider adapters."""
from .paypal_gateway import PayPalGateway
from .stripe_gateway import StripeGateway, intent_outcome, verify_signature

__all__ = ["PayPalGateway", "StripeGateway", "intent_outcome", "verify_signature"]
