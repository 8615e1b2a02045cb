"""
Order, payment and return status enums.

Values match the persisted/wire strings exactly.
"""
from enum import Enum


class OrderStatus(str, Enum):
    """Fulfillment lifecycle."""

    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentStatus(str, Enum):
    """Payment lifecycle, independent axis from OrderStatus."""

    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


class PaymentMethod(str, Enum):
    """Checkout payment methods."""

    CREDIT_CARD = "credit_card"
    DEBIT_CARD = "debit_card"
    PAYPAL = "paypal"
    STRIPE = "stripe"
    CASH_ON_DELIVERY = "cash_on_delivery"


class ShippingMethod(str, Enum):
    """Shipping tiers priced by the pricing calculator."""

    STANDARD = "standard"
    EXPRESS = "express"
    OVERNIGHT = "overnight"


class PaymentOutcome(str, Enum):
    """Result reported by a payment provider for one payment."""

    SUCCEEDED = "succeeded"
    FAILED = "failed"
    PENDING = "pending"


class ReturnStatus(str, Enum):
    """Return request lifecycle."""

    REQUESTED = "requested"
    APPROVED = "approved"
    IN_TRANSIT = "in_transit"
    RECEIVED = "received"
    REFUNDED = "refunded"
    REJECTED = "rejected"


class Role(str, Enum):
    """Caller roles."""

    USER = "user"
    ADMIN = "admin"
