"""Domain enumerations."""

from .order_enums import (
    OrderStatus,
    PaymentMethod,
    PaymentOutcome,
    PaymentStatus,
    ReturnStatus,
    Role,
    ShippingMethod,
)

__all__ = [
    "OrderStatus",
    "PaymentMethod",
    "PaymentOutcome",
    "PaymentStatus",
    "ReturnStatus",
    "Role",
    "ShippingMethod",
]
