"""Application DTOs for Order operations."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import Field

from core.domain.entities.order import Order, OrderItem
from core.domain.enums import OrderStatus, PaymentMethod, PaymentStatus, ShippingMethod
from core.domain.value_objects import Address, CustomerInfo

from .common import CamelModel, MoneyValue


# =============================================================================
# REQUEST DTOs
# =============================================================================

class OrderLineRequest(CamelModel):
    """Requested line: price and name always come from the catalog."""

    product_id: str = Field(..., description="Catalog product id")
    quantity: Any = Field(default=1, description="Units ordered (integer >= 1)")
    size: Optional[str] = None
    color: Optional[str] = None


class CustomerInfoInput(CamelModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None


class CreateOrderRequest(CamelModel):
    """
    Checkout payload shared by direct, Stripe and PayPal checkouts.

    Addresses are accepted loosely (``address``/``street``,
    ``zip``/``postalCode``/``zipCode``, ``firstName``+``lastName``) and
    normalized by the ledger.
    """

    items: List[OrderLineRequest] = Field(default_factory=list)
    shipping_address: Optional[Dict[str, Any]] = None
    billing_address: Optional[Dict[str, Any]] = None
    payment_method: Optional[str] = None
    customer_info: Optional[CustomerInfoInput] = None
    notes: Optional[str] = None
    shipping_method: str = ShippingMethod.STANDARD.value


class UpdateOrderStatusRequest(CamelModel):
    status: str
    tracking_number: Optional[str] = None
    notes: Optional[str] = None


class RefundOrderRequest(CamelModel):
    amount: Optional[MoneyValue] = None
    reason: Optional[str] = None


# =============================================================================
# RESPONSE DTOs
# =============================================================================

class OrderItemDTO(CamelModel):
    id: str
    product_id: str
    name: str
    price: MoneyValue
    image: str = ""
    quantity: int
    size: str = ""
    color: Optional[str] = None

    @classmethod
    def from_entity(cls, item: OrderItem) -> "OrderItemDTO":
        return cls(
            id=item.id,
            product_id=item.product_id,
            name=item.name,
            price=item.price,
            image=item.image,
            quantity=item.quantity,
            size=item.size,
            color=item.color,
        )


class AddressDTO(CamelModel):
    name: str
    street: str
    city: str
    state: str
    zip_code: str
    country: str
    phone: Optional[str] = None

    @classmethod
    def from_value(cls, address: Address) -> "AddressDTO":
        return cls(**address.to_dict())


class CustomerInfoDTO(CamelModel):
    name: str
    email: str
    phone: Optional[str] = None

    @classmethod
    def from_value(cls, info: CustomerInfo) -> "CustomerInfoDTO":
        return cls(**info.to_dict())


class RefundDTO(CamelModel):
    amount: MoneyValue
    reason: str
    processed_at: datetime
    processed_by: Optional[str] = None


class OrderDTO(CamelModel):
    """Response DTO for order details."""

    id: str
    order_code: str = Field(..., description="Human readable code, ORD-YYYY-NNNN")
    user_id: str
    items: List[OrderItemDTO]
    customer_info: CustomerInfoDTO
    subtotal: MoneyValue
    shipping: MoneyValue
    tax: MoneyValue
    discount: MoneyValue
    total: MoneyValue
    status: OrderStatus
    payment_status: PaymentStatus
    payment_method: PaymentMethod
    payment_id: Optional[str] = None
    shipping_address: AddressDTO
    billing_address: AddressDTO
    shipping_method: ShippingMethod
    tracking_number: Optional[str] = None
    notes: Optional[str] = None
    delivered_at: Optional[datetime] = None
    refund: Optional[RefundDTO] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, order: Order) -> "OrderDTO":
        refund = None
        if order.refund is not None:
            refund = RefundDTO(
                amount=order.refund.amount,
                reason=order.refund.reason,
                processed_at=order.refund.processed_at,
                processed_by=order.refund.processed_by,
            )
        return cls(
            id=order.id,
            order_code=order.order_code,
            user_id=order.user_id,
            items=[OrderItemDTO.from_entity(item) for item in order.items],
            customer_info=CustomerInfoDTO.from_value(order.customer_info),
            subtotal=order.subtotal,
            shipping=order.shipping,
            tax=order.tax,
            discount=order.discount,
            total=order.total,
            status=order.status,
            payment_status=order.payment_status,
            payment_method=order.payment_method,
            payment_id=order.payment_id,
            shipping_address=AddressDTO.from_value(order.shipping_address),
            billing_address=AddressDTO.from_value(order.billing_address),
            shipping_method=order.shipping_method,
            tracking_number=order.tracking_number,
            notes=order.notes,
            delivered_at=order.delivered_at,
            refund=refund,
            created_at=order.created_at,
            updated_at=order.updated_at,
        )


class OrderListDTO(CamelModel):
    """One page of orders."""

    items: List[OrderDTO] = Field(default_factory=list)
    total: int = Field(..., ge=0, description="Total matching orders")
    page: int
    pages: int


class OrderEventDTO(CamelModel):
    """Stored domain event, as returned by the history endpoint."""

    event_id: str
    event_type: str
    aggregate_id: str
    aggregate_type: str
    user_id: Optional[str] = None
    occurred_at: datetime
    data: Dict[str, Any] = Field(default_factory=dict)
