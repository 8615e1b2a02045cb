"""
Order aggregate root.

CRITICAL: This file must contain ZERO imports from:
- sqlalchemy
- pydantic
- fastapi
"""
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Dict, FrozenSet, List, Optional

from ...utils.clock import utc_now
from ..enums import OrderStatus, PaymentMethod, PaymentOutcome, PaymentStatus, ShippingMethod
from ..errors import ValidationError
from ..events.base import DomainEvent
from ..events.order_events import (
    OrderCancelledEvent,
    OrderCreatedEvent,
    OrderPaymentStatusChangedEvent,
    OrderRefundedEvent,
    OrderStatusChangedEvent,
)
from ..value_objects import Address, CustomerInfo, round_money

ALLOWED_TRANSITIONS: Dict[OrderStatus, FrozenSet[OrderStatus]] = {
    OrderStatus.PENDING: frozenset(
        {OrderStatus.PROCESSING, OrderStatus.SHIPPED, OrderStatus.CANCELLED}
    ),
    OrderStatus.PROCESSING: frozenset(
        {OrderStatus.SHIPPED, OrderStatus.DELIVERED, OrderStatus.CANCELLED}
    ),
    OrderStatus.SHIPPED: frozenset({OrderStatus.DELIVERED}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}

CANCELLABLE_STATUSES = frozenset({OrderStatus.PENDING, OrderStatus.PROCESSING})
# A success or failure report never overrides these.
SETTLED_PAYMENT_STATUSES = frozenset({PaymentStatus.PAID, PaymentStatus.REFUNDED})


@dataclass
class OrderItem:
    """Line item snapshot taken at order creation. Never re-priced."""
    id: str
    product_id: str
    name: str
    price: Decimal
    quantity: int
    image: str = ""
    size: str = ""
    color: Optional[str] = None

    @property
    def line_total(self) -> Decimal:
        return round_money(self.price * self.quantity)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "product_id": self.product_id,
            "name": self.name,
            "price": str(self.price),
            "quantity": self.quantity,
            "image": self.image,
            "size": self.size,
            "color": self.color,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "OrderItem":
        return cls(
            id=data["id"],
            product_id=data["product_id"],
            name=data.get("name", ""),
            price=Decimal(str(data["price"])),
            quantity=int(data["quantity"]),
            image=data.get("image") or "",
            size=data.get("size") or "",
            color=data.get("color"),
        )


@dataclass
class RefundRecord:
    """Admin refund attached to an order (at most once)."""
    amount: Decimal
    reason: str
    processed_at: datetime
    processed_by: Optional[str] = None


@dataclass
class Order:
    """
    Order aggregate root.

    Two independent state axes: fulfilment ``status`` and ``payment_status``.
    Every mutation goes through a method here so the invariants and the
    collected domain events stay in one place. Ledgers persist the result.
    """
    id: str
    order_code: str
    user_id: str
    items: List[OrderItem]
    customer_info: CustomerInfo
    shipping_address: Address
    billing_address: Address
    payment_method: PaymentMethod
    subtotal: Decimal
    shipping: Decimal
    tax: Decimal
    total: Decimal
    discount: Decimal = Decimal("0.00")
    shipping_method: ShippingMethod = ShippingMethod.STANDARD
    status: OrderStatus = OrderStatus.PENDING
    payment_status: PaymentStatus = PaymentStatus.PENDING
    payment_id: Optional[str] = None
    tracking_number: Optional[str] = None
    notes: Optional[str] = None
    delivered_at: Optional[datetime] = None
    refund: Optional[RefundRecord] = None
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)
    version: int = 0

    # Event collection
    _domain_events: List[DomainEvent] = field(default_factory=list, init=False, repr=False)

    @classmethod
    def place(
        cls,
        *,
        id: str,
        order_code: str,
        user_id: str,
        items: List[OrderItem],
        customer_info: CustomerInfo,
        shipping_address: Address,
        billing_address: Address,
        payment_method: PaymentMethod,
        shipping_method: ShippingMethod,
        subtotal: Decimal,
        shipping: Decimal,
        tax: Decimal,
        total: Decimal,
        payment_id: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> "Order":
        """Factory for a freshly checked-out order (pending / pending)."""
        if not items:
            raise ValidationError("Order must contain at least one item")
        if not shipping_address.is_complete():
            raise ValidationError("Shipping address is incomplete")
        if total != subtotal + shipping + tax:
            raise ValidationError("Order total does not match its components")

        now = utc_now()
        order = cls(
            id=id,
            order_code=order_code,
            user_id=user_id,
            items=list(items),
            customer_info=customer_info,
            shipping_address=shipping_address,
            billing_address=billing_address,
            payment_method=payment_method,
            shipping_method=shipping_method,
            subtotal=subtotal,
            shipping=shipping,
            tax=tax,
            total=total,
            payment_id=payment_id,
            notes=notes,
            created_at=now,
            updated_at=now,
        )
        order._record_event(
            OrderCreatedEvent(
                order_id=id,
                order_code=order_code,
                total=str(total),
                payment_method=payment_method.value,
                payment_id=payment_id,
                user_id=user_id,
            )
        )
        return order

    def owned_by(self, user_id: str) -> bool:
        return str(self.user_id) == str(user_id)

    @property
    def is_paid(self) -> bool:
        return self.payment_status == PaymentStatus.PAID

    def can_cancel(self) -> bool:
        return self.status in CANCELLABLE_STATUSES

    # =========================================================================
    # FULFILMENT
    # =========================================================================

    def change_status(
        self,
        new_status: OrderStatus,
        tracking_number: Optional[str] = None,
        notes: Optional[str] = None,
        actor: Optional[str] = None,
    ) -> None:
        """
        Admin status update.

        Same-status updates are accepted so tracking number and notes can be
        edited without moving the order.

        Raises:
            ValidationError: jump not in ALLOWED_TRANSITIONS
        """
        previous = self.status
        if new_status != previous and new_status not in ALLOWED_TRANSITIONS[previous]:
            raise ValidationError(
                f"Cannot change order status from {previous.value} to {new_status.value}"
            )

        self.status = new_status
        if tracking_number is not None:
            self.tracking_number = tracking_number
        if notes is not None:
            self.notes = notes
        if new_status == OrderStatus.DELIVERED and previous != OrderStatus.DELIVERED:
            self.delivered_at = utc_now()
        self._touch()

        self._record_event(
            OrderStatusChangedEvent(
                order_id=self.id,
                previous_status=previous.value,
                new_status=new_status.value,
                tracking_number=self.tracking_number,
                user_id=actor,
            )
        )

    def cancel(self, actor: Optional[str] = None) -> None:
        """
        Cancel a pending or processing order.

        Payment status becomes ``refunded`` regardless of whether anything
        was captured; downstream bookkeeping relies on it.
        """
        if not self.can_cancel():
            raise ValidationError(f"Cannot cancel order with status {self.status.value}")

        previous = self.status
        previous_payment = self.payment_status
        self.status = OrderStatus.CANCELLED
        self.payment_status = PaymentStatus.REFUNDED
        self._touch()

        self._record_event(
            OrderCancelledEvent(order_id=self.id, previous_status=previous.value, user_id=actor)
        )
        self._record_payment_change(previous_payment, source="cancel", actor=actor)

    # =========================================================================
    # PAYMENT
    # =========================================================================

    def apply_payment_outcome(self, outcome: PaymentOutcome) -> bool:
        """
        Fold a provider-reported outcome into the order.

        Idempotent and monotonic: once paid or refunded, neither a repeated
        success nor a late failure changes anything. A success moves a
        pending order to processing; it never regresses a later status.

        Returns:
            True if any field changed
        """
        if outcome == PaymentOutcome.PENDING:
            return False

        if outcome == PaymentOutcome.SUCCEEDED:
            changed = False
            previous_payment = self.payment_status
            if previous_payment not in SETTLED_PAYMENT_STATUSES:
                self.payment_status = PaymentStatus.PAID
                changed = True
            if self.payment_status == PaymentStatus.PAID and self.status == OrderStatus.PENDING:
                self.status = OrderStatus.PROCESSING
                self._record_event(
                    OrderStatusChangedEvent(
                        order_id=self.id,
                        previous_status=OrderStatus.PENDING.value,
                        new_status=OrderStatus.PROCESSING.value,
                        reason="payment succeeded",
                    )
                )
                changed = True
            if changed:
                self._touch()
                if previous_payment != self.payment_status:
                    self._record_payment_change(previous_payment, source="provider")
            return changed

        if outcome == PaymentOutcome.FAILED:
            previous_payment = self.payment_status
            if previous_payment in SETTLED_PAYMENT_STATUSES or previous_payment == PaymentStatus.FAILED:
                return False
            self.payment_status = PaymentStatus.FAILED
            self._touch()
            self._record_payment_change(previous_payment, source="provider")
            return True

        raise ValidationError(f"Unknown payment outcome: {outcome}")

    def record_refund(self, amount: Decimal, reason: str, actor: Optional[str] = None) -> RefundRecord:
        """
        Attach an admin refund.

        Raises:
            ValidationError: order not paid, already refunded, or amount out of range
        """
        if self.refund is not None or self.payment_status == PaymentStatus.REFUNDED:
            raise ValidationError("Order has already been refunded")
        if self.payment_status != PaymentStatus.PAID:
            raise ValidationError("Only paid orders can be refunded")
        amount = round_money(amount)
        if amount <= 0 or amount > self.total:
            raise ValidationError(
                f"Refund amount must be greater than 0 and at most {self.total}"
            )

        previous_payment = self.payment_status
        self.refund = RefundRecord(
            amount=amount,
            reason=reason,
            processed_at=utc_now(),
            processed_by=actor,
        )
        self.payment_status = PaymentStatus.REFUNDED
        self._touch()

        self._record_event(
            OrderRefundedEvent(
                order_id=self.id,
                amount=str(amount),
                reason=reason,
                processed_by=actor,
                user_id=actor,
            )
        )
        self._record_payment_change(previous_payment, source="admin_refund", actor=actor)
        return self.refund

    def mark_refunded(self, source: str = "return") -> bool:
        """Force ``payment_status=refunded`` (return workflow). Returns True if changed."""
        if self.payment_status == PaymentStatus.REFUNDED:
            return False
        previous_payment = self.payment_status
        self.payment_status = PaymentStatus.REFUNDED
        self._touch()
        self._record_payment_change(previous_payment, source=source)
        return True

    # =========================================================================
    # EVENT COLLECTION
    # =========================================================================

    def get_domain_events(self) -> List[DomainEvent]:
        """Events collected since the aggregate was loaded or last cleared."""
        return list(self._domain_events)

    def clear_domain_events(self) -> None:
        """Clear all collected domain events (after persisting)."""
        self._domain_events.clear()

    def _record_payment_change(
        self, previous: PaymentStatus, source: str, actor: Optional[str] = None
    ) -> None:
        self._record_event(
            OrderPaymentStatusChangedEvent(
                order_id=self.id,
                previous_payment_status=previous.value,
                new_payment_status=self.payment_status.value,
                payment_id=self.payment_id,
                source=source,
                user_id=actor,
            )
        )

    def _record_event(self, event: DomainEvent) -> None:
        self._domain_events.append(event)

    def _touch(self) -> None:
        self.updated_at = utc_now()
