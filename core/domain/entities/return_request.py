"""
Return request aggregate.

CRITICAL: This file must contain ZERO imports from:
- sqlalchemy
- pydantic
- fastapi
"""
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from ...utils.clock import utc_now
from ..enums import ReturnStatus
from ..errors import ValidationError
from ..events.base import DomainEvent
from ..events.return_events import ReturnRequestedEvent, ReturnUpdatedEvent
from ..value_objects import round_money


@dataclass
class ReturnItem:
    """Snapshot of an order line being sent back."""
    order_item_id: str
    product_id: str
    name: str
    price: Decimal
    quantity: int
    reason: str = ""

    def to_dict(self) -> dict:
        return {
            "order_item_id": self.order_item_id,
            "product_id": self.product_id,
            "name": self.name,
            "price": str(self.price),
            "quantity": self.quantity,
            "reason": self.reason,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ReturnItem":
        return cls(
            order_item_id=data["order_item_id"],
            product_id=data["product_id"],
            name=data.get("name", ""),
            price=Decimal(str(data["price"])),
            quantity=int(data["quantity"]),
            reason=data.get("reason") or "",
        )


@dataclass
class ReturnRequest:
    """Post-purchase claim against a single order."""
    id: str
    rma_number: str
    order_id: str
    user_id: str
    items: List[ReturnItem]
    status: ReturnStatus = ReturnStatus.REQUESTED
    reason: str = ""
    comments: str = ""
    refund_amount: Decimal = Decimal("0.00")
    carrier: Optional[str] = None
    tracking_number: Optional[str] = None
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    _domain_events: List[DomainEvent] = field(default_factory=list, init=False, repr=False)

    @classmethod
    def open(
        cls,
        *,
        id: str,
        rma_number: str,
        order_id: str,
        user_id: str,
        items: List[ReturnItem],
        reason: str = "",
        comments: str = "",
        actor: Optional[str] = None,
    ) -> "ReturnRequest":
        if not items:
            raise ValidationError("Return must contain at least one item")
        request = cls(
            id=id,
            rma_number=rma_number,
            order_id=order_id,
            user_id=user_id,
            items=list(items),
            reason=reason or "",
            comments=comments or "",
        )
        request._domain_events.append(
            ReturnRequestedEvent(
                return_id=id,
                order_id=order_id,
                rma_number=rma_number,
                items_count=len(items),
                user_id=actor,
            )
        )
        return request

    def owned_by(self, user_id: str) -> bool:
        return str(self.user_id) == str(user_id)

    def update(
        self,
        status: Optional[ReturnStatus] = None,
        refund_amount: Optional[Decimal] = None,
        carrier: Optional[str] = None,
        tracking_number: Optional[str] = None,
        actor: Optional[str] = None,
    ) -> dict:
        """
        Apply an admin update. Any status value is accepted.

        Returns:
            Mapping of the fields that were supplied
        """
        updated = {}
        if refund_amount is not None:
            refund_amount = round_money(refund_amount)
            if refund_amount < 0:
                raise ValidationError("Refund amount cannot be negative")

        previous = self.status
        if status is not None:
            self.status = status
            updated["status"] = status.value
        if refund_amount is not None:
            self.refund_amount = refund_amount
            updated["refund_amount"] = str(refund_amount)
        if carrier is not None:
            self.carrier = carrier
            updated["carrier"] = carrier
        if tracking_number is not None:
            self.tracking_number = tracking_number
            updated["tracking_number"] = tracking_number

        self.updated_at = utc_now()
        self._domain_events.append(
            ReturnUpdatedEvent(
                return_id=self.id,
                previous_status=previous.value,
                new_status=self.status.value,
                updated_fields=updated,
                user_id=actor,
            )
        )
        return updated

    def get_domain_events(self) -> List[DomainEvent]:
        return list(self._domain_events)

    def clear_domain_events(self) -> None:
        self._domain_events.clear()
