"""DTOs for return requests."""

from datetime import datetime
from typing import Any, List, Optional

from pydantic import Field

from core.domain.entities.return_request import ReturnItem, ReturnRequest
from core.domain.enums import ReturnStatus

from .common import CamelModel, MoneyValue


class ReturnLineRequest(CamelModel):
    order_item_id: str
    quantity: Any = 1
    reason: Optional[str] = None


class CreateReturnRequest(CamelModel):
    order_id: str
    items: Optional[List[ReturnLineRequest]] = None
    reason: str = ""
    comments: str = ""


class UpdateReturnRequest(CamelModel):
    status: Optional[str] = None
    refund_amount: Optional[MoneyValue] = None
    carrier: Optional[str] = None
    tracking_number: Optional[str] = None


class ReturnItemDTO(CamelModel):
    order_item_id: str
    product_id: str
    name: str
    price: MoneyValue
    quantity: int
    reason: str = ""

    @classmethod
    def from_entity(cls, item: ReturnItem) -> "ReturnItemDTO":
        return cls(
            order_item_id=item.order_item_id,
            product_id=item.product_id,
            name=item.name,
            price=item.price,
            quantity=item.quantity,
            reason=item.reason,
        )


class ReturnDTO(CamelModel):
    id: str
    rma_number: str
    order_id: str
    user_id: str
    items: List[ReturnItemDTO] = Field(default_factory=list)
    status: ReturnStatus
    reason: str = ""
    comments: str = ""
    refund_amount: MoneyValue
    carrier: Optional[str] = None
    tracking_number: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, request: ReturnRequest) -> "ReturnDTO":
        return cls(
            id=request.id,
            rma_number=request.rma_number,
            order_id=request.order_id,
            user_id=request.user_id,
            items=[ReturnItemDTO.from_entity(item) for item in request.items],
            status=request.status,
            reason=request.reason,
            comments=request.comments,
            refund_amount=request.refund_amount,
            carrier=request.carrier,
            tracking_number=request.tracking_number,
            created_at=request.created_at,
            updated_at=request.updated_at,
        )
