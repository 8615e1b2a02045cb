"""
Return ledger.

Customers open returns against their own orders; admins move them through
any status. Reaching ``refunded`` mirrors onto the parent order's payment
status, best-effort.
"""
import logging
import uuid
from decimal import Decimal
from typing import Any, List, Optional

from sqlalchemy.ext.asyncio import async_sessionmaker

from core.application.dtos.return_dto import CreateReturnRequest, ReturnDTO, ReturnLineRequest
from core.application.interfaces import RealtimeNotifier
from core.data.uow import create_uow
from core.domain.entities.order import Order
from core.domain.entities.return_request import ReturnItem, ReturnRequest
from core.domain.enums import ReturnStatus
from core.domain.errors import Conflict, Forbidden, NotFound, ValidationError
from core.domain.value_objects import Requester, RmaNumber
from core.utils.clock import utc_now

from .order_ledger import OrderLedger, require_admin
from .pricing import parse_quantity
from .side_effects import SideEffectRunner

logger = logging.getLogger(__name__)

RETURN_TOPIC = "return:{}"
DEFAULT_ITEM_REASON = "No reason provided"


def parse_return_status(value: Any) -> ReturnStatus:
    try:
        return ReturnStatus(str(value).lower())
    except ValueError:
        raise ValidationError(f"Invalid return status: {value}")


def return_update_payload(request: ReturnRequest) -> dict:
    """Realtime message pushed to ``return:<id>``."""
    return {
        "type": "return_update",
        "id": request.id,
        "rmaNumber": request.rma_number,
        "orderId": request.order_id,
        "status": request.status.value,
        "refundAmount": float(request.refund_amount),
        "updatedAt": request.updated_at.isoformat(),
    }


class ReturnLedger:
    """Application service for return requests (RMA)."""

    def __init__(
        self,
        session_factory: async_sessionmaker,
        orders: OrderLedger,
        notifier: RealtimeNotifier,
        side_effects: Optional[SideEffectRunner] = None,
        max_rma_attempts: int = 5,
    ) -> None:
        self._session_factory = session_factory
        self._orders = orders
        self._notifier = notifier
        self._side_effects = side_effects or SideEffectRunner()
        self._max_rma_attempts = max_rma_attempts

    async def create_return(self, requester: Requester, request: CreateReturnRequest) -> ReturnDTO:
        """
        Open a return against an order the requester owns (or any, for admins).

        Items default to every order line. Supplied items must reference
        order lines and may not exceed the ordered quantity.
        """
        async with create_uow(self._session_factory) as uow:
            order = await uow.orders.get(request.order_id)
            if order is None:
                raise NotFound("Order not found")
            if not requester.can_access(order.user_id):
                raise Forbidden("Not authorized to request return for this order")

        items = self._build_items(order, request.items, request.reason)

        for attempt in range(1, self._max_rma_attempts + 1):
            rma = RmaNumber.generate(utc_now()).value
            return_request = ReturnRequest.open(
                id=uuid.uuid4().hex,
                rma_number=rma,
                order_id=order.id,
                user_id=order.user_id,
                items=items,
                reason=request.reason,
                comments=request.comments,
                actor=requester.user_id,
            )
            try:
                async with create_uow(self._session_factory) as uow:
                    if await uow.returns.rma_exists(rma):
                        raise Conflict(f"RMA {rma} already exists")
                    await uow.returns.add(return_request)
                    await uow.events.append_all(return_request.get_domain_events())
                    await uow.commit()
            except Conflict:
                logger.warning(f"RMA {rma} collided (attempt {attempt}/{self._max_rma_attempts})")
                continue
            return_request.clear_domain_events()
            break
        else:
            raise Conflict("Could not allocate a unique RMA number")

        logger.info(f"Return {return_request.rma_number} opened for order {order.order_code}")
        await self._publish(return_request)
        return ReturnDTO.from_entity(return_request)

    def _build_items(
        self,
        order: Order,
        lines: Optional[List[ReturnLineRequest]],
        reason: str,
    ) -> List[ReturnItem]:
        if not lines:
            return [
                ReturnItem(
                    order_item_id=item.id,
                    product_id=item.product_id,
                    name=item.name,
                    price=item.price,
                    quantity=item.quantity,
                    reason=reason or DEFAULT_ITEM_REASON,
                )
                for item in order.items
            ]

        by_id = {item.id: item for item in order.items}
        items = []
        for line in lines:
            ordered = by_id.get(line.order_item_id)
            if ordered is None:
                raise ValidationError(f"Item {line.order_item_id} is not part of this order")
            quantity = parse_quantity(line.quantity)
            if quantity > ordered.quantity:
                raise ValidationError(
                    f"Cannot return {quantity} of {ordered.name}; only {ordered.quantity} ordered"
                )
            items.append(
                ReturnItem(
                    order_item_id=ordered.id,
                    product_id=ordered.product_id,
                    name=ordered.name,
                    price=ordered.price,
                    quantity=quantity,
                    reason=line.reason or reason or DEFAULT_ITEM_REASON,
                )
            )
        return items

    async def get_return(self, return_id: str, requester: Requester) -> ReturnDTO:
        async with create_uow(self._session_factory) as uow:
            request = await uow.returns.get(return_id)
        if request is None:
            raise NotFound("Return request not found")
        if not requester.can_access(request.user_id):
            raise Forbidden("Not authorized")
        return ReturnDTO.from_entity(request)

    async def list_mine(self, requester: Requester) -> List[ReturnDTO]:
        async with create_uow(self._session_factory) as uow:
            requests = await uow.returns.list_for_user(requester.user_id)
        return [ReturnDTO.from_entity(r) for r in requests]

    async def list_all(self, requester: Requester, status: Optional[str] = None) -> List[ReturnDTO]:
        require_admin(requester)
        status_filter = None if not status or status == "all" else parse_return_status(status)
        async with create_uow(self._session_factory) as uow:
            requests = await uow.returns.list_all(status_filter)
        return [ReturnDTO.from_entity(r) for r in requests]

    async def update_status(
        self,
        return_id: str,
        requester: Requester,
        status: Optional[str] = None,
        refund_amount: Optional[Decimal] = None,
        carrier: Optional[str] = None,
        tracking_number: Optional[str] = None,
    ) -> ReturnDTO:
        """Admin update of any subset of status, refund amount and shipping details."""
        new_status = parse_return_status(status) if status else None

        async with create_uow(self._session_factory) as uow:
            request = await uow.returns.get(return_id)
            if request is None:
                raise NotFound("Return request not found")
            require_admin(requester)

            request.update(
                status=new_status,
                refund_amount=refund_amount,
                carrier=carrier or None,
                tracking_number=tracking_number or None,
                actor=requester.user_id,
            )
            await uow.returns.update(request)
            await uow.events.append_all(request.get_domain_events())
            await uow.commit()
            request.clear_domain_events()

        logger.info(f"Return {request.rma_number} -> {request.status.value} by {requester.user_id}")

        if new_status == ReturnStatus.REFUNDED:
            order_id = request.order_id
            await self._side_effects.run(
                "return-refund-order", lambda: self._orders.mark_refunded_by_return(order_id)
            )

        await self._publish(request)
        return ReturnDTO.from_entity(request)

    async def _publish(self, request: ReturnRequest) -> None:
        payload = return_update_payload(request)
        topic = RETURN_TOPIC.format(request.id)
        await self._side_effects.run("return-update", lambda: self._notifier.publish(topic, payload))
