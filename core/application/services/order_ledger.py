"""
Order ledger.

Owns every write to an order's ``status``, ``payment_status`` and refund
record. Each operation runs in its own unit of work; realtime pushes, cart
clearing and analytics recomputation happen after commit through the
side-effect runner and can never fail the operation.
"""
import logging
import math
import uuid
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any, Awaitable, Callable, List, Optional, Tuple

from sqlalchemy.ext.asyncio import async_sessionmaker

from core.application.dtos.order_dto import CreateOrderRequest, OrderDTO, OrderEventDTO, OrderListDTO
from core.application.interfaces import AnalyticsSnapshotBuilder, RealtimeNotifier
from core.data.uow import UnitOfWork, create_uow
from core.domain.entities.order import Order, OrderItem
from core.domain.enums import OrderStatus, PaymentMethod, PaymentOutcome, ShippingMethod
from core.domain.errors import (
    ConcurrencyError,
    Conflict,
    DuplicateOrderCode,
    Forbidden,
    NotFound,
    ValidationError,
)
from core.domain.repositories import OrderQuery
from core.domain.value_objects import Address, CustomerInfo, OrderCode, Requester, round_money
from core.utils.clock import utc_now

from .address_normalizer import normalize_address
from .pricing import OrderTotals, PricingCalculator
from .side_effects import SideEffectRunner

logger = logging.getLogger(__name__)

ORDER_SEQUENCE = "orders"
ORDER_TOPIC = "order:{}"
ANALYTICS_TOPIC = "analytics"
MAX_PAGE_SIZE = 100
DEFAULT_REFUND_REASON = "Admin refund"


@dataclass(frozen=True)
class PreparedOrder:
    """Validated and priced checkout, not yet persisted."""
    id: str
    user_id: str
    items: List[OrderItem]
    totals: OrderTotals
    shipping_method: ShippingMethod
    payment_method: PaymentMethod
    customer_info: CustomerInfo
    shipping_address: Address
    billing_address: Address
    notes: Optional[str] = None


def parse_order_status(value: Any) -> OrderStatus:
    try:
        return OrderStatus(str(value).lower())
    except ValueError:
        raise ValidationError(f"Invalid order status: {value}")


def parse_payment_method(value: Any) -> PaymentMethod:
    if isinstance(value, PaymentMethod):
        return value
    if not value:
        raise ValidationError("Payment method is required")
    try:
        return PaymentMethod(str(value).lower())
    except ValueError:
        raise ValidationError(f"Invalid payment method: {value}")


def order_update_payload(order: Order) -> dict:
    """Realtime message pushed to ``order:<id>``."""
    return {
        "type": "order_payment_update",
        "orderId": order.id,
        "orderCode": order.order_code,
        "status": order.status.value,
        "paymentStatus": order.payment_status.value,
        "paymentId": order.payment_id,
        "updatedAt": order.updated_at.isoformat(),
    }


def require_admin(requester: Requester) -> None:
    if not requester.is_admin:
        raise Forbidden("Admin access required")


class OrderLedger:
    """
    Application service for orchestrating order operations.

    Responsibilities:
    - Validate, price and persist checkouts
    - Enforce the status and payment state machines
    - Reconcile provider payment outcomes idempotently
    - Fan out changes after commit
    """

    def __init__(
        self,
        session_factory: async_sessionmaker,
        pricing: PricingCalculator,
        notifier: RealtimeNotifier,
        analytics: AnalyticsSnapshotBuilder,
        side_effects: Optional[SideEffectRunner] = None,
        max_code_attempts: int = 5,
        max_concurrency_retries: int = 3,
    ) -> None:
        self._session_factory = session_factory
        self._pricing = pricing
        self._notifier = notifier
        self._analytics = analytics
        self._side_effects = side_effects or SideEffectRunner()
        self._max_code_attempts = max_code_attempts
        self._max_concurrency_retries = max_concurrency_retries

    # =========================================================================
    # CREATION
    # =========================================================================

    async def prepare_order(
        self,
        requester: Requester,
        request: CreateOrderRequest,
        payment_method: Optional[PaymentMethod] = None,
        order_id: Optional[str] = None,
    ) -> PreparedOrder:
        """
        Validate and price a checkout without persisting anything.

        Raises:
            ValidationError: empty items, bad quantity, incomplete shipping
                address, unknown payment or shipping method
            NotFound: a product does not exist
        """
        method = parse_payment_method(payment_method or request.payment_method)

        incoming = request.customer_info
        customer_info = CustomerInfo(
            name=(incoming.name if incoming and incoming.name else requester.name) or "",
            email=(incoming.email if incoming and incoming.email else requester.email) or "",
            phone=(incoming.phone if incoming and incoming.phone else requester.phone),
        )
        fallback = {"name": customer_info.name, "phone": customer_info.phone}

        shipping_address = normalize_address(request.shipping_address, fallback)
        if shipping_address is None or not shipping_address.is_complete():
            missing = shipping_address.missing_fields() if shipping_address else ["shippingAddress"]
            raise ValidationError(f"Shipping address is incomplete: missing {', '.join(missing)}")

        billing_address = normalize_address(request.billing_address, fallback)
        if billing_address is None or not billing_address.is_complete():
            billing_address = shipping_address

        async with create_uow(self._session_factory) as uow:
            priced = await self._pricing.price(uow.catalog, request.items, request.shipping_method)

        return PreparedOrder(
            id=order_id or uuid.uuid4().hex,
            user_id=requester.user_id,
            items=priced.items,
            totals=priced.totals,
            shipping_method=priced.shipping_method,
            payment_method=method,
            customer_info=customer_info,
            shipping_address=shipping_address,
            billing_address=billing_address,
            notes=request.notes,
        )

    async def create_order(
        self,
        requester: Requester,
        request: CreateOrderRequest,
        payment_id: Optional[str] = None,
        prepared: Optional[PreparedOrder] = None,
    ) -> OrderDTO:
        """Persist a pending order.

        Args:
            requester: order owner
            request: checkout payload (ignored when ``prepared`` is given)
            payment_id: provider payment reference for provider checkouts
            prepared: result of an earlier ``prepare_order``

        Returns:
            OrderDTO of the new order (pending / pending)
        """
        if prepared is None:
            prepared = await self.prepare_order(requester, request)

        order = None
        for attempt in range(1, self._max_code_attempts + 1):
            code = await self._allocate_order_code()
            order = Order.place(
                id=prepared.id,
                order_code=code,
                user_id=prepared.user_id,
                items=prepared.items,
                customer_info=prepared.customer_info,
                shipping_address=prepared.shipping_address,
                billing_address=prepared.billing_address,
                payment_method=prepared.payment_method,
                shipping_method=prepared.shipping_method,
                subtotal=prepared.totals.subtotal,
                shipping=prepared.totals.shipping,
                tax=prepared.totals.tax,
                total=prepared.totals.total,
                payment_id=payment_id,
                notes=prepared.notes,
            )
            try:
                async with create_uow(self._session_factory) as uow:
                    await uow.orders.add(order)
                    await uow.events.append_all(order.get_domain_events())
                    await uow.commit()
            except DuplicateOrderCode:
                logger.warning(f"Order code {code} collided (attempt {attempt}/{self._max_code_attempts})")
                continue
            order.clear_domain_events()
            break
        else:
            raise Conflict("Could not allocate a unique order code")

        logger.info(
            f"Order created: {order.order_code} id={order.id} user={order.user_id} "
            f"total={order.total} method={order.payment_method.value}"
        )
        user_id = order.user_id
        await self._side_effects.run("clear-cart", lambda: self._clear_cart(user_id))
        await self._side_effects.run("analytics", self.publish_analytics)
        return OrderDTO.from_entity(order)

    async def _allocate_order_code(self) -> str:
        """Next code from the atomic counter, committed on its own."""
        async with create_uow(self._session_factory) as uow:
            seed = await uow.orders.count()
            sequence = await uow.sequences.next_value(ORDER_SEQUENCE, seed=seed)
            await uow.commit()
        return OrderCode.build(utc_now().year, sequence).value

    # =========================================================================
    # QUERIES
    # =========================================================================

    async def get_order(self, order_id: str, requester: Requester) -> OrderDTO:
        async with create_uow(self._session_factory) as uow:
            order = await self._load_visible(uow, order_id, requester)
        return OrderDTO.from_entity(order)

    async def list_orders(
        self,
        requester: Requester,
        page: int = 1,
        limit: int = 10,
        search: Optional[str] = None,
        status: Optional[str] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> OrderListDTO:
        """
        Paged listing, newest first.

        Admins see every order and may filter; everyone else always gets
        exactly their own orders, filters ignored.
        """
        page = max(int(page or 1), 1)
        limit = min(max(int(limit or 10), 1), MAX_PAGE_SIZE)

        if requester.is_admin:
            query = OrderQuery(
                search=search.strip() if search and search.strip() else None,
                status=None if not status or status == "all" else parse_order_status(status),
                start_date=start_date,
                end_date=end_date,
            )
        else:
            query = OrderQuery(user_id=requester.user_id)

        async with create_uow(self._session_factory) as uow:
            orders, total = await uow.orders.search(query, offset=(page - 1) * limit, limit=limit)

        return OrderListDTO(
            items=[OrderDTO.from_entity(order) for order in orders],
            total=total,
            page=page,
            pages=math.ceil(total / limit) if total else 0,
        )

    async def find_for_payment(self, payment_id: str, requester: Requester) -> OrderDTO:
        """Order correlated with a provider payment, visible only to its owner."""
        async with create_uow(self._session_factory) as uow:
            order = await uow.orders.get_by_payment_id(payment_id)
        if order is None or not order.owned_by(requester.user_id):
            raise NotFound("Order not found for this payment")
        return OrderDTO.from_entity(order)

    async def order_history(self, order_id: str, requester: Requester) -> List[OrderEventDTO]:
        """Stored domain events for one order, oldest first."""
        async with create_uow(self._session_factory) as uow:
            await self._load_visible(uow, order_id, requester)
            events = await uow.events.get_events("Order", order_id)
        return [OrderEventDTO(**event) for event in events]

    async def stats(
        self,
        requester: Requester,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> dict:
        require_admin(requester)
        return await self._analytics.compute_snapshot(start, end)

    # =========================================================================
    # TRANSITIONS
    # =========================================================================

    async def update_status(
        self,
        order_id: str,
        new_status: Any,
        requester: Requester,
        tracking_number: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> OrderDTO:
        """Admin fulfilment update, checked against the transition table."""
        require_admin(requester)
        status = parse_order_status(new_status)

        def mutate(order: Order) -> bool:
            order.change_status(status, tracking_number=tracking_number, notes=notes, actor=requester.user_id)
            return True

        order, _ = await self._apply(self._by_id(order_id), mutate)
        logger.info(f"Order {order.order_code} status -> {order.status.value} by {requester.user_id}")
        await self._publish_order(order)
        return OrderDTO.from_entity(order)

    async def cancel(self, order_id: str, requester: Requester) -> OrderDTO:
        """Owner or admin; pending/processing only."""

        def mutate(order: Order) -> bool:
            if not requester.can_access(order.user_id):
                raise Forbidden("Not authorized to cancel this order")
            order.cancel(actor=requester.user_id)
            return True

        order, _ = await self._apply(self._by_id(order_id), mutate)
        logger.info(f"Order {order.order_code} cancelled by {requester.user_id}")
        await self._publish_order(order)
        return OrderDTO.from_entity(order)

    async def refund(
        self,
        order_id: str,
        requester: Requester,
        amount: Optional[Decimal] = None,
        reason: Optional[str] = None,
    ) -> OrderDTO:
        """Admin refund of a paid order; defaults to the full total."""
        require_admin(requester)

        def mutate(order: Order) -> bool:
            refund_amount = order.total if amount is None else round_money(amount)
            order.record_refund(refund_amount, reason or DEFAULT_REFUND_REASON, actor=requester.user_id)
            return True

        order, _ = await self._apply(self._by_id(order_id), mutate)
        logger.info(f"Order {order.order_code} refunded {order.refund.amount} by {requester.user_id}")
        await self._publish_order(order)
        return OrderDTO.from_entity(order)

    async def reconcile_payment(self, payment_id: str, outcome: PaymentOutcome) -> OrderDTO:
        """
        Fold a provider outcome into the order correlated by ``payment_id``.

        Safe to call any number of times, in any order, from callbacks and
        webhooks alike. Writes only when something changes; the cart is
        cleared only on the actual transition to paid. Realtime and
        analytics pushes are attempted every time.

        Raises:
            NotFound: no order carries this payment id
        """
        outcome = PaymentOutcome(outcome)
        state = {}

        def mutate(order: Order) -> bool:
            state["was_paid"] = order.is_paid
            return order.apply_payment_outcome(outcome)

        order, changed = await self._apply(self._by_payment_id(payment_id), mutate)
        became_paid = changed and not state["was_paid"] and order.is_paid

        if changed:
            logger.info(
                f"Payment {payment_id} reconciled ({outcome.value}): order {order.order_code} "
                f"-> {order.status.value}/{order.payment_status.value}"
            )
        else:
            logger.info(f"Payment {payment_id} reconciled ({outcome.value}): no change")

        if became_paid:
            user_id = order.user_id
            await self._side_effects.run("clear-cart", lambda: self._clear_cart(user_id))
        await self._publish_order(order)
        return OrderDTO.from_entity(order)

    async def mark_refunded_by_return(self, order_id: str) -> OrderDTO:
        """Return workflow reached ``refunded``; mirror it on the order."""
        order, changed = await self._apply(self._by_id(order_id), lambda o: o.mark_refunded("return"))
        if changed:
            logger.info(f"Order {order.order_code} marked refunded by return")
        await self._publish_order(order)
        return OrderDTO.from_entity(order)

    # =========================================================================
    # INTERNALS
    # =========================================================================

    def _by_id(self, order_id: str) -> Callable[[UnitOfWork], Awaitable[Optional[Order]]]:
        return lambda uow: uow.orders.get(order_id)

    def _by_payment_id(self, payment_id: str) -> Callable[[UnitOfWork], Awaitable[Optional[Order]]]:
        return lambda uow: uow.orders.get_by_payment_id(payment_id)

    async def _apply(
        self,
        load: Callable[[UnitOfWork], Awaitable[Optional[Order]]],
        mutate: Callable[[Order], bool],
    ) -> Tuple[Order, bool]:
        """
        Load, mutate and persist one order.

        Concurrent modification is retried from a fresh read; the mutation
        must therefore be safe to re-run.
        """
        for attempt in range(1, self._max_concurrency_retries + 1):
            try:
                async with create_uow(self._session_factory) as uow:
                    order = await load(uow)
                    if order is None:
                        raise NotFound("Order not found")
                    changed = bool(mutate(order))
                    if changed:
                        await uow.orders.update(order)
                        await uow.events.append_all(order.get_domain_events())
                        await uow.commit()
                        order.clear_domain_events()
                    return order, changed
            except ConcurrencyError:
                if attempt == self._max_concurrency_retries:
                    raise
                logger.warning(f"Concurrent order update, retrying ({attempt}/{self._max_concurrency_retries})")
        raise ConcurrencyError()

    async def _load_visible(self, uow: UnitOfWork, order_id: str, requester: Requester) -> Order:
        order = await uow.orders.get(order_id)
        if order is None:
            raise NotFound("Order not found")
        if not requester.can_access(order.user_id):
            raise Forbidden("Not authorized to access this order")
        return order

    async def _publish_order(self, order: Order) -> None:
        payload = order_update_payload(order)
        topic = ORDER_TOPIC.format(order.id)
        await self._side_effects.run("order-update", lambda: self._notifier.publish(topic, payload))
        await self._side_effects.run("analytics", self.publish_analytics)

    async def publish_analytics(self) -> None:
        """Recompute the snapshot and push it to the analytics room."""
        snapshot = await self._analytics.compute_snapshot()
        await self._notifier.publish(ANALYTICS_TOPIC, {"type": "analytics_update", "data": snapshot})

    async def _clear_cart(self, user_id: str) -> None:
        async with create_uow(self._session_factory) as uow:
            await uow.carts.clear(user_id)
            await uow.commit()
