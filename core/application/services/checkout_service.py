"""
Provider checkouts.

One ``CheckoutService`` per payment provider. A checkout prices the order,
opens the provider payment, then persists the pending order carrying the
provider's payment id, so every later callback or webhook can be
correlated. Confirmation always goes through ``OrderLedger.reconcile_payment``.
"""
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

from core.application.dtos.order_dto import CreateOrderRequest, OrderDTO
from core.application.dtos.payment_dto import PaymentResultDTO
from core.application.interfaces import PaymentDraft, PaymentGateway, PaymentHandle
from core.domain.enums import PaymentMethod, PaymentOutcome, PaymentStatus
from core.domain.errors import ServiceUnavailable
from core.domain.value_objects import Money, Requester

from .order_ledger import OrderLedger

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CheckoutResult:
    order: OrderDTO
    payment: PaymentHandle


class CheckoutService:
    """Provider-agnostic checkout and confirmation flow."""

    def __init__(
        self,
        ledger: OrderLedger,
        gateway: PaymentGateway,
        payment_method: PaymentMethod,
        enabled_check: Optional[Callable[[], Awaitable[bool]]] = None,
    ) -> None:
        self._ledger = ledger
        self._gateway = gateway
        self._payment_method = payment_method
        self._enabled_check = enabled_check

    @property
    def gateway(self) -> PaymentGateway:
        return self._gateway

    async def start_checkout(self, requester: Requester, request: CreateOrderRequest) -> CheckoutResult:
        """
        Open a provider payment and persist the matching pending order.

        Raises:
            ServiceUnavailable: provider disabled by store settings
            ValidationError, NotFound: checkout payload rejected
            BadGateway: provider refused or was unreachable
        """
        if self._enabled_check is not None and not await self._enabled_check():
            raise ServiceUnavailable(f"{self._gateway.name} payments are currently disabled")

        prepared = await self._ledger.prepare_order(requester, request, payment_method=self._payment_method)
        currency = prepared.totals.currency
        draft = PaymentDraft(
            order_id=prepared.id,
            user_id=requester.user_id,
            amount=Money(prepared.totals.total, currency),
            subtotal=Money(prepared.totals.subtotal, currency),
            shipping=Money(prepared.totals.shipping, currency),
            tax=Money(prepared.totals.tax, currency),
            items=prepared.items,
            customer_email=prepared.customer_info.email or None,
            description=f"Order {prepared.id}",
        )

        handle = await self._gateway.create_payment(draft)
        logger.info(f"{self._gateway.name} payment {handle.payment_id} opened for order {prepared.id}")

        order = await self._ledger.create_order(
            requester, request, payment_id=handle.payment_id, prepared=prepared
        )
        return CheckoutResult(order=order, payment=handle)

    async def confirm_payment(self, payment_id: str, requester: Requester) -> PaymentResultDTO:
        """
        Confirm a payment the requester owns.

        Provider refusals come back as ``success=False`` with the provider's
        response and leave the order untouched.
        """
        order = await self._ledger.find_for_payment(payment_id, requester)
        if order.payment_status == PaymentStatus.PAID:
            return PaymentResultDTO(success=True, message="Payment already confirmed", order=order)

        confirmation = await self._gateway.confirm(payment_id)
        if not confirmation.accepted:
            logger.warning(f"{self._gateway.name} refused confirmation of {payment_id}: {confirmation.message}")
            return PaymentResultDTO(
                success=False,
                message=confirmation.message or "Payment provider rejected the request",
                provider_response=confirmation.raw,
            )

        order = await self._ledger.reconcile_payment(payment_id, confirmation.outcome)
        success = order.payment_status == PaymentStatus.PAID
        if success:
            message = "Payment confirmed"
        elif confirmation.outcome == PaymentOutcome.PENDING:
            message = "Payment is still processing"
        else:
            message = "Payment was not completed"
        return PaymentResultDTO(
            success=success,
            message=message,
            order=order,
            provider_response=confirmation.raw,
        )
