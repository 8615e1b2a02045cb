"""Static mappers for domain entities ↔ database models."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from core.domain.entities.order import Order, OrderItem, RefundRecord
from core.domain.entities.product import Product
from core.domain.entities.return_request import ReturnItem, ReturnRequest
from core.domain.entities.store_settings import StoreSettings
from core.domain.enums import (
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
    ReturnStatus,
    ShippingMethod,
)
from core.domain.value_objects import Address, CustomerInfo, round_money
from core.utils.clock import ensure_utc

from .models import OrderModel, ProductModel, ReturnModel, StoreSettingsModel


def _money(value) -> Decimal:
    return round_money(Decimal(str(value if value is not None else 0)))


class RefundMapper:
    """Refund record ↔ JSON column."""

    @staticmethod
    def to_domain(data: Optional[dict]) -> Optional[RefundRecord]:
        if not data:
            return None
        return RefundRecord(
            amount=_money(data["amount"]),
            reason=data.get("reason") or "",
            processed_at=ensure_utc(datetime.fromisoformat(data["processed_at"])),
            processed_by=data.get("processed_by"),
        )

    @staticmethod
    def to_persistence(refund: Optional[RefundRecord]) -> Optional[dict]:
        if refund is None:
            return None
        return {
            "amount": str(refund.amount),
            "reason": refund.reason,
            "processed_at": refund.processed_at.isoformat(),
            "processed_by": refund.processed_by,
        }


class OrderMapper:
    """Static mapper for Order ↔ OrderModel transformation with JSON snapshots."""

    @staticmethod
    def to_domain(model: OrderModel) -> Order:
        """Convert ORM model to domain aggregate.

        Args:
            model: OrderModel instance

        Returns:
            Order domain aggregate (no pending events)
        """
        return Order(
            id=model.id,
            order_code=model.order_code,
            user_id=model.user_id,
            items=[OrderItem.from_dict(item) for item in (model.items or [])],
            customer_info=CustomerInfo.from_dict(model.customer_info or {}),
            shipping_address=Address.from_dict(model.shipping_address or {}),
            billing_address=Address.from_dict(model.billing_address or {}),
            payment_method=PaymentMethod(model.payment_method),
            shipping_method=ShippingMethod(model.shipping_method),
            subtotal=_money(model.subtotal),
            shipping=_money(model.shipping),
            tax=_money(model.tax),
            discount=_money(model.discount),
            total=_money(model.total),
            status=OrderStatus(model.status),
            payment_status=PaymentStatus(model.payment_status),
            payment_id=model.payment_id,
            tracking_number=model.tracking_number,
            notes=model.notes,
            delivered_at=ensure_utc(model.delivered_at),
            refund=RefundMapper.to_domain(model.refund),
            created_at=ensure_utc(model.created_at),
            updated_at=ensure_utc(model.updated_at),
            version=model.version or 0,
        )

    @staticmethod
    def to_persistence(entity: Order) -> OrderModel:
        """Convert a new domain aggregate to an ORM model."""
        model = OrderModel(id=entity.id, order_code=entity.order_code, user_id=entity.user_id)
        OrderMapper.update_persistence(entity, model)
        model.created_at = entity.created_at
        return model

    @staticmethod
    def update_persistence(entity: Order, model: OrderModel) -> OrderModel:
        """Copy mutable aggregate state onto an existing ORM model.

        ``version`` is left alone; SQLAlchemy bumps it on flush.
        """
        model.items = [item.to_dict() for item in entity.items]
        model.customer_info = entity.customer_info.to_dict()
        model.customer_name = entity.customer_info.name
        model.customer_email = entity.customer_info.email
        model.subtotal = entity.subtotal
        model.shipping = entity.shipping
        model.tax = entity.tax
        model.discount = entity.discount
        model.total = entity.total
        model.status = entity.status.value
        model.payment_status = entity.payment_status.value
        model.payment_method = entity.payment_method.value
        model.payment_id = entity.payment_id
        model.shipping_address = entity.shipping_address.to_dict()
        model.billing_address = entity.billing_address.to_dict()
        model.shipping_method = entity.shipping_method.value
        model.tracking_number = entity.tracking_number
        model.notes = entity.notes
        model.delivered_at = entity.delivered_at
        model.refund = RefundMapper.to_persistence(entity.refund)
        model.updated_at = entity.updated_at
        return model


class ReturnMapper:

    @staticmethod
    def to_domain(model: ReturnModel) -> ReturnRequest:
        return ReturnRequest(
            id=model.id,
            rma_number=model.rma_number,
            order_id=model.order_id,
            user_id=model.user_id,
            items=[ReturnItem.from_dict(item) for item in (model.items or [])],
            status=ReturnStatus(model.status),
            reason=model.reason or "",
            comments=model.comments or "",
            refund_amount=_money(model.refund_amount),
            carrier=model.carrier,
            tracking_number=model.tracking_number,
            created_at=ensure_utc(model.created_at),
            updated_at=ensure_utc(model.updated_at),
        )

    @staticmethod
    def to_persistence(entity: ReturnRequest) -> ReturnModel:
        model = ReturnModel(
            id=entity.id,
            rma_number=entity.rma_number,
            order_id=entity.order_id,
            user_id=entity.user_id,
            created_at=entity.created_at,
        )
        ReturnMapper.update_persistence(entity, model)
        return model

    @staticmethod
    def update_persistence(entity: ReturnRequest, model: ReturnModel) -> ReturnModel:
        model.items = [item.to_dict() for item in entity.items]
        model.status = entity.status.value
        model.reason = entity.reason
        model.comments = entity.comments
        model.refund_amount = entity.refund_amount
        model.carrier = entity.carrier
        model.tracking_number = entity.tracking_number
        model.updated_at = entity.updated_at
        return model


class ProductMapper:

    @staticmethod
    def to_domain(model: ProductModel) -> Product:
        return Product(
            id=model.id,
            name=model.name,
            brand=model.brand or "",
            price=_money(model.price),
            image=model.image or "",
            size=model.size or "",
            category=model.category,
            stock_count=model.stock_count or 0,
        )


class StoreSettingsMapper:

    @staticmethod
    def to_domain(model: StoreSettingsModel) -> StoreSettings:
        return StoreSettings(
            stripe_enabled=bool(model.stripe_enabled),
            updated_by=model.updated_by,
            updated_at=ensure_utc(model.updated_at),
        )

    @staticmethod
    def update_persistence(entity: StoreSettings, model: StoreSettingsModel) -> StoreSettingsModel:
        model.stripe_enabled = entity.stripe_enabled
        model.updated_by = entity.updated_by
        model.updated_at = entity.updated_at
        return model
