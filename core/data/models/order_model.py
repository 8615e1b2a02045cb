"""SQLAlchemy ORM model for Order aggregate."""

from sqlalchemy import JSON, Column, DateTime, Index, Integer, Numeric, String, Text

from core.utils.clock import utc_now

from .base import Base


class OrderModel(Base):
    """
    SQLAlchemy ORM model for orders table.

    Line items, addresses, customer info and the refund record are stored as
    JSON snapshots. ``customer_name``/``customer_email`` are denormalized
    copies for admin search. ``version`` is SQLAlchemy's optimistic lock.
    """

    __tablename__ = "orders"

    id = Column(String(32), primary_key=True)
    order_code = Column(String(32), unique=True, nullable=False)
    user_id = Column(String(64), nullable=False, index=True)

    items = Column(JSON, nullable=False, default=list)
    customer_info = Column(JSON, nullable=False, default=dict)
    customer_name = Column(String(255), nullable=True)
    customer_email = Column(String(255), nullable=True)

    subtotal = Column(Numeric(12, 2), nullable=False)
    shipping = Column(Numeric(12, 2), nullable=False)
    tax = Column(Numeric(12, 2), nullable=False)
    discount = Column(Numeric(12, 2), nullable=False, default=0)
    total = Column(Numeric(12, 2), nullable=False)

    status = Column(String(20), nullable=False, default="pending", index=True)
    payment_status = Column(String(20), nullable=False, default="pending", index=True)
    payment_method = Column(String(32), nullable=False)
    payment_id = Column(String(255), unique=True, nullable=True)

    shipping_address = Column(JSON, nullable=False)
    billing_address = Column(JSON, nullable=False)
    shipping_method = Column(String(20), nullable=False, default="standard")
    tracking_number = Column(String(255), nullable=True)
    notes = Column(Text, nullable=True)
    delivered_at = Column(DateTime(timezone=True), nullable=True)
    refund = Column(JSON, nullable=True)

    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
    version = Column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}

    __table_args__ = (
        Index("ix_orders_created_at_id", "created_at", "id"),
    )

    def __repr__(self):
        return f"<OrderModel(id={self.id}, code={self.order_code}, status={self.status}/{self.payment_status})>"
