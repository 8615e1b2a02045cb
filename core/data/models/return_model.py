"""SQLAlchemy ORM model for return requests."""

from sqlalchemy import JSON, Column, DateTime, Numeric, String, Text

from core.utils.clock import utc_now

from .base import Base


class ReturnModel(Base):
    __tablename__ = "returns"

    id = Column(String(32), primary_key=True)
    rma_number = Column(String(64), unique=True, nullable=False)
    order_id = Column(String(32), nullable=False, index=True)
    user_id = Column(String(64), nullable=False, index=True)
    items = Column(JSON, nullable=False, default=list)
    status = Column(String(20), nullable=False, default="requested", index=True)
    reason = Column(Text, nullable=False, default="")
    comments = Column(Text, nullable=False, default="")
    refund_amount = Column(Numeric(12, 2), nullable=False, default=0)
    carrier = Column(String(100), nullable=True)
    tracking_number = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
