"""Catalog and cart tables (owned by the catalog service, read/cleared here)."""

from sqlalchemy import JSON, Column, DateTime, Integer, Numeric, String

from core.utils.clock import utc_now

from .base import Base


class ProductModel(Base):
    __tablename__ = "products"

    id = Column(String(64), primary_key=True)
    name = Column(String(255), nullable=False)
    brand = Column(String(255), nullable=False, default="")
    price = Column(Numeric(12, 2), nullable=False)
    image = Column(String(1024), nullable=False, default="")
    size = Column(String(64), nullable=False, default="")
    category = Column(String(128), nullable=True)
    stock_count = Column(Integer, nullable=False, default=0)


class CartModel(Base):
    __tablename__ = "carts"

    user_id = Column(String(64), primary_key=True)
    items = Column(JSON, nullable=False, default=list)
    updated_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
