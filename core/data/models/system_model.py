"""Store-wide bookkeeping tables: settings singleton, counters, event log."""

from sqlalchemy import JSON, Boolean, Column, DateTime, Index, Integer, String

from core.utils.clock import utc_now

from .base import Base


class StoreSettingsModel(Base):
    __tablename__ = "store_settings"

    id = Column(Integer, primary_key=True, default=1)
    stripe_enabled = Column(Boolean, nullable=False, default=True)
    updated_by = Column(String(64), nullable=True)
    updated_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)


class SequenceModel(Base):
    __tablename__ = "sequences"

    name = Column(String(64), primary_key=True)
    value = Column(Integer, nullable=False, default=0)


class EventModel(Base):
    """
    Append-only domain event log.

    Written in the same transaction as the aggregate change.
    """

    __tablename__ = "domain_events"

    id = Column(Integer, primary_key=True, autoincrement=True)
    event_id = Column(String(36), unique=True, nullable=False)
    event_type = Column(String(100), nullable=False, index=True)
    event_version = Column(Integer, nullable=False, default=1)
    aggregate_type = Column(String(50), nullable=False)
    aggregate_id = Column(String(64), nullable=False)
    user_id = Column(String(64), nullable=True)
    data = Column(JSON, nullable=False, default=dict)
    occurred_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)

    __table_args__ = (
        Index("ix_domain_events_aggregate", "aggregate_type", "aggregate_id"),
    )
