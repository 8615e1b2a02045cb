"""
Analytics snapshot builder.

Computes the aggregate order figures pushed to the ``analytics`` room and
served by the admin stats endpoint. Cancelled orders are excluded from
revenue and order counts.
"""
import logging
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import async_sessionmaker

from core.application.interfaces import AnalyticsSnapshotBuilder
from core.data.models import OrderModel
from core.domain.enums import OrderStatus, PaymentStatus
from core.domain.value_objects import round_money
from core.utils.clock import utc_now

logger = logging.getLogger(__name__)


class SqlAnalyticsSnapshotBuilder(AnalyticsSnapshotBuilder):
    """Aggregates straight from the orders table."""

    def __init__(self, session_factory: async_sessionmaker) -> None:
        self._session_factory = session_factory

    async def compute_snapshot(
        self,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        conditions = []
        if start is not None:
            conditions.append(OrderModel.created_at >= start)
        if end is not None:
            conditions.append(OrderModel.created_at <= end)

        async with self._session_factory() as session:
            status_rows = (
                await session.execute(
                    select(OrderModel.status, func.count(), func.sum(OrderModel.total))
                    .where(*conditions)
                    .group_by(OrderModel.status)
                )
            ).all()
            payment_rows = (
                await session.execute(
                    select(OrderModel.payment_status, func.count(), func.sum(OrderModel.total))
                    .where(*conditions)
                    .group_by(OrderModel.payment_status)
                )
            ).all()

        orders_by_status = {status.value: 0 for status in OrderStatus}
        revenue = Decimal("0")
        total_orders = 0
        for status, count, amount in status_rows:
            orders_by_status[status] = int(count)
            if status != OrderStatus.CANCELLED.value:
                total_orders += int(count)
                revenue += Decimal(str(amount or 0))

        payment_breakdown = {
            status.value: {"count": 0, "amount": 0.0} for status in PaymentStatus
        }
        for payment_status, count, amount in payment_rows:
            payment_breakdown[payment_status] = {
                "count": int(count),
                "amount": float(round_money(amount or 0)),
            }

        revenue = round_money(revenue)
        average = round_money(revenue / total_orders) if total_orders else Decimal("0.00")

        snapshot = {
            "totalRevenue": float(revenue),
            "totalOrders": total_orders,
            "averageOrderValue": float(average),
            "ordersByStatus": orders_by_status,
            "paymentStatusBreakdown": payment_breakdown,
            "paidRevenue": payment_breakdown[PaymentStatus.PAID.value]["amount"],
            "startDate": start.isoformat() if start else None,
            "endDate": end.isoformat() if end else None,
            "generatedAt": utc_now().isoformat(),
        }
        logger.debug(f"Analytics snapshot: {total_orders} orders, revenue {revenue}")
        return snapshot
