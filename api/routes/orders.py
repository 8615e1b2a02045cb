"""
Orders management endpoints.

Creation, listing, admin transitions, cancellation and refunds.
"""
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from api.dependencies import get_order_ledger
from api.security import get_requester
from core.application.dtos import (
    CreateOrderRequest,
    OrderDTO,
    OrderEventDTO,
    OrderListDTO,
    RefundOrderRequest,
    UpdateOrderStatusRequest,
)
from core.application.services import OrderLedger
from core.domain.value_objects import Requester
from core.utils.clock import ensure_utc

router = APIRouter()


@router.post(
    "",
    response_model=OrderDTO,
    status_code=status.HTTP_201_CREATED,
    summary="Create order",
)
async def create_order(
    request: CreateOrderRequest,
    requester: Requester = Depends(get_requester),
    ledger: OrderLedger = Depends(get_order_ledger),
):
    """Price the cart against the catalog and persist a pending order."""
    return await ledger.create_order(requester, request)


@router.get("", response_model=OrderListDTO, summary="List orders")
async def list_orders(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    search: Optional[str] = Query(default=None),
    order_status: Optional[str] = Query(default=None, alias="status"),
    start_date: Optional[datetime] = Query(default=None, alias="startDate"),
    end_date: Optional[datetime] = Query(default=None, alias="endDate"),
    requester: Requester = Depends(get_requester),
    ledger: OrderLedger = Depends(get_order_ledger),
):
    """
    List orders, newest first.

    Admins see every order and may filter by search text, status and date
    range; other callers get their own orders.
    """
    return await ledger.list_orders(
        requester,
        page=page,
        limit=limit,
        search=search,
        status=order_status,
        start_date=ensure_utc(start_date),
        end_date=ensure_utc(end_date),
    )


@router.get("/stats", summary="Order analytics snapshot (admin)")
async def order_stats(
    start_date: Optional[datetime] = Query(default=None, alias="startDate"),
    end_date: Optional[datetime] = Query(default=None, alias="endDate"),
    requester: Requester = Depends(get_requester),
    ledger: OrderLedger = Depends(get_order_ledger),
):
    return await ledger.stats(requester, ensure_utc(start_date), ensure_utc(end_date))


@router.get("/{order_id}", response_model=OrderDTO, summary="Get order by ID")
async def get_order(
    order_id: str,
    requester: Requester = Depends(get_requester),
    ledger: OrderLedger = Depends(get_order_ledger),
):
    return await ledger.get_order(order_id, requester)


@router.get("/{order_id}/history", response_model=List[OrderEventDTO], summary="Order event history")
async def get_order_history(
    order_id: str,
    requester: Requester = Depends(get_requester),
    ledger: OrderLedger = Depends(get_order_ledger),
):
    return await ledger.order_history(order_id, requester)


@router.patch("/{order_id}/status", response_model=OrderDTO, summary="Update order status (admin)")
async def update_order_status(
    order_id: str,
    request: UpdateOrderStatusRequest,
    requester: Requester = Depends(get_requester),
    ledger: OrderLedger = Depends(get_order_ledger),
):
    return await ledger.update_status(
        order_id,
        request.status,
        requester,
        tracking_number=request.tracking_number,
        notes=request.notes,
    )


@router.patch("/{order_id}/cancel", response_model=OrderDTO, summary="Cancel order")
async def cancel_order(
    order_id: str,
    requester: Requester = Depends(get_requester),
    ledger: OrderLedger = Depends(get_order_ledger),
):
    return await ledger.cancel(order_id, requester)


@router.post("/{order_id}/refund", response_model=OrderDTO, summary="Refund paid order (admin)")
async def refund_order(
    order_id: str,
    request: Optional[RefundOrderRequest] = None,
    requester: Requester = Depends(get_requester),
    ledger: OrderLedger = Depends(get_order_ledger),
):
    request = request or RefundOrderRequest()
    return await ledger.refund(order_id, requester, amount=request.amount, reason=request.reason)
