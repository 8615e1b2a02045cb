"""Return (RMA) endpoints."""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from api.dependencies import get_return_ledger
from api.security import get_requester
from core.application.dtos import CreateReturnRequest, ReturnDTO, UpdateReturnRequest
from core.application.services import ReturnLedger
from core.domain.value_objects import Requester

router = APIRouter()


@router.post("", response_model=ReturnDTO, status_code=status.HTTP_201_CREATED, summary="Open a return")
async def create_return(
    request: CreateReturnRequest,
    requester: Requester = Depends(get_requester),
    ledger: ReturnLedger = Depends(get_return_ledger),
):
    return await ledger.create_return(requester, request)


@router.get("/my", response_model=List[ReturnDTO], summary="Caller's returns")
async def list_my_returns(
    requester: Requester = Depends(get_requester),
    ledger: ReturnLedger = Depends(get_return_ledger),
):
    return await ledger.list_mine(requester)


@router.get("", response_model=List[ReturnDTO], summary="All returns (admin)")
async def list_returns(
    return_status: Optional[str] = Query(default=None, alias="status"),
    requester: Requester = Depends(get_requester),
    ledger: ReturnLedger = Depends(get_return_ledger),
):
    return await ledger.list_all(requester, status=return_status)


@router.get("/{return_id}", response_model=ReturnDTO, summary="Get return by ID")
async def get_return(
    return_id: str,
    requester: Requester = Depends(get_requester),
    ledger: ReturnLedger = Depends(get_return_ledger),
):
    return await ledger.get_return(return_id, requester)


@router.patch("/{return_id}/status", response_model=ReturnDTO, summary="Update return (admin)")
async def update_return_status(
    return_id: str,
    request: UpdateReturnRequest,
    requester: Requester = Depends(get_requester),
    ledger: ReturnLedger = Depends(get_return_ledger),
):
    return await ledger.update_status(
        return_id,
        requester,
        status=request.status,
        refund_amount=request.refund_amount,
        carrier=request.carrier,
        tracking_number=request.tracking_number,
    )
