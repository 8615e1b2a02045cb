"""Runtime store settings (admin)."""
from fastapi import APIRouter, Depends

from api.dependencies import get_store_settings_service
from api.security import get_requester
from core.application.dtos import StoreSettingsDTO, UpdateStoreSettingsRequest
from core.application.services import StoreSettingsService
from core.domain.value_objects import Requester

router = APIRouter()


@router.get("", response_model=StoreSettingsDTO, summary="Current store settings")
async def get_store_settings(
    requester: Requester = Depends(get_requester),
    service: StoreSettingsService = Depends(get_store_settings_service),
):
    return await service.get(requester)


@router.patch("", response_model=StoreSettingsDTO, summary="Update store settings")
async def update_store_settings(
    request: UpdateStoreSettingsRequest,
    requester: Requester = Depends(get_requester),
    service: StoreSettingsService = Depends(get_store_settings_service),
):
    return await service.update(requester, stripe_enabled=request.stripe_enabled)
