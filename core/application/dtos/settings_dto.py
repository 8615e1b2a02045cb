"""Store settings DTOs."""

from datetime import datetime
from typing import Optional

from core.domain.entities.store_settings import StoreSettings

from .common import CamelModel


class StoreSettingsDTO(CamelModel):
    stripe_enabled: bool
    updated_by: Optional[str] = None
    updated_at: datetime

    @classmethod
    def from_entity(cls, settings: StoreSettings) -> "StoreSettingsDTO":
        return cls(
            stripe_enabled=settings.stripe_enabled,
            updated_by=settings.updated_by,
            updated_at=settings.updated_at,
        )


class UpdateStoreSettingsRequest(CamelModel):
    stripe_enabled: Optional[bool] = None
