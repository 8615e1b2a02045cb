"""Runtime store settings (admin toggles)."""
import logging
from typing import Optional

from sqlalchemy.ext.asyncio import async_sessionmaker

from core.application.dtos.settings_dto import StoreSettingsDTO
from core.data.uow import create_uow
from core.domain.entities.store_settings import StoreSettings
from core.domain.value_objects import Requester
from core.utils.clock import utc_now

from .order_ledger import require_admin

logger = logging.getLogger(__name__)


class StoreSettingsService:

    def __init__(self, session_factory: async_sessionmaker) -> None:
        self._session_factory = session_factory

    async def current(self) -> StoreSettings:
        async with create_uow(self._session_factory) as uow:
            return await uow.store_settings.get()

    async def is_stripe_enabled(self) -> bool:
        return (await self.current()).stripe_enabled

    async def get(self, requester: Requester) -> StoreSettingsDTO:
        require_admin(requester)
        return StoreSettingsDTO.from_entity(await self.current())

    async def update(self, requester: Requester, stripe_enabled: Optional[bool] = None) -> StoreSettingsDTO:
        require_admin(requester)
        async with create_uow(self._session_factory) as uow:
            settings = await uow.store_settings.get()
            if stripe_enabled is not None:
                settings.stripe_enabled = bool(stripe_enabled)
            settings.updated_by = requester.user_id
            settings.updated_at = utc_now()
            await uow.store_settings.save(settings)
            await uow.commit()
        logger.info(f"Store settings updated by {requester.user_id}: stripe_enabled={settings.stripe_enabled}")
        return StoreSettingsDTO.from_entity(settings)
