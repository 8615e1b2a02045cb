"""Store settings singleton row."""

from sqlalchemy.ext.asyncio import AsyncSession

from core.domain.entities.store_settings import StoreSettings
from core.domain.repositories import StoreSettingsRepository

from ..mappers import StoreSettingsMapper
from ..models.system_model import StoreSettingsModel

SETTINGS_ROW_ID = 1


class SqlAlchemyStoreSettingsRepository(StoreSettingsRepository):

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self) -> StoreSettings:
        model = await self._session.get(StoreSettingsModel, SETTINGS_ROW_ID)
        if model is None:
            return StoreSettings()
        return StoreSettingsMapper.to_domain(model)

    async def save(self, settings: StoreSettings) -> None:
        model = await self._session.get(StoreSettingsModel, SETTINGS_ROW_ID)
        if model is None:
            model = StoreSettingsModel(id=SETTINGS_ROW_ID)
            self._session.add(model)
        StoreSettingsMapper.update_persistence(settings, model)
        await self._session.flush()
