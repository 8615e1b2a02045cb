"""Store settings singleton persistence."""

from abc import ABC, abstractmethod

from ..entities.store_settings import StoreSettings


class StoreSettingsRepository(ABC):

    @abstractmethod
    async def get(self) -> StoreSettings:
        """Current settings; defaults when nothing has been saved yet."""
        pass

    @abstractmethod
    async def save(self, settings: StoreSettings) -> None:
        pass
