from pydantic import Field

from core.settings.base import StoreBaseSettings


class LoggingSettings(StoreBaseSettings):
    level: str = Field(default="INFO", alias="LOG_LEVEL")
