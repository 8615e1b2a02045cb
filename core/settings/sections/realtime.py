from typing import Literal

from pydantic import Field

from core.settings.base import StoreBaseSettings


class RealtimeSettings(StoreBaseSettings):
    """
    Realtime fan-out backend.

    ``memory`` keeps rooms in-process; ``redis`` publishes through Redis
    pub/sub so several API workers share rooms; ``none`` disables pushes.
    """

    backend: Literal["memory", "redis", "none"] = Field(
        default="memory", alias="REALTIME_BACKEND"
    )
    redis_url: str = Field(default="redis://localhost:6379/0", alias="REDIS_URL")
    channel_prefix: str = Field(default="storefront:rt:", alias="REALTIME_CHANNEL_PREFIX")
    queue_size: int = Field(default=100, alias="REALTIME_QUEUE_SIZE")
