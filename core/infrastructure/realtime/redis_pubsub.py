"""
Redis pub/sub realtime transport.

``RedisRealtimeNotifier`` publishes JSON messages on ``<prefix><topic>``;
``RedisRealtimeRelay`` runs in every API worker, pattern-subscribes to the
prefix and forwards messages into that worker's in-memory rooms.
"""
import asyncio
import json
import logging
from typing import Any, Dict, Optional

import redis.asyncio as aioredis

from core.application.interfaces import RealtimeNotifier

from .memory import InMemoryRealtimeNotifier

logger = logging.getLogger(__name__)


class RedisRealtimeNotifier(RealtimeNotifier):
    """Publishes realtime payloads through Redis."""

    def __init__(
        self,
        redis_url: str = "redis://localhost:6379/0",
        channel_prefix: str = "storefront:rt:",
        client: Optional[aioredis.Redis] = None,
    ):
        self.redis_url = redis_url
        self.channel_prefix = channel_prefix
        self._redis_client: Optional[aioredis.Redis] = client

    async def connect(self) -> None:
        """Establish Redis connection."""
        if self._redis_client is None:
            self._redis_client = aioredis.from_url(
                self.redis_url,
                encoding="utf-8",
                decode_responses=True,
            )
            await self._redis_client.ping()
            logger.info(f"✅ Connected to Redis: {self.redis_url}")

    async def disconnect(self) -> None:
        """Close Redis connection."""
        if self._redis_client:
            await self._redis_client.aclose()
            self._redis_client = None
            logger.info("✅ Disconnected from Redis")

    async def publish(self, topic: str, payload: Dict[str, Any]) -> None:
        if self._redis_client is None:
            await self.connect()
        channel = f"{self.channel_prefix}{topic}"
        receivers = await self._redis_client.publish(channel, json.dumps(payload, default=str))
        logger.debug(f"Published {payload.get('type')} to {channel} ({receivers} receiver(s))")


class RedisRealtimeRelay:
    """Forwards Redis pub/sub messages into a local room hub."""

    def __init__(
        self,
        hub: InMemoryRealtimeNotifier,
        redis_url: str = "redis://localhost:6379/0",
        channel_prefix: str = "storefront:rt:",
        client: Optional[aioredis.Redis] = None,
    ):
        self.hub = hub
        self.redis_url = redis_url
        self.channel_prefix = channel_prefix
        self._redis_client: Optional[aioredis.Redis] = client
        self._task: Optional[asyncio.Task] = None

    async def start(self) -> None:
        if self._task is not None:
            return
        if self._redis_client is None:
            self._redis_client = aioredis.from_url(
                self.redis_url,
                encoding="utf-8",
                decode_responses=True,
            )
        self._task = asyncio.create_task(self._run(), name="realtime-relay")
        logger.info(f"Realtime relay listening on {self.channel_prefix}*")

    async def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        if self._redis_client is not None:
            await self._redis_client.aclose()
            self._redis_client = None

    def handle_message(self, message: Dict[str, Any]) -> None:
        """Route one pub/sub message into the hub."""
        if message.get("type") != "pmessage":
            return
        channel = message.get("channel") or ""
        topic = channel[len(self.channel_prefix):]
        try:
            payload = json.loads(message.get("data") or "{}")
        except (TypeError, ValueError):
            logger.warning(f"Dropping malformed realtime message on {channel}")
            return
        self.hub.publish_local(topic, payload)

    async def _run(self) -> None:
        pubsub = self._redis_client.pubsub()
        await pubsub.psubscribe(f"{self.channel_prefix}*")
        try:
            while True:
                try:
                    message = await pubsub.get_message(ignore_subscribe_messages=True, timeout=1.0)
                except aioredis.ConnectionError as e:
                    logger.error(f"Realtime relay lost Redis connection: {e}")
                    await asyncio.sleep(1.0)
                    continue
                if message:
                    self.handle_message(message)
        finally:
            await pubsub.aclose()
