"""
In-process realtime rooms.

Each websocket connection gets a ``Subscription`` with a bounded queue and
joins any number of topic rooms. Publishing never blocks: when a slow
client's queue is full the oldest pending message is dropped.
"""
import asyncio
import logging
import uuid
from typing import Any, Dict, Optional, Set

from core.application.interfaces import RealtimeNotifier

logger = logging.getLogger(__name__)


class Subscription:
    """One connected client."""

    def __init__(self, queue_size: int = 100) -> None:
        self.id = uuid.uuid4().hex
        self.queue: asyncio.Queue = asyncio.Queue(maxsize=queue_size)
        self.topics: Set[str] = set()
        self.dropped = 0

    def deliver(self, message: Dict[str, Any]) -> None:
        try:
            self.queue.put_nowait(message)
        except asyncio.QueueFull:
            self.queue.get_nowait()
            self.dropped += 1
            self.queue.put_nowait(message)

    async def receive(self, timeout: Optional[float] = None) -> Dict[str, Any]:
        if timeout is None:
            return await self.queue.get()
        return await asyncio.wait_for(self.queue.get(), timeout)


class InMemoryRealtimeNotifier(RealtimeNotifier):
    """
    Room registry and notifier in one.

    Used directly in single-process deployments, and as the local hub fed by
    ``RedisRealtimeRelay`` when several workers share Redis.
    """

    def __init__(self, queue_size: int = 100) -> None:
        self._queue_size = queue_size
        self._rooms: Dict[str, Set[Subscription]] = {}

    def connect(self) -> Subscription:
        return Subscription(self._queue_size)

    def join(self, subscription: Subscription, topic: str) -> None:
        self._rooms.setdefault(topic, set()).add(subscription)
        subscription.topics.add(topic)
        logger.debug(f"Subscription {subscription.id} joined {topic}")

    def leave(self, subscription: Subscription, topic: str) -> None:
        members = self._rooms.get(topic)
        if members is not None:
            members.discard(subscription)
            if not members:
                del self._rooms[topic]
        subscription.topics.discard(topic)

    def leave_all(self, subscription: Subscription) -> None:
        for topic in list(subscription.topics):
            self.leave(subscription, topic)

    def members(self, topic: str) -> int:
        return len(self._rooms.get(topic, ()))

    async def publish(self, topic: str, payload: Dict[str, Any]) -> None:
        self.publish_local(topic, payload)

    def publish_local(self, topic: str, payload: Dict[str, Any]) -> int:
        """Deliver to every member of the room. Returns the recipient count."""
        members = list(self._rooms.get(topic, ()))
        message = {"topic": topic, "data": payload}
        for subscription in members:
            subscription.deliver(message)
        if members:
            logger.debug(f"Delivered {payload.get('type')} to {len(members)} member(s) of {topic}")
        return len(members)
