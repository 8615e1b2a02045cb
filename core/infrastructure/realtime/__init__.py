"""Realtime fan-out: in-memory rooms, Redis pub/sub transport, no-op."""
from .memory import InMemoryRealtimeNotifier, Subscription
from .null import NullRealtimeNotifier
from .redis_pubsub import RedisRealtimeNotifier, RedisRealtimeRelay

__all__ = [
    "InMemoryRealtimeNotifier",
    "NullRealtimeNotifier",
    "RedisRealtimeNotifier",
    "RedisRealtimeRelay",
    "Subscription",
]
