"""Realtime notifier that drops everything."""
from typing import Any, Dict

from core.application.interfaces import RealtimeNotifier


class NullRealtimeNotifier(RealtimeNotifier):

    async def publish(self, topic: str, payload: Dict[str, Any]) -> None:
        return None
