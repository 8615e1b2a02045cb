"""
Realtime websocket.

Clients send ``{"action": "join" | "leave", "topic": "order:<id>"}`` and
receive ``{"topic": ..., "data": ...}`` for every room they are in. The
upgrade must carry the same ``X-User-*`` identity as REST calls; rooms are
scoped by ``RoomAccessPolicy``.
"""
import asyncio
import json
import logging

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect, status

from api.dependencies import get_realtime_hub, get_room_access
from api.security import requester_from_headers
from core.application.services import RoomAccessPolicy
from core.domain.errors import Forbidden, NotFound, ValidationError
from core.infrastructure.realtime import InMemoryRealtimeNotifier, Subscription

logger = logging.getLogger(__name__)
router = APIRouter()

TOPIC_PREFIXES = ("order:", "return:")
STANDALONE_TOPICS = ("analytics",)


def is_valid_topic(topic) -> bool:
    if not isinstance(topic, str):
        return False
    if topic in STANDALONE_TOPICS:
        return True
    return any(topic.startswith(prefix) and len(topic) > len(prefix) for prefix in TOPIC_PREFIXES)


def _error(topic, message: str) -> dict:
    return {"topic": topic, "data": {"type": "error", "message": message}}


async def _forward(websocket: WebSocket, subscription: Subscription) -> None:
    while True:
        message = await subscription.receive()
        await websocket.send_json(message)


@router.websocket("/ws")
async def realtime_socket(
    websocket: WebSocket,
    hub: InMemoryRealtimeNotifier = Depends(get_realtime_hub),
    access: RoomAccessPolicy = Depends(get_room_access),
):
    requester = requester_from_headers(websocket.headers)
    if requester is None:
        logger.warning("Realtime connection without identity refused")
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await websocket.accept()
    subscription = hub.connect()
    sender = asyncio.create_task(_forward(websocket, subscription))
    logger.info(f"Realtime client {subscription.id} connected as {requester.user_id}")

    try:
        while True:
            raw = await websocket.receive_text()
            try:
                message = json.loads(raw)
            except ValueError:
                subscription.deliver(_error(None, "Invalid JSON"))
                continue

            action = message.get("action") if isinstance(message, dict) else None
            topic = message.get("topic") if isinstance(message, dict) else None
            if action not in ("join", "leave") or not is_valid_topic(topic):
                subscription.deliver(_error(topic, "Unsupported message"))
                continue

            if action == "join":
                try:
                    await access.authorize(requester, topic)
                except (Forbidden, NotFound, ValidationError):
                    logger.warning(f"Realtime client {subscription.id} ({requester.user_id}) denied {topic}")
                    subscription.deliver(_error(topic, "Not authorized"))
                    continue
                hub.join(subscription, topic)
                subscription.deliver({"topic": topic, "data": {"type": "joined"}})
            else:
                hub.leave(subscription, topic)
                subscription.deliver({"topic": topic, "data": {"type": "left"}})
    except WebSocketDisconnect:
        logger.info(f"Realtime client {subscription.id} disconnected")
    finally:
        hub.leave_all(subscription)
        sender.cancel()
        try:
            await sender
        except (asyncio.CancelledError, WebSocketDisconnect, RuntimeError):
            pass
