"""Tests for realtime rooms and the Redis relay."""
import json
from unittest.mock import AsyncMock

import pytest

from core.infrastructure.realtime import (
    InMemoryRealtimeNotifier,
    NullRealtimeNotifier,
    RedisRealtimeNotifier,
    RedisRealtimeRelay,
)


@pytest.mark.asyncio
async def test_publish_reaches_only_room_members():
    hub = InMemoryRealtimeNotifier()
    member = hub.connect()
    outsider = hub.connect()
    hub.join(member, "order:1")
    hub.join(outsider, "order:2")

    await hub.publish("order:1", {"type": "order_payment_update", "orderId": "1"})

    message = await member.receive(timeout=1)
    assert message == {"topic": "order:1", "data": {"type": "order_payment_update", "orderId": "1"}}
    assert outsider.queue.empty()


@pytest.mark.asyncio
async def test_full_queue_drops_oldest():
    hub = InMemoryRealtimeNotifier(queue_size=2)
    slow = hub.connect()
    hub.join(slow, "analytics")

    for n in range(3):
        await hub.publish("analytics", {"n": n})

    assert slow.dropped == 1
    assert (await slow.receive(timeout=1))["data"] == {"n": 1}
    assert (await slow.receive(timeout=1))["data"] == {"n": 2}


def test_leave_all_empties_rooms():
    hub = InMemoryRealtimeNotifier()
    subscription = hub.connect()
    hub.join(subscription, "order:1")
    hub.join(subscription, "return:9")

    hub.leave_all(subscription)

    assert hub.members("order:1") == 0
    assert hub.members("return:9") == 0
    assert subscription.topics == set()


@pytest.mark.asyncio
async def test_null_notifier_accepts_everything():
    await NullRealtimeNotifier().publish("order:1", {"type": "x"})


@pytest.mark.asyncio
async def test_redis_notifier_publishes_json_on_prefixed_channel():
    client = AsyncMock()
    client.publish.return_value = 1
    notifier = RedisRealtimeNotifier(channel_prefix="rt:", client=client)

    await notifier.publish("order:7", {"type": "order_payment_update", "orderId": "7"})

    channel, body = client.publish.call_args.args
    assert channel == "rt:order:7"
    assert json.loads(body) == {"type": "order_payment_update", "orderId": "7"}


def test_relay_forwards_pattern_messages_to_hub():
    hub = InMemoryRealtimeNotifier()
    subscription = hub.connect()
    hub.join(subscription, "return:3")
    relay = RedisRealtimeRelay(hub, channel_prefix="rt:", client=AsyncMock())

    relay.handle_message(
        {"type": "pmessage", "pattern": "rt:*", "channel": "rt:return:3", "data": json.dumps({"type": "return_update"})}
    )

    assert subscription.queue.get_nowait() == {"topic": "return:3", "data": {"type": "return_update"}}


def test_relay_ignores_malformed_and_non_pattern_messages():
    hub = InMemoryRealtimeNotifier()
    subscription = hub.connect()
    hub.join(subscription, "analytics")
    relay = RedisRealtimeRelay(hub, channel_prefix="rt:", client=AsyncMock())

    relay.handle_message({"type": "psubscribe", "channel": "rt:*", "data": 1})
    relay.handle_message({"type": "pmessage", "channel": "rt:analytics", "data": "{not json"})

    assert subscription.queue.empty()
