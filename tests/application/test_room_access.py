"""Tests for realtime room scoping."""
import pytest

from core.application.dtos import CreateReturnRequest
from core.application.services import RoomAccessPolicy
from core.domain.enums import PaymentOutcome
from core.domain.errors import Forbidden, NotFound, ValidationError
from tests.conftest import order_request


@pytest.fixture
def room_access(order_ledger, return_ledger) -> RoomAccessPolicy:
    return RoomAccessPolicy(order_ledger, return_ledger)


@pytest.mark.asyncio
async def test_owner_and_admin_may_join_order_room(room_access, order_ledger, customer, admin):
    order = await order_ledger.create_order(customer, order_request())

    await room_access.authorize(customer, f"order:{order.id}")
    await room_access.authorize(admin, f"order:{order.id}")


@pytest.mark.asyncio
async def test_stranger_may_not_join_order_room(room_access, order_ledger, customer, other_customer):
    order = await order_ledger.create_order(customer, order_request())

    with pytest.raises(Forbidden):
        await room_access.authorize(other_customer, f"order:{order.id}")
    with pytest.raises(NotFound):
        await room_access.authorize(customer, "order:does-not-exist")


@pytest.mark.asyncio
async def test_return_room_follows_return_owner(room_access, order_ledger, return_ledger, customer, other_customer):
    order = await order_ledger.create_order(customer, order_request())
    created = await return_ledger.create_return(customer, CreateReturnRequest(order_id=order.id))

    await room_access.authorize(customer, f"return:{created.id}")
    with pytest.raises(Forbidden):
        await room_access.authorize(other_customer, f"return:{created.id}")


@pytest.mark.asyncio
async def test_analytics_room_is_admin_only(room_access, customer, admin):
    await room_access.authorize(admin, "analytics")
    with pytest.raises(Forbidden):
        await room_access.authorize(customer, "analytics")


@pytest.mark.asyncio
async def test_unknown_topic_is_rejected(room_access, admin):
    with pytest.raises(ValidationError):
        await room_access.authorize(admin, "secrets:1")


@pytest.mark.asyncio
async def test_order_push_carries_no_personal_data(order_ledger, customer, notifier):
    order = await order_ledger.create_order(customer, order_request(), payment_id="pi_room")
    notifier.clear()

    await order_ledger.reconcile_payment("pi_room", PaymentOutcome.SUCCEEDED)

    payload = notifier.for_topic(f"order:{order.id}")[-1]
    assert set(payload) == {
        "type", "orderId", "orderCode", "status", "paymentStatus", "paymentId", "updatedAt"
    }
