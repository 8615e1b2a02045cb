"""Integration tests for the orders endpoints."""
import pytest

from tests.integration.conftest import ADMIN_HEADERS, CUSTOMER_HEADERS, OTHER_HEADERS, checkout_payload


async def _create(client, headers=CUSTOMER_HEADERS, **overrides):
    response = await client.post("/api/v1/orders", json=checkout_payload(**overrides), headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


@pytest.mark.asyncio
async def test_create_order_returns_camel_case_numbers(client):
    order = await _create(client)

    assert order["orderCode"].startswith("ORD-")
    assert order["subtotal"] == 110.0
    assert order["total"] == 118.8
    assert order["paymentStatus"] == "pending"
    assert order["shippingAddress"]["zipCode"] == "N1 9GU"
    assert order["customerInfo"]["email"] == "ada@example.com"


@pytest.mark.asyncio
async def test_missing_identity_is_401(client):
    response = await client.post("/api/v1/orders", json=checkout_payload())
    assert response.status_code == 401
    assert response.json() == {"detail": "Authentication required"}


@pytest.mark.asyncio
async def test_validation_and_lookup_errors(client):
    bad_quantity = await client.post(
        "/api/v1/orders",
        json=checkout_payload(items=[{"productId": "prod-shirt", "quantity": "lots"}]),
        headers=CUSTOMER_HEADERS,
    )
    unknown = await client.post(
        "/api/v1/orders",
        json=checkout_payload(items=[{"productId": "ghost", "quantity": 1}]),
        headers=CUSTOMER_HEADERS,
    )

    assert bad_quantity.status_code == 400
    assert unknown.status_code == 404
    assert "ghost" in unknown.json()["detail"]


@pytest.mark.asyncio
async def test_get_order_access(client):
    order = await _create(client)

    assert (await client.get(f"/api/v1/orders/{order['id']}", headers=CUSTOMER_HEADERS)).status_code == 200
    assert (await client.get(f"/api/v1/orders/{order['id']}", headers=OTHER_HEADERS)).status_code == 403
    assert (await client.get("/api/v1/orders/nope", headers=ADMIN_HEADERS)).status_code == 404


@pytest.mark.asyncio
async def test_list_orders_paging(client):
    for _ in range(3):
        await _create(client)
    await _create(client, headers=OTHER_HEADERS)

    mine = (await client.get("/api/v1/orders", headers=CUSTOMER_HEADERS)).json()
    page = (await client.get("/api/v1/orders?page=2&limit=3", headers=ADMIN_HEADERS)).json()

    assert mine["total"] == 3
    assert (page["total"], page["page"], page["pages"]) == (4, 2, 2)
    assert len(page["items"]) == 1


@pytest.mark.asyncio
async def test_admin_lifecycle(client):
    order = await _create(client)
    order_id = order["id"]

    forbidden = await client.patch(
        f"/api/v1/orders/{order_id}/status", json={"status": "shipped"}, headers=CUSTOMER_HEADERS
    )
    shipped = await client.patch(
        f"/api/v1/orders/{order_id}/status",
        json={"status": "shipped", "trackingNumber": "1Z999"},
        headers=ADMIN_HEADERS,
    )
    backwards = await client.patch(
        f"/api/v1/orders/{order_id}/status", json={"status": "pending"}, headers=ADMIN_HEADERS
    )
    cancel = await client.patch(f"/api/v1/orders/{order_id}/cancel", headers=CUSTOMER_HEADERS)

    assert forbidden.status_code == 403
    assert shipped.status_code == 200
    assert shipped.json()["trackingNumber"] == "1Z999"
    assert backwards.status_code == 400
    assert cancel.status_code == 400


@pytest.mark.asyncio
async def test_cancel_and_history(client):
    order = await _create(client)

    cancelled = await client.patch(f"/api/v1/orders/{order['id']}/cancel", headers=CUSTOMER_HEADERS)
    history = await client.get(f"/api/v1/orders/{order['id']}/history", headers=CUSTOMER_HEADERS)

    assert cancelled.json()["status"] == "cancelled"
    assert cancelled.json()["paymentStatus"] == "refunded"
    types = [event["eventType"] for event in history.json()]
    assert types[0] == "OrderCreatedEvent"
    assert "OrderCancelledEvent" in types


@pytest.mark.asyncio
async def test_refund_unpaid_order_is_rejected(client):
    order = await _create(client)

    response = await client.post(
        f"/api/v1/orders/{order['id']}/refund", json={"amount": 10}, headers=ADMIN_HEADERS
    )

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_stats_is_admin_only(client):
    await _create(client)

    denied = await client.get("/api/v1/orders/stats", headers=CUSTOMER_HEADERS)
    stats = await client.get("/api/v1/orders/stats", headers=ADMIN_HEADERS)

    assert denied.status_code == 403
    assert stats.json()["totalOrders"] == 1
    assert stats.json()["totalRevenue"] == 118.8


@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/health")
    ready = await client.get("/health/ready")

    assert response.json()["status"] == "healthy"
    assert ready.json()["checks"]["database"] == "ok"
