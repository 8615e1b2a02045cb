"""Integration tests for returns and store settings endpoints."""
import pytest

from tests.integration.conftest import ADMIN_HEADERS, CUSTOMER_HEADERS, OTHER_HEADERS, checkout_payload


async def _order(client):
    response = await client.post("/api/v1/orders", json=checkout_payload(), headers=CUSTOMER_HEADERS)
    return response.json()


@pytest.mark.asyncio
async def test_return_flow(client):
    order = await _order(client)

    created = await client.post(
        "/api/v1/returns", json={"orderId": order["id"], "reason": "Wrong size"}, headers=CUSTOMER_HEADERS
    )
    assert created.status_code == 201
    return_id = created.json()["id"]
    assert created.json()["rmaNumber"].startswith("RMA-")

    mine = await client.get("/api/v1/returns/my", headers=CUSTOMER_HEADERS)
    assert [r["id"] for r in mine.json()] == [return_id]

    denied = await client.patch(
        f"/api/v1/returns/{return_id}/status", json={"status": "approved"}, headers=CUSTOMER_HEADERS
    )
    approved = await client.patch(
        f"/api/v1/returns/{return_id}/status",
        json={"status": "approved", "refundAmount": 55},
        headers=ADMIN_HEADERS,
    )
    assert denied.status_code == 403
    assert approved.json()["status"] == "approved"
    assert approved.json()["refundAmount"] == 55.0

    listed = await client.get("/api/v1/returns?status=approved", headers=ADMIN_HEADERS)
    assert [r["id"] for r in listed.json()] == [return_id]


@pytest.mark.asyncio
async def test_return_errors(client):
    order = await _order(client)

    missing = await client.post("/api/v1/returns", json={"orderId": "nope"}, headers=CUSTOMER_HEADERS)
    foreign = await client.post("/api/v1/returns", json={"orderId": order["id"]}, headers=OTHER_HEADERS)
    not_admin = await client.get("/api/v1/returns", headers=CUSTOMER_HEADERS)

    assert missing.status_code == 404
    assert foreign.status_code == 403
    assert not_admin.status_code == 403


@pytest.mark.asyncio
async def test_refunded_return_refunds_order(client):
    order = await _order(client)
    created = await client.post("/api/v1/returns", json={"orderId": order["id"]}, headers=CUSTOMER_HEADERS)

    await client.patch(
        f"/api/v1/returns/{created.json()['id']}/status", json={"status": "refunded"}, headers=ADMIN_HEADERS
    )

    refreshed = await client.get(f"/api/v1/orders/{order['id']}", headers=CUSTOMER_HEADERS)
    assert refreshed.json()["paymentStatus"] == "refunded"


@pytest.mark.asyncio
async def test_store_settings_endpoints(client):
    denied = await client.get("/api/v1/admin/settings", headers=CUSTOMER_HEADERS)
    current = await client.get("/api/v1/admin/settings", headers=ADMIN_HEADERS)

    assert denied.status_code == 403
    assert current.json()["stripeEnabled"] is True
