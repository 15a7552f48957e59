"""HTTP-level tests for the `/orders` resource (create, list, cancel, delete)."""

from datetime import datetime, timezone

import mongomock
import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

from orderdesk.common.db import MongoStore
from orderdesk.main import create_app

ORDER = {"customerId": "any-customer", "items": [{"product": "Pen", "quantity": 2, "price": 1.5}], "total": 3}


def parse_ts(raw: str) -> datetime:
    return datetime.fromisoformat(raw.replace("Z", "+00:00")).astimezone(timezone.utc)


def create_order(client, **overrides):
    payload = dict(ORDER)
    payload.update(overrides)
    return client.post("/orders", json=payload)


def test_create_order_defaults_to_pending(client):
    now = datetime.now(timezone.utc)
    started = now.replace(microsecond=now.microsecond // 1000 * 1000)

    resp = create_order(client)

    assert resp.status_code == 201
    body = resp.json()
    assert ObjectId.is_valid(body["id"])
    assert body["status"] == "pending"
    assert body["customerId"] == "any-customer"
    assert body["items"] == [{"product": "Pen", "quantity": 2, "price": 1.5}]
    assert body["total"] == 3
    assert parse_ts(body["createdAt"]) >= started


def test_create_does_not_check_customer_exists_or_total(client):
    resp = create_order(client, customerId=str(ObjectId()), total=999)

    assert resp.status_code == 201
    assert resp.json()["total"] == 999


def test_create_requires_total(client):
    payload = {"customerId": "c1", "items": []}

    resp = client.post("/orders", json=payload)

    assert resp.status_code == 400
    assert "total" in resp.json()["message"]
    assert client.get("/orders").json() == []


def test_create_rejects_empty_customer_id(client):
    resp = create_order(client, customerId="")

    assert resp.status_code == 400
    assert "customerId" in resp.json()["message"]


def test_create_rejects_unknown_status(client):
    resp = create_order(client, status="shipped")

    assert resp.status_code == 400


def test_list_returns_every_order(client):
    first = create_order(client).json()
    second = create_order(client, customerId="someone-else").json()

    listed = client.get("/orders").json()

    assert sorted(o["id"] for o in listed) == sorted([first["id"], second["id"]])
    assert {o["createdAt"] for o in listed} == {first["createdAt"], second["createdAt"]}


def test_list_reports_storage_failure_as_500(unavailable_client):
    resp = unavailable_client.get("/orders")

    assert resp.status_code == 500
    assert "message" in resp.json()


def test_cancel_sets_status(client):
    order = create_order(client).json()

    resp = client.patch(f"/orders/{order['id']}/cancel")

    assert resp.status_code == 200
    assert resp.json()["status"] == "cancelled"
    assert resp.json()["createdAt"] == order["createdAt"]


def test_cancel_paid_order_is_allowed(client):
    order = create_order(client, status="paid").json()

    resp = client.patch(f"/orders/{order['id']}/cancel")

    assert resp.status_code == 200
    assert resp.json()["status"] == "cancelled"


def test_cancel_twice_is_allowed(client):
    order = create_order(client).json()
    client.patch(f"/orders/{order['id']}/cancel")

    resp = client.patch(f"/orders/{order['id']}/cancel")

    assert resp.status_code == 200
    assert resp.json()["status"] == "cancelled"


def test_cancel_unknown_order_returns_null(client):
    resp = client.patch(f"/orders/{ObjectId()}/cancel")

    assert resp.status_code == 200
    assert resp.json() is None


def test_cancel_rejects_malformed_id(client):
    resp = client.patch("/orders/xyz/cancel")

    assert resp.status_code == 400
    assert "xyz" in resp.json()["message"]


def test_delete_removes_order(client):
    order = create_order(client).json()

    resp = client.delete(f"/orders/{order['id']}")

    assert resp.status_code == 200
    assert resp.json() == {"message": "Order deleted"}
    assert client.get("/orders").json() == []


def test_delete_unknown_order_still_confirms(client):
    resp = client.delete(f"/orders/{ObjectId()}")

    assert resp.status_code == 200
    assert resp.json() == {"message": "Order deleted"}


def test_delete_rejects_malformed_id(client):
    assert client.delete("/orders/42").status_code == 400


@pytest.fixture
def strict_client(app_settings):
    strict = app_settings.model_copy(update={"enforce_status_transitions": True})
    store = MongoStore(strict.mongo_url, strict.mongo_db_name, client_factory=mongomock.MongoClient)
    with TestClient(create_app(store=store, app_settings=strict)) as test_client:
        yield test_client


def test_strict_transitions_reject_cancelling_cancelled_order(strict_client):
    order = create_order(strict_client).json()
    assert strict_client.patch(f"/orders/{order['id']}/cancel").status_code == 200

    resp = strict_client.patch(f"/orders/{order['id']}/cancel")

    assert resp.status_code == 400
    assert resp.json()["message"] == "Invalid transition: cancelled -> cancelled"
    assert strict_client.patch(f"/orders/{ObjectId()}/cancel").json() is None


def test_strict_transitions_allow_cancelling_paid_order(strict_client):
    order = create_order(strict_client).json()
    assert strict_client.post(f"/orders/{order['id']}/payment").json()["order"]["status"] == "paid"

    resp = strict_client.patch(f"/orders/{order['id']}/cancel")

    assert resp.status_code == 200
    assert resp.json()["status"] == "cancelled"


@pytest.mark.parametrize("status", ["paid", "cancelled"])
def test_strict_transitions_require_pending_on_create(strict_client, status):
    resp = create_order(strict_client, status=status)

    assert resp.status_code == 400
    assert resp.json()["message"] == f"orders must be created pending, got {status}"
    assert strict_client.get("/orders").json() == []


def test_strict_transitions_accept_explicit_pending_on_create(strict_client):
    resp = create_order(strict_client, status="pending")

    assert resp.status_code == 201
    assert resp.json()["status"] == "pending"
