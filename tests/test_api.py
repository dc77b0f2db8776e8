from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from app.api import create_app
from app.api.deps import get_lock_service, get_product_client
from app.data.database import get_db
from app.services.notification_service import NotificationService


@pytest.fixture
def client(db, products, locks, monkeypatch):
    sent = []
    monkeypatch.setattr(
        NotificationService,
        "send_points_notification",
        staticmethod(lambda user_id, amount, cause: sent.append((user_id, amount, cause))),
    )
    app = create_app()

    def override_db():
        yield db

    app.dependency_overrides[get_db] = override_db
    app.dependency_overrides[get_product_client] = lambda: products
    app.dependency_overrides[get_lock_service] = lambda: locks
    return TestClient(app)


def test_health(client):
    res = client.get("/health")

    assert res.status_code == 200
    assert res.json()["database"] == "ok"


def test_create_and_get_profile(client):
    res = client.post("/profiles/", json={"id": 1, "name": "ana"})

    assert res.status_code == 200
    body = res.json()
    assert body["points_balance"] == 0
    assert len(body["referral_code"]) == 6

    assert client.get("/profiles/1").json()["name"] == "ana"
    assert client.get("/profiles/2").status_code == 404


def test_cart_flow(client, make_profile):
    make_profile(1)

    res = client.post("/carts/me/items", params={"user_id": 1}, json={"product_id": 1, "quantity": 2})
    assert res.status_code == 200
    line_id = res.json()["items"][0]["id"]

    res = client.patch(f"/carts/me/items/{line_id}", params={"user_id": 1}, json={"quantity": 4})
    summary = res.json()["summary"]
    assert Decimal(summary["subtotal"]) == Decimal("40.00")
    assert Decimal(summary["shipping"]) == Decimal("15.90")

    res = client.delete(f"/carts/me/items/{line_id}", params={"user_id": 1})
    assert res.json()["items"] == []

    assert client.post("/carts/me/clear", params={"user_id": 1}).status_code == 204


def test_out_of_stock_maps_to_conflict(client, make_profile):
    make_profile(1)

    res = client.post("/carts/me/items", params={"user_id": 1}, json={"product_id": 3, "quantity": 9})

    assert res.status_code == 409
    assert res.json()["retryable"] is False


def test_invalid_quantity_maps_to_bad_request(client, make_profile):
    make_profile(1)

    res = client.post("/carts/me/items", params={"user_id": 1}, json={"product_id": 1, "quantity": 0})

    assert res.status_code == 400


def test_busy_lock_is_retryable_conflict(client, locks, make_profile):
    make_profile(1)
    locks.busy.add(1)

    res = client.get("/carts/me", params={"user_id": 1})

    assert res.status_code == 409
    assert res.json()["retryable"] is True


def test_foreign_line_is_forbidden(client, make_profile):
    make_profile(1)
    make_profile(2)
    res = client.post("/carts/me/items", params={"user_id": 2}, json={"product_id": 1})
    line_id = res.json()["items"][0]["id"]

    res = client.delete(f"/carts/me/items/{line_id}", params={"user_id": 1})

    assert res.status_code == 403


def test_points_endpoints(client, make_profile, add_tx):
    make_profile(1, balance=170)
    add_tx(1, 100, "compra", "order:1")
    add_tx(1, -30, "resgate", "reward:1")
    add_tx(1, 100, "compra", "order:1")

    audit = client.get("/points/1/audit").json()
    assert audit["difference"] == 100
    assert audit["duplicate_transactions"] == 1
    assert audit["status"] == "discrepancy"

    fixed = client.post("/points/1/audit/fix").json()
    assert fixed["difference"] == 0
    assert client.get("/points/1/balance").json()["points_balance"] == 70

    res = client.post("/points/1/redeem", json={"points": 500})
    assert res.status_code == 409

    res = client.post("/points/1/redeem", json={"points": 20, "reference_id": "reward:2"})
    assert res.json()["created"] is True
    assert client.get("/points/1/transactions").json()["total"] == 5


def test_referral_and_order_flow(client, make_profile):
    make_profile(1, code="ANA123")
    make_profile(2)

    res = client.post("/referrals/", json={"user_id": 2, "code": "ana123"})
    assert res.json() == {"applied": True}
    assert client.post("/referrals/", json={"user_id": 1, "code": "ANA123"}).status_code == 400

    client.post("/carts/me/items", params={"user_id": 2}, json={"product_id": 2, "quantity": 1})
    res = client.post("/orders/", params={"user_id": 2})
    assert res.status_code == 201
    order_id = res.json()["id"]

    res = client.post(f"/orders/{order_id}/confirm")
    assert res.json()["status"] == "CONFIRMED"

    info = client.get("/referrals/1").json()
    assert info["approved_referrals"] == 1
    assert info["points_balance"] == 20
    assert client.get(f"/orders/{order_id}", params={"user_id": 1}).status_code == 403


def test_manual_referral_approval(client, make_profile):
    make_profile(1, code="ANA123")
    make_profile(2)
    client.post("/referrals/", json={"user_id": 2, "code": "ANA123"})

    assert client.post("/referrals/2/approve").json() == {"approved": True}
    assert client.post("/referrals/2/approve").json() == {"approved": False}
    assert client.get("/points/2/balance").json()["points_balance"] == 20
