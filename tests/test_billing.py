import threading
from concurrent.futures import ThreadPoolExecutor
from unittest.mock import MagicMock
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from bort.modules import database
from bort.modules import payments
from bort.schemas.billing import Plan

CHECKOUT = {
    "plan_id": "pro",
    "success_url": "https://bort.example/success",
    "cancel_url": "https://bort.example/cancel",
}

@pytest.fixture
def stripe_session():
    session = MagicMock()
    session.id = "cs_test_1"
    session.url = "https://checkout.stripe.com/c/pay/cs_test_1"
    with patch("stripe.checkout.Session.create", return_value=session) as create:
        yield create

def test_list_plans_seeds_defaults_once(client, db):
    """
    Test that the default plans are seeded only on first listing.
    """
    first = client.get("/billing/plans").json()
    second = client.get("/billing/plans").json()

    assert [p["id"] for p in first] == ["basic", "pro", "yearly", "lifetime"]
    assert [p["price_cents"] for p in first] == [999, 4099, 9999, 40099]
    assert [p["id"] for p in second] == [p["id"] for p in first]
    assert len(database.list_plans(db)) == 4

def test_checkout_subscription(client, stripe_session):
    """
    Test that recurring plans create a subscription checkout.
    """
    client.get("/billing/plans")

    response = client.post("/billing/checkout", json=CHECKOUT)
    assert response.status_code == 200
    assert response.json() == {"id": "cs_test_1", "url": "https://checkout.stripe.com/c/pay/cs_test_1"}

    kwargs = stripe_session.call_args.kwargs
    assert kwargs["mode"] == "subscription"
    assert kwargs["success_url"] == "https://bort.example/success"
    line_item = kwargs["line_items"][0]
    assert line_item["price_data"]["unit_amount"] == 4099
    assert line_item["price_data"]["currency"] == "usd"
    assert line_item["price_data"]["recurring"] == {"interval": "month"}

def test_checkout_with_price_id(client, stripe_session):
    """
    Test that a Stripe price id replaces inline price data.
    """
    client.get("/billing/plans")

    response = client.post("/billing/checkout", json={**CHECKOUT, "price_id": "price_123"})
    assert response.status_code == 200
    assert stripe_session.call_args.kwargs["line_items"] == [{"price": "price_123", "quantity": 1}]

def test_checkout_unknown_plan(client, stripe_session):
    """
    Test that checkout for an unknown plan returns 404.
    """
    client.get("/billing/plans")

    response = client.post("/billing/checkout", json={**CHECKOUT, "plan_id": "platinum"})
    assert response.status_code == 404
    stripe_session.assert_not_called()

def test_checkout_without_stripe_key(client, settings, stripe_session):
    """
    Test that checkout is unavailable without a Stripe key.
    """
    settings.stripe_secret_key = None

    response = client.post("/billing/checkout", json=CHECKOUT)
    assert response.status_code == 503
    stripe_session.assert_not_called()

def test_checkout_processor_failure(client, stripe_session):
    """
    Test that a Stripe failure surfaces as a 500 with its message.
    """
    client.get("/billing/plans")
    stripe_session.side_effect = RuntimeError("card network down")

    response = client.post("/billing/checkout", json=CHECKOUT)
    assert response.status_code == 500
    assert "card network down" in response.json()["detail"]

def test_checkout_rejects_invalid_urls(client, stripe_session):
    """
    Test that redirect urls must be valid.
    """
    response = client.post("/billing/checkout", json={**CHECKOUT, "success_url": "not a url"})
    assert response.status_code == 422

def test_record_cashapp_payment(client, db):
    """
    Test that a Cash App reference is stored as a pending payment.
    """
    client.get("/billing/plans")

    response = client.post("/billing/cashapp", json={"plan_id": "yearly", "tx_ref": "$bort-42"})
    assert response.status_code == 200
    assert response.json() == {"ok": True}

    [payment] = database.list_payments(db)
    assert payment.method == "cashapp"
    assert payment.status == "pending"
    assert payment.user_id == "anon"
    assert payment.amount_cents == 9999
    assert payment.currency == "USD"
    assert payment.reference == "$bort-42"

def test_record_cashapp_requires_reference_and_plan(client):
    """
    Test that Cash App payments need a reference and a known plan.
    """
    client.get("/billing/plans")

    assert client.post("/billing/cashapp", json={"plan_id": "pro", "tx_ref": "ab"}).status_code == 422
    assert client.post("/billing/cashapp", json={"plan_id": "gold", "tx_ref": "abc"}).status_code == 404

def test_list_payments(client):
    """
    Test that recorded payments are listed oldest first and can be filtered by status.
    """
    client.get("/billing/plans")
    client.post("/billing/cashapp", json={"plan_id": "basic", "tx_ref": "$bort-1"})
    client.post("/billing/cashapp", json={"plan_id": "lifetime", "tx_ref": "$bort-2"})

    response = client.get("/billing/payments")
    assert response.status_code == 200
    payments_list = response.json()
    assert [p["reference"] for p in payments_list] == ["$bort-1", "$bort-2"]
    assert [p["amount_cents"] for p in payments_list] == [999, 40099]

    assert len(client.get("/billing/payments", params={"status": "pending"}).json()) == 2
    assert client.get("/billing/payments", params={"status": "paid"}).json() == []

def test_checkout_keeps_serving_while_stripe_responds(app, stripe_session):
    """
    Test that other requests are answered while a Stripe session is being created.
    """
    started = threading.Event()
    release = threading.Event()
    session = stripe_session.return_value

    def slow_create(**kwargs):
        started.set()
        release.wait(5)
        return session

    stripe_session.side_effect = slow_create

    with TestClient(app) as client, ThreadPoolExecutor(max_workers=1) as pool:
        client.get("/billing/plans")
        pending = pool.submit(client.post, "/billing/checkout", json=CHECKOUT)
        assert started.wait(5)

        assert client.get("/billing/plans").status_code == 200
        assert not pending.done()

        release.set()
        assert pending.result(timeout=5).json()["id"] == "cs_test_1"

@pytest.mark.parametrize("interval,mode,recurring", [
    ("basic", "subscription", {"interval": "month"}),
    ("pro", "subscription", {"interval": "month"}),
    ("yearly", "subscription", {"interval": "year"}),
    ("lifetime", "payment", None),
])
def test_checkout_line_item_per_interval(interval, mode, recurring):
    """
    Test the checkout mode and recurrence for each plan interval.
    """
    plan = Plan(id=interval, name=interval.title(), price_cents=100, interval=interval)

    assert payments.checkout_mode(plan) == mode
    assert payments.checkout_line_item(plan)["price_data"].get("recurring") == recurring
