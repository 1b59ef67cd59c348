"""HTTP surface, exercised through FastAPI's TestClient."""

import asyncio
from datetime import UTC, datetime, timedelta
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from cardnd.api.deps import get_store
from cardnd.config import settings
from cardnd.core.security import create_access_token
from cardnd.main import app
from cardnd.store.memory import InMemoryDocumentStore

from .conftest import seed_user

API = settings.api_prefix


def auth(user_id: str, role: str) -> dict[str, str]:
    token = create_access_token({"sub": user_id, "role": role})
    return {"Authorization": f"Bearer {token}"}


GUEST = auth("guest-1", "guest")
HOST = auth("host-1", "host")
ADMIN = auth("admin-1", "admin")


@pytest.fixture
def client():
    store = InMemoryDocumentStore()

    async def seed():
        await seed_user(store, "guest-1", "guest")
        await seed_user(store, "host-1", "host")
        await seed_user(store, "admin-1", "admin")

    asyncio.run(seed())
    app.dependency_overrides[get_store] = lambda: store
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def book(client, total="5000", starts_in=timedelta(days=3)) -> dict:
    start = datetime.now(UTC) + starts_in
    response = client.post(
        f"{API}/bookings/",
        headers=GUEST,
        json={
            "host_id": "host-1",
            "vehicle_id": f"vehicle-{total}-{starts_in.total_seconds()}",
            "start_date": start.isoformat(),
            "end_date": (start + timedelta(days=2)).isoformat(),
            "total_price": total,
            "vehicle_details": {"title": "Honda City", "type": "car"},
        },
    )
    assert response.status_code == 201, response.text
    return response.json()


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert "X-Request-ID" in response.headers
    assert "Cache-Control" not in response.headers

    fees = client.get(f"{API}/settings/fees", headers=GUEST)
    assert fees.headers["Cache-Control"] == "no-store"
    assert fees.headers["X-Content-Type-Options"] == "nosniff"


def test_requires_bearer_token(client):
    assert client.get(f"{API}/bookings/").status_code in (401, 403)
    response = client.get(f"{API}/bookings/", headers={"Authorization": "Bearer nonsense"})
    assert response.status_code == 401


def test_guest_cannot_use_admin_routes(client):
    assert client.get(f"{API}/refunds/", headers=GUEST).status_code == 403
    assert client.get(f"{API}/payout-methods/", headers=GUEST).status_code == 403


def test_book_quote_cancel_and_settle(client):
    booking = book(client, total="5000")
    assert booking["status"] == "confirmed"
    assert booking["display_status"] == "confirmed"
    assert Decimal(booking["host_earnings"]) == Decimal("4750")

    quote = client.get(f"{API}/bookings/{booking['id']}/refund-quote", headers=GUEST).json()
    assert quote["refund_percentage"] == 100

    response = client.post(
        f"{API}/bookings/{booking['id']}/cancel", headers=GUEST, json={"reason": "Plans changed"}
    )
    assert response.status_code == 200, response.text
    cancellation = response.json()
    assert Decimal(cancellation["refund_amount"]) == Decimal("5000")
    assert cancellation["refund_status"] == "pending"

    again = client.post(f"{API}/bookings/{booking['id']}/cancel", headers=GUEST, json={"reason": "x"})
    assert again.status_code == 409
    assert "already cancelled" in again.json()["detail"]

    pending = client.get(f"{API}/refunds/cancellations?refund_status=pending", headers=ADMIN).json()
    assert pending["total"] == 1
    assert Decimal(pending["total_pending_refunds"]) == Decimal("5000")

    settle_url = f"{API}/refunds/cancellations/{cancellation['id']}/settle"
    settled = client.post(settle_url, headers=ADMIN, json={"reference_number": "GC-1"})
    assert settled.status_code == 201, settled.text
    assert client.post(settle_url, headers=ADMIN, json={"reference_number": "GC-2"}).status_code == 409
    assert client.get(f"{API}/refunds/", headers=ADMIN).json()["total"] == 1


def test_cancel_requires_reason(client):
    booking = book(client)
    response = client.post(f"{API}/bookings/{booking['id']}/cancel", headers=GUEST, json={"reason": ""})
    assert response.status_code == 422


def test_other_users_cannot_see_booking(client):
    booking = book(client)
    stranger = auth("someone", "guest")
    assert client.get(f"{API}/bookings/{booking['id']}", headers=stranger).status_code == 403
    assert client.get(f"{API}/bookings/{booking['id']}", headers=HOST).status_code == 200
    assert client.get(f"{API}/bookings/missing", headers=ADMIN).status_code == 404


def test_payout_flow(client):
    book(client, total="1500")
    book(client, total="2500", starts_in=timedelta(days=10))

    method = client.post(
        f"{API}/payout-methods/",
        headers=HOST,
        json={"account_name": "Host One", "mobile_number": "09171234567", "is_primary": True},
    )
    assert method.status_code == 201, method.text
    method_id = method.json()["id"]

    earnings = client.get(f"{API}/payouts/earnings", headers=HOST).json()
    assert Decimal(earnings["total_earnings"]) == Decimal("3830")
    assert earnings["booking_count"] == 2

    payout = {"method_id": method_id, "amount": "3830", "reference_number": "REF-1"}
    unverified = client.post(f"{API}/payouts/", headers=ADMIN, json=payout)
    assert unverified.status_code == 409
    assert "not yet verified" in unverified.json()["detail"]

    assert client.post(f"{API}/payout-methods/{method_id}/verify", headers=ADMIN).status_code == 200

    requests = client.get(f"{API}/payouts/requests?verified=true", headers=ADMIN).json()
    assert requests[0]["host_name"] == "Host 1"

    response = client.post(f"{API}/payouts/", headers=ADMIN, json=payout)
    assert response.status_code == 201, response.text
    transaction = response.json()
    assert len(transaction["booking_ids"]) == 2
    assert Decimal(transaction["amount_difference"]) == 0

    assert Decimal(client.get(f"{API}/payouts/earnings", headers=HOST).json()["total_earnings"]) == 0
    history = client.get(f"{API}/payouts/", headers=HOST).json()
    assert history["total"] == 1
    assert client.post(f"{API}/payouts/", headers=ADMIN, json=payout).status_code == 409


def test_invalid_gcash_number(client):
    response = client.post(
        f"{API}/payout-methods/",
        headers=HOST,
        json={"account_name": "Host One", "mobile_number": "12345"},
    )
    assert response.status_code == 422


def test_verification_flow(client):
    asyncio.run(seed_user(client.app.dependency_overrides[get_store](), "new-user", status=None))
    user = auth("new-user", "guest")

    status = client.get(f"{API}/verifications/me", headers=user).json()
    assert status["status"] == "not_verified"
    assert status["should_prompt"] is True

    submitted = client.post(
        f"{API}/verifications/",
        headers=user,
        json={"id_type": "passport", "front_image_url": "https://img/f", "back_image_url": "https://img/b"},
    )
    assert submitted.status_code == 201, submitted.text

    queue = client.get(f"{API}/verifications/", headers=ADMIN).json()
    assert [v["user_id"] for v in queue] == ["new-user"]

    rejected = client.post(f"{API}/verifications/new-user/reject", headers=ADMIN, json={"reason": "Blurry"})
    assert rejected.status_code == 200
    status = client.get(f"{API}/verifications/me", headers=user).json()
    assert status["status"] == "rejected"
    assert status["rejection_reason"] == "Blurry"
    assert status["badge"]["text"] == "Rejected"


def test_fee_settings(client):
    fees = client.get(f"{API}/settings/fees", headers=GUEST).json()
    assert Decimal(fees["service_fee_threshold"]) == Decimal("2000")

    update = {
        "service_fee_threshold": "3000",
        "service_fee_above_threshold": "6",
        "service_fee_below_threshold": "4",
    }
    assert client.put(f"{API}/settings/fees", headers=GUEST, json=update).status_code == 403
    assert client.put(f"{API}/settings/fees", headers=ADMIN, json=update).status_code == 200

    booking = book(client, total="2500")
    assert booking["service_fee"]["tier"] == "below"
    assert Decimal(booking["service_fee"]["amount"]) == Decimal("100")

    now = datetime.now(UTC)
    summary = client.get(
        f"{API}/settings/fees/summary?year={now.year}&month={now.month}", headers=ADMIN
    ).json()
    assert summary["count"] == 1


@pytest.mark.parametrize("amount", ["0", "-10", "NaN", "abc"])
def test_payout_amount_is_validated(client, amount):
    response = client.post(
        f"{API}/payouts/",
        headers=ADMIN,
        json={"method_id": "any", "amount": amount, "reference_number": "REF-1"},
    )
    assert response.status_code == 422


def test_admin_can_set_host_primary_method(client):
    first = client.post(
        f"{API}/payout-methods/",
        headers=HOST,
        json={"account_name": "Host One", "mobile_number": "09171234567", "is_primary": True},
    ).json()
    second = client.post(
        f"{API}/payout-methods/",
        headers=HOST,
        json={"account_name": "Host One", "mobile_number": "09181234567"},
    ).json()

    stranger = auth("host-2", "host")
    assert client.post(f"{API}/payout-methods/{second['id']}/primary", headers=stranger).status_code == 403

    response = client.post(f"{API}/payout-methods/{second['id']}/primary", headers=ADMIN)
    assert response.status_code == 200, response.text
    assert response.json()["is_primary"] is True

    methods = {m["id"]: m for m in client.get(f"{API}/payout-methods/", headers=HOST).json()}
    assert methods[first["id"]]["is_primary"] is False
    assert methods[second["id"]]["is_primary"] is True
