"""Shared fixtures: an in-memory store seeded with a verified guest, a host
and an admin, and a fixed clock."""

from datetime import UTC, datetime, timedelta
from decimal import Decimal

import pytest

from cardnd.core.security import Actor
from cardnd.models.booking import PartySnapshot, VehicleSnapshot
from cardnd.models.user import User
from cardnd.services.booking_service import booking_service
from cardnd.store.base import new_document_id
from cardnd.store.memory import InMemoryDocumentStore

NOW = datetime(2026, 6, 1, 8, 0, tzinfo=UTC)


async def seed_user(store, user_id: str, role: str = "guest", status: str | None = "approved") -> User:
    user = User(
        id=user_id,
        email=f"{user_id}@example.com",
        full_name=user_id.replace("-", " ").title(),
        role=role,
        id_verification_status=status,
    )
    await store.set(User.__collection__, user_id, user.to_document())
    return user


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def guest() -> Actor:
    return Actor(id="guest-1", role="guest")


@pytest.fixture
def host() -> Actor:
    return Actor(id="host-1", role="host")


@pytest.fixture
def admin() -> Actor:
    return Actor(id="admin-1", role="admin")


@pytest.fixture
async def store(guest, host, admin):
    store = InMemoryDocumentStore()
    await seed_user(store, guest.id, "guest")
    await seed_user(store, host.id, "host")
    await seed_user(store, admin.id, "admin")
    return store


@pytest.fixture
def make_booking(store, guest, host, now):
    """Create a booking starting ``starts_in`` after the fixed clock."""

    async def _make(
        total_price="5000",
        starts_in=timedelta(hours=48),
        duration=timedelta(days=2),
        host_id=None,
        auto_confirm=True,
    ):
        start = now + starts_in
        return await booking_service.create_booking(
            store,
            guest,
            host_id=host_id or host.id,
            vehicle_id=new_document_id(),
            start_date=start,
            end_date=start + duration,
            total_price=Decimal(total_price),
            vehicle_details=VehicleSnapshot(title="Toyota Vios 2020", type="car"),
            host_details=PartySnapshot(name="Host One", email="host-1@example.com"),
            auto_confirm=auto_confirm,
            now=now,
        )

    return _make
