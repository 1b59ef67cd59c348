"""Booking creation, confirmation and availability."""

from datetime import timedelta
from decimal import Decimal

import pytest

from cardnd.core.exceptions import NotFoundError, PreconditionError, ValidationError
from cardnd.core.security import Actor
from cardnd.models.financial import ServiceFeeRecord
from cardnd.services.booking_service import booking_service

from .conftest import seed_user


async def test_confirmed_booking_gets_fee_snapshot_and_ledger_entry(store, make_booking, now):
    booking = await make_booking(total_price="2500")

    assert booking.status == "confirmed"
    assert booking.confirmed_at == now
    assert booking.service_fee.tier == "above"
    assert booking.host_earnings == Decimal("2375")
    assert booking.guest_details.name == "Guest 1"

    records = await store.query(ServiceFeeRecord.__collection__)
    assert len(records) == 1
    record = ServiceFeeRecord.from_document(records[0])
    assert record.booking_id == booking.id
    assert record.amount == Decimal("125")
    assert (record.year, record.month) == (now.year, now.month)


async def test_pending_booking_then_confirm(store, make_booking, host, now):
    booking = await make_booking(total_price="1500", auto_confirm=False)
    assert booking.status == "pending"
    assert booking.service_fee is None
    assert await store.query(ServiceFeeRecord.__collection__) == []

    confirmed = await booking_service.confirm_booking(store, booking.id, host, now=now)
    assert confirmed.status == "confirmed"
    assert confirmed.host_earnings == Decimal("1455")
    assert len(await store.query(ServiceFeeRecord.__collection__)) == 1

    with pytest.raises(PreconditionError):
        await booking_service.confirm_booking(store, booking.id, host, now=now)


async def test_unverified_guest_cannot_book(store, host, now):
    await seed_user(store, "pending-guest", status="pending")
    with pytest.raises(PreconditionError, match="pending"):
        await booking_service.create_booking(
            store,
            Actor(id="pending-guest"),
            host.id,
            "vehicle-1",
            now + timedelta(days=1),
            now + timedelta(days=2),
            Decimal("1000"),
            now=now,
        )


async def test_unknown_guest(store, host, now):
    with pytest.raises(NotFoundError):
        await booking_service.create_booking(
            store, Actor(id="ghost"), host.id, "vehicle-1",
            now + timedelta(days=1), now + timedelta(days=2), Decimal("1000"), now=now,
        )


async def test_invalid_booking_input(store, guest, host, now):
    start = now + timedelta(days=1)
    with pytest.raises(ValidationError):
        await booking_service.create_booking(store, guest, host.id, "v", start, start, Decimal("1000"), now=now)
    with pytest.raises(ValidationError):
        await booking_service.create_booking(
            store, guest, host.id, "v", start, start + timedelta(days=1), Decimal("0"), now=now
        )


async def test_overlapping_dates_are_unavailable(store, guest, host, now):
    start = now + timedelta(days=3)
    end = start + timedelta(days=2)
    await booking_service.create_booking(store, guest, host.id, "vehicle-1", start, end, Decimal("3000"), now=now)

    assert not await booking_service.check_availability(store, "vehicle-1", end, end + timedelta(days=1))
    assert await booking_service.check_availability(
        store, "vehicle-1", end + timedelta(minutes=1), end + timedelta(days=1)
    )
    assert await booking_service.check_availability(store, "vehicle-2", start, end)
    with pytest.raises(PreconditionError, match="not available"):
        await booking_service.create_booking(
            store, guest, host.id, "vehicle-1", start + timedelta(hours=1), end, Decimal("3000"), now=now
        )


async def test_list_bookings(store, make_booking, guest, host, now):
    await make_booking()
    await make_booking(starts_in=timedelta(days=10))

    guest_bookings = await booking_service.list_guest_bookings(store, guest.id)
    assert len(guest_bookings) == 2
    assert guest_bookings[0].start_date > guest_bookings[1].start_date
    assert len(await booking_service.list_host_bookings(store, host.id)) == 2
    assert booking_service.derived_status(guest_bookings[0], now) == "confirmed"
