"""Document store behaviour, run against both implementations."""

import pytest
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from cardnd.core.exceptions import NotFoundError, StaleWriteError
from cardnd.database import init_db
from cardnd.store.base import BatchCreate, BatchSet, BatchUpdate
from cardnd.store.memory import InMemoryDocumentStore
from cardnd.store.sql import SqlDocumentStore


@pytest.fixture(params=["memory", "sql"])
async def doc_store(request):
    if request.param == "memory":
        yield InMemoryDocumentStore()
        return

    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await init_db(engine)
    store = SqlDocumentStore(async_sessionmaker(engine, expire_on_commit=False))
    yield store
    await store.close()
    await engine.dispose()


async def test_create_get_query(doc_store):
    first = await doc_store.create("bookings", {"host_id": "h1", "status": "confirmed"})
    await doc_store.create("bookings", {"host_id": "h1", "status": "pending"})
    await doc_store.create("bookings", {"host_id": "h2", "status": "confirmed"})

    assert await doc_store.get("bookings", first) == {"id": first, "host_id": "h1", "status": "confirmed"}
    assert await doc_store.get("bookings", "missing") is None
    assert len(await doc_store.query("bookings", {"host_id": "h1"})) == 2
    assert len(await doc_store.query("bookings", {"host_id": "h1", "status": "confirmed"})) == 1
    assert len(await doc_store.query("bookings")) == 3
    assert await doc_store.query("cancellations") == []


async def test_missing_field_matches_none(doc_store):
    await doc_store.create("bookings", {"status": "confirmed"})
    assert len(await doc_store.query("bookings", {"paid_out_at": None})) == 1


async def test_update_set_delete(doc_store):
    document_id = await doc_store.create("payout_methods", {"is_primary": False, "verified": False})
    await doc_store.update("payout_methods", document_id, {"verified": True})
    assert (await doc_store.get("payout_methods", document_id))["verified"] is True

    await doc_store.set("payout_methods", document_id, {"is_primary": True})
    assert await doc_store.get("payout_methods", document_id) == {"id": document_id, "is_primary": True}

    await doc_store.delete("payout_methods", document_id)
    assert await doc_store.get("payout_methods", document_id) is None
    with pytest.raises(NotFoundError):
        await doc_store.delete("payout_methods", document_id)
    with pytest.raises(NotFoundError):
        await doc_store.update("payout_methods", document_id, {"verified": False})


async def test_batch_applies_everything(doc_store):
    booking_id = await doc_store.create("bookings", {"status": "confirmed", "paid_out_at": None})
    create = BatchCreate("payout_transactions", {"booking_ids": [booking_id]})

    touched = await doc_store.atomic_batch(
        [
            create,
            BatchUpdate(
                "bookings",
                booking_id,
                {"paid_out_at": "2026-06-01T08:00:00Z", "paid_out_transaction_id": create.document_id},
                expect={"paid_out_at": None},
            ),
            BatchSet("settings", "platform_settings", {"service_fee_threshold": "2000"}),
        ]
    )

    assert touched == [create.document_id, booking_id, "platform_settings"]
    booking = await doc_store.get("bookings", booking_id)
    assert booking["paid_out_transaction_id"] == create.document_id
    assert (await doc_store.get("payout_transactions", create.document_id))["booking_ids"] == [booking_id]


async def test_stale_expectation_rejects_whole_batch(doc_store):
    booking_id = await doc_store.create("bookings", {"status": "cancelled"})

    with pytest.raises(StaleWriteError) as exc_info:
        await doc_store.atomic_batch(
            [
                BatchCreate("cancellations", {"booking_id": booking_id}),
                BatchUpdate("bookings", booking_id, {"status": "cancelled"}, expect={"status": "confirmed"}),
            ]
        )

    assert exc_info.value.field == "status"
    assert await doc_store.query("cancellations") == []


async def test_missing_update_target_rejects_whole_batch(doc_store):
    with pytest.raises(NotFoundError):
        await doc_store.atomic_batch(
            [
                BatchCreate("refund_transactions", {"amount": "100"}),
                BatchUpdate("cancellations", "missing", {"refund_status": "processed"}),
            ]
        )
    assert await doc_store.query("refund_transactions") == []


async def test_documents_are_copies(doc_store):
    document_id = await doc_store.create("bookings", {"tags": ["a"]})
    fetched = await doc_store.get("bookings", document_id)
    fetched["tags"].append("b")
    assert (await doc_store.get("bookings", document_id))["tags"] == ["a"]
