"""GCash payout method registry."""

import pytest

from cardnd.core.exceptions import NotFoundError, PreconditionError, ValidationError
from cardnd.services.payout_method_service import payout_method_service


async def primaries(store, user_id):
    methods = await payout_method_service.list_payout_methods(store, user_id)
    return [m.id for m in methods if m.is_primary]


async def test_adding_two_primaries_keeps_one(store, host, now):
    first = await payout_method_service.add_payout_method(
        store, host.id, "Host One", "09171234567", is_primary=True, now=now
    )
    second = await payout_method_service.add_payout_method(
        store, host.id, "Host One", "09181234567", is_primary=True, now=now
    )

    assert await primaries(store, host.id) == [second.id]
    assert first.id != second.id


async def test_primary_is_per_user(store, host, guest, now):
    await payout_method_service.add_payout_method(store, host.id, "Host", "09171234567", True, now)
    await payout_method_service.add_payout_method(store, guest.id, "Guest", "09181234567", True, now)
    assert len(await primaries(store, host.id)) == 1
    assert len(await primaries(store, guest.id)) == 1


async def test_update_to_primary_demotes_previous(store, host, now):
    first = await payout_method_service.add_payout_method(
        store, host.id, "Host One", "09171234567", is_primary=True, now=now
    )
    second = await payout_method_service.add_payout_method(
        store, host.id, "Host One", "09181234567", now=now
    )

    await payout_method_service.update_payout_method(store, second.id, is_primary=True, now=now)

    assert await primaries(store, host.id) == [second.id]
    assert (await payout_method_service.get_payout_method(store, first.id)).is_primary is False


async def test_set_primary_checks_ownership(store, host, guest, now):
    method = await payout_method_service.add_payout_method(store, host.id, "Host", "09171234567", now=now)
    with pytest.raises(PreconditionError):
        await payout_method_service.set_primary_payout_method(store, guest.id, method.id)

    updated = await payout_method_service.set_primary_payout_method(store, host.id, method.id)
    assert updated.is_primary
    primary = await payout_method_service.get_primary_payout_method(store, host.id)
    assert primary.id == method.id


@pytest.mark.parametrize(
    "number",
    [
        "9171234567",
        "0917123456",
        "08171234567",
        "+639171234567",
        "",
        "09171234567\n",
        "09\u0661\u0662\u0663\u0664\u0665\u0666\u0667\u0668\u0669",
    ],
)
async def test_rejects_invalid_gcash_numbers(store, host, number, now):
    with pytest.raises(ValidationError):
        await payout_method_service.add_payout_method(store, host.id, "Host", number, now=now)


async def test_rejects_blank_account_name(store, host, now):
    with pytest.raises(ValidationError):
        await payout_method_service.add_payout_method(store, host.id, "  ", "09171234567", now=now)


async def test_changing_number_clears_verification(store, host, admin, now):
    method = await payout_method_service.add_payout_method(store, host.id, "Host", "09171234567", now=now)
    verified = await payout_method_service.verify_payout_method(store, method.id, admin, now=now)
    assert verified.verified and verified.verified_at == now

    renamed = await payout_method_service.update_payout_method(store, method.id, account_name="H. One")
    assert renamed.verified

    changed = await payout_method_service.update_payout_method(store, method.id, mobile_number="09998887777")
    assert changed.verified is False
    assert changed.verified_at is None


async def test_delete(store, host, now):
    method = await payout_method_service.add_payout_method(store, host.id, "Host", "09171234567", now=now)
    await payout_method_service.delete_payout_method(store, method.id)
    assert await payout_method_service.list_payout_methods(store, host.id) == []
    with pytest.raises(NotFoundError):
        await payout_method_service.delete_payout_method(store, method.id)
