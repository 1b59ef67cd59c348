"""Payout method endpoints for hosts."""

from fastapi import APIRouter, status

from cardnd.api.deps import AdminDep, HostDep, StoreDep
from cardnd.core.exceptions import AuthorizationError
from cardnd.core.security import Actor
from cardnd.models.payment import PayoutMethod
from cardnd.schemas.payout import PayoutMethodCreate, PayoutMethodResponse, PayoutMethodUpdate
from cardnd.services.payout_method_service import payout_method_service

router = APIRouter()


async def _owned(store, method_id: str, actor: Actor) -> PayoutMethod:
    method = await payout_method_service.get_payout_method(store, method_id)
    if method.user_id != actor.id and not actor.is_admin:
        raise AuthorizationError("You don't have permission to manage this payout method")
    return method


def _to_response(method: PayoutMethod) -> PayoutMethodResponse:
    return PayoutMethodResponse(**method.model_dump())


@router.get("/", response_model=list[PayoutMethodResponse])
async def list_payout_methods(actor: HostDep, store: StoreDep) -> list[PayoutMethodResponse]:
    methods = await payout_method_service.list_payout_methods(store, actor.id)
    return [_to_response(m) for m in methods]


@router.post("/", response_model=PayoutMethodResponse, status_code=status.HTTP_201_CREATED)
async def add_payout_method(
    data: PayoutMethodCreate,
    actor: HostDep,
    store: StoreDep,
) -> PayoutMethodResponse:
    method = await payout_method_service.add_payout_method(
        store,
        user_id=actor.id,
        account_name=data.account_name,
        mobile_number=data.mobile_number,
        is_primary=data.is_primary,
    )
    return _to_response(method)


@router.patch("/{method_id}", response_model=PayoutMethodResponse)
async def update_payout_method(
    method_id: str,
    data: PayoutMethodUpdate,
    actor: HostDep,
    store: StoreDep,
) -> PayoutMethodResponse:
    await _owned(store, method_id, actor)
    method = await payout_method_service.update_payout_method(
        store,
        method_id,
        account_name=data.account_name,
        mobile_number=data.mobile_number,
        is_primary=data.is_primary,
    )
    return _to_response(method)


@router.post("/{method_id}/primary", response_model=PayoutMethodResponse)
async def set_primary_payout_method(
    method_id: str,
    actor: HostDep,
    store: StoreDep,
) -> PayoutMethodResponse:
    owned = await _owned(store, method_id, actor)
    method = await payout_method_service.set_primary_payout_method(store, owned.user_id, method_id)
    return _to_response(method)


@router.delete("/{method_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_payout_method(method_id: str, actor: HostDep, store: StoreDep) -> None:
    await _owned(store, method_id, actor)
    await payout_method_service.delete_payout_method(store, method_id)


@router.post("/{method_id}/verify", response_model=PayoutMethodResponse)
async def verify_payout_method(
    method_id: str,
    admin: AdminDep,
    store: StoreDep,
) -> PayoutMethodResponse:
    """Admin marks a GCash account as checked."""
    method = await payout_method_service.verify_payout_method(store, method_id, admin)
    return _to_response(method)
