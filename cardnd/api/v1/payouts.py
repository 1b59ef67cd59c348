"""Payout endpoints for hosts and admins."""

from fastapi import APIRouter, Query, status

from cardnd.api.deps import AdminDep, HostDep, StoreDep
from cardnd.models.base import ZERO
from cardnd.models.financial import PayoutTransaction
from cardnd.schemas.payout import (
    PayoutCreate,
    PayoutListResponse,
    PayoutMethodResponse,
    PayoutRequestResponse,
    PayoutResponse,
    UnpaidEarningsResponse,
)
from cardnd.services.earnings_service import UnpaidEarnings, earnings_service
from cardnd.services.payout_service import payout_service

router = APIRouter()


def _earnings_response(earnings: UnpaidEarnings, include_bookings: bool) -> UnpaidEarningsResponse:
    return UnpaidEarningsResponse(
        host_id=earnings.host_id,
        total_earnings=earnings.total_earnings,
        booking_count=earnings.count,
        unpaid_booking_ids=earnings.unpaid_booking_ids,
        service_fee_breakdown=earnings.service_fee_breakdown,
        bookings=earnings.unpaid_bookings if include_bookings else [],
    )


def _list_response(transactions: list[PayoutTransaction]) -> PayoutListResponse:
    return PayoutListResponse(
        payouts=[PayoutResponse(**t.model_dump()) for t in transactions],
        total=len(transactions),
        total_amount=sum((t.amount for t in transactions), ZERO),
    )


@router.get("/earnings", response_model=UnpaidEarningsResponse)
async def get_my_unpaid_earnings(actor: HostDep, store: StoreDep) -> UnpaidEarningsResponse:
    """What the calling host is owed right now."""
    earnings = await earnings_service.aggregate_unpaid_earnings(store, actor.id)
    return _earnings_response(earnings, include_bookings=True)


@router.get("/", response_model=PayoutListResponse)
async def get_my_payouts(
    actor: HostDep,
    store: StoreDep,
    limit: int | None = Query(default=None, ge=1, le=500),
) -> PayoutListResponse:
    """Get host's payout history."""
    transactions = await payout_service.list_payout_history(store, host_id=actor.id, limit=limit)
    return _list_response(transactions)


@router.get("/requests", response_model=list[PayoutRequestResponse])
async def list_payout_requests(
    admin: AdminDep,
    store: StoreDep,
    verified: bool | None = Query(default=None),
) -> list[PayoutRequestResponse]:
    """Every payout account with its host's unpaid earnings."""
    requests = await payout_service.list_payout_requests(store, verified=verified)
    return [
        PayoutRequestResponse(
            method=PayoutMethodResponse(**r.method.model_dump()),
            host_name=r.host.full_name if r.host else None,
            host_email=r.host.email if r.host else None,
            earnings=_earnings_response(r.earnings, include_bookings=False),
        )
        for r in requests
    ]


@router.post("/", response_model=PayoutResponse, status_code=status.HTTP_201_CREATED)
async def process_payout(data: PayoutCreate, admin: AdminDep, store: StoreDep) -> PayoutResponse:
    """Record a payout the admin sent through GCash."""
    transaction = await payout_service.process_payout(
        store,
        method_id=data.method_id,
        amount=data.amount,
        reference_number=data.reference_number,
        actor=admin,
        notes=data.notes,
    )
    return PayoutResponse(**transaction.model_dump())


@router.get("/history", response_model=PayoutListResponse)
async def get_payout_history(
    admin: AdminDep,
    store: StoreDep,
    host_id: str | None = Query(default=None),
    limit: int | None = Query(default=None, ge=1, le=500),
) -> PayoutListResponse:
    transactions = await payout_service.list_payout_history(store, host_id=host_id, limit=limit)
    return _list_response(transactions)


@router.get("/{transaction_id}", response_model=PayoutResponse)
async def get_payout(transaction_id: str, admin: AdminDep, store: StoreDep) -> PayoutResponse:
    transaction = await payout_service.get_payout(store, transaction_id)
    return PayoutResponse(**transaction.model_dump())
