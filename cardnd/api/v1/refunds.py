"""Refund administration endpoints."""

from fastapi import APIRouter, Query, status

from cardnd.api.deps import AdminDep, StoreDep
from cardnd.models.base import ZERO
from cardnd.schemas.booking import CancellationListResponse, CancellationResponse
from cardnd.schemas.refund import RefundListResponse, RefundSettle, RefundTransactionResponse
from cardnd.services.cancellation_service import cancellation_service

router = APIRouter()


@router.get("/cancellations", response_model=CancellationListResponse)
async def list_cancellations(
    admin: AdminDep,
    store: StoreDep,
    refund_status: str | None = Query(default=None, pattern="^(pending|processed|not_applicable)$"),
) -> CancellationListResponse:
    cancellations = await cancellation_service.list_cancellations(store, refund_status)
    return CancellationListResponse(
        cancellations=[CancellationResponse(**c.model_dump()) for c in cancellations],
        total=len(cancellations),
        total_pending_refunds=sum(
            (c.refund_amount for c in cancellations if c.refund_status == "pending"), ZERO
        ),
    )


@router.post(
    "/cancellations/{cancellation_id}/settle",
    response_model=RefundTransactionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def settle_refund(
    cancellation_id: str,
    data: RefundSettle,
    admin: AdminDep,
    store: StoreDep,
) -> RefundTransactionResponse:
    """Record a refund the admin sent to the guest."""
    transaction = await cancellation_service.settle_refund(
        store,
        cancellation_id,
        reference_number=data.reference_number,
        actor=admin,
        method=data.method,
        notes=data.notes,
    )
    return RefundTransactionResponse(**transaction.model_dump())


@router.get("/", response_model=RefundListResponse)
async def list_refunds(
    admin: AdminDep,
    store: StoreDep,
    limit: int | None = Query(default=None, ge=1, le=500),
) -> RefundListResponse:
    transactions = await cancellation_service.list_refund_transactions(store, limit)
    return RefundListResponse(
        refunds=[RefundTransactionResponse(**t.model_dump()) for t in transactions],
        total=len(transactions),
    )
