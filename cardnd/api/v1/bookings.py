"""Booking endpoints."""

from datetime import UTC, datetime

from fastapi import APIRouter, Query, status

from cardnd.api.deps import ActorDep, StoreDep
from cardnd.core.exceptions import AuthorizationError
from cardnd.core.security import Actor
from cardnd.domain.cancellation_policy import get_policy_description
from cardnd.models.booking import Booking
from cardnd.schemas.booking import (
    BookingCreate,
    BookingListResponse,
    BookingResponse,
    CancelBookingRequest,
    CancellationResponse,
    RefundQuoteResponse,
)
from cardnd.services.booking_service import booking_service
from cardnd.services.cancellation_service import cancellation_service

router = APIRouter()


def _require_party(booking: Booking, actor: Actor, allow_guest: bool = True) -> None:
    if actor.is_admin or booking.host_id == actor.id:
        return
    if allow_guest and booking.guest_id == actor.id:
        return
    raise AuthorizationError("You don't have permission to access this booking")


def _to_response(booking: Booking, now: datetime) -> BookingResponse:
    return BookingResponse(
        **booking.model_dump(),
        display_status=booking_service.derived_status(booking, now),
    )


@router.post("/", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
async def create_booking(
    data: BookingCreate,
    actor: ActorDep,
    store: StoreDep,
) -> BookingResponse:
    """Book a vehicle. The guest must be ID-verified."""
    booking = await booking_service.create_booking(
        store,
        guest=actor,
        host_id=data.host_id,
        vehicle_id=data.vehicle_id,
        start_date=data.start_date,
        end_date=data.end_date,
        total_price=data.total_price,
        vehicle_details=data.vehicle_details,
        host_details=data.host_details,
        payment_receipt=data.payment_receipt,
        auto_confirm=data.auto_confirm,
    )
    return _to_response(booking, datetime.now(UTC))


@router.get("/", response_model=BookingListResponse)
async def list_my_bookings(
    actor: ActorDep,
    store: StoreDep,
    as_host: bool = Query(default=False),
) -> BookingListResponse:
    """The caller's bookings as guest, or as host with ``as_host=true``."""
    if as_host:
        bookings = await booking_service.list_host_bookings(store, actor.id)
    else:
        bookings = await booking_service.list_guest_bookings(store, actor.id)
    now = datetime.now(UTC)
    return BookingListResponse(
        bookings=[_to_response(b, now) for b in bookings],
        total=len(bookings),
    )


@router.get("/{booking_id}", response_model=BookingResponse)
async def get_booking(booking_id: str, actor: ActorDep, store: StoreDep) -> BookingResponse:
    booking = await booking_service.get_booking(store, booking_id)
    _require_party(booking, actor)
    return _to_response(booking, datetime.now(UTC))


@router.get("/{booking_id}/refund-quote", response_model=RefundQuoteResponse)
async def get_refund_quote(
    booking_id: str,
    actor: ActorDep,
    store: StoreDep,
) -> RefundQuoteResponse:
    """What cancelling this booking right now would refund."""
    booking = await booking_service.get_booking(store, booking_id)
    _require_party(booking, actor)
    quote = await cancellation_service.quote_refund(store, booking_id)
    return RefundQuoteResponse(
        booking_id=booking_id,
        refund_percentage=quote.refund_percentage,
        refund_amount=quote.refund_amount,
        policy_label=quote.policy_label,
        hours_until_booking=quote.hours_until_booking,
        policy=get_policy_description(),
    )


@router.post("/{booking_id}/confirm", response_model=BookingResponse)
async def confirm_booking(booking_id: str, actor: ActorDep, store: StoreDep) -> BookingResponse:
    """Host confirms a pending booking."""
    booking = await booking_service.get_booking(store, booking_id)
    _require_party(booking, actor, allow_guest=False)
    booking = await booking_service.confirm_booking(store, booking_id, actor)
    return _to_response(booking, datetime.now(UTC))


@router.post("/{booking_id}/cancel", response_model=CancellationResponse)
async def cancel_booking(
    booking_id: str,
    data: CancelBookingRequest,
    actor: ActorDep,
    store: StoreDep,
) -> CancellationResponse:
    """Cancel a booking that has not started. The refund follows the policy."""
    booking = await booking_service.get_booking(store, booking_id)
    _require_party(booking, actor)
    cancellation = await cancellation_service.cancel_booking(store, booking_id, data.reason, actor)
    return CancellationResponse(**cancellation.model_dump())
