"""Booking and cancellation Pydantic schemas."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator

from cardnd.models.booking import Booking, PartySnapshot, VehicleSnapshot
from cardnd.models.financial import Cancellation


class BookingCreate(BaseModel):
    """Schema for creating a booking."""

    host_id: str
    vehicle_id: str
    start_date: datetime
    end_date: datetime
    total_price: Decimal = Field(..., gt=0)
    vehicle_details: VehicleSnapshot | None = None
    host_details: PartySnapshot | None = None
    payment_receipt: str | None = None
    auto_confirm: bool = True

    @field_validator("end_date")
    @classmethod
    def validate_end_date(cls, v: datetime, info) -> datetime:
        start_date = info.data.get("start_date")
        if start_date and v <= start_date:
            raise ValueError("end_date must be after start_date")
        return v


class BookingResponse(Booking):
    """Booking with the status users see right now."""

    display_status: str


class BookingListResponse(BaseModel):
    """Schema for a list of bookings."""

    bookings: list[BookingResponse]
    total: int


class RefundQuoteResponse(BaseModel):
    """What cancelling now would refund."""

    booking_id: str
    refund_percentage: int
    refund_amount: Decimal
    policy_label: str
    hours_until_booking: int
    policy: str


class CancelBookingRequest(BaseModel):
    """Schema for cancelling a booking."""

    reason: str = Field(..., max_length=1000)


class CancellationResponse(Cancellation):
    """Schema for a cancellation record."""


class CancellationListResponse(BaseModel):
    cancellations: list[CancellationResponse]
    total: int
    total_pending_refunds: Decimal
