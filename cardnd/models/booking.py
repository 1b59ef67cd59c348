"""Booking document."""

from __future__ import annotations

from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, Field

from cardnd.models.base import DocumentModel, UTCDateTime, utcnow

StoredBookingStatus = Literal["pending", "confirmed", "cancelled"]
RefundStatus = Literal["not_applicable", "pending", "processed"]
FeeTier = Literal["below", "above"]


class ServiceFee(BaseModel):
    """Service fee snapshot taken when the booking is confirmed."""

    percentage: Decimal
    tier: FeeTier
    amount: Decimal


class VehicleSnapshot(BaseModel):
    """Vehicle display fields copied onto the booking at write time."""

    title: str | None = None
    type: str | None = None  # car, motorcycle
    image_url: str | None = None


class PartySnapshot(BaseModel):
    """Guest or host display fields copied at write time."""

    name: str | None = None
    email: str | None = None


class Booking(DocumentModel):
    """A guest's reservation of a host's vehicle."""

    __collection__ = "bookings"

    guest_id: str
    host_id: str
    vehicle_id: str

    start_date: UTCDateTime
    end_date: UTCDateTime

    # What the guest paid
    total_price: Decimal
    service_fee: ServiceFee | None = None
    host_earnings: Decimal | None = None

    status: StoredBookingStatus = "pending"
    created_at: UTCDateTime = Field(default_factory=utcnow)
    confirmed_at: UTCDateTime | None = None

    vehicle_details: VehicleSnapshot = Field(default_factory=VehicleSnapshot)
    guest_details: PartySnapshot = Field(default_factory=PartySnapshot)
    host_details: PartySnapshot = Field(default_factory=PartySnapshot)
    payment_receipt: str | None = None

    # Payout
    paid_out_at: UTCDateTime | None = None
    paid_out_transaction_id: str | None = None

    # Cancellation
    cancellation_id: str | None = None
    cancelled_at: UTCDateTime | None = None
    cancelled_by: str | None = None
    cancellation_reason: str | None = None
    refund_amount: Decimal | None = None
    refund_percentage: int | None = None
    refund_status: RefundStatus | None = None
    refund_reference: str | None = None
    refund_processed_at: UTCDateTime | None = None
