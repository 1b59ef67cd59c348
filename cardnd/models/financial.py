"""Cancellation and settlement records.

Refund and payout transactions are immutable once written. Cancellations
only ever change their refund status, reference and processed timestamp.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, Field

from cardnd.models.base import ZERO, DocumentModel, UTCDateTime, utcnow
from cardnd.models.booking import FeeTier, RefundStatus


class BookingSnapshot(BaseModel):
    """Booking display fields denormalized onto a cancellation."""

    vehicle_title: str | None = None
    start_date: UTCDateTime
    end_date: UTCDateTime
    total_price: Decimal


class Cancellation(DocumentModel):
    """One record per cancelled booking."""

    __collection__ = "cancellations"

    booking_id: str
    guest_id: str
    host_id: str
    vehicle_id: str
    guest_name: str | None = None
    guest_email: str | None = None
    host_name: str | None = None
    booking_details: BookingSnapshot

    original_amount: Decimal
    refund_amount: Decimal
    refund_percentage: int
    hours_before_booking: int
    policy_label: str

    reason: str
    cancelled_by: str
    cancelled_by_role: str
    cancelled_at: UTCDateTime = Field(default_factory=utcnow)

    refund_status: RefundStatus
    refund_reference: str | None = None
    refund_processed_at: UTCDateTime | None = None


class RefundTransaction(DocumentModel):
    """Completed refund to a guest."""

    __collection__ = "refund_transactions"

    cancellation_id: str
    booking_id: str
    guest_id: str
    guest_name: str | None = None
    guest_email: str | None = None
    host_id: str
    vehicle_title: str | None = None

    original_amount: Decimal
    refund_amount: Decimal
    refund_percentage: int
    reference_number: str
    refund_method: str = "gcash"
    notes: str | None = None

    status: Literal["completed"] = "completed"
    processed_at: UTCDateTime = Field(default_factory=utcnow)
    processed_by: str


class TierTotals(BaseModel):
    """Fee total and booking count for one tier."""

    count: int = 0
    amount: Decimal = ZERO


class ServiceFeeBreakdown(BaseModel):
    """Service fees withheld from a set of bookings, split by tier."""

    total: Decimal = ZERO
    below: TierTotals = Field(default_factory=TierTotals)
    above: TierTotals = Field(default_factory=TierTotals)

    def add(self, tier: FeeTier, amount: Decimal) -> None:
        bucket = self.above if tier == "above" else self.below
        bucket.count += 1
        bucket.amount += amount
        self.total += amount


class PayoutTransaction(DocumentModel):
    """Completed payout to a host, covering a set of bookings."""

    __collection__ = "payout_transactions"

    host_id: str
    method_id: str
    account_name: str
    mobile_number: str

    # Operator-entered amount; computed_earnings is what the bookings add up to
    amount: Decimal
    computed_earnings: Decimal
    reference_number: str
    notes: str | None = None

    booking_ids: list[str]
    booking_count: int
    service_fee_breakdown: ServiceFeeBreakdown

    status: Literal["completed"] = "completed"
    created_at: UTCDateTime = Field(default_factory=utcnow)
    processed_by: str

    @property
    def amount_difference(self) -> Decimal:
        return self.amount - self.computed_earnings


class ServiceFeeRecord(DocumentModel):
    """Platform revenue ledger entry written alongside a confirmed booking."""

    __collection__ = "service_fees"

    booking_id: str
    guest_id: str
    host_id: str
    vehicle_id: str
    vehicle_title: str | None = None

    amount: Decimal
    percentage: Decimal
    tier: FeeTier
    base_amount: Decimal
    host_earnings: Decimal

    status: Literal["collected"] = "collected"
    collected_at: UTCDateTime = Field(default_factory=utcnow)
    month: int
    year: int
