"""Payout method and payout Pydantic schemas."""

from decimal import Decimal

from pydantic import BaseModel, Field, computed_field

from cardnd.models.booking import Booking
from cardnd.models.financial import PayoutTransaction, ServiceFeeBreakdown
from cardnd.models.payment import PayoutMethod


class PayoutMethodCreate(BaseModel):
    """Schema for linking a GCash account."""

    account_name: str = Field(..., max_length=200)
    mobile_number: str = Field(..., max_length=20)
    is_primary: bool = False


class PayoutMethodUpdate(BaseModel):
    """Schema for editing a GCash account. Omitted fields are unchanged."""

    account_name: str | None = Field(None, max_length=200)
    mobile_number: str | None = Field(None, max_length=20)
    is_primary: bool | None = None


class PayoutMethodResponse(PayoutMethod):
    """Schema for a payout method."""


class UnpaidEarningsResponse(BaseModel):
    """What a host is owed right now."""

    host_id: str
    total_earnings: Decimal
    booking_count: int
    unpaid_booking_ids: list[str]
    service_fee_breakdown: ServiceFeeBreakdown
    bookings: list[Booking] = Field(default_factory=list)


class PayoutRequestResponse(BaseModel):
    """A payout method with its host's unpaid earnings."""

    method: PayoutMethodResponse
    host_name: str | None = None
    host_email: str | None = None
    earnings: UnpaidEarningsResponse


class PayoutCreate(BaseModel):
    """Schema for recording a payout sent to a host."""

    method_id: str
    amount: Decimal = Field(..., gt=0)
    reference_number: str = Field(..., max_length=100)
    notes: str | None = Field(None, max_length=1000)


class PayoutResponse(PayoutTransaction):
    """Schema for a completed payout."""

    @computed_field
    @property
    def amount_difference(self) -> Decimal:
        return self.amount - self.computed_earnings


class PayoutListResponse(BaseModel):
    payouts: list[PayoutResponse]
    total: int
    total_amount: Decimal
