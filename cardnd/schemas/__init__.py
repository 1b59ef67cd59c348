"""Pydantic schemas for API validation."""

from cardnd.schemas.booking import (
    BookingCreate,
    BookingListResponse,
    BookingResponse,
    CancelBookingRequest,
    CancellationListResponse,
    CancellationResponse,
    RefundQuoteResponse,
)
from cardnd.schemas.payout import (
    PayoutCreate,
    PayoutListResponse,
    PayoutMethodCreate,
    PayoutMethodResponse,
    PayoutMethodUpdate,
    PayoutRequestResponse,
    PayoutResponse,
    UnpaidEarningsResponse,
)
from cardnd.schemas.refund import RefundListResponse, RefundSettle, RefundTransactionResponse
from cardnd.schemas.settings import FeeSettingsResponse, FeeSettingsUpdate, ServiceFeeSummaryResponse
from cardnd.schemas.verification import (
    VerificationReject,
    VerificationResponse,
    VerificationStatusResponse,
    VerificationSubmit,
)

__all__ = [
    # Booking
    "BookingCreate",
    "BookingResponse",
    "BookingListResponse",
    "RefundQuoteResponse",
    "CancelBookingRequest",
    "CancellationResponse",
    "CancellationListResponse",
    # Payout
    "PayoutMethodCreate",
    "PayoutMethodUpdate",
    "PayoutMethodResponse",
    "UnpaidEarningsResponse",
    "PayoutRequestResponse",
    "PayoutCreate",
    "PayoutResponse",
    "PayoutListResponse",
    # Refund
    "RefundSettle",
    "RefundTransactionResponse",
    "RefundListResponse",
    # Verification
    "VerificationSubmit",
    "VerificationReject",
    "VerificationResponse",
    "VerificationStatusResponse",
    # Settings
    "FeeSettingsUpdate",
    "FeeSettingsResponse",
    "ServiceFeeSummaryResponse",
]
