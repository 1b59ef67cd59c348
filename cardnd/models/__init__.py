"""Persisted document models."""

from cardnd.models.admin import PLATFORM_SETTINGS_ID, PlatformSettings
from cardnd.models.base import DocumentModel
from cardnd.models.booking import Booking, PartySnapshot, ServiceFee, VehicleSnapshot
from cardnd.models.financial import (
    BookingSnapshot,
    Cancellation,
    PayoutTransaction,
    RefundTransaction,
    ServiceFeeBreakdown,
    ServiceFeeRecord,
    TierTotals,
)
from cardnd.models.payment import PayoutMethod
from cardnd.models.user import ID_TYPES, IdVerification, User

__all__ = [
    # Base
    "DocumentModel",
    # User
    "User",
    "IdVerification",
    "ID_TYPES",
    # Booking
    "Booking",
    "ServiceFee",
    "VehicleSnapshot",
    "PartySnapshot",
    # Financial
    "BookingSnapshot",
    "Cancellation",
    "RefundTransaction",
    "PayoutTransaction",
    "ServiceFeeBreakdown",
    "ServiceFeeRecord",
    "TierTotals",
    # Payout methods
    "PayoutMethod",
    # Settings
    "PlatformSettings",
    "PLATFORM_SETTINGS_ID",
]
