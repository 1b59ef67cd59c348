"""Main API router that includes all endpoint routers."""

from fastapi import APIRouter

from cardnd.api.v1 import bookings, payout_methods, payouts, refunds, settings, verifications

api_router = APIRouter()

# Bookings and cancellations
api_router.include_router(bookings.router, prefix="/bookings", tags=["Bookings"])

# Payout methods
api_router.include_router(payout_methods.router, prefix="/payout-methods", tags=["Payout Methods"])

# Payouts
api_router.include_router(payouts.router, prefix="/payouts", tags=["Payouts"])

# Refunds
api_router.include_router(refunds.router, prefix="/refunds", tags=["Refunds"])

# ID verification
api_router.include_router(verifications.router, prefix="/verifications", tags=["Verifications"])

# Platform settings
api_router.include_router(settings.router, prefix="/settings", tags=["Settings"])
