"""Platform settings and service fee report endpoints."""

from fastapi import APIRouter, Query

from cardnd.api.deps import ActorDep, AdminDep, StoreDep
from cardnd.schemas.settings import FeeSettingsResponse, FeeSettingsUpdate, ServiceFeeSummaryResponse
from cardnd.services.earnings_service import earnings_service
from cardnd.services.platform_settings_service import platform_settings_service

router = APIRouter()


@router.get("/fees", response_model=FeeSettingsResponse)
async def get_fee_settings(actor: ActorDep, store: StoreDep) -> FeeSettingsResponse:
    fee_settings = await platform_settings_service.get_fee_settings(store)
    return FeeSettingsResponse(**fee_settings.model_dump())


@router.put("/fees", response_model=FeeSettingsResponse)
async def update_fee_settings(
    data: FeeSettingsUpdate,
    admin: AdminDep,
    store: StoreDep,
) -> FeeSettingsResponse:
    """Replace the fee schedule. Applies to bookings confirmed from now on."""
    fee_settings = await platform_settings_service.update_fee_settings(
        store,
        admin,
        threshold=data.service_fee_threshold,
        above_threshold_percent=data.service_fee_above_threshold,
        below_threshold_percent=data.service_fee_below_threshold,
    )
    return FeeSettingsResponse(**fee_settings.model_dump())


@router.get("/fees/summary", response_model=ServiceFeeSummaryResponse)
async def get_monthly_service_fees(
    admin: AdminDep,
    store: StoreDep,
    year: int = Query(..., ge=2000, le=2100),
    month: int = Query(..., ge=1, le=12),
) -> ServiceFeeSummaryResponse:
    """Service fees collected in one calendar month."""
    records = await earnings_service.get_monthly_service_fees(store, year, month)
    return ServiceFeeSummaryResponse(
        year=year,
        month=month,
        total=await earnings_service.get_monthly_service_fee_total(store, year, month),
        count=len(records),
    )
