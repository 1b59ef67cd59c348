"""Platform settings Pydantic schemas."""

from decimal import Decimal

from pydantic import BaseModel, Field

from cardnd.models.admin import PlatformSettings


class FeeSettingsUpdate(BaseModel):
    """Schema for replacing the service fee schedule."""

    service_fee_threshold: Decimal
    service_fee_above_threshold: Decimal = Field(..., description="Percent")
    service_fee_below_threshold: Decimal = Field(..., description="Percent")


class FeeSettingsResponse(PlatformSettings):
    """Schema for the current service fee schedule."""


class ServiceFeeSummaryResponse(BaseModel):
    """Service fees collected in a period."""

    year: int
    month: int
    total: Decimal
    count: int
