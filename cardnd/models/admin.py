"""Platform-wide settings document."""

from __future__ import annotations

from decimal import Decimal

from cardnd.config import settings
from cardnd.models.base import DocumentModel, UTCDateTime

PLATFORM_SETTINGS_ID = "platform_settings"


class PlatformSettings(DocumentModel):
    """Service fee schedule. Stored as a singleton under PLATFORM_SETTINGS_ID."""

    __collection__ = "settings"

    service_fee_threshold: Decimal
    service_fee_above_threshold: Decimal  # percent
    service_fee_below_threshold: Decimal  # percent
    updated_at: UTCDateTime | None = None
    updated_by: str | None = None

    @classmethod
    def defaults(cls) -> "PlatformSettings":
        """Fallback schedule used when no settings document exists."""
        return cls(
            service_fee_threshold=settings.default_service_fee_threshold,
            service_fee_above_threshold=settings.default_service_fee_above_threshold,
            service_fee_below_threshold=settings.default_service_fee_below_threshold,
        )
