"""Platform settings service."""

import logging
from datetime import UTC, datetime
from decimal import Decimal

from cardnd.core.exceptions import ValidationError
from cardnd.core.security import Actor
from cardnd.models.admin import PLATFORM_SETTINGS_ID, PlatformSettings
from cardnd.store.base import DocumentStore

logger = logging.getLogger(__name__)


class PlatformSettingsService:
    """Read and update the service fee schedule."""

    async def get_fee_settings(self, store: DocumentStore) -> PlatformSettings:
        """Current fee schedule, read fresh on every call.

        Fields missing from the stored document fall back to the defaults.
        """
        data = await store.get(PlatformSettings.__collection__, PLATFORM_SETTINGS_ID)
        defaults = PlatformSettings.defaults()
        if data is None:
            return defaults
        merged = {**defaults.to_document(), **{k: v for k, v in data.items() if v is not None}}
        return PlatformSettings.from_document(merged)

    async def update_fee_settings(
        self,
        store: DocumentStore,
        actor: Actor,
        threshold: Decimal,
        above_threshold_percent: Decimal,
        below_threshold_percent: Decimal,
    ) -> PlatformSettings:
        """Replace the fee schedule. Existing bookings keep their snapshot."""
        if threshold <= 0:
            raise ValidationError("Service fee threshold must be greater than zero")
        for label, pct in (
            ("Above-threshold", above_threshold_percent),
            ("Below-threshold", below_threshold_percent),
        ):
            if not Decimal("0") <= pct <= Decimal("100"):
                raise ValidationError(f"{label} service fee must be between 0 and 100 percent")

        updated = PlatformSettings(
            id=PLATFORM_SETTINGS_ID,
            service_fee_threshold=threshold,
            service_fee_above_threshold=above_threshold_percent,
            service_fee_below_threshold=below_threshold_percent,
            updated_at=datetime.now(UTC),
            updated_by=actor.id,
        )
        await store.set(PlatformSettings.__collection__, PLATFORM_SETTINGS_ID, updated.to_document())
        logger.info(
            f"Service fee schedule updated by {actor.id}: threshold={threshold} "
            f"above={above_threshold_percent}% below={below_threshold_percent}%"
        )
        return updated


# Singleton instance
platform_settings_service = PlatformSettingsService()
