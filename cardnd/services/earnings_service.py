"""Service fee and host earnings service.

CRITICAL BUSINESS LOGIC:
- The platform keeps a tiered service fee out of what the guest paid
- Bookings priced above the threshold pay the "above" percentage; a price
  equal to the threshold is still "below"
- host_earnings = total_price - service fee amount, exactly
- The fee is snapshotted onto the booking at confirmation and never
  recomputed, so later schedule changes do not touch old bookings
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal

from cardnd.models.admin import PlatformSettings
from cardnd.models.base import ZERO
from cardnd.models.booking import Booking, ServiceFee
from cardnd.models.financial import ServiceFeeBreakdown, ServiceFeeRecord
from cardnd.services.documents import load_all
from cardnd.store.base import DocumentStore

CENTAVO = Decimal("0.01")


@dataclass
class UnpaidEarnings:
    """What a host is owed right now."""

    host_id: str
    total_earnings: Decimal = ZERO
    unpaid_bookings: list[Booking] = field(default_factory=list)
    service_fee_breakdown: ServiceFeeBreakdown = field(default_factory=ServiceFeeBreakdown)

    @property
    def unpaid_booking_ids(self) -> list[str]:
        return [b.id for b in self.unpaid_bookings]

    @property
    def count(self) -> int:
        return len(self.unpaid_bookings)


class EarningsService:
    """Service for calculating service fees and host earnings."""

    def compute_service_fee(
        self,
        total_price: Decimal,
        fee_settings: PlatformSettings,
    ) -> ServiceFee:
        """Calculate the tiered service fee for a booking price.

        Args:
            total_price: What the guest pays
            fee_settings: Threshold and per-tier percentages

        Returns:
            ServiceFee: percentage, tier and amount (rounded to centavos)
        """
        total_price = Decimal(str(total_price))
        if total_price > fee_settings.service_fee_threshold:
            tier = "above"
            percentage = fee_settings.service_fee_above_threshold
        else:
            tier = "below"
            percentage = fee_settings.service_fee_below_threshold

        amount = (total_price * percentage / Decimal("100")).quantize(
            CENTAVO, rounding=ROUND_HALF_UP
        )
        return ServiceFee(percentage=percentage, tier=tier, amount=amount)

    def calculate_booking_amounts(
        self,
        total_price: Decimal,
        fee_settings: PlatformSettings,
    ) -> dict:
        """Fee and host share for a booking price.

        Returns:
            dict: total_price, service_fee, host_earnings
        """
        total_price = Decimal(str(total_price))
        service_fee = self.compute_service_fee(total_price, fee_settings)
        return {
            "total_price": total_price,
            "service_fee": service_fee,
            "host_earnings": total_price - service_fee.amount,
        }

    async def aggregate_unpaid_earnings(
        self,
        store: DocumentStore,
        host_id: str,
    ) -> UnpaidEarnings:
        """Sum a host's confirmed bookings that have not been paid out.

        Recomputed from the store on every call.
        """
        bookings = await load_all(store, Booking, {"host_id": host_id, "status": "confirmed"})
        earnings = UnpaidEarnings(host_id=host_id)

        for booking in sorted(bookings, key=lambda b: (b.start_date, b.id)):
            if booking.paid_out_at is not None:
                continue
            earnings.unpaid_bookings.append(booking)
            earnings.total_earnings += booking.host_earnings or ZERO
            if booking.service_fee is not None:
                earnings.service_fee_breakdown.add(
                    booking.service_fee.tier, booking.service_fee.amount
                )

        return earnings

    async def get_total_service_fees(
        self,
        store: DocumentStore,
        start: datetime,
        end: datetime,
    ) -> Decimal:
        """Fees collected between ``start`` and ``end`` inclusive."""
        records = await load_all(store, ServiceFeeRecord, {"status": "collected"})
        return sum(
            (r.amount for r in records if start <= r.collected_at <= end),
            ZERO,
        )

    async def get_monthly_service_fees(
        self,
        store: DocumentStore,
        year: int,
        month: int,
    ) -> list[ServiceFeeRecord]:
        records = await load_all(store, ServiceFeeRecord, {"year": year, "month": month})
        return sorted(records, key=lambda r: r.collected_at)

    async def get_monthly_service_fee_total(
        self,
        store: DocumentStore,
        year: int,
        month: int,
    ) -> Decimal:
        records = await self.get_monthly_service_fees(store, year, month)
        return sum((r.amount for r in records), ZERO)

    async def get_service_fees_by_host(self, store: DocumentStore, host_id: str) -> Decimal:
        """Total fees withheld from one host's bookings."""
        records = await load_all(store, ServiceFeeRecord, {"host_id": host_id})
        return sum((r.amount for r in records), ZERO)


# Singleton instance
earnings_service = EarningsService()
