"""Booking creation, confirmation and lookup."""

import logging
from datetime import UTC, datetime
from decimal import Decimal

from cardnd.core.exceptions import NotFoundError, PreconditionError, ValidationError
from cardnd.core.security import Actor
from cardnd.domain.booking_state import assert_booking_transition, derive_booking_status
from cardnd.domain.verification_policy import action_error_message, can_perform_action
from cardnd.models.base import as_utc
from cardnd.models.booking import Booking, PartySnapshot, VehicleSnapshot
from cardnd.models.financial import ServiceFeeRecord
from cardnd.models.user import User
from cardnd.services.documents import load, load_all, load_optional
from cardnd.services.earnings_service import earnings_service
from cardnd.services.platform_settings_service import platform_settings_service
from cardnd.store.base import BatchCreate, BatchUpdate, DocumentStore, new_document_id

logger = logging.getLogger(__name__)

# Statuses that hold a vehicle's calendar
BLOCKING_STATUSES = ("pending", "confirmed")


def _fee_record(booking: Booking, now: datetime) -> ServiceFeeRecord:
    return ServiceFeeRecord(
        booking_id=booking.id,
        guest_id=booking.guest_id,
        host_id=booking.host_id,
        vehicle_id=booking.vehicle_id,
        vehicle_title=booking.vehicle_details.title,
        amount=booking.service_fee.amount,
        percentage=booking.service_fee.percentage,
        tier=booking.service_fee.tier,
        base_amount=booking.total_price,
        host_earnings=booking.host_earnings,
        collected_at=now,
        month=now.month,
        year=now.year,
    )


class BookingService:
    """Service for the booking side of the rental flow."""

    async def get_booking(self, store: DocumentStore, booking_id: str) -> Booking:
        return await load(store, Booking, booking_id, "Booking")

    def derived_status(self, booking: Booking, now: datetime | None = None) -> str:
        return derive_booking_status(
            booking.status, booking.start_date, booking.end_date, now or datetime.now(UTC)
        )

    async def list_guest_bookings(self, store: DocumentStore, guest_id: str) -> list[Booking]:
        bookings = await load_all(store, Booking, {"guest_id": guest_id})
        return sorted(bookings, key=lambda b: b.start_date, reverse=True)

    async def list_host_bookings(self, store: DocumentStore, host_id: str) -> list[Booking]:
        bookings = await load_all(store, Booking, {"host_id": host_id})
        return sorted(bookings, key=lambda b: b.start_date, reverse=True)

    async def check_availability(
        self,
        store: DocumentStore,
        vehicle_id: str,
        start_date: datetime,
        end_date: datetime,
    ) -> bool:
        """True if no pending or confirmed booking overlaps the range.

        Ranges touching at an endpoint count as overlapping.
        """
        start_date, end_date = as_utc(start_date), as_utc(end_date)
        for status in BLOCKING_STATUSES:
            for booking in await load_all(
                store, Booking, {"vehicle_id": vehicle_id, "status": status}
            ):
                if start_date <= booking.end_date and end_date >= booking.start_date:
                    return False
        return True

    async def create_booking(
        self,
        store: DocumentStore,
        guest: Actor,
        host_id: str,
        vehicle_id: str,
        start_date: datetime,
        end_date: datetime,
        total_price: Decimal,
        vehicle_details: VehicleSnapshot | None = None,
        guest_details: PartySnapshot | None = None,
        host_details: PartySnapshot | None = None,
        payment_receipt: str | None = None,
        auto_confirm: bool = True,
        now: datetime | None = None,
    ) -> Booking:
        """Create a booking for an ID-verified guest.

        Confirmed bookings get their service fee snapshot and a service fee
        ledger record in the same atomic write.
        """
        now = now or datetime.now(UTC)
        start_date, end_date = as_utc(start_date), as_utc(end_date)
        total_price = Decimal(str(total_price))
        if total_price <= 0:
            raise ValidationError("Total price must be greater than zero")
        if end_date <= start_date:
            raise ValidationError("End date must be after start date")

        user = await load_optional(store, User, guest.id)
        if user is None:
            raise NotFoundError("User", guest.id)
        if not can_perform_action(user, "book"):
            raise PreconditionError(action_error_message(user, "book"))

        if not await self.check_availability(store, vehicle_id, start_date, end_date):
            raise PreconditionError("The selected dates are not available for this vehicle")

        booking = Booking(
            id=new_document_id(),
            guest_id=guest.id,
            host_id=host_id,
            vehicle_id=vehicle_id,
            start_date=start_date,
            end_date=end_date,
            total_price=total_price,
            status="pending",
            created_at=now,
            vehicle_details=vehicle_details or VehicleSnapshot(),
            guest_details=guest_details or PartySnapshot(name=user.full_name, email=user.email),
            host_details=host_details or PartySnapshot(),
            payment_receipt=payment_receipt,
        )

        operations = []
        if auto_confirm:
            fee_settings = await platform_settings_service.get_fee_settings(store)
            amounts = earnings_service.calculate_booking_amounts(total_price, fee_settings)
            booking.status = "confirmed"
            booking.confirmed_at = now
            booking.service_fee = amounts["service_fee"]
            booking.host_earnings = amounts["host_earnings"]
            operations.append(
                BatchCreate(ServiceFeeRecord.__collection__, _fee_record(booking, now).to_document())
            )
        operations.insert(
            0, BatchCreate(Booking.__collection__, booking.to_document(), document_id=booking.id)
        )

        await store.atomic_batch(operations)
        logger.info(
            f"Booking {booking.id} created ({booking.status}) for vehicle {vehicle_id} "
            f"by guest {guest.id}"
        )
        return booking

    async def confirm_booking(
        self,
        store: DocumentStore,
        booking_id: str,
        actor: Actor,
        now: datetime | None = None,
    ) -> Booking:
        """Confirm a pending booking and snapshot its service fee."""
        now = now or datetime.now(UTC)
        booking = await self.get_booking(store, booking_id)
        assert_booking_transition(booking.status, "confirmed")

        fee_settings = await platform_settings_service.get_fee_settings(store)
        amounts = earnings_service.calculate_booking_amounts(booking.total_price, fee_settings)
        booking.status = "confirmed"
        booking.confirmed_at = now
        booking.service_fee = amounts["service_fee"]
        booking.host_earnings = amounts["host_earnings"]

        changes = booking.model_dump(
            mode="json", include={"status", "confirmed_at", "service_fee", "host_earnings"}
        )
        await store.atomic_batch(
            [
                BatchUpdate(
                    Booking.__collection__, booking.id, changes, expect={"status": "pending"}
                ),
                BatchCreate(ServiceFeeRecord.__collection__, _fee_record(booking, now).to_document()),
            ]
        )
        logger.info(f"Booking {booking.id} confirmed by {actor.id}")
        return booking


# Singleton instance
booking_service = BookingService()
