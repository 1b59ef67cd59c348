"""Cancellation and refund settlement service.

A cancellation writes the Cancellation record and flips the Booking in one
atomic batch, so a booking is never left cancelled without its record.
Refunds are sent outside the platform (GCash) and recorded here by an admin
with the external reference number.
"""

import logging
from datetime import UTC, datetime

from cardnd.core.exceptions import PreconditionError, ValidationError
from cardnd.core.security import Actor
from cardnd.domain.booking_state import can_cancel_booking
from cardnd.domain.cancellation_policy import RefundQuote, compute_refund
from cardnd.domain.payout_state import (
    assert_refund_transition,
    can_settle_refund,
    initial_refund_status,
)
from cardnd.models.base import as_utc, dump
from cardnd.models.booking import Booking
from cardnd.models.financial import BookingSnapshot, Cancellation, RefundTransaction
from cardnd.services.documents import load, load_all
from cardnd.store.base import BatchCreate, BatchUpdate, DocumentStore, new_document_id

logger = logging.getLogger(__name__)


class CancellationService:
    """Service for booking cancellations and guest refunds."""

    async def quote_refund(
        self,
        store: DocumentStore,
        booking_id: str,
        now: datetime | None = None,
    ) -> RefundQuote:
        """Refund the guest would get by cancelling at ``now``."""
        booking = await load(store, Booking, booking_id, "Booking")
        return compute_refund(now or datetime.now(UTC), booking.start_date, booking.total_price)

    async def cancel_booking(
        self,
        store: DocumentStore,
        booking_id: str,
        reason: str,
        actor: Actor,
        now: datetime | None = None,
    ) -> Cancellation:
        """Cancel a booking that has not started yet.

        Args:
            store: Document store
            booking_id: Booking to cancel
            reason: Free-text reason, required
            actor: Who is cancelling (guest, host or admin)
            now: Moment of cancellation, defaults to the current time

        Returns:
            Cancellation: The created cancellation record

        Raises:
            ValidationError: Empty reason
            NotFoundError: Unknown booking
            PreconditionError: Booking already cancelled, completed or started
        """
        now = as_utc(now or datetime.now(UTC))
        reason = (reason or "").strip()
        if not reason:
            raise ValidationError("Please provide a reason for cancellation")

        booking = await load(store, Booking, booking_id, "Booking")
        can_cancel, error = can_cancel_booking(
            booking.status, booking.start_date, booking.end_date, now
        )
        if not can_cancel:
            raise PreconditionError(error)

        quote = compute_refund(now, booking.start_date, booking.total_price)
        refund_status = initial_refund_status(quote.refund_amount)

        cancellation = Cancellation(
            id=new_document_id(),
            booking_id=booking.id,
            guest_id=booking.guest_id,
            host_id=booking.host_id,
            vehicle_id=booking.vehicle_id,
            guest_name=booking.guest_details.name,
            guest_email=booking.guest_details.email,
            host_name=booking.host_details.name,
            booking_details=BookingSnapshot(
                vehicle_title=booking.vehicle_details.title,
                start_date=booking.start_date,
                end_date=booking.end_date,
                total_price=booking.total_price,
            ),
            original_amount=booking.total_price,
            refund_amount=quote.refund_amount,
            refund_percentage=quote.refund_percentage,
            hours_before_booking=quote.hours_until_booking,
            policy_label=quote.policy_label,
            reason=reason,
            cancelled_by=actor.id,
            cancelled_by_role=actor.role,
            cancelled_at=now,
            refund_status=refund_status,
        )

        booking_changes = {
            "status": "cancelled",
            "cancellation_id": cancellation.id,
            "cancelled_at": dump(now),
            "cancelled_by": actor.id,
            "cancellation_reason": reason,
            "refund_amount": dump(quote.refund_amount),
            "refund_percentage": quote.refund_percentage,
            "refund_status": refund_status,
        }
        await store.atomic_batch(
            [
                BatchCreate(
                    Cancellation.__collection__,
                    cancellation.to_document(),
                    document_id=cancellation.id,
                ),
                BatchUpdate(
                    Booking.__collection__,
                    booking.id,
                    booking_changes,
                    expect={"status": booking.status},
                ),
            ]
        )
        logger.info(
            f"Booking {booking.id} cancelled by {actor.role} {actor.id}: "
            f"refund {quote.refund_percentage}% ({quote.refund_amount}), status={refund_status}"
        )
        return cancellation

    async def get_cancellation(self, store: DocumentStore, cancellation_id: str) -> Cancellation:
        return await load(store, Cancellation, cancellation_id, "Cancellation")

    async def list_cancellations(
        self,
        store: DocumentStore,
        refund_status: str | None = None,
    ) -> list[Cancellation]:
        """Cancellations, newest first, optionally filtered by refund status."""
        filters = {"refund_status": refund_status} if refund_status else None
        cancellations = await load_all(store, Cancellation, filters)
        return sorted(cancellations, key=lambda c: c.cancelled_at, reverse=True)

    async def settle_refund(
        self,
        store: DocumentStore,
        cancellation_id: str,
        reference_number: str,
        actor: Actor,
        method: str = "gcash",
        notes: str | None = None,
        now: datetime | None = None,
    ) -> RefundTransaction:
        """Record a refund that an admin has sent to the guest.

        Writes the RefundTransaction and marks the Cancellation and its
        Booking as processed in one atomic batch. A second call on the same
        cancellation is refused.
        """
        now = as_utc(now or datetime.now(UTC))
        reference_number = (reference_number or "").strip()
        if not reference_number:
            raise ValidationError("Please enter a reference number")

        cancellation = await self.get_cancellation(store, cancellation_id)
        can_settle, error = can_settle_refund(cancellation.refund_status, cancellation.refund_amount)
        if not can_settle:
            raise PreconditionError(error)
        assert_refund_transition(cancellation.refund_status, "processed")

        transaction = RefundTransaction(
            id=new_document_id(),
            cancellation_id=cancellation.id,
            booking_id=cancellation.booking_id,
            guest_id=cancellation.guest_id,
            guest_name=cancellation.guest_name,
            guest_email=cancellation.guest_email,
            host_id=cancellation.host_id,
            vehicle_title=cancellation.booking_details.vehicle_title,
            original_amount=cancellation.original_amount,
            refund_amount=cancellation.refund_amount,
            refund_percentage=cancellation.refund_percentage,
            reference_number=reference_number,
            refund_method=method,
            notes=notes,
            processed_at=now,
            processed_by=actor.id,
        )

        settled = {
            "refund_status": "processed",
            "refund_reference": reference_number,
            "refund_processed_at": dump(now),
        }
        await store.atomic_batch(
            [
                BatchCreate(
                    RefundTransaction.__collection__,
                    transaction.to_document(),
                    document_id=transaction.id,
                ),
                BatchUpdate(
                    Cancellation.__collection__,
                    cancellation.id,
                    settled,
                    expect={"refund_status": "pending"},
                ),
                BatchUpdate(Booking.__collection__, cancellation.booking_id, settled),
            ]
        )
        logger.info(
            f"Refund {transaction.id} of {transaction.refund_amount} settled for cancellation "
            f"{cancellation.id} (ref {reference_number}) by {actor.id}"
        )
        return transaction

    async def list_refund_transactions(
        self,
        store: DocumentStore,
        limit: int | None = None,
    ) -> list[RefundTransaction]:
        """Refund history, most recent first."""
        transactions = await load_all(store, RefundTransaction)
        transactions.sort(key=lambda t: t.processed_at, reverse=True)
        return transactions[:limit] if limit else transactions


# Singleton instance
cancellation_service = CancellationService()
