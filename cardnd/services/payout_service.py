"""Host payout settlement service.

CRITICAL BUSINESS LOGIC:
- Payouts are sent by an admin outside the platform and recorded here with
  the external reference number
- The set of bookings being paid is re-fetched at call time, never taken
  from the caller
- Every paid booking is stamped with paid_out_at in the same atomic write as
  the PayoutTransaction; the write is conditional on paid_out_at still being
  unset, so two admins cannot pay the same booking twice
- The amount is entered by the admin and recorded as-is; the computed
  earnings are stored next to it so differences stay visible
"""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from decimal import Decimal, InvalidOperation

from cardnd.core.exceptions import PreconditionError, ValidationError
from cardnd.core.security import Actor
from cardnd.domain.payout_state import can_process_payout
from cardnd.models.base import as_utc, dump
from cardnd.models.booking import Booking
from cardnd.models.financial import PayoutTransaction
from cardnd.models.payment import PayoutMethod
from cardnd.models.user import User
from cardnd.services.documents import load, load_all, load_optional
from cardnd.services.earnings_service import UnpaidEarnings, earnings_service
from cardnd.services.payout_method_service import payout_method_service
from cardnd.store.base import BatchCreate, BatchUpdate, DocumentStore, new_document_id
from cardnd.utils.formatters import format_currency
from cardnd.utils.validators import mask_sensitive_data

logger = logging.getLogger(__name__)


@dataclass
class PayoutRequest:
    """A payout method together with what its host is currently owed."""

    method: PayoutMethod
    host: User | None
    earnings: UnpaidEarnings


class PayoutService:
    """Service for settling host earnings."""

    async def process_payout(
        self,
        store: DocumentStore,
        method_id: str,
        amount: Decimal,
        reference_number: str,
        actor: Actor,
        notes: str | None = None,
        now: datetime | None = None,
    ) -> PayoutTransaction:
        """Record a payout sent to a host's verified GCash account.

        Args:
            store: Document store
            method_id: Payout method the money was sent to
            amount: Amount the admin sent
            reference_number: GCash reference number
            actor: Admin recording the payout
            notes: Optional admin notes
            now: Payout timestamp, defaults to the current time

        Returns:
            PayoutTransaction: The recorded transaction

        Raises:
            ValidationError: Non-positive amount or missing reference
            NotFoundError: Unknown payout method
            PreconditionError: Unverified method or nothing to pay
            StaleWriteError: A booking was paid out concurrently
        """
        now = as_utc(now or datetime.now(UTC))
        try:
            amount = Decimal(str(amount))
        except InvalidOperation:
            raise ValidationError("Please enter a valid amount") from None
        if not amount.is_finite() or amount <= 0:
            raise ValidationError("Please enter a valid amount")
        reference_number = (reference_number or "").strip()
        if not reference_number:
            raise ValidationError("Please enter a reference number")

        method = await payout_method_service.get_payout_method(store, method_id)
        earnings = await earnings_service.aggregate_unpaid_earnings(store, method.user_id)

        can_process, error = can_process_payout(method.verified, earnings.count)
        if not can_process:
            raise PreconditionError(error)

        transaction = PayoutTransaction(
            id=new_document_id(),
            host_id=method.user_id,
            method_id=method.id,
            account_name=method.account_name,
            mobile_number=method.mobile_number,
            amount=amount,
            computed_earnings=earnings.total_earnings,
            reference_number=reference_number,
            notes=notes,
            booking_ids=earnings.unpaid_booking_ids,
            booking_count=earnings.count,
            service_fee_breakdown=earnings.service_fee_breakdown,
            created_at=now,
            processed_by=actor.id,
        )

        operations = [
            BatchCreate(
                PayoutTransaction.__collection__,
                transaction.to_document(),
                document_id=transaction.id,
            )
        ]
        for booking_id in transaction.booking_ids:
            operations.append(
                BatchUpdate(
                    Booking.__collection__,
                    booking_id,
                    {"paid_out_at": dump(now), "paid_out_transaction_id": transaction.id},
                    expect={"paid_out_at": None, "status": "confirmed"},
                )
            )
        await store.atomic_batch(operations)

        if transaction.amount_difference != 0:
            logger.warning(
                f"Payout {transaction.id} amount {amount} differs from computed earnings "
                f"{transaction.computed_earnings} by {transaction.amount_difference}"
            )
        logger.info(
            f"Payout {transaction.id} of {format_currency(amount)} to host {method.user_id} "
            f"({mask_sensitive_data(method.mobile_number)}) covering "
            f"{transaction.booking_count} bookings (ref {reference_number}) by {actor.id}"
        )
        return transaction

    async def list_payout_requests(
        self,
        store: DocumentStore,
        verified: bool | None = None,
    ) -> list[PayoutRequest]:
        """Every payout method with its host's unpaid earnings, highest first."""
        filters = {"verified": verified} if verified is not None else None
        methods = await load_all(store, PayoutMethod, filters)

        requests = []
        for method in methods:
            host = await load_optional(store, User, method.user_id)
            earnings = await earnings_service.aggregate_unpaid_earnings(store, method.user_id)
            requests.append(PayoutRequest(method=method, host=host, earnings=earnings))

        requests.sort(key=lambda r: r.earnings.total_earnings, reverse=True)
        return requests

    async def get_payout(self, store: DocumentStore, transaction_id: str) -> PayoutTransaction:
        return await load(store, PayoutTransaction, transaction_id, "Payout transaction")

    async def list_payout_history(
        self,
        store: DocumentStore,
        host_id: str | None = None,
        limit: int | None = None,
    ) -> list[PayoutTransaction]:
        """Completed payouts, most recent first."""
        filters = {"status": "completed"}
        if host_id:
            filters["host_id"] = host_id
        transactions = await load_all(store, PayoutTransaction, filters)
        transactions.sort(key=lambda t: t.created_at, reverse=True)
        return transactions[:limit] if limit else transactions


# Singleton instance
payout_service = PayoutService()
