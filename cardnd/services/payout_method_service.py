"""Host payout methods (GCash accounts).

At most one method per user is primary. Promoting a method demotes every
other method of the same user in the same atomic write.
"""

import logging
from datetime import UTC, datetime

from cardnd.core.exceptions import NotFoundError, PreconditionError, ValidationError
from cardnd.core.security import Actor
from cardnd.models.base import dump
from cardnd.models.payment import PayoutMethod
from cardnd.services.documents import load, load_all
from cardnd.store.base import BatchCreate, BatchUpdate, DocumentStore, new_document_id
from cardnd.utils.validators import is_valid_gcash_number

logger = logging.getLogger(__name__)


def _validate_account(account_name: str | None, mobile_number: str | None) -> None:
    if account_name is not None and not account_name.strip():
        raise ValidationError("Account name is required")
    if mobile_number is not None and not is_valid_gcash_number(mobile_number):
        raise ValidationError("Please enter a valid GCash number (09XXXXXXXXX)")


class PayoutMethodService:
    """Service for managing where hosts get paid."""

    async def _demotions(
        self,
        store: DocumentStore,
        user_id: str,
        keep_id: str,
        now: datetime,
    ) -> list[BatchUpdate]:
        methods = await load_all(store, PayoutMethod, {"user_id": user_id, "is_primary": True})
        return [
            BatchUpdate(
                PayoutMethod.__collection__,
                method.id,
                {"is_primary": False, "updated_at": dump(now)},
            )
            for method in methods
            if method.id != keep_id
        ]

    async def add_payout_method(
        self,
        store: DocumentStore,
        user_id: str,
        account_name: str,
        mobile_number: str,
        is_primary: bool = False,
        now: datetime | None = None,
    ) -> PayoutMethod:
        """Link a GCash account to a host. New accounts start unverified."""
        now = now or datetime.now(UTC)
        _validate_account(account_name, mobile_number)

        method = PayoutMethod(
            id=new_document_id(),
            user_id=user_id,
            account_name=account_name.strip(),
            mobile_number=mobile_number.strip(),
            is_primary=is_primary,
            added_at=now,
            updated_at=now,
        )
        operations = [
            BatchCreate(PayoutMethod.__collection__, method.to_document(), document_id=method.id)
        ]
        if is_primary:
            operations += await self._demotions(store, user_id, method.id, now)

        await store.atomic_batch(operations)
        logger.info(f"Payout method {method.id} added for user {user_id} (primary={is_primary})")
        return method

    async def get_payout_method(self, store: DocumentStore, method_id: str) -> PayoutMethod:
        return await load(store, PayoutMethod, method_id, "Payout method")

    async def list_payout_methods(self, store: DocumentStore, user_id: str) -> list[PayoutMethod]:
        """A user's methods, primary first then newest."""
        methods = await load_all(store, PayoutMethod, {"user_id": user_id})
        methods.sort(key=lambda m: m.added_at, reverse=True)
        methods.sort(key=lambda m: not m.is_primary)
        return methods

    async def get_primary_payout_method(
        self,
        store: DocumentStore,
        user_id: str,
    ) -> PayoutMethod | None:
        methods = await load_all(store, PayoutMethod, {"user_id": user_id, "is_primary": True})
        return methods[0] if methods else None

    async def update_payout_method(
        self,
        store: DocumentStore,
        method_id: str,
        account_name: str | None = None,
        mobile_number: str | None = None,
        is_primary: bool | None = None,
        now: datetime | None = None,
    ) -> PayoutMethod:
        """Edit a payout method.

        Changing the mobile number clears verification, since the new
        account has not been checked.
        """
        now = now or datetime.now(UTC)
        _validate_account(account_name, mobile_number)
        method = await self.get_payout_method(store, method_id)

        changes: dict = {"updated_at": dump(now)}
        if account_name is not None:
            changes["account_name"] = account_name.strip()
        if mobile_number is not None and mobile_number.strip() != method.mobile_number:
            changes["mobile_number"] = mobile_number.strip()
            changes["verified"] = False
            changes["verified_at"] = None
        if is_primary is not None:
            changes["is_primary"] = is_primary

        operations = [BatchUpdate(PayoutMethod.__collection__, method.id, changes)]
        if is_primary:
            operations += await self._demotions(store, method.user_id, method.id, now)
        await store.atomic_batch(operations)

        logger.info(f"Payout method {method.id} updated: {sorted(changes)}")
        return await self.get_payout_method(store, method.id)

    async def set_primary_payout_method(
        self,
        store: DocumentStore,
        user_id: str,
        method_id: str,
        now: datetime | None = None,
    ) -> PayoutMethod:
        method = await self.get_payout_method(store, method_id)
        if method.user_id != user_id:
            raise PreconditionError("This payout method belongs to another user")
        return await self.update_payout_method(store, method_id, is_primary=True, now=now)

    async def delete_payout_method(self, store: DocumentStore, method_id: str) -> None:
        """Remove a payout method. Past payouts keep their own copy of the account."""
        try:
            await store.delete(PayoutMethod.__collection__, method_id)
        except NotFoundError:
            raise NotFoundError("Payout method", method_id) from None
        logger.info(f"Payout method {method_id} deleted")

    async def verify_payout_method(
        self,
        store: DocumentStore,
        method_id: str,
        actor: Actor,
        now: datetime | None = None,
    ) -> PayoutMethod:
        """Mark an account as checked by an admin. Payouts require this."""
        now = now or datetime.now(UTC)
        method = await self.get_payout_method(store, method_id)
        await store.update(
            PayoutMethod.__collection__,
            method.id,
            {"verified": True, "verified_at": dump(now), "updated_at": dump(now)},
        )
        logger.info(f"Payout method {method.id} verified by {actor.id}")
        return await self.get_payout_method(store, method.id)


# Singleton instance
payout_method_service = PayoutMethodService()
