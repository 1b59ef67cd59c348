"""ID verification submission and review.

The IdVerification record and the user's mirrored status are always
written in one atomic batch.
"""

import logging
from datetime import UTC, datetime

from cardnd.core.exceptions import NotFoundError, PreconditionError, ValidationError
from cardnd.core.security import Actor
from cardnd.domain.verification_policy import classify, should_prompt_verification
from cardnd.models.base import dump
from cardnd.models.user import ID_TYPES, IdVerification, User
from cardnd.services.documents import load, load_all, load_optional
from cardnd.store.base import BatchSet, BatchUpdate, DocumentStore

logger = logging.getLogger(__name__)


class VerificationService:
    """Service for the ID verification workflow."""

    async def submit_verification(
        self,
        store: DocumentStore,
        user_id: str,
        id_type: str,
        front_image_url: str,
        back_image_url: str,
        now: datetime | None = None,
    ) -> IdVerification:
        """Submit ID images for review. Resubmitting after a rejection
        replaces the previous submission."""
        now = now or datetime.now(UTC)
        if id_type not in ID_TYPES:
            raise ValidationError(f"Unsupported ID type: {id_type}")
        if not (front_image_url or "").strip() or not (back_image_url or "").strip():
            raise ValidationError("Please upload both the front and back of your ID")

        user = await load(store, User, user_id, "User")
        if not should_prompt_verification(user):
            raise PreconditionError(classify(user).message)

        verification = IdVerification(
            id=user_id,
            user_id=user_id,
            id_type=id_type,
            front_image_url=front_image_url.strip(),
            back_image_url=back_image_url.strip(),
            submitted_at=now,
        )
        await store.atomic_batch(
            [
                BatchSet(IdVerification.__collection__, user_id, verification.to_document()),
                BatchUpdate(
                    User.__collection__,
                    user_id,
                    {
                        "id_verification_status": "pending",
                        "id_type": id_type,
                        "id_rejection_reason": None,
                        "id_verification_submitted_at": dump(now),
                        "updated_at": dump(now),
                    },
                ),
            ]
        )
        logger.info(f"ID verification submitted by user {user_id} ({id_type})")
        return verification

    async def get_verification(self, store: DocumentStore, user_id: str) -> IdVerification | None:
        return await load_optional(store, IdVerification, user_id)

    async def list_verifications(
        self,
        store: DocumentStore,
        status: str | None = None,
    ) -> list[IdVerification]:
        """Review queue, oldest submission first."""
        filters = {"status": status} if status else None
        verifications = await load_all(store, IdVerification, filters)
        return sorted(verifications, key=lambda v: v.submitted_at)

    async def _pending(self, store: DocumentStore, verification_id: str) -> IdVerification:
        verification = await load_optional(store, IdVerification, verification_id)
        if verification is None:
            raise NotFoundError("ID verification", verification_id)
        if verification.status != "pending":
            raise PreconditionError(
                f"This verification has already been reviewed (status: {verification.status})"
            )
        return verification

    async def approve(
        self,
        store: DocumentStore,
        verification_id: str,
        actor: Actor,
        now: datetime | None = None,
    ) -> IdVerification:
        """Approve a pending ID and unlock the user's restricted actions."""
        now = now or datetime.now(UTC)
        verification = await self._pending(store, verification_id)

        await store.atomic_batch(
            [
                BatchUpdate(
                    IdVerification.__collection__,
                    verification.id,
                    {
                        "status": "approved",
                        "rejection_reason": None,
                        "reviewed_at": dump(now),
                        "reviewed_by": actor.id,
                    },
                    expect={"status": "pending"},
                ),
                BatchUpdate(
                    User.__collection__,
                    verification.user_id,
                    {
                        "id_verification_status": "approved",
                        "id_rejection_reason": None,
                        "updated_at": dump(now),
                    },
                ),
            ]
        )
        logger.info(f"ID verification {verification.id} approved by {actor.id}")
        return await load(store, IdVerification, verification.id, "ID verification")

    async def reject(
        self,
        store: DocumentStore,
        verification_id: str,
        reason: str,
        actor: Actor,
        now: datetime | None = None,
    ) -> IdVerification:
        """Reject a pending ID with a reason the user will see."""
        now = now or datetime.now(UTC)
        reason = (reason or "").strip()
        if not reason:
            raise ValidationError("Please provide a reason for rejection")
        verification = await self._pending(store, verification_id)

        await store.atomic_batch(
            [
                BatchUpdate(
                    IdVerification.__collection__,
                    verification.id,
                    {
                        "status": "rejected",
                        "rejection_reason": reason,
                        "reviewed_at": dump(now),
                        "reviewed_by": actor.id,
                    },
                    expect={"status": "pending"},
                ),
                BatchUpdate(
                    User.__collection__,
                    verification.user_id,
                    {
                        "id_verification_status": "rejected",
                        "id_rejection_reason": reason,
                        "updated_at": dump(now),
                    },
                ),
            ]
        )
        logger.info(f"ID verification {verification.id} rejected by {actor.id}: {reason}")
        return await load(store, IdVerification, verification.id, "ID verification")


# Singleton instance
verification_service = VerificationService()
