"""ID verification endpoints."""

from fastapi import APIRouter, Query, status

from cardnd.api.deps import ActorDep, AdminDep, StoreDep
from cardnd.core.exceptions import NotFoundError
from cardnd.domain.verification_policy import classify, should_prompt_verification, status_badge
from cardnd.models.user import User
from cardnd.schemas.verification import (
    VerificationReject,
    VerificationResponse,
    VerificationStatusResponse,
    VerificationSubmit,
)
from cardnd.services.documents import load_optional
from cardnd.services.verification_service import verification_service

router = APIRouter()


@router.post("/", response_model=VerificationResponse, status_code=status.HTTP_201_CREATED)
async def submit_verification(
    data: VerificationSubmit,
    actor: ActorDep,
    store: StoreDep,
) -> VerificationResponse:
    verification = await verification_service.submit_verification(
        store,
        user_id=actor.id,
        id_type=data.id_type,
        front_image_url=data.front_image_url,
        back_image_url=data.back_image_url,
    )
    return VerificationResponse(**verification.model_dump())


@router.get("/me", response_model=VerificationStatusResponse)
async def get_my_verification_status(actor: ActorDep, store: StoreDep) -> VerificationStatusResponse:
    """The caller's verification state and the actions it unlocks."""
    user = await load_optional(store, User, actor.id)
    if user is None:
        raise NotFoundError("User", actor.id)
    state = classify(user)
    verification = await verification_service.get_verification(store, actor.id)
    return VerificationStatusResponse(
        status=state.status,
        can_book=state.can_book,
        can_add_vehicle=state.can_add_vehicle,
        message=state.message,
        requires_action=state.requires_action,
        rejection_reason=state.rejection_reason,
        badge=status_badge(user),
        should_prompt=should_prompt_verification(user),
        verification=VerificationResponse(**verification.model_dump()) if verification else None,
    )


@router.get("/", response_model=list[VerificationResponse])
async def list_verifications(
    admin: AdminDep,
    store: StoreDep,
    status_filter: str | None = Query(
        default="pending", alias="status", pattern="^(pending|approved|rejected)$"
    ),
) -> list[VerificationResponse]:
    """Review queue, oldest first."""
    verifications = await verification_service.list_verifications(store, status_filter)
    return [VerificationResponse(**v.model_dump()) for v in verifications]


@router.post("/{verification_id}/approve", response_model=VerificationResponse)
async def approve_verification(
    verification_id: str,
    admin: AdminDep,
    store: StoreDep,
) -> VerificationResponse:
    verification = await verification_service.approve(store, verification_id, admin)
    return VerificationResponse(**verification.model_dump())


@router.post("/{verification_id}/reject", response_model=VerificationResponse)
async def reject_verification(
    verification_id: str,
    data: VerificationReject,
    admin: AdminDep,
    store: StoreDep,
) -> VerificationResponse:
    verification = await verification_service.reject(store, verification_id, data.reason, admin)
    return VerificationResponse(**verification.model_dump())
