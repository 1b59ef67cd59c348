"""ID verification Pydantic schemas."""

from pydantic import BaseModel, Field

from cardnd.models.user import IdVerification


class VerificationSubmit(BaseModel):
    """Schema for submitting ID images."""

    id_type: str
    front_image_url: str = Field(..., max_length=2000)
    back_image_url: str = Field(..., max_length=2000)


class VerificationReject(BaseModel):
    reason: str = Field(..., max_length=1000)


class VerificationResponse(IdVerification):
    """Schema for an ID verification record."""


class VerificationStatusResponse(BaseModel):
    """The caller's verification state and what it allows."""

    status: str
    can_book: bool
    can_add_vehicle: bool
    message: str
    requires_action: bool
    rejection_reason: str | None = None
    badge: dict[str, str]
    should_prompt: bool
    verification: VerificationResponse | None = None
