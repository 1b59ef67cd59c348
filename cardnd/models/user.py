"""User and ID verification documents."""

from __future__ import annotations

from typing import Literal

from pydantic import Field

from cardnd.models.base import DocumentModel, UTCDateTime, utcnow

# "idle" is what older profiles carry before any submission
VerificationStatus = Literal["idle", "pending", "approved", "rejected"]

ID_TYPES = {
    "national_id": "National ID (PhilSys)",
    "drivers_license": "Driver's License",
    "passport": "Passport",
    "umid": "UMID",
    "sss_id": "SSS ID",
    "postal_id": "Postal ID",
    "voters_id": "Voter's ID",
    "prc_id": "PRC ID",
    "philhealth_id": "PhilHealth ID",
}


class User(DocumentModel):
    """User profile. Created at registration by the auth provider."""

    __collection__ = "users"

    email: str | None = None
    full_name: str | None = None
    phone: str | None = None
    role: Literal["guest", "host", "admin"] = "guest"

    id_verification_status: VerificationStatus | None = None
    id_rejection_reason: str | None = None
    id_type: str | None = None
    id_verification_submitted_at: UTCDateTime | None = None
    updated_at: UTCDateTime | None = None


class IdVerification(DocumentModel):
    """ID submission under review. Keyed by the submitting user's id."""

    __collection__ = "id_verifications"

    user_id: str
    id_type: str
    front_image_url: str
    back_image_url: str
    status: Literal["pending", "approved", "rejected"] = "pending"
    submitted_at: UTCDateTime = Field(default_factory=utcnow)
    reviewed_at: UTCDateTime | None = None
    reviewed_by: str | None = None
    rejection_reason: str | None = None
