"""Host payout method document."""

from __future__ import annotations

from typing import Literal

from pydantic import Field

from cardnd.models.base import DocumentModel, UTCDateTime, utcnow


class PayoutMethod(DocumentModel):
    """A host's linked GCash account.

    At most one method per user has ``is_primary`` set.
    """

    __collection__ = "payout_methods"

    user_id: str
    type: Literal["gcash"] = "gcash"
    account_name: str
    mobile_number: str
    is_primary: bool = False
    verified: bool = False
    verified_at: UTCDateTime | None = None
    added_at: UTCDateTime = Field(default_factory=utcnow)
    updated_at: UTCDateTime = Field(default_factory=utcnow)
