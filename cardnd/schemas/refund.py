"""Refund settlement Pydantic schemas."""

from pydantic import BaseModel, Field

from cardnd.models.financial import RefundTransaction


class RefundSettle(BaseModel):
    """Schema for recording a refund sent to a guest."""

    reference_number: str = Field(..., max_length=100)
    method: str = Field(default="gcash", max_length=50)
    notes: str | None = Field(None, max_length=1000)


class RefundTransactionResponse(RefundTransaction):
    """Schema for a completed refund."""


class RefundListResponse(BaseModel):
    refunds: list[RefundTransactionResponse]
    total: int
