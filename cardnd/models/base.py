"""Base class for persisted documents."""

from __future__ import annotations

from datetime import UTC, datetime
from decimal import Decimal
from typing import Annotated, Any, ClassVar

from pydantic import AfterValidator, BaseModel, ConfigDict, TypeAdapter


def as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


# Naive timestamps are taken to be UTC
UTCDateTime = Annotated[datetime, AfterValidator(as_utc)]

ZERO = Decimal("0")

_any = TypeAdapter(Any)


def utcnow() -> datetime:
    return datetime.now(UTC)


class DocumentModel(BaseModel):
    """A document in a named collection.

    ``id`` is the store key; it is never written into the document body.
    """

    __collection__: ClassVar[str]

    model_config = ConfigDict(extra="ignore")

    id: str | None = None

    def to_document(self) -> dict[str, Any]:
        """JSON-compatible body for the document store."""
        return self.model_dump(mode="json", exclude={"id"})

    @classmethod
    def from_document(cls, data: dict[str, Any]):
        return cls.model_validate(data)


def dump(value: Any) -> Any:
    """JSON-compatible form of a single field value (for partial updates)."""
    if isinstance(value, datetime):
        value = as_utc(value)
    return _any.dump_python(value, mode="json")
