"""Typed loading helpers shared by the services."""

from collections.abc import Mapping
from typing import Any, TypeVar

from cardnd.core.exceptions import NotFoundError
from cardnd.models.base import DocumentModel
from cardnd.store.base import DocumentStore

M = TypeVar("M", bound=DocumentModel)


async def load(store: DocumentStore, model: type[M], document_id: str, resource: str) -> M:
    """Fetch one document as ``model`` or raise NotFoundError."""
    data = await store.get(model.__collection__, document_id)
    if data is None:
        raise NotFoundError(resource, document_id)
    return model.from_document(data)


async def load_optional(store: DocumentStore, model: type[M], document_id: str) -> M | None:
    data = await store.get(model.__collection__, document_id)
    return model.from_document(data) if data is not None else None


async def load_all(
    store: DocumentStore,
    model: type[M],
    filters: Mapping[str, Any] | None = None,
) -> list[M]:
    """Fetch every document of ``model`` matching the equality filters."""
    documents = await store.query(model.__collection__, filters)
    return [model.from_document(d) for d in documents]
