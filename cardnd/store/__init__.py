"""Document store collaborator."""

from cardnd.config import settings
from cardnd.store.base import (
    BatchCreate,
    BatchOperation,
    BatchSet,
    BatchUpdate,
    DocumentStore,
    new_document_id,
)
from cardnd.store.memory import InMemoryDocumentStore

_store: DocumentStore | None = None


def get_document_store() -> DocumentStore:
    """Return the process-wide store selected by ``settings.document_store``."""
    global _store
    if _store is None:
        if settings.document_store == "sql":
            from cardnd.database import get_session_factory
            from cardnd.store.sql import SqlDocumentStore

            _store = SqlDocumentStore(get_session_factory())
        else:
            _store = InMemoryDocumentStore()
    return _store


__all__ = [
    "BatchCreate",
    "BatchOperation",
    "BatchSet",
    "BatchUpdate",
    "DocumentStore",
    "InMemoryDocumentStore",
    "get_document_store",
    "new_document_id",
]
