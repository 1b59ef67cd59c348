"""Document store interface.

The engines never talk to a database directly. They read and write plain
JSON-compatible documents grouped into named collections, and every group of
writes that must land together goes through ``atomic_batch``.
"""

from __future__ import annotations

import uuid
from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Union


def new_document_id() -> str:
    """Generate an opaque document key."""
    return uuid.uuid4().hex


def matches(document: Mapping[str, Any], filters: Mapping[str, Any]) -> bool:
    """Equality match of every filter against a document (missing == None)."""
    return all(document.get(key) == value for key, value in filters.items())


@dataclass
class BatchCreate:
    """Create a new document. The id is assigned up front so other
    operations in the same batch can reference it."""

    collection: str
    data: dict[str, Any]
    document_id: str = field(default_factory=new_document_id)


@dataclass
class BatchSet:
    """Create or overwrite a document under a known key."""

    collection: str
    document_id: str
    data: dict[str, Any]


@dataclass
class BatchUpdate:
    """Merge fields into an existing document.

    ``expect`` lists field values that must still hold when the batch
    commits; otherwise the whole batch is rejected with StaleWriteError.
    """

    collection: str
    document_id: str
    changes: dict[str, Any]
    expect: dict[str, Any] = field(default_factory=dict)


BatchOperation = Union[BatchCreate, BatchSet, BatchUpdate]


class DocumentStore(ABC):
    """Abstract base class for document stores."""

    @abstractmethod
    async def create(
        self,
        collection: str,
        data: Mapping[str, Any],
        document_id: str | None = None,
    ) -> str:
        """Create a document and return its id."""
        pass

    @abstractmethod
    async def set(self, collection: str, document_id: str, data: Mapping[str, Any]) -> None:
        """Create or overwrite a document under a known id."""
        pass

    @abstractmethod
    async def get(self, collection: str, document_id: str) -> dict[str, Any] | None:
        """Fetch a document (with its ``id`` key) or None if absent."""
        pass

    @abstractmethod
    async def query(
        self,
        collection: str,
        filters: Mapping[str, Any] | None = None,
    ) -> list[dict[str, Any]]:
        """Return every document matching all equality filters."""
        pass

    @abstractmethod
    async def update(
        self,
        collection: str,
        document_id: str,
        changes: Mapping[str, Any],
    ) -> None:
        """Merge fields into a document.

        Raises:
            NotFoundError: If the document does not exist
        """
        pass

    @abstractmethod
    async def delete(self, collection: str, document_id: str) -> None:
        """Delete a document.

        Raises:
            NotFoundError: If the document does not exist
        """
        pass

    @abstractmethod
    async def atomic_batch(self, operations: Sequence[BatchOperation]) -> list[str]:
        """Apply all operations or none of them.

        Returns:
            The document id touched by each operation, in order

        Raises:
            NotFoundError: If an update targets a missing document
            StaleWriteError: If an update's expectations no longer hold
        """
        pass

    async def close(self) -> None:
        """Release any resources held by the store."""
        return None
