"""Process-local document store."""

from __future__ import annotations

import asyncio
import copy
from collections import defaultdict
from collections.abc import Mapping, Sequence
from typing import Any

from cardnd.core.exceptions import NotFoundError, StaleWriteError
from cardnd.store.base import (
    BatchCreate,
    BatchOperation,
    BatchSet,
    BatchUpdate,
    DocumentStore,
    matches,
    new_document_id,
)


class InMemoryDocumentStore(DocumentStore):
    """Dict-backed store. Documents are deep-copied in and out so callers
    never share state with the store."""

    def __init__(self) -> None:
        self._collections: dict[str, dict[str, dict[str, Any]]] = defaultdict(dict)
        self._lock = asyncio.Lock()

    def _export(self, document_id: str, data: dict[str, Any]) -> dict[str, Any]:
        exported = copy.deepcopy(data)
        exported["id"] = document_id
        return exported

    @staticmethod
    def _import(data: Mapping[str, Any]) -> dict[str, Any]:
        stored = copy.deepcopy(dict(data))
        stored.pop("id", None)
        return stored

    async def create(
        self,
        collection: str,
        data: Mapping[str, Any],
        document_id: str | None = None,
    ) -> str:
        document_id = document_id or new_document_id()
        async with self._lock:
            self._collections[collection][document_id] = self._import(data)
        return document_id

    async def set(self, collection: str, document_id: str, data: Mapping[str, Any]) -> None:
        async with self._lock:
            self._collections[collection][document_id] = self._import(data)

    async def get(self, collection: str, document_id: str) -> dict[str, Any] | None:
        data = self._collections[collection].get(document_id)
        if data is None:
            return None
        return self._export(document_id, data)

    async def query(
        self,
        collection: str,
        filters: Mapping[str, Any] | None = None,
    ) -> list[dict[str, Any]]:
        filters = filters or {}
        return [
            self._export(document_id, data)
            for document_id, data in self._collections[collection].items()
            if matches(data, filters)
        ]

    async def update(
        self,
        collection: str,
        document_id: str,
        changes: Mapping[str, Any],
    ) -> None:
        async with self._lock:
            current = self._collections[collection].get(document_id)
            if current is None:
                raise NotFoundError(collection, document_id)
            current.update(self._import(changes))

    async def delete(self, collection: str, document_id: str) -> None:
        async with self._lock:
            if document_id not in self._collections[collection]:
                raise NotFoundError(collection, document_id)
            del self._collections[collection][document_id]

    async def atomic_batch(self, operations: Sequence[BatchOperation]) -> list[str]:
        async with self._lock:
            # Validate everything first so a failure leaves the store untouched
            for op in operations:
                if isinstance(op, BatchUpdate):
                    current = self._collections[op.collection].get(op.document_id)
                    if current is None:
                        raise NotFoundError(op.collection, op.document_id)
                    for key, value in op.expect.items():
                        if current.get(key) != value:
                            raise StaleWriteError(op.collection, op.document_id, key)

            touched = []
            for op in operations:
                if isinstance(op, BatchCreate):
                    self._collections[op.collection][op.document_id] = self._import(op.data)
                elif isinstance(op, BatchSet):
                    self._collections[op.collection][op.document_id] = self._import(op.data)
                else:
                    self._collections[op.collection][op.document_id].update(
                        self._import(op.changes)
                    )
                touched.append(op.document_id)
            return touched
