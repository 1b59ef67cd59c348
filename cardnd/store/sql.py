"""SQL-backed document store.

All collections share one ``documents`` table keyed by (collection, id) with
the document body in a JSON column. Equality filters are applied after the
collection is loaded, which keeps the table portable between PostgreSQL and
SQLite.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, String, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from cardnd.core.exceptions import CollaboratorError, NotFoundError, StaleWriteError
from cardnd.database import Base
from cardnd.store.base import (
    BatchCreate,
    BatchOperation,
    BatchSet,
    DocumentStore,
    matches,
    new_document_id,
)

logger = logging.getLogger(__name__)


class DocumentRecord(Base):
    """One stored document."""

    __tablename__ = "documents"

    collection: Mapped[str] = mapped_column(String(64), primary_key=True)
    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    data: Mapped[dict] = mapped_column(JSON, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    def export(self) -> dict[str, Any]:
        return {**self.data, "id": self.id}


def _clean(data: Mapping[str, Any]) -> dict[str, Any]:
    cleaned = dict(data)
    cleaned.pop("id", None)
    return cleaned


class SqlDocumentStore(DocumentStore):
    """Document store on an async SQLAlchemy session factory."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def _locked(
        self, session: AsyncSession, collection: str, document_id: str
    ) -> DocumentRecord:
        record = await session.get(
            DocumentRecord, (collection, document_id), with_for_update=True
        )
        if record is None:
            raise NotFoundError(collection, document_id)
        return record

    async def create(
        self,
        collection: str,
        data: Mapping[str, Any],
        document_id: str | None = None,
    ) -> str:
        document_id = document_id or new_document_id()
        try:
            async with self._session_factory() as session, session.begin():
                session.add(
                    DocumentRecord(collection=collection, id=document_id, data=_clean(data))
                )
        except SQLAlchemyError as e:
            raise CollaboratorError("document store", str(e))
        return document_id

    async def set(self, collection: str, document_id: str, data: Mapping[str, Any]) -> None:
        try:
            async with self._session_factory() as session, session.begin():
                await session.merge(
                    DocumentRecord(collection=collection, id=document_id, data=_clean(data))
                )
        except SQLAlchemyError as e:
            raise CollaboratorError("document store", str(e))

    async def get(self, collection: str, document_id: str) -> dict[str, Any] | None:
        try:
            async with self._session_factory() as session:
                record = await session.get(DocumentRecord, (collection, document_id))
                return record.export() if record else None
        except SQLAlchemyError as e:
            raise CollaboratorError("document store", str(e))

    async def query(
        self,
        collection: str,
        filters: Mapping[str, Any] | None = None,
    ) -> list[dict[str, Any]]:
        filters = filters or {}
        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    select(DocumentRecord).where(DocumentRecord.collection == collection)
                )
                records = list(result.scalars().all())
        except SQLAlchemyError as e:
            raise CollaboratorError("document store", str(e))
        return [r.export() for r in records if matches(r.data, filters)]

    async def update(
        self,
        collection: str,
        document_id: str,
        changes: Mapping[str, Any],
    ) -> None:
        try:
            async with self._session_factory() as session, session.begin():
                record = await self._locked(session, collection, document_id)
                # Reassign so the JSON column is flagged dirty
                record.data = {**record.data, **_clean(changes)}
        except SQLAlchemyError as e:
            raise CollaboratorError("document store", str(e))

    async def delete(self, collection: str, document_id: str) -> None:
        try:
            async with self._session_factory() as session, session.begin():
                record = await self._locked(session, collection, document_id)
                await session.delete(record)
        except SQLAlchemyError as e:
            raise CollaboratorError("document store", str(e))

    async def atomic_batch(self, operations: Sequence[BatchOperation]) -> list[str]:
        touched = []
        try:
            async with self._session_factory() as session, session.begin():
                for op in operations:
                    if isinstance(op, BatchCreate):
                        session.add(
                            DocumentRecord(
                                collection=op.collection, id=op.document_id, data=_clean(op.data)
                            )
                        )
                    elif isinstance(op, BatchSet):
                        await session.merge(
                            DocumentRecord(
                                collection=op.collection, id=op.document_id, data=_clean(op.data)
                            )
                        )
                    else:
                        record = await self._locked(session, op.collection, op.document_id)
                        for key, value in op.expect.items():
                            if record.data.get(key) != value:
                                logger.warning(
                                    f"Stale write rejected on {op.collection}/{op.document_id} "
                                    f"field={key}"
                                )
                                raise StaleWriteError(op.collection, op.document_id, key)
                        record.data = {**record.data, **_clean(op.changes)}
                    touched.append(op.document_id)
        except SQLAlchemyError as e:
            raise CollaboratorError("document store", str(e))
        return touched
