"""
Document status updater.

Moves a document through PENDING -> PROCESSING -> COMPLETED (or FAILED with
an error message). Each write runs in its own short transaction from the
injected session factory, so it is safe to call from background tasks that
outlive the request that scheduled them.

A write that matches no row (document deleted, or already past the target
state) is a no-op and returns None.

Dependencies: sqlalchemy, knowledge_base.boundary.db
System role: Processing-status persistence for background chunking
"""

import logging
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import async_sessionmaker

from knowledge_base.boundary.db.CRUD.document_crud import document_crud
from knowledge_base.boundary.db.models import DocumentModel, DocumentStatus

logger = logging.getLogger(__name__)


class DocumentStatusUpdater:
    """Update document processing status in the store."""

    def __init__(self, session_factory: async_sessionmaker) -> None:
        """
        Initialize with the store's session factory.

        Args:
            session_factory: async_sessionmaker bound to the document store
        """
        self._session_factory = session_factory

    async def _advance(
        self,
        document_id: UUID,
        status: DocumentStatus,
        **kwargs: Any,
    ) -> DocumentModel | None:
        async with self._session_factory() as db:
            try:
                document = await document_crud.advance_status(db, document_id, status, **kwargs)
                await db.commit()
            except Exception as e:
                logger.error(f"{__name__}:_advance - {type(e).__name__}: {e}")
                await db.rollback()
                raise

        if document is None:
            logger.info(
                f"{__name__}:_advance - Skipped {status.value} write (document gone or status already advanced)",
                extra={"document_id": str(document_id)},
            )
        else:
            logger.info(
                f"{__name__}:_advance - Document marked as {status.value.upper()}",
                extra={"document_id": str(document_id)},
            )
        return document

    async def mark_processing(self, document_id: UUID) -> DocumentModel | None:
        """
        Mark document as PROCESSING (from PENDING only).

        Args:
            document_id: Document UUID

        Returns:
            Updated DocumentModel, or None if the write was skipped
        """
        return await self._advance(document_id, DocumentStatus.PROCESSING)

    async def mark_completed(
        self,
        document_id: UUID,
        chunks: list[dict[str, Any]],
    ) -> DocumentModel | None:
        """
        Attach chunks and mark document as COMPLETED (from PROCESSING only).

        Args:
            document_id: Document UUID
            chunks: Serialized chunk list

        Returns:
            Updated DocumentModel, or None if the write was skipped
        """
        return await self._advance(document_id, DocumentStatus.COMPLETED, chunks=chunks)

    async def mark_failed(self, document_id: UUID, error_message: str) -> DocumentModel | None:
        """
        Mark document as FAILED with error details.

        Args:
            document_id: Document UUID
            error_message: Human-readable error description (truncated to 2000 chars)

        Returns:
            Updated DocumentModel, or None if the write was skipped
        """
        return await self._advance(document_id, DocumentStatus.FAILED, error_message=error_message)
