"""
Document service orchestrator.

Caller-facing document operations for command handlers: upload, removal,
lookup, listing, search, and metadata edits. Ingestion is delegated to
DocumentPipeline and search to Retriever.

Dependencies: knowledge_base.core, knowledge_base.boundary.db
System role: Document management orchestration
"""

import logging
import math
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import async_sessionmaker

from knowledge_base.boundary.db.CRUD.document_crud import document_crud
from knowledge_base.boundary.db.models import DocumentCategory
from knowledge_base.core.document_processing import DocumentPipeline, UploadMetadata
from knowledge_base.core.exceptions import DocumentNotFoundError, SearchFailedError
from knowledge_base.core.retriever import Retriever
from knowledge_base.models.document import DocumentDetail, DocumentPage, DocumentSummary, DocumentUpdate

logger = logging.getLogger(__name__)


class DocumentService:
    """
    Document service orchestrator.

    Handles the document lifecycle: upload, read, edit, search, deletion.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker,
        pipeline: DocumentPipeline | None = None,
        retriever: Retriever | None = None,
    ) -> None:
        """
        Initialize document service.

        Args:
            session_factory: async_sessionmaker bound to the document store
            pipeline: Optional DocumentPipeline (created if None)
            retriever: Optional Retriever (created if None)
        """
        self._session_factory = session_factory
        self._pipeline = pipeline
        self._retriever = retriever

    @property
    def pipeline(self) -> DocumentPipeline:
        """Lazy-load pipeline to avoid initialization cost."""
        if self._pipeline is None:
            self._pipeline = DocumentPipeline(self._session_factory)
        return self._pipeline

    @property
    def retriever(self) -> Retriever:
        """Lazy-load retriever."""
        if self._retriever is None:
            self._retriever = Retriever(self._session_factory)
        return self._retriever

    async def add_document(
        self,
        filename: str,
        content: bytes,
        metadata: UploadMetadata | dict[str, Any] | None = None,
    ) -> DocumentDetail:
        """
        Upload a document; chunking continues in the background.

        Returns:
            DocumentDetail: The created document (status pending)

        Raises:
            DocumentValidationError: Type, size, or emptiness check failed
            DuplicateDocumentError: Same content or filename already stored
        """
        document = await self.pipeline.add_document(filename, content, metadata)
        return DocumentDetail.model_validate(document)

    async def remove_document(self, document_id: UUID) -> bool:
        """
        Hard-delete a document and its artifact.

        Raises:
            DocumentNotFoundError: No document with this id
        """
        return await self.pipeline.remove_document(document_id)

    async def get_document(self, document_id: UUID) -> DocumentDetail:
        """
        Fetch a document and record the read.

        Raises:
            DocumentNotFoundError: No document with this id
        """
        async with self._session_factory() as db:
            document = await document_crud.increment_usage(db, document_id)
            if document is None:
                raise DocumentNotFoundError(str(document_id))
            await db.commit()
            return DocumentDetail.model_validate(document)

    async def get_documents(
        self,
        limit: int = 10,
        skip: int = 0,
        category: DocumentCategory | str | None = None,
        active_only: bool = True,
        sort_by: str = "created_at",
        sort_order: str = "desc",
    ) -> DocumentPage:
        """
        List documents page by page.

        Args:
            limit: Page size
            skip: Documents to skip
            category: Optional category filter
            active_only: Exclude deactivated documents
            sort_by: Sort field (see DocumentCRUD.SORTABLE_FIELDS)
            sort_order: "asc" or "desc"

        Returns:
            DocumentPage: Summaries plus total, page, and total_pages

        Raises:
            ValueError: If limit is not positive or sort_by is not sortable
        """
        if limit <= 0:
            raise ValueError("limit must be positive")

        async with self._session_factory() as db:
            documents = await document_crud.list_documents(
                db,
                limit=limit,
                skip=skip,
                category=category,
                active_only=active_only,
                sort_by=sort_by,
                descending=sort_order.lower() != "asc",
            )
            total = await document_crud.count(db, category=category, active_only=active_only)
            summaries = [DocumentSummary.model_validate(doc) for doc in documents]

        return DocumentPage(
            documents=summaries,
            total=total,
            page=skip // limit + 1,
            total_pages=math.ceil(total / limit),
        )

    async def search_documents(
        self,
        query: str,
        limit: int = 10,
        category: DocumentCategory | str | None = None,
        tags: list[str] | None = None,
        active_only: bool = True,
    ) -> list[DocumentSummary]:
        """
        Full-text search. Store failures degrade to an empty list.

        Returns:
            list[DocumentSummary]: Ranked summaries (no content)
        """
        try:
            return await self.retriever.search(
                query,
                limit=limit,
                category=category,
                tags=tags,
                active_only=active_only,
            )
        except SearchFailedError as e:
            logger.error(f"{__name__}:search_documents - {e}", exc_info=e.__cause__)
            return []

    async def update_document(
        self,
        document_id: UUID,
        updates: DocumentUpdate | dict[str, Any],
    ) -> DocumentDetail:
        """
        Edit title, description, tags, or category. Other keys are ignored.

        Raises:
            DocumentNotFoundError: No document with this id
        """
        if isinstance(updates, dict):
            updates = DocumentUpdate.model_validate(updates)
        values = updates.model_dump(exclude_none=True)

        async with self._session_factory() as db:
            if values:
                document = await document_crud.update_by_id(db, document_id, **values)
            else:
                document = await document_crud.get_by_id(db, document_id)
            if document is None:
                raise DocumentNotFoundError(str(document_id))
            await db.commit()

        logger.info(
            f"{__name__}:update_document - Document updated",
            extra={"document_id": str(document_id), "fields": ",".join(values)},
        )
        return DocumentDetail.model_validate(document)

    async def deactivate_document(self, document_id: UUID) -> DocumentDetail:
        """
        Soft-delete: hide the document from search, fallback, and active listings.

        Raises:
            DocumentNotFoundError: No document with this id
        """
        async with self._session_factory() as db:
            document = await document_crud.update_by_id(db, document_id, is_active=False)
            if document is None:
                raise DocumentNotFoundError(str(document_id))
            await db.commit()

        logger.info(
            f"{__name__}:deactivate_document - Document deactivated",
            extra={"document_id": str(document_id)},
        )
        return DocumentDetail.model_validate(document)
