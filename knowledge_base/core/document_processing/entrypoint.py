"""
Document ingestion pipeline orchestrator.

Coordinates validation, hashing, duplicate checks, metadata persistence,
artifact writes, and background chunking.

Ordering within add_document: metadata record is committed before the
artifact is written, and the artifact is written before chunking is
scheduled. Chunking runs in the background and reports only through the
document's processing status.

Dependencies: All task modules, configs, boundary.db, boundary.storage
System role: Pipeline orchestration (coordinates only)
"""

import logging
import time
from pathlib import PurePath
from typing import Any
from uuid import UUID

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker

from knowledge_base.boundary.db.CRUD.document_crud import document_crud
from knowledge_base.boundary.db.models import DocumentModel, DocumentStatus
from knowledge_base.boundary.storage import LocalFileStore
from knowledge_base.configs.ingestion import DocumentPipelineSettings
from knowledge_base.configs.settings import get_settings
from knowledge_base.core.exceptions import (
    DocumentNotFoundError,
    DuplicateContentError,
    DuplicateFilenameError,
    ProcessingFailedError,
)
from knowledge_base.observability import log_exception_with_context, log_with_context

from .background import BackgroundTaskRunner
from .database import DocumentStatusUpdater
from .models import ProcessingResult, UploadMetadata
from .tasks import ChunkingTask, ValidationTask, compute_content_hash, get_content_type

logger = logging.getLogger(__name__)


class DocumentPipeline:
    """Orchestrate document ingestion: validate -> hash -> dedupe -> persist -> write -> chunk."""

    def __init__(
        self,
        session_factory: async_sessionmaker,
        file_store: LocalFileStore | None = None,
        settings: DocumentPipelineSettings | None = None,
        task_runner: BackgroundTaskRunner | None = None,
    ) -> None:
        """
        Initialize pipeline with its collaborators.

        Args:
            session_factory: async_sessionmaker bound to the document store
            file_store: Artifact store (defaults to settings.documents_dir)
            settings: Pipeline settings (uses application settings if None)
            task_runner: Background scheduler for chunking
        """
        self._settings = settings or get_settings().ingestion
        self._session_factory = session_factory
        self._file_store = file_store or LocalFileStore(self._settings.documents_dir)
        self._task_runner = task_runner or BackgroundTaskRunner()

        self._validation_task = ValidationTask(
            allowed_extensions=self._settings.allowed_extensions,
            max_file_size=self._settings.max_file_size,
        )
        self._chunking_task = ChunkingTask(
            chunk_size=self._settings.chunk_size,
            chunk_overlap=self._settings.chunk_overlap,
            boundary_ratio=self._settings.boundary_ratio,
        )
        self._status_updater = DocumentStatusUpdater(session_factory)

    @property
    def task_runner(self) -> BackgroundTaskRunner:
        return self._task_runner

    async def initialize(self) -> None:
        """Create the documents directory if it does not exist."""
        await self._file_store.mkdir()
        logger.info(
            f"{__name__}:initialize - Documents directory ready",
            extra={"documents_dir": str(self._file_store.base_dir)},
        )

    def validate(self, filename: str, content: bytes) -> str:
        """
        Validate an upload without touching the store.

        Returns:
            str: Decoded text content

        Raises:
            UnsupportedFileTypeError, FileTooLargeError, EmptyFileError
        """
        return self._validation_task.validate(filename, content)

    async def add_document(
        self,
        filename: str,
        content: bytes,
        metadata: UploadMetadata | dict[str, Any] | None = None,
    ) -> DocumentModel:
        """
        Ingest a new document.

        Args:
            filename: Uploaded filename (reduced to its base name)
            content: Raw uploaded bytes
            metadata: Title, description, category, tags, and uploader

        Returns:
            DocumentModel: Created document in PENDING status

        Raises:
            UnsupportedFileTypeError: Extension not allowed or binary content
            FileTooLargeError: Content exceeds max_file_size
            EmptyFileError: Content is empty
            DuplicateContentError: A document with identical bytes exists
            DuplicateFilenameError: A document with the same filename exists
        """
        text = self.validate(filename, content)
        filename = self._file_store.path_for(filename).name

        if metadata is None:
            metadata = UploadMetadata()
        elif isinstance(metadata, dict):
            metadata = UploadMetadata.model_validate(metadata)

        file_hash = compute_content_hash(content)

        async with self._session_factory() as db:
            if await document_crud.get_by_hash(db, file_hash) is not None:
                raise DuplicateContentError(file_hash)
            if await document_crud.get_by_filename(db, filename) is not None:
                raise DuplicateFilenameError(filename)

            try:
                document = await document_crud.create(
                    db,
                    title=metadata.title or PurePath(filename).stem,
                    filename=filename,
                    content=text,
                    content_type=get_content_type(filename),
                    description=metadata.description,
                    category=metadata.category,
                    tags=metadata.tags,
                    file_size=len(content),
                    file_hash=file_hash,
                    uploaded_by_id=metadata.uploaded_by_id,
                    uploaded_by_name=metadata.uploaded_by_name,
                    processing_status=DocumentStatus.PENDING,
                )
                await db.commit()
            except IntegrityError as e:
                # Lost a race with a concurrent upload of the same file
                await db.rollback()
                if "file_hash" in str(e.orig):
                    raise DuplicateContentError(file_hash) from e
                raise DuplicateFilenameError(filename) from e

        try:
            await self._file_store.write_file(filename, content)
        except OSError as e:
            log_exception_with_context(
                logger,
                f"{__name__}:add_document - Artifact write failed, removing record",
                e,
                document_id=document.id,
                document_filename=filename,
            )
            async with self._session_factory() as db:
                await document_crud.delete_by_id(db, document.id)
                await db.commit()
            raise

        log_with_context(
            logger,
            logging.INFO,
            f"{__name__}:add_document - Document added",
            document_id=document.id,
            document_filename=filename,
            file_size=len(content),
            category=metadata.category.value,
        )

        self._task_runner.schedule(
            self.process_for_embeddings,
            document.id,
            name=f"process-document-{document.id}",
        )
        return document

    async def remove_document(self, document_id: UUID) -> bool:
        """
        Hard-delete a document and its artifact.

        Artifact deletion is best-effort: a missing or unremovable file is
        logged and the record is deleted anyway.

        Args:
            document_id: Document UUID

        Returns:
            bool: True once the record is gone

        Raises:
            DocumentNotFoundError: No document with this id
        """
        async with self._session_factory() as db:
            document = await document_crud.get_by_id(db, document_id)
            if document is None:
                raise DocumentNotFoundError(str(document_id))
            filename = document.filename

            try:
                await self._file_store.unlink(filename)
            except (OSError, ValueError) as e:
                logger.warning(
                    f"{__name__}:remove_document - Could not delete artifact: {type(e).__name__}: {e}",
                    extra={"document_id": str(document_id), "document_filename": filename},
                )

            await document_crud.delete_by_id(db, document_id)
            await db.commit()

        logger.info(
            f"{__name__}:remove_document - Document removed",
            extra={"document_id": str(document_id), "document_filename": filename},
        )
        return True

    async def process_for_embeddings(self, document_id: UUID) -> ProcessingResult | None:
        """
        Chunk a document and record the outcome on its status.

        A document that is missing, or deleted while being processed, is
        skipped silently.

        Args:
            document_id: Document UUID

        Returns:
            ProcessingResult, or None if the document was skipped

        Raises:
            ProcessingFailedError: Chunking failed (status already set to FAILED)
        """
        start_time = time.perf_counter()

        async with self._session_factory() as db:
            document = await document_crud.get_by_id(db, document_id)
        if document is None:
            logger.info(
                f"{__name__}:process_for_embeddings - Document gone before processing, skipping",
                extra={"document_id": str(document_id)},
            )
            return None

        try:
            if await self._status_updater.mark_processing(document_id) is None:
                return None

            chunks = self._chunking_task.chunk(document.content)

            updated = await self._status_updater.mark_completed(
                document_id,
                [chunk.model_dump() for chunk in chunks],
            )
            if updated is None:
                return None

        except Exception as e:
            error_message = str(e) or type(e).__name__
            log_exception_with_context(
                logger,
                f"{__name__}:process_for_embeddings - Processing failed",
                e,
                document_id=document_id,
            )
            try:
                await self._status_updater.mark_failed(document_id, error_message)
            except SQLAlchemyError as status_error:
                logger.error(
                    f"{__name__}:process_for_embeddings - Could not record failure: {status_error}",
                    extra={"document_id": str(document_id)},
                )
            raise ProcessingFailedError(
                f"Failed to process document: {error_message}",
                document_id=str(document_id),
                cause=e,
            ) from e

        elapsed_ms = (time.perf_counter() - start_time) * 1000
        logger.info(
            f"{__name__}:process_for_embeddings - Document processed",
            extra={"document_id": str(document_id), "chunk_count": len(chunks)},
        )
        return ProcessingResult(
            document_id=str(document_id),
            chunk_count=len(chunks),
            processing_time_ms=elapsed_ms,
        )
