"""
Document ORM model.

Represents a knowledge-base document: raw text, upload metadata, derived
chunks, processing lifecycle, and usage statistics.

Dependencies: sqlalchemy, knowledge_base.boundary.db.base
System role: Document persistence for ingestion and retrieval
"""

import enum
from datetime import datetime

from sqlalchemy import JSON, Boolean, DateTime, Enum, Index, Integer, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from knowledge_base.boundary.db.base import Base, TimestampMixin, UUIDMixin, utcnow


class DocumentStatus(str, enum.Enum):
    """
    Document processing lifecycle states.

    PENDING: Document stored, chunking not started
    PROCESSING: Background task is chunking the content
    COMPLETED: Chunks attached, document fully processed
    FAILED: Chunking error; processing_error holds the reason

    Status only moves forward: PENDING -> PROCESSING -> COMPLETED | FAILED.
    """

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    def predecessors(self) -> tuple["DocumentStatus", ...]:
        """States from which a transition into this state is allowed."""
        return _PREDECESSORS[self]


_PREDECESSORS: dict[DocumentStatus, tuple[DocumentStatus, ...]] = {
    DocumentStatus.PENDING: (),
    DocumentStatus.PROCESSING: (DocumentStatus.PENDING,),
    DocumentStatus.COMPLETED: (DocumentStatus.PROCESSING,),
    DocumentStatus.FAILED: (DocumentStatus.PENDING, DocumentStatus.PROCESSING),
}


class DocumentCategory(str, enum.Enum):
    """Knowledge-base categories offered by the upload command."""

    GENERAL = "general"
    FAQ = "faq"
    GUIDE = "guide"
    RULES = "rules"
    LORE = "lore"
    TECHNICAL = "technical"


class ContentType(str, enum.Enum):
    """Content type derived from the uploaded file extension."""

    TEXT = "text"
    MARKDOWN = "markdown"
    PDF = "pdf"
    DOCX = "docx"


def _enum_column(enum_cls: type[enum.Enum]) -> Enum:
    # Persist enum values ("pending"), not member names ("PENDING")
    return Enum(
        enum_cls,
        native_enum=False,
        length=32,
        values_callable=lambda members: [m.value for m in members],
    )


_JSONList = JSON().with_variant(JSONB(), "postgresql")


class DocumentModel(Base, UUIDMixin, TimestampMixin):
    """
    Document ORM model.

    Lifecycle: created by the ingestion pipeline (PENDING), chunked in the
    background (PROCESSING -> COMPLETED/FAILED), read by the context
    assembler (usage_count/last_used), hard-deleted by explicit removal.

    Attributes:
        id: UUID primary key (auto-generated)
        title: Display title (defaults to the filename stem)
        filename: Unique across active and inactive documents
        content: Raw UTF-8 text of the upload
        content_type: Derived from the file extension
        description: Free-text description from the uploader
        category: One of DocumentCategory
        tags: Lower-cased, de-duplicated tag list
        file_size: Byte length of content
        file_hash: SHA-256 hex digest of content (unique)
        uploaded_by_id / uploaded_by_name / uploaded_at: Uploader identity
        processing_status: DocumentStatus
        processing_error: Failure reason when FAILED
        processed_at: Completion timestamp
        is_processed: True once COMPLETED
        chunks: Ordered chunk list ({chunk_index, content, start_index, embedding})
        usage_count: Times the document was consulted
        last_used: Last time the document was consulted
        is_active: Soft-delete flag

    Constraints:
        filename and file_hash carry unique constraints backing the
        ingestion pipeline's duplicate checks.
    """

    __tablename__ = "documents"

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    filename: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    content_type: Mapped[ContentType] = mapped_column(
        _enum_column(ContentType),
        nullable=False,
        default=ContentType.TEXT,
    )
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    category: Mapped[DocumentCategory] = mapped_column(
        _enum_column(DocumentCategory),
        nullable=False,
        default=DocumentCategory.GENERAL,
    )
    tags: Mapped[list[str]] = mapped_column(_JSONList, nullable=False, default=list)

    file_size: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    file_hash: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)

    uploaded_by_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    uploaded_by_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    uploaded_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    processing_status: Mapped[DocumentStatus] = mapped_column(
        _enum_column(DocumentStatus),
        nullable=False,
        default=DocumentStatus.PENDING,
    )
    processing_error: Mapped[str | None] = mapped_column(String(2048), nullable=True)
    processed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    is_processed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    chunks: Mapped[list[dict]] = mapped_column(_JSONList, nullable=False, default=list)

    usage_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_used: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    __table_args__ = (
        Index("ix_documents_active_processed", "is_active", "is_processed"),
        Index("ix_documents_category", "category"),
        Index("ix_documents_uploaded_by", "uploaded_by_id"),
    )

    def __repr__(self) -> str:
        return f"<DocumentModel {self.filename} ({self.id}) {self.processing_status}>"
