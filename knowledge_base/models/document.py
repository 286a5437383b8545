"""
Document domain models and schemas.

Read contracts handed to callers (command handlers, chat service) and the
partial-update schema.

Dependencies: pydantic
System role: Document contracts
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from knowledge_base.boundary.db.models import ContentType, DocumentCategory, DocumentStatus
from knowledge_base.core.document_processing.models import Chunk


class DocumentSummary(BaseModel):
    """Search/list view of a document (no content)."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    title: str
    filename: str
    description: str = ""
    category: DocumentCategory
    tags: list[str] = Field(default_factory=list)
    usage_count: int = 0
    last_used: datetime | None = None
    score: float | None = Field(default=None, description="Relevance score when returned by search")


class DocumentDetail(DocumentSummary):
    """Full document view."""

    content: str
    content_type: ContentType
    file_size: int
    file_hash: str
    uploaded_by_id: str | None = None
    uploaded_by_name: str | None = None
    uploaded_at: datetime
    processing_status: DocumentStatus
    processing_error: str | None = None
    processed_at: datetime | None = None
    is_processed: bool
    chunks: list[Chunk] = Field(default_factory=list)
    is_active: bool
    created_at: datetime
    updated_at: datetime


class DocumentUpdate(BaseModel):
    """Fields a caller may change after upload."""

    model_config = ConfigDict(extra="ignore")

    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    tags: list[str] | None = None
    category: DocumentCategory | None = None

    @field_validator("tags", mode="before")
    @classmethod
    def normalize_tags(cls, value):
        if value is None:
            return None
        if isinstance(value, str):
            value = value.split(",")
        tags: list[str] = []
        for tag in value:
            tag = str(tag).strip().lower()
            if tag and tag not in tags:
                tags.append(tag)
        return tags


class DocumentPage(BaseModel):
    """Paginated document list response."""

    documents: list[DocumentSummary]
    total: int
    page: int
    total_pages: int
