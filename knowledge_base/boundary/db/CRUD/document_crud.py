"""
Document CRUD operations.

Persistence collaborator for the knowledge base: insert, find by id, hash
or filename, conditional status updates, atomic usage counting, listing,
and full-text search.

Full-text search runs natively on PostgreSQL (tsvector/ts_rank). Other
dialects use an ILIKE prefilter on the query terms, filter tags against the
serialized JSON list, and rank every matching row in process with BM25.

Dependencies: sqlalchemy, rank_bm25, knowledge_base.boundary.db.models
System role: Document persistence operations
"""

import json
import re
from dataclasses import dataclass
from typing import Any, Sequence
from uuid import UUID

from rank_bm25 import BM25Plus
from sqlalchemy import ColumnElement, Select, String, cast, delete, func, or_, select, update
from sqlalchemy.dialects.postgresql import JSONB, array
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import defer

from knowledge_base.boundary.db.base import utcnow
from knowledge_base.boundary.db.models.document_model import (
    DocumentCategory,
    DocumentModel,
    DocumentStatus,
)

SORTABLE_FIELDS = ("created_at", "updated_at", "title", "usage_count", "last_used", "file_size")


def tokenize(text: str) -> list[str]:
    """Lowercase alphanumeric tokenization shared by search and scoring."""
    return re.findall(r"[a-z0-9]+", text.lower())


def extract_terms(query: str, min_len: int = 2, max_terms: int = 12) -> list[str]:
    """
    Extract distinct search terms from a free-text query.

    Args:
        query: Raw query text
        min_len: Minimum token length to keep
        max_terms: Maximum number of terms

    Returns:
        list[str]: Terms in first-seen order
    """
    seen: set[str] = set()
    terms: list[str] = []
    for token in tokenize(query):
        if len(token) < min_len or token in seen:
            continue
        seen.add(token)
        terms.append(token)
        if len(terms) >= max_terms:
            break
    return terms


@dataclass
class SearchHit:
    """A document row paired with its relevance score."""

    document: DocumentModel
    score: float


class DocumentCRUD:
    """
    CRUD operations for DocumentModel.

    Methods flush but never commit; the caller owns the transaction.
    """

    def __init__(self) -> None:
        self.model = DocumentModel

    async def create(self, session: AsyncSession, **kwargs) -> DocumentModel:
        """
        Insert a document row.

        Args:
            session: Async database session
            **kwargs: DocumentModel field values

        Returns:
            DocumentModel: Created row with generated id and timestamps

        Raises:
            IntegrityError: On filename or file_hash unique violation
        """
        document = DocumentModel(**kwargs)
        session.add(document)
        await session.flush()
        await session.refresh(document)
        return document

    async def get_by_id(self, session: AsyncSession, id: UUID) -> DocumentModel | None:
        """Find a document by primary key, or None."""
        result = await session.execute(select(DocumentModel).where(DocumentModel.id == id))
        return result.scalar_one_or_none()

    async def get_by_hash(self, session: AsyncSession, file_hash: str) -> DocumentModel | None:
        """Find the document whose content hashes to file_hash, or None."""
        stmt = select(DocumentModel).where(DocumentModel.file_hash == file_hash)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_filename(self, session: AsyncSession, filename: str) -> DocumentModel | None:
        """Find a document by filename regardless of its active flag, or None."""
        stmt = select(DocumentModel).where(DocumentModel.filename == filename)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def update_by_id(
        self,
        session: AsyncSession,
        id: UUID,
        **kwargs,
    ) -> DocumentModel | None:
        """
        Update a document by primary key.

        Args:
            session: Async database session
            id: Document UUID
            **kwargs: Fields to update

        Returns:
            Updated DocumentModel if found, None otherwise
        """
        stmt = (
            update(DocumentModel)
            .where(DocumentModel.id == id)
            .values(**kwargs)
            .returning(DocumentModel)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def delete_by_id(self, session: AsyncSession, id: UUID) -> bool:
        """Hard-delete a document; True if a row was removed."""
        result = await session.execute(delete(DocumentModel).where(DocumentModel.id == id))
        return result.rowcount > 0

    async def increment_usage(self, session: AsyncSession, id: UUID) -> DocumentModel | None:
        """
        Atomically bump usage_count and refresh last_used.

        Args:
            session: Async database session
            id: Document UUID

        Returns:
            Updated DocumentModel if found, None otherwise
        """
        return await self.update_by_id(
            session,
            id,
            usage_count=DocumentModel.usage_count + 1,
            last_used=utcnow(),
        )

    async def advance_status(
        self,
        session: AsyncSession,
        id: UUID,
        status: DocumentStatus,
        error_message: str | None = None,
        chunks: list[dict[str, Any]] | None = None,
    ) -> DocumentModel | None:
        """
        Move a document's processing status forward.

        The UPDATE only matches rows whose current status is a legal
        predecessor of the target, so a stale or repeated write never
        regresses the lifecycle.

        Args:
            session: Async database session
            id: Document UUID
            status: Target status
            error_message: Failure reason (FAILED only)
            chunks: Chunk payload to attach (COMPLETED only)

        Returns:
            Updated DocumentModel, or None if the document is gone or the
            transition is not allowed from its current status
        """
        values: dict[str, Any] = {"processing_status": status}
        if status == DocumentStatus.COMPLETED:
            values.update(
                is_processed=True,
                processed_at=utcnow(),
                processing_error=None,
                chunks=chunks or [],
            )
        elif status == DocumentStatus.FAILED:
            values["processing_error"] = (error_message or "Unknown error")[:2000]

        stmt = (
            update(DocumentModel)
            .where(
                DocumentModel.id == id,
                DocumentModel.processing_status.in_(status.predecessors()),
            )
            .values(**values)
            .returning(DocumentModel)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    def _filtered(
        self,
        stmt: Select,
        category: DocumentCategory | str | None = None,
        active_only: bool = True,
        processed_only: bool = False,
    ) -> Select:
        if active_only:
            stmt = stmt.where(DocumentModel.is_active.is_(True))
        if processed_only:
            stmt = stmt.where(DocumentModel.is_processed.is_(True))
        if category:
            stmt = stmt.where(DocumentModel.category == DocumentCategory(category))
        return stmt

    async def list_documents(
        self,
        session: AsyncSession,
        limit: int = 50,
        skip: int = 0,
        category: DocumentCategory | str | None = None,
        active_only: bool = True,
        sort_by: str = "created_at",
        descending: bool = True,
    ) -> Sequence[DocumentModel]:
        """
        List documents with filtering, sorting, and pagination.

        Args:
            session: Async database session
            limit: Page size
            skip: Rows to skip
            category: Optional category filter
            active_only: Exclude soft-deleted documents
            sort_by: One of SORTABLE_FIELDS
            descending: Sort direction

        Returns:
            Sequence of DocumentModels (content deferred)

        Raises:
            ValueError: If sort_by is not sortable
        """
        if sort_by not in SORTABLE_FIELDS:
            raise ValueError(f"Cannot sort documents by {sort_by!r}")

        column = getattr(DocumentModel, sort_by)
        order = column.desc().nulls_last() if descending else column.asc().nulls_last()
        stmt = self._filtered(
            select(DocumentModel).options(defer(DocumentModel.content), defer(DocumentModel.chunks)),
            category=category,
            active_only=active_only,
        )
        stmt = stmt.order_by(order, DocumentModel.id).offset(skip).limit(limit)
        result = await session.execute(stmt)
        return result.scalars().all()

    async def count(
        self,
        session: AsyncSession,
        category: DocumentCategory | str | None = None,
        active_only: bool = True,
        processed_only: bool = False,
    ) -> int:
        """Count documents matching the same filters as list_documents."""
        stmt = self._filtered(
            select(func.count()).select_from(DocumentModel),
            category=category,
            active_only=active_only,
            processed_only=processed_only,
        )
        result = await session.execute(stmt)
        return int(result.scalar_one())

    async def get_recently_used(
        self,
        session: AsyncSession,
        limit: int = 5,
        category: DocumentCategory | str | None = None,
    ) -> Sequence[DocumentModel]:
        """
        Most-recently-used active documents, never-used ones last.

        Args:
            session: Async database session
            limit: Maximum number of documents
            category: Optional category filter

        Returns:
            Sequence of DocumentModels (content deferred)
        """
        stmt = self._filtered(
            select(DocumentModel).options(defer(DocumentModel.content), defer(DocumentModel.chunks)),
            category=category,
        )
        stmt = stmt.order_by(
            DocumentModel.last_used.desc().nulls_last(),
            DocumentModel.usage_count.desc(),
            DocumentModel.created_at.desc(),
        ).limit(limit)
        result = await session.execute(stmt)
        return result.scalars().all()

    async def search(
        self,
        session: AsyncSession,
        query: str,
        limit: int = 10,
        category: DocumentCategory | str | None = None,
        tags: list[str] | None = None,
        active_only: bool = True,
    ) -> list[SearchHit]:
        """
        Full-text relevance search over title, description, and content.

        A document matches when it contains any query term.

        Args:
            session: Async database session
            query: Free-text query
            limit: Maximum number of hits
            category: Optional category filter
            tags: Optional tag filter (matches any)
            active_only: Exclude soft-deleted documents

        Returns:
            list[SearchHit]: Hits ordered by descending relevance

        Raises:
            SQLAlchemyError: On store-level failure
        """
        terms = extract_terms(query)
        if not terms:
            return []
        tags = [t.lower() for t in tags] if tags else None

        if session.get_bind().dialect.name == "postgresql":
            return await self._search_postgres(session, terms, limit, category, tags, active_only)
        return await self._search_portable(session, query, terms, limit, category, tags, active_only)

    async def _search_postgres(
        self,
        session: AsyncSession,
        terms: list[str],
        limit: int,
        category: DocumentCategory | str | None,
        tags: list[str] | None,
        active_only: bool,
    ) -> list[SearchHit]:
        document_vector = func.to_tsvector(
            "english",
            func.concat_ws(" ", DocumentModel.title, DocumentModel.description, DocumentModel.content),
        )
        ts_query = func.to_tsquery("english", " | ".join(terms))
        score = func.ts_rank(document_vector, ts_query).label("score")

        stmt = (
            select(DocumentModel, score)
            .options(defer(DocumentModel.content), defer(DocumentModel.chunks))
            .where(document_vector.op("@@")(ts_query))
        )
        stmt = self._filtered(stmt, category=category, active_only=active_only)
        if tags:
            stmt = stmt.where(cast(DocumentModel.tags, JSONB).has_any(array(tags)))
        stmt = stmt.order_by(score.desc()).limit(limit)

        result = await session.execute(stmt)
        return [SearchHit(document=row[0], score=float(row[1])) for row in result.all()]

    async def _search_portable(
        self,
        session: AsyncSession,
        query: str,
        terms: list[str],
        limit: int,
        category: DocumentCategory | str | None,
        tags: list[str] | None,
        active_only: bool,
    ) -> list[SearchHit]:
        conditions: list[ColumnElement[bool]] = []
        for term in terms:
            pattern = f"%{term}%"
            conditions.extend(
                [
                    DocumentModel.title.ilike(pattern),
                    DocumentModel.description.ilike(pattern),
                    DocumentModel.content.ilike(pattern),
                ]
            )
        stmt = self._filtered(select(DocumentModel).where(or_(*conditions)), category=category, active_only=active_only)
        if tags:
            serialized = cast(DocumentModel.tags, String)
            stmt = stmt.where(or_(*[serialized.contains(json.dumps(tag), autoescape=True) for tag in tags]))
        result = await session.execute(stmt)
        pool = list(result.scalars().all())
        if not pool:
            return []

        corpus = [
            tokenize(f"{doc.title} {doc.description} {doc.content}") or [""]
            for doc in pool
        ]
        scores = BM25Plus(corpus).get_scores(tokenize(query))
        hits = [SearchHit(document=doc, score=float(s)) for doc, s in zip(pool, scores)]
        hits.sort(key=lambda hit: hit.score, reverse=True)
        return hits[:limit]


document_crud = DocumentCRUD()
