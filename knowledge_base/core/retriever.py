"""
Retrieval engine.

Answers free-text queries against the corpus with the store's full-text
search. find_relevant() is the chat-facing entry point: it never raises,
and when search yields nothing it falls back to the most-recently-used
active documents so the assistant still has grounding material.

Dependencies: sqlalchemy, knowledge_base.boundary.db
System role: Keyword retrieval for context assembly
"""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker

from knowledge_base.boundary.db.CRUD.document_crud import document_crud
from knowledge_base.boundary.db.models import DocumentCategory
from knowledge_base.configs.retrieval import RetrievalSettings
from knowledge_base.configs.settings import get_settings
from knowledge_base.core.exceptions import SearchFailedError
from knowledge_base.models.document import DocumentSummary

logger = logging.getLogger(__name__)


class Retriever:
    """Full-text search with a recency fallback."""

    def __init__(
        self,
        session_factory: async_sessionmaker,
        settings: RetrievalSettings | None = None,
    ) -> None:
        """
        Initialize retriever.

        Args:
            session_factory: async_sessionmaker bound to the document store
            settings: Retrieval settings (uses application settings if None)
        """
        self._session_factory = session_factory
        self._settings = settings or get_settings().retrieval

    async def search(
        self,
        query: str,
        limit: int | None = None,
        category: DocumentCategory | str | None = None,
        tags: list[str] | None = None,
        active_only: bool = True,
    ) -> list[DocumentSummary]:
        """
        Rank documents by relevance to query.

        Args:
            query: Free-text query
            limit: Maximum results (defaults to settings.search_limit)
            category: Optional category filter
            tags: Optional tag filter (matches any)
            active_only: Exclude deactivated documents

        Returns:
            list[DocumentSummary]: Summaries ordered by descending score

        Raises:
            SearchFailedError: Unknown category, or the store could not run the query
        """
        limit = limit or self._settings.search_limit
        if category:
            try:
                category = DocumentCategory(category)
            except ValueError as e:
                raise SearchFailedError(f"Unknown category: {category}", query=query) from e
        try:
            async with self._session_factory() as db:
                hits = await document_crud.search(
                    db,
                    query,
                    limit=limit,
                    category=category,
                    tags=tags,
                    active_only=active_only,
                )
                results = [
                    DocumentSummary.model_validate(hit.document).model_copy(update={"score": hit.score})
                    for hit in hits
                ]
        except SQLAlchemyError as e:
            raise SearchFailedError(f"Search failed: {type(e).__name__}", query=query) from e

        logger.info(
            f"{__name__}:search - Found {len(results)} documents",
            extra={"query_length": len(query), "limit": limit},
        )
        return results

    async def recently_used(self, limit: int | None = None) -> list[DocumentSummary]:
        """Most-recently-used active documents."""
        limit = limit or self._settings.search_limit
        async with self._session_factory() as db:
            documents = await document_crud.get_recently_used(db, limit=limit)
            return [DocumentSummary.model_validate(doc) for doc in documents]

    async def find_relevant(self, query: str, limit: int | None = None) -> list[DocumentSummary]:
        """
        Candidates for context assembly. Never raises.

        Search failures degrade to an empty result. An empty result falls
        back to recently used documents when settings.fallback_to_recent is set.

        Args:
            query: Free-text query
            limit: Maximum candidates

        Returns:
            list[DocumentSummary]: Possibly empty candidate list
        """
        limit = limit or self._settings.search_limit
        try:
            results = await self.search(query, limit=limit)
        except SearchFailedError as e:
            logger.error(f"{__name__}:find_relevant - {e}", exc_info=e.__cause__)
            results = []

        if results or not self._settings.fallback_to_recent:
            return results

        try:
            results = await self.recently_used(limit)
        except SQLAlchemyError as e:
            logger.error(f"{__name__}:find_relevant - Fallback failed: {type(e).__name__}: {e}")
            return []

        logger.info(
            f"{__name__}:find_relevant - No search hits, falling back to {len(results)} recently used documents",
        )
        return results
