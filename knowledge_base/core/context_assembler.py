"""
Context assembler.

Builds the knowledge-base context block for a generation call: for each
candidate (in ranking order) it fetches the full content, keeps the
paragraphs that mention the query, wraps the excerpt with its source
title, and stops at the first excerpt that would overflow the character
budget.

Every document whose excerpt is appended has its usage recorded, committed
immediately, so the count reflects consultation even if generation later
fails.

Dependencies: sqlalchemy, knowledge_base.boundary.db
System role: Context assembly for retrieval-augmented chat
"""

import logging
import re
from typing import Iterable, Protocol
from uuid import UUID

from sqlalchemy.ext.asyncio import async_sessionmaker

from knowledge_base.boundary.db.CRUD.document_crud import document_crud
from knowledge_base.configs.retrieval import RetrievalSettings
from knowledge_base.configs.settings import get_settings
from knowledge_base.models.chat import AssembledContext

logger = logging.getLogger(__name__)

_PARAGRAPH_BREAK = re.compile(r"\n\s*\n")


class Candidate(Protocol):
    id: UUID


def split_paragraphs(content: str) -> list[str]:
    """Split text on blank lines, dropping empty paragraphs."""
    return [p.strip() for p in _PARAGRAPH_BREAK.split(content) if p.strip()]


def select_paragraphs(
    paragraphs: list[str],
    query: str,
    max_paragraphs: int = 3,
    fallback_paragraphs: int = 2,
) -> list[str]:
    """
    Pick the paragraphs to quote from a document.

    A paragraph is selected when it contains any whitespace-delimited query
    token (case-insensitive substring match). Without any match the
    document's leading paragraphs are used instead.
    """
    tokens = [token for token in query.lower().split() if token]
    matching = [p for p in paragraphs if any(token in p.lower() for token in tokens)]
    selected = matching or paragraphs[:fallback_paragraphs]
    return selected[:max_paragraphs]


def wrap_excerpt(title: str, excerpt: str) -> str:
    return f'\n--- From "{title}" ---\n{excerpt}\n'


class ContextAssembler:
    """Assemble a length-bounded context block from candidate documents."""

    def __init__(
        self,
        session_factory: async_sessionmaker,
        settings: RetrievalSettings | None = None,
    ) -> None:
        """
        Initialize assembler.

        Args:
            session_factory: async_sessionmaker bound to the document store
            settings: Retrieval settings (budget and paragraph limits)
        """
        self._session_factory = session_factory
        settings = settings or get_settings().retrieval
        self.budget = settings.context_budget
        self.max_paragraphs = settings.max_paragraphs
        self.fallback_paragraphs = settings.fallback_paragraphs

    async def build_context(self, candidates: Iterable[Candidate], query: str) -> AssembledContext:
        """
        Build the context block for query.

        Args:
            candidates: Ranked documents (anything with an id)
            query: User query used to select paragraphs

        Returns:
            AssembledContext: Context text (never longer than the budget),
            titles of the quoted documents, and how many were quoted
        """
        parts: list[str] = []
        titles: list[str] = []
        total_length = 0

        async with self._session_factory() as db:
            for candidate in candidates:
                document = await document_crud.get_by_id(db, candidate.id)
                if document is None or not document.content:
                    continue

                paragraphs = split_paragraphs(document.content)
                selected = select_paragraphs(
                    paragraphs,
                    query,
                    max_paragraphs=self.max_paragraphs,
                    fallback_paragraphs=self.fallback_paragraphs,
                )
                if not selected:
                    continue

                wrapped = wrap_excerpt(document.title, "\n\n".join(selected))
                if total_length + len(wrapped) > self.budget:
                    break

                parts.append(wrapped)
                titles.append(document.title)
                total_length += len(wrapped)

                await document_crud.increment_usage(db, document.id)
                await db.commit()

        logger.info(
            f"{__name__}:build_context - Assembled {total_length} chars from {len(titles)} documents",
            extra={"budget": self.budget},
        )
        return AssembledContext(
            context="".join(parts),
            document_titles=titles,
            documents_used=len(titles),
        )
