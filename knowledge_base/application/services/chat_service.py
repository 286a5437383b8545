"""
Chat service for knowledge-base Q&A.

Orchestrates the chat flow: query validation, retrieval (with recency
fallback), context assembly under the character budget, and generation.
Also renders the knowledge-base topic summary and processing statistics.

Dependencies: knowledge_base.core, knowledge_base.boundary.db
System role: Chat service orchestration layer
"""

import logging

from sqlalchemy.ext.asyncio import async_sessionmaker

from knowledge_base.boundary.db.CRUD.document_crud import document_crud
from knowledge_base.configs.retrieval import RetrievalSettings
from knowledge_base.configs.settings import get_settings
from knowledge_base.core.context_assembler import ContextAssembler
from knowledge_base.core.generation import TextGenerator
from knowledge_base.core.query_validator import is_valid_query
from knowledge_base.core.retriever import Retriever
from knowledge_base.models.chat import ChatResult, ChatStats, KnowledgeBaseSummary

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are an AI assistant. Your role is to answer questions based ONLY on the provided knowledge base documents.

IMPORTANT RULES:
1. ONLY answer questions using information from the provided documents.
2. If the information is not in the documents, say "I don't have information about that in my knowledge base."
3. Always be helpful and friendly.
4. When referencing information, mention it comes from the knowledge base.
5. Do not make up or hallucinate any information.
6. Keep responses concise but informative.
7. If asked about topics unrelated to the documents, politely state that you can only answer questions about the provided context.

Maintain a positive and engaging tone while being accurate and truthful."""

INVALID_QUERY_RESPONSE = (
    "Please ask a question between {min_length} and {max_length} characters "
    "that doesn't touch on credentials or security topics."
)
NO_INFORMATION_RESPONSE = (
    "I don't have any information about that in my knowledge base. "
    "Please make sure relevant documents have been added to help me answer your questions!"
)
ERROR_RESPONSE = "I'm sorry, I encountered an error while processing your question. Please try again later."

SUMMARY_DOCUMENT_LIMIT = 20
SUMMARY_TITLES_PER_CATEGORY = 5


def build_prompt(query: str, context: str) -> str:
    return f"""KNOWLEDGE BASE CONTEXT:
{context}

USER QUESTION: {query}

Please provide a helpful response based on the knowledge base context above. If the information needed to answer the question is not in the context, say so clearly."""


class ChatService:
    """
    Chat service for knowledge-base questions.

    Never raises from process_message: invalid queries, empty corpora, and
    generation failures all produce a user-presentable ChatResult.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker,
        generator: TextGenerator,
        retriever: Retriever | None = None,
        assembler: ContextAssembler | None = None,
        settings: RetrievalSettings | None = None,
    ) -> None:
        """
        Initialize chat service.

        Args:
            session_factory: async_sessionmaker bound to the document store
            generator: Text-generation collaborator
            retriever: Optional Retriever (created if None)
            assembler: Optional ContextAssembler (created if None)
            settings: Retrieval settings (query limits, search limit)
        """
        self._session_factory = session_factory
        self._settings = settings or get_settings().retrieval
        self.generator = generator
        self.retriever = retriever or Retriever(session_factory, self._settings)
        self.assembler = assembler or ContextAssembler(session_factory, self._settings)

    async def process_message(self, query: str, user_id: str | None = None) -> ChatResult:
        """
        Answer a question from the knowledge base.

        Flow:
        1. Validate query
        2. Find relevant documents (search, then recency fallback)
        3. Assemble context under the budget (records usage)
        4. Generate the answer

        Args:
            query: User question
            user_id: Asking user, for logs only

        Returns:
            ChatResult: Answer plus provenance
        """
        if not is_valid_query(
            query,
            max_length=self._settings.query_max_length,
            min_length=self._settings.query_min_length,
        ):
            return ChatResult(
                response=INVALID_QUERY_RESPONSE.format(
                    min_length=self._settings.query_min_length,
                    max_length=self._settings.query_max_length,
                ),
                has_context=False,
            )

        logger.info(
            f"{__name__}:process_message - START",
            extra={"user_id": user_id, "query_length": len(query)},
        )

        documents = await self.retriever.find_relevant(query, limit=self._settings.search_limit)
        if not documents:
            return ChatResult(response=NO_INFORMATION_RESPONSE, has_context=False)

        try:
            assembled = await self.assembler.build_context(documents, query)
            answer = await self.generator.generate(
                build_prompt(query, assembled.context),
                system_prompt=SYSTEM_PROMPT,
            )
        except Exception as e:
            logger.error(f"{__name__}:process_message - Failed: {type(e).__name__}: {e}")
            return ChatResult(
                response=ERROR_RESPONSE,
                has_context=False,
                error=str(e),
            )

        logger.info(
            f"{__name__}:process_message - COMPLETE",
            extra={"documents_used": assembled.documents_used, "context_length": len(assembled.context)},
        )
        return ChatResult(
            response=answer,
            has_context=assembled.has_context,
            context_length=len(assembled.context),
            documents_used=assembled.documents_used,
            document_titles=assembled.document_titles,
        )

    async def get_knowledge_base_summary(self) -> KnowledgeBaseSummary:
        """
        Titles of recent active documents grouped by category.

        Returns:
            KnowledgeBaseSummary: Total active count and up to five titles
            per category drawn from the newest twenty documents
        """
        async with self._session_factory() as db:
            documents = await document_crud.list_documents(db, limit=SUMMARY_DOCUMENT_LIMIT)
            total = await document_crud.count(db)

        categories: dict[str, list[str]] = {}
        counts: dict[str, int] = {}
        for document in documents:
            category = document.category.value
            counts[category] = counts.get(category, 0) + 1
            titles = categories.setdefault(category, [])
            if len(titles) < SUMMARY_TITLES_PER_CATEGORY:
                titles.append(document.title)
        return KnowledgeBaseSummary(total_documents=total, categories=categories, category_counts=counts)

    async def get_chat_stats(self) -> ChatStats:
        """Active and processed document counts."""
        async with self._session_factory() as db:
            total = await document_crud.count(db)
            processed = await document_crud.count(db, processed_only=True)

        rate = round(processed / total * 100, 1) if total else 0.0
        return ChatStats(total_documents=total, processed_documents=processed, processing_rate=rate)


def render_summary(summary: KnowledgeBaseSummary) -> str:
    """Format a KnowledgeBaseSummary for a chat reply."""
    if not summary.categories:
        return "No documents are currently available in the knowledge base."

    lines = [
        f"I have access to {summary.total_documents} document(s) in my knowledge base "
        "covering the following topics:",
        "",
    ]
    for category, titles in summary.categories.items():
        lines.append(f"**{category.capitalize()}:**")
        lines.extend(f"- {title}" for title in titles)
        remaining = summary.category_counts.get(category, len(titles)) - len(titles)
        if remaining > 0:
            lines.append(f"- ... and {remaining} more")
        lines.append("")
    lines.append("Feel free to ask me questions about any of these topics!")
    return "\n".join(lines)
