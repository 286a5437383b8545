"""
Test suite for ChatService.

Uses the SQLite test store with a mocked text generator.

System role: Verification of the knowledge-base chat flow
"""

from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import OperationalError

from knowledge_base.application.services.chat_service import (
    ERROR_RESPONSE,
    NO_INFORMATION_RESPONSE,
    SYSTEM_PROMPT,
    ChatService,
    render_summary,
)
from knowledge_base.boundary.db.CRUD.document_crud import document_crud
from knowledge_base.boundary.db.models import DocumentCategory, DocumentStatus
from knowledge_base.core.exceptions import GenerationError


@pytest.fixture
def mock_generator() -> AsyncMock:
    """Provide a text generator returning a fixed answer."""
    generator = AsyncMock()
    generator.generate = AsyncMock(return_value="Gargoyles meet monthly.")
    return generator


@pytest.fixture
def chat_service(session_factory, mock_generator, retrieval_settings) -> ChatService:
    return ChatService(session_factory, mock_generator, settings=retrieval_settings)


class TestProcessMessage:
    """Test suite for ChatService.process_message."""

    @pytest.mark.asyncio
    async def test_answers_with_context(
        self, chat_service: ChatService, mock_generator: AsyncMock, session_factory, make_document
    ) -> None:
        # Arrange
        document = await make_document("Council", "The gargoyle council meets monthly.")

        # Act
        result = await chat_service.process_message("When does the gargoyle council meet?", user_id="42")

        # Assert
        assert result.response == "Gargoyles meet monthly."
        assert result.has_context is True
        assert result.documents_used == 1
        assert result.document_titles == ["Council"]
        assert result.context_length > 0

        prompt = mock_generator.generate.await_args.args[0]
        assert '--- From "Council" ---' in prompt
        assert "USER QUESTION: When does the gargoyle council meet?" in prompt
        assert mock_generator.generate.await_args.kwargs["system_prompt"] == SYSTEM_PROMPT

        async with session_factory() as db:
            assert (await document_crud.get_by_id(db, document.id)).usage_count == 1

    @pytest.mark.asyncio
    async def test_invalid_query_skips_retrieval(
        self, chat_service: ChatService, mock_generator: AsyncMock
    ) -> None:
        result = await chat_service.process_message("what is the admin password?")

        assert result.has_context is False
        mock_generator.generate.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_empty_corpus_returns_no_information(
        self, chat_service: ChatService, mock_generator: AsyncMock
    ) -> None:
        result = await chat_service.process_message("Tell me about gargoyles")

        assert result.response == NO_INFORMATION_RESPONSE
        assert result.has_context is False
        assert result.documents_used == 0
        mock_generator.generate.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_falls_back_to_recent_documents(
        self, chat_service: ChatService, mock_generator: AsyncMock, make_document
    ) -> None:
        """Test a query with no hits still gets grounding from recent documents."""
        await make_document("Welcome", "Welcome to the server.\n\nRead the rules.")

        result = await chat_service.process_message("zeppelin schedule")

        assert result.document_titles == ["Welcome"]
        prompt = mock_generator.generate.await_args.args[0]
        assert "Welcome to the server." in prompt

    @pytest.mark.asyncio
    async def test_generation_failure_returns_apology(
        self, chat_service: ChatService, mock_generator: AsyncMock, session_factory, make_document
    ) -> None:
        # Arrange
        document = await make_document("Council", "The gargoyle council meets monthly.")
        mock_generator.generate.side_effect = GenerationError("Failed to generate AI response")

        # Act
        result = await chat_service.process_message("gargoyle council")

        # Assert
        assert result.response == ERROR_RESPONSE
        assert result.error == "Failed to generate AI response"
        async with session_factory() as db:
            assert (await document_crud.get_by_id(db, document.id)).usage_count == 1

    @pytest.mark.asyncio
    async def test_store_failure_during_assembly_returns_apology(
        self, chat_service: ChatService, mock_generator: AsyncMock, make_document
    ) -> None:
        # Arrange
        await make_document("Council", "The gargoyle council meets monthly.")
        chat_service.assembler.build_context = AsyncMock(
            side_effect=OperationalError("UPDATE documents", {}, Exception("db down"))
        )

        # Act
        result = await chat_service.process_message("When does the gargoyle council meet?")

        # Assert
        assert result.response == ERROR_RESPONSE
        assert result.has_context is False
        assert "db down" in result.error
        mock_generator.generate.assert_not_awaited()


class TestKnowledgeBaseSummary:
    """Test suite for get_knowledge_base_summary and render_summary."""

    @pytest.mark.asyncio
    async def test_groups_titles_by_category(self, chat_service: ChatService, make_document) -> None:
        # Arrange
        for i in range(7):
            await make_document(f"Faq {i}", f"answer {i}", category=DocumentCategory.FAQ)
        await make_document("Origin", "story", category=DocumentCategory.LORE)
        await make_document("Retired", "old", category=DocumentCategory.LORE, is_active=False)

        # Act
        summary = await chat_service.get_knowledge_base_summary()
        text = render_summary(summary)

        # Assert
        assert summary.total_documents == 8
        assert len(summary.categories["faq"]) == 5
        assert summary.category_counts["faq"] == 7
        assert summary.categories["lore"] == ["Origin"]
        assert "**Faq:**" in text
        assert "- ... and 2 more" in text
        assert "Retired" not in text

    @pytest.mark.asyncio
    async def test_empty_summary(self, chat_service: ChatService) -> None:
        summary = await chat_service.get_knowledge_base_summary()

        assert render_summary(summary) == "No documents are currently available in the knowledge base."


class TestChatStats:
    """Test suite for get_chat_stats."""

    @pytest.mark.asyncio
    async def test_processing_rate_rounded(self, chat_service: ChatService, make_document) -> None:
        await make_document("One", "1")
        await make_document("Two", "2")
        await make_document("Three", "3", processing_status=DocumentStatus.PENDING, is_processed=False)

        stats = await chat_service.get_chat_stats()

        assert stats.total_documents == 3
        assert stats.processed_documents == 2
        assert stats.processing_rate == 66.7

    @pytest.mark.asyncio
    async def test_empty_corpus_rate_is_zero(self, chat_service: ChatService) -> None:
        stats = await chat_service.get_chat_stats()

        assert stats.processing_rate == 0.0
