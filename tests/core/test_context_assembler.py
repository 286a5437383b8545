"""
Test suite for ContextAssembler.

System role: Verification of excerpt selection, budget, and usage tracking
"""

import uuid
from types import SimpleNamespace

import pytest

from knowledge_base.boundary.db.CRUD.document_crud import document_crud
from knowledge_base.configs.retrieval import RetrievalSettings
from knowledge_base.core.context_assembler import (
    ContextAssembler,
    select_paragraphs,
    split_paragraphs,
    wrap_excerpt,
)

FIVE_PARAGRAPHS = (
    "Intro about the city.\n\n"
    "The Gargoyle council meets monthly.\n\n"
    "Weather report.\n  \n"
    "Each gargoyle holds one vote.\n\n"
    "Closing remarks."
)


@pytest.fixture
def assembler(session_factory, retrieval_settings) -> ContextAssembler:
    return ContextAssembler(session_factory, retrieval_settings)


async def _usage(session_factory, document_id) -> int:
    async with session_factory() as db:
        return (await document_crud.get_by_id(db, document_id)).usage_count


class TestParagraphHelpers:
    """Test suite for paragraph splitting and selection."""

    def test_split_on_blank_lines_including_whitespace_only(self) -> None:
        assert len(split_paragraphs(FIVE_PARAGRAPHS)) == 5

    def test_selects_matching_paragraphs_case_insensitively(self) -> None:
        selected = select_paragraphs(split_paragraphs(FIVE_PARAGRAPHS), "GARGOYLE vote")

        assert selected == ["The Gargoyle council meets monthly.", "Each gargoyle holds one vote."]

    def test_no_match_falls_back_to_leading_paragraphs(self) -> None:
        selected = select_paragraphs(split_paragraphs(FIVE_PARAGRAPHS), "zeppelin")

        assert selected == ["Intro about the city.", "The Gargoyle council meets monthly."]

    def test_caps_selection_at_max_paragraphs(self) -> None:
        paragraphs = [f"stone fact {i}" for i in range(6)]

        assert select_paragraphs(paragraphs, "stone") == paragraphs[:3]

    def test_wrap_excerpt_format(self) -> None:
        assert wrap_excerpt("Rules", "Be kind.") == '\n--- From "Rules" ---\nBe kind.\n'


class TestBuildContext:
    """Test suite for ContextAssembler.build_context."""

    @pytest.mark.asyncio
    async def test_builds_excerpt_and_records_usage(
        self, assembler: ContextAssembler, session_factory, make_document
    ) -> None:
        # Arrange
        document = await make_document("Council", FIVE_PARAGRAPHS)

        # Act
        assembled = await assembler.build_context([document], "gargoyle")

        # Assert
        assert assembled.context == (
            '\n--- From "Council" ---\n'
            "The Gargoyle council meets monthly.\n\nEach gargoyle holds one vote.\n"
        )
        assert assembled.document_titles == ["Council"]
        assert assembled.documents_used == 1
        assert assembled.has_context is True
        assert await _usage(session_factory, document.id) == 1

    @pytest.mark.asyncio
    async def test_budget_is_never_exceeded(
        self, assembler: ContextAssembler, session_factory, make_document
    ) -> None:
        """Test assembly stops at the first excerpt that would overflow."""
        # Arrange
        big = [await make_document(f"Big {i}", "stone " * 250) for i in range(3)]
        small = await make_document("Small", "stone")

        # Act
        assembled = await assembler.build_context([*big, small], "stone")

        # Assert
        assert len(assembled.context) <= 4000
        assert assembled.document_titles == ["Big 0", "Big 1"]
        assert [await _usage(session_factory, d.id) for d in big] == [1, 1, 0]
        assert await _usage(session_factory, small.id) == 0

    @pytest.mark.asyncio
    async def test_small_budget_yields_empty_context(self, session_factory, make_document) -> None:
        document = await make_document("Big", "stone " * 100)
        assembler = ContextAssembler(session_factory, RetrievalSettings(context_budget=50))

        assembled = await assembler.build_context([document], "stone")

        assert assembled.context == ""
        assert assembled.has_context is False
        assert await _usage(session_factory, document.id) == 0

    @pytest.mark.asyncio
    async def test_vanished_candidates_are_skipped(
        self, assembler: ContextAssembler, make_document
    ) -> None:
        document = await make_document("Present", "Still here.")
        ghost = SimpleNamespace(id=uuid.uuid4())

        assembled = await assembler.build_context([ghost, document], "here")

        assert assembled.document_titles == ["Present"]

    @pytest.mark.asyncio
    async def test_no_candidates(self, assembler: ContextAssembler) -> None:
        assembled = await assembler.build_context([], "anything")

        assert assembled.context == ""
        assert assembled.documents_used == 0
