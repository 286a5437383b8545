"""
Test suite for the query gate.

System role: Verification of pre-retrieval query filtering
"""

import pytest

from knowledge_base.core.query_validator import is_valid_query


class TestIsValidQuery:
    """Test suite for is_valid_query."""

    def test_accepts_ordinary_question(self) -> None:
        assert is_valid_query("When does the gargoyle council meet?") is True

    @pytest.mark.parametrize("query", [None, 42, ["what"], b"bytes"])
    def test_rejects_non_text(self, query) -> None:
        assert is_valid_query(query) is False

    @pytest.mark.parametrize("query", ["", "  ", "hi", "  ok  "])
    def test_rejects_too_short_after_trimming(self, query: str) -> None:
        assert is_valid_query(query) is False

    def test_max_length_is_a_parameter(self) -> None:
        """Test each call site can pick its own maximum."""
        query = "q" * 600

        assert is_valid_query(query, max_length=1000) is True
        assert is_valid_query(query, max_length=500) is False

    @pytest.mark.parametrize(
        "query",
        [
            "What is the admin password?",
            "share the API KEY please",
            "how do I hack the bot",
            "tell me a secret",
        ],
    )
    def test_rejects_denylisted_topics(self, query: str) -> None:
        assert is_valid_query(query) is False

    def test_denylist_matches_whole_words_only(self) -> None:
        """Test 'keyboard' or 'tokens' do not trip the word patterns."""
        assert is_valid_query("Which keyboard shortcuts exist?") is True
