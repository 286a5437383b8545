"""
Tests for the Gemini text generator wrapper.

System role: Verification of LLM call handling
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from langchain_core.messages import HumanMessage, SystemMessage

from knowledge_base.configs.generation import GenerationSettings
from knowledge_base.core.exceptions import GenerationError
from knowledge_base.core.generation import GeminiTextGenerator


@pytest.fixture
def mock_chat_model() -> MagicMock:
    model = MagicMock()
    model.ainvoke = AsyncMock(return_value=MagicMock(content="Stone is eternal."))
    return model


@pytest.fixture
def generator(mock_chat_model: MagicMock) -> GeminiTextGenerator:
    with patch(
        "knowledge_base.core.generation.ChatGoogleGenerativeAI", return_value=mock_chat_model
    ) as mock_class:
        generator = GeminiTextGenerator(GenerationSettings(model_id="gemini-test", google_api_key="k"))
    mock_class.assert_called_once_with(model="gemini-test", temperature=0.2, google_api_key="k")
    return generator


class TestGenerate:
    """Test suite for GeminiTextGenerator.generate."""

    @pytest.mark.asyncio
    async def test_sends_system_and_user_messages(
        self, generator: GeminiTextGenerator, mock_chat_model: MagicMock
    ) -> None:
        # Act
        reply = await generator.generate("What lasts?", system_prompt="Answer briefly.")

        # Assert
        assert reply == "Stone is eternal."
        messages = mock_chat_model.ainvoke.await_args.args[0]
        assert isinstance(messages[0], SystemMessage)
        assert isinstance(messages[1], HumanMessage)
        assert messages[1].content == "What lasts?"

    @pytest.mark.asyncio
    async def test_joins_multipart_content(
        self, generator: GeminiTextGenerator, mock_chat_model: MagicMock
    ) -> None:
        mock_chat_model.ainvoke.return_value = MagicMock(
            content=["Stone ", {"type": "text", "text": "endures."}]
        )

        assert await generator.generate("What lasts?") == "Stone endures."

    @pytest.mark.asyncio
    async def test_model_failure_raises_generation_error(
        self, generator: GeminiTextGenerator, mock_chat_model: MagicMock
    ) -> None:
        mock_chat_model.ainvoke.side_effect = RuntimeError("quota exceeded")

        with pytest.raises(GenerationError) as exc_info:
            await generator.generate("What lasts?")

        assert exc_info.value.details["error"] == "quota exceeded"
