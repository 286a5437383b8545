"""
Text-generation collaborator.

Prompt in, text out. GeminiTextGenerator wraps the LangChain Google GenAI
chat model; anything with the same async generate() signature can stand in
(tests use AsyncMock).

Dependencies: langchain_google_genai, langchain_core
System role: LLM call for knowledge-base answers
"""

import logging
from typing import Protocol

from langchain_core.messages import HumanMessage, SystemMessage
from langchain_google_genai import ChatGoogleGenerativeAI

from knowledge_base.configs.generation import GenerationSettings
from knowledge_base.configs.settings import get_settings
from knowledge_base.core.exceptions import GenerationError

logger = logging.getLogger(__name__)


class TextGenerator(Protocol):
    async def generate(self, prompt: str, system_prompt: str | None = None) -> str: ...


class GeminiTextGenerator:
    """Gemini chat model behind the TextGenerator interface."""

    def __init__(self, settings: GenerationSettings | None = None) -> None:
        settings = settings or get_settings().generation
        kwargs = {"model": settings.model_id, "temperature": settings.temperature}
        if settings.google_api_key:
            kwargs["google_api_key"] = settings.google_api_key
        self.model = ChatGoogleGenerativeAI(**kwargs)
        logger.info(f"{__name__}:__init__ - Initialized Gemini generator with {settings.model_id}")

    async def generate(self, prompt: str, system_prompt: str | None = None) -> str:
        """
        Generate a reply.

        Args:
            prompt: User-facing prompt (question plus context)
            system_prompt: Optional system instructions

        Returns:
            str: Model reply text

        Raises:
            GenerationError: The model call failed
        """
        messages = []
        if system_prompt:
            messages.append(SystemMessage(content=system_prompt))
        messages.append(HumanMessage(content=prompt))

        try:
            response = await self.model.ainvoke(messages)
        except Exception as e:
            logger.error(f"{__name__}:generate - {type(e).__name__}: {e}")
            raise GenerationError("Failed to generate AI response", {"error": str(e)}) from e

        content = response.content
        if isinstance(content, list):
            # Multi-part replies: keep the text parts
            content = "".join(
                part if isinstance(part, str) else part.get("text", "")
                for part in content
            )
        return content
