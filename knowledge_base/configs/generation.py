"""
Text generation settings.

Settings for the Gemini chat model used to answer knowledge-base questions.

Dependencies: pydantic_settings
System role: LLM configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class GenerationSettings(BaseSettings):
    """Gemini model configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="KB_GENERATION_",
        case_sensitive=False,
        extra="ignore",
    )

    model_id: str = Field(
        default="gemini-2.0-flash",
        description="Google Gemini chat model identifier",
    )
    temperature: float = Field(default=0.2, description="Sampling temperature")
    google_api_key: str | None = Field(
        default=None,
        description="Gemini API key (falls back to GOOGLE_API_KEY when unset)",
    )
