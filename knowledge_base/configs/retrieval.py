"""
Retrieval and context assembly settings.

Dependencies: pydantic, pydantic_settings
System role: Search, fallback, and context budget configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class RetrievalSettings(BaseSettings):
    """Configuration for keyword retrieval and context assembly."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="KB_RETRIEVAL_",
        case_sensitive=False,
        extra="ignore",
    )

    search_limit: int = Field(default=5, description="Documents considered per query")
    context_budget: int = Field(
        default=4000,
        description="Maximum characters of assembled context per generation call",
    )
    max_paragraphs: int = Field(
        default=3,
        description="Paragraphs taken from each document excerpt",
    )
    fallback_paragraphs: int = Field(
        default=2,
        description="Leading paragraphs used when no paragraph matches the query",
    )
    fallback_to_recent: bool = Field(
        default=True,
        description="Use most-recently-used documents when search finds nothing",
    )
    query_min_length: int = Field(default=3, description="Shortest accepted query")
    query_max_length: int = Field(default=1000, description="Longest accepted query")
