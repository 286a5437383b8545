"""
Unified application settings.

Aggregates all configuration modules into a single Settings class.

Dependencies: All config modules
System role: Central configuration aggregator for the engine
"""

from functools import lru_cache

from knowledge_base.configs.base import BaseSettings
from knowledge_base.configs.database import DatabaseSettings
from knowledge_base.configs.generation import GenerationSettings
from knowledge_base.configs.ingestion import DocumentPipelineSettings
from knowledge_base.configs.retrieval import RetrievalSettings


class Settings(BaseSettings):
    """Unified application settings aggregating all config modules."""

    # Aggregated settings
    database: DatabaseSettings = DatabaseSettings()
    ingestion: DocumentPipelineSettings = DocumentPipelineSettings()
    retrieval: RetrievalSettings = RetrievalSettings()
    generation: GenerationSettings = GenerationSettings()


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Returns Settings instance, cached so environment variables are read once.

    Returns:
        Settings: Application settings instance

    Usage:
        from knowledge_base.configs import get_settings
        settings = get_settings()
    """
    return Settings()
