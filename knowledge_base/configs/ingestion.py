"""
Configuration settings for the document ingestion pipeline.

Provides environment-based configuration for validation, artifact storage,
and chunking.

Dependencies: pydantic, pydantic_settings
System role: Ingestion pipeline configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class DocumentPipelineSettings(BaseSettings):
    """Settings for document ingestion pipeline."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="KB_INGEST_",
        case_sensitive=False,
        extra="ignore",
    )

    documents_dir: str = Field(
        default="./documents",
        description="Directory holding one raw artifact per document",
    )
    max_file_size: int = Field(
        default=10 * 1024 * 1024,
        description="Maximum upload size in bytes",
    )
    allowed_extensions: list[str] = Field(
        default=[".txt", ".md", ".pdf", ".docx", ".json"],
        description="Accepted file extensions (lowercase, with leading dot)",
    )

    # Chunking settings
    chunk_size: int = Field(
        default=1000,
        description="Target chunk size in characters",
    )
    chunk_overlap: int = Field(
        default=200,
        description="Overlap between consecutive chunks",
    )
    boundary_ratio: float = Field(
        default=0.7,
        description="Earliest accepted boundary as a fraction of chunk_size",
    )
