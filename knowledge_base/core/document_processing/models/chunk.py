"""
Chunk domain model for document processing pipeline.

A chunk is a derived span of a document's content. It is stored inside its
owning document and has no identity outside it.

Dependencies: pydantic
System role: Data structure for document chunks in ingestion pipeline
"""

from pydantic import BaseModel, Field


class Chunk(BaseModel):
    """Document chunk with an optional embedding vector."""

    chunk_index: int = Field(ge=0, description="Position within the owning document")
    content: str = Field(description="Chunk text, whitespace-trimmed")
    start_index: int = Field(ge=0, description="Offset of content within the document text")
    embedding: list[float] | None = Field(
        default=None,
        description="Reserved for semantic search; not computed",
    )
