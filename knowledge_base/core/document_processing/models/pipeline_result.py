"""
Processing result model for background chunking.

Dependencies: pydantic
System role: Return type for DocumentPipeline.process_for_embeddings()
"""

from pydantic import BaseModel, Field


class ProcessingResult(BaseModel):
    """Outcome of chunking a single document."""

    document_id: str = Field(description="Processed document identifier")
    chunk_count: int = Field(description="Number of chunks attached")
    processing_time_ms: float = Field(description="Wall time spent chunking and persisting")
