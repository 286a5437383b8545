"""
Chat models and schemas.

Dependencies: pydantic
System role: Chat service contracts
"""

from pydantic import BaseModel, Field


class AssembledContext(BaseModel):
    """Context block built from candidate documents under a character budget."""

    context: str = ""
    document_titles: list[str] = Field(default_factory=list)
    documents_used: int = 0

    @property
    def has_context(self) -> bool:
        return self.documents_used > 0


class ChatResult(BaseModel):
    """Answer to a knowledge-base question with provenance."""

    response: str
    has_context: bool
    context_length: int = 0
    documents_used: int = 0
    document_titles: list[str] = Field(default_factory=list)
    error: str | None = Field(default=None, description="Failure detail when generation failed")


class KnowledgeBaseSummary(BaseModel):
    """Titles of active documents grouped by category."""

    total_documents: int
    categories: dict[str, list[str]] = Field(default_factory=dict, description="Up to five titles per category")
    category_counts: dict[str, int] = Field(default_factory=dict)


class ChatStats(BaseModel):
    """Corpus processing statistics."""

    total_documents: int
    processed_documents: int
    processing_rate: float = Field(description="Processed share of active documents, percent")
