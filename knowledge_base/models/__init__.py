"""
Pydantic contracts returned to callers.
"""

from knowledge_base.models.chat import AssembledContext, ChatResult, ChatStats, KnowledgeBaseSummary
from knowledge_base.models.document import DocumentDetail, DocumentPage, DocumentSummary, DocumentUpdate

__all__ = [
    "AssembledContext",
    "ChatResult",
    "ChatStats",
    "KnowledgeBaseSummary",
    "DocumentDetail",
    "DocumentPage",
    "DocumentSummary",
    "DocumentUpdate",
]
