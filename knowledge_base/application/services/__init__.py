"""
Application services.

Exports: DocumentService, ChatService
"""

from knowledge_base.application.services.chat_service import ChatService
from knowledge_base.application.services.document_service import DocumentService

__all__ = ["ChatService", "DocumentService"]
