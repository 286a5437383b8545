"""
ORM models for the document store.

Exports: DocumentModel and its enums
"""

from knowledge_base.boundary.db.models.document_model import (
    ContentType,
    DocumentCategory,
    DocumentModel,
    DocumentStatus,
)

__all__ = ["ContentType", "DocumentCategory", "DocumentModel", "DocumentStatus"]
