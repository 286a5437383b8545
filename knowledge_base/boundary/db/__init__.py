"""
Document store boundary.

Exports the declarative base, connection helpers, and the document model.
"""

from knowledge_base.boundary.db.base import Base, TimestampMixin, UUIDMixin
from knowledge_base.boundary.db.connection import (
    get_async_engine,
    get_async_session_factory,
    init_models,
)
from knowledge_base.boundary.db.models import (
    ContentType,
    DocumentCategory,
    DocumentModel,
    DocumentStatus,
)

__all__ = [
    "Base",
    "TimestampMixin",
    "UUIDMixin",
    "get_async_engine",
    "get_async_session_factory",
    "init_models",
    "ContentType",
    "DocumentCategory",
    "DocumentModel",
    "DocumentStatus",
]
