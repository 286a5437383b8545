"""
Database helpers for the document processing pipeline.

Exports: DocumentStatusUpdater
"""

from .document_status_updater import DocumentStatusUpdater

__all__ = ["DocumentStatusUpdater"]
