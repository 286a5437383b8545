"""
CRUD operations for the document store.

Exports: DocumentCRUD, document_crud, SearchHit
"""

from knowledge_base.boundary.db.CRUD.document_crud import DocumentCRUD, SearchHit, document_crud

__all__ = ["DocumentCRUD", "SearchHit", "document_crud"]
