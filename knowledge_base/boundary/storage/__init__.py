"""
File-artifact storage boundary.

Exports: LocalFileStore
"""

from knowledge_base.boundary.storage.local_file_store import LocalFileStore

__all__ = ["LocalFileStore"]
