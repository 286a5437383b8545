"""
Task modules for document processing pipeline.

Exports: ValidationTask, ChunkingTask, compute_content_hash, get_content_type
"""

from .chunking_task import ChunkingTask
from .hashing_task import HASH_HEX_LENGTH, compute_content_hash
from .validation_task import ValidationTask, get_content_type, get_extension

__all__ = [
    "ValidationTask",
    "ChunkingTask",
    "compute_content_hash",
    "HASH_HEX_LENGTH",
    "get_content_type",
    "get_extension",
]
