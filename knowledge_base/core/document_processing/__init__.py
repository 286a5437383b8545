"""
Document processing: validation, hashing, chunking, and the ingestion pipeline.

Exports: DocumentPipeline, BackgroundTaskRunner, ChunkingTask, ProcessingResult, UploadMetadata
"""

from .background import BackgroundTaskRunner
from .entrypoint import DocumentPipeline
from .models import Chunk, ProcessingResult, UploadMetadata
from .tasks import ChunkingTask, ValidationTask, compute_content_hash

__all__ = [
    "BackgroundTaskRunner",
    "DocumentPipeline",
    "Chunk",
    "ProcessingResult",
    "UploadMetadata",
    "ChunkingTask",
    "ValidationTask",
    "compute_content_hash",
]
