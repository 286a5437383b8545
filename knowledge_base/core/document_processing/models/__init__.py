"""
Models for document processing pipeline.

Exports: Chunk, ProcessingResult, UploadMetadata
"""

from .chunk import Chunk
from .pipeline_result import ProcessingResult
from .upload_metadata import UploadMetadata

__all__ = ["Chunk", "ProcessingResult", "UploadMetadata"]
