"""
Text chunking task using BoundaryAwareTextSplitter.

Splits document text into ordered chunks sized for context use.

Dependencies: knowledge_base.core.document_processing.text_splitter
System role: Background stage of document ingestion pipeline
"""

from ..models import Chunk
from ..text_splitter import BoundaryAwareTextSplitter


class ChunkingTask:
    """Split document text into Chunk models."""

    def __init__(
        self,
        chunk_size: int = 1000,
        chunk_overlap: int = 200,
        boundary_ratio: float = 0.7,
    ) -> None:
        """
        Initialize chunking task with splitter configuration.

        Args:
            chunk_size: Target chunk size in characters
            chunk_overlap: Overlap between consecutive chunks
            boundary_ratio: Earliest accepted boundary as a fraction of chunk_size
        """
        self._splitter = BoundaryAwareTextSplitter(
            chunk_size=chunk_size,
            chunk_overlap=chunk_overlap,
            boundary_ratio=boundary_ratio,
        )

    def chunk(self, text: str) -> list[Chunk]:
        """
        Split text into chunks.

        Deterministic: identical text always yields identical chunks.

        Args:
            text: Document content

        Returns:
            list[Chunk]: Ordered, trimmed, non-empty chunks

        Raises:
            TypeError: When text is not a string
        """
        if not isinstance(text, str):
            raise TypeError(f"Cannot chunk {type(text).__name__}; expected str")

        chunks: list[Chunk] = []
        for start, end in self._splitter.split_spans(text):
            raw = text[start:end]
            content = raw.strip()
            if not content:
                continue
            chunks.append(
                Chunk(
                    chunk_index=len(chunks),
                    content=content,
                    start_index=start + (len(raw) - len(raw.lstrip())),
                )
            )
        return chunks
