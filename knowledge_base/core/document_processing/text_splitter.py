"""
Boundary-aware character splitter.

Fixed-size chunks with fixed overlap. When a chunk would end mid-text, the
cut moves back to the last sentence terminator, else the last line break,
else the last space, provided that point lies at or beyond boundary_ratio of
the chunk size; otherwise the raw chunk size is used.

Dependencies: langchain_text_splitters
System role: Chunker for document ingestion
"""

import math
from typing import Any

from langchain_text_splitters import TextSplitter

SENTENCE_TERMINATORS = (".", "!", "?")
PARAGRAPH_BREAK = "\n"
WORD_BREAK = " "


class BoundaryAwareTextSplitter(TextSplitter):
    """Split text into overlapping, boundary-aligned chunks."""

    def __init__(
        self,
        chunk_size: int = 1000,
        chunk_overlap: int = 200,
        boundary_ratio: float = 0.7,
        **kwargs: Any,
    ) -> None:
        """
        Initialize splitter.

        Args:
            chunk_size: Target chunk length in characters
            chunk_overlap: Characters shared by consecutive chunks
            boundary_ratio: Earliest accepted boundary as a fraction of chunk_size

        Raises:
            ValueError: If the earliest boundary would not move past the overlap
        """
        super().__init__(chunk_size=chunk_size, chunk_overlap=chunk_overlap, **kwargs)
        if not 0 < boundary_ratio <= 1:
            raise ValueError(f"boundary_ratio must be in (0, 1], got {boundary_ratio}")
        self._min_advance = math.ceil(chunk_size * boundary_ratio)
        # Every chunk must end past the next chunk's start or splitting never terminates
        if self._min_advance <= chunk_overlap:
            raise ValueError(
                f"chunk_size * boundary_ratio ({self._min_advance}) must exceed "
                f"chunk_overlap ({chunk_overlap})"
            )

    def split_spans(self, text: str) -> list[tuple[int, int]]:
        """
        Compute raw (untrimmed) chunk spans.

        Consecutive spans overlap by exactly chunk_overlap characters and the
        last span ends at len(text), so dropping each span's leading overlap
        and concatenating reproduces the text.

        Args:
            text: Document text

        Returns:
            list[tuple[int, int]]: (start, end) offsets in order
        """
        spans: list[tuple[int, int]] = []
        length = len(text)
        start = 0
        while start < length:
            end = start + self._chunk_size
            if end >= length:
                spans.append((start, length))
                break
            end = self._find_boundary(text, start, end)
            spans.append((start, end))
            start = end - self._chunk_overlap
        return spans

    def _find_boundary(self, text: str, start: int, end: int) -> int:
        earliest = start + self._min_advance

        sentence_end = max(text.rfind(mark, earliest, end) for mark in SENTENCE_TERMINATORS)
        if sentence_end >= 0:
            return sentence_end + 1

        for separator in (PARAGRAPH_BREAK, WORD_BREAK):
            position = text.rfind(separator, earliest, end)
            if position >= 0:
                return position + 1

        return end

    def split_text(self, text: str) -> list[str]:
        """Split text into trimmed, non-empty chunks."""
        chunks = (text[start:end].strip() for start, end in self.split_spans(text))
        return [chunk for chunk in chunks if chunk]
