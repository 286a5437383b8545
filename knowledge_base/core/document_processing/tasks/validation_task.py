"""
Upload validation task.

Checks extension, size, emptiness, and text-ness of an upload before any
hashing or store access happens.

Dependencies: pathlib, knowledge_base.core.exceptions
System role: First stage of document ingestion pipeline
"""

from pathlib import PurePath

from knowledge_base.boundary.db.models import ContentType
from knowledge_base.core.exceptions import (
    EmptyFileError,
    FileTooLargeError,
    UnsupportedFileTypeError,
)

_CONTENT_TYPES: dict[str, ContentType] = {
    ".txt": ContentType.TEXT,
    ".md": ContentType.MARKDOWN,
    ".pdf": ContentType.PDF,
    ".docx": ContentType.DOCX,
    ".json": ContentType.TEXT,
}


def get_extension(filename: str) -> str:
    """Lower-cased extension including the dot ('' when absent)."""
    return PurePath(filename).suffix.lower()


def get_content_type(filename: str) -> ContentType:
    """Map a filename to its content type, defaulting to text."""
    return _CONTENT_TYPES.get(get_extension(filename), ContentType.TEXT)


class ValidationTask:
    """Validate uploads against type and size limits."""

    def __init__(
        self,
        allowed_extensions: list[str] | tuple[str, ...] = (".txt", ".md", ".pdf", ".docx", ".json"),
        max_file_size: int = 10 * 1024 * 1024,
    ) -> None:
        """
        Initialize validation task.

        Args:
            allowed_extensions: Accepted extensions with leading dot
            max_file_size: Maximum content length in bytes
        """
        self._allowed = tuple(ext.lower() for ext in allowed_extensions)
        self._max_file_size = max_file_size

    def validate(self, filename: str, content: bytes) -> str:
        """
        Validate an upload and decode it to text.

        Args:
            filename: Uploaded filename
            content: Raw uploaded bytes

        Returns:
            str: Content decoded as UTF-8

        Raises:
            UnsupportedFileTypeError: Extension not allowed, or content is binary
            FileTooLargeError: Content longer than max_file_size
            EmptyFileError: Content is zero bytes
        """
        extension = get_extension(filename)
        if extension not in self._allowed:
            raise UnsupportedFileTypeError(
                f"File type {extension or '(none)'} is not allowed. "
                f"Allowed types: {', '.join(self._allowed)}",
                filename=filename,
            )

        if len(content) > self._max_file_size:
            raise FileTooLargeError(
                f"File size exceeds maximum limit of {self._max_file_size / 1024 / 1024:g}MB",
                filename=filename,
                details={"file_size": len(content)},
            )

        if len(content) == 0:
            raise EmptyFileError("File is empty", filename=filename)

        if b"\x00" in content:
            raise UnsupportedFileTypeError("Binary files are not supported.", filename=filename)
        try:
            return content.decode("utf-8")
        except UnicodeDecodeError as e:
            raise UnsupportedFileTypeError(
                "Binary files are not supported.",
                filename=filename,
                details={"decode_error": str(e)},
            ) from e
