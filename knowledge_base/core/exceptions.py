"""
Exception hierarchy for the knowledge-base engine.

Provides layered exception structure for domain-specific errors.
Every message is safe to show to the end user verbatim; details carry
context for logs.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the engine
"""

from typing import Any


class KnowledgeBaseException(Exception):
    """Base exception for all knowledge-base errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class DocumentValidationError(KnowledgeBaseException):
    """Raised when an uploaded file fails validation."""

    def __init__(
        self,
        message: str,
        filename: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize validation error.

        Args:
            message: Error message
            filename: Name of the rejected file
            details: Additional context
        """
        details = details or {}
        if filename:
            details["filename"] = filename
        super().__init__(message, details)


class UnsupportedFileTypeError(DocumentValidationError):
    """Raised when the file extension is not allowed or the content is binary."""


class FileTooLargeError(DocumentValidationError):
    """Raised when the content exceeds the configured maximum size."""


class EmptyFileError(DocumentValidationError):
    """Raised when the content is zero bytes long."""


class DuplicateDocumentError(KnowledgeBaseException):
    """Base exception for duplicate uploads."""


class DuplicateContentError(DuplicateDocumentError):
    """Raised when a document with byte-identical content already exists."""

    def __init__(self, file_hash: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize duplicate content error.

        Args:
            file_hash: Content hash shared with the existing document
            details: Additional context
        """
        details = details or {}
        details["file_hash"] = file_hash
        super().__init__("Document with identical content already exists", details)


class DuplicateFilenameError(DuplicateDocumentError):
    """Raised when a document with the same filename already exists."""

    def __init__(self, filename: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize duplicate filename error.

        Args:
            filename: Conflicting filename
            details: Additional context
        """
        details = details or {}
        details["filename"] = filename
        super().__init__("Document with this filename already exists", details)


class DocumentNotFoundError(KnowledgeBaseException):
    """Raised when a document cannot be found."""

    def __init__(self, document_id: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize document not found error.

        Args:
            document_id: ID of the missing document
            details: Additional context
        """
        details = details or {}
        details["document_id"] = document_id
        super().__init__("Document not found", details)


class ProcessingFailedError(KnowledgeBaseException):
    """Raised by background chunking when a document cannot be processed."""

    def __init__(
        self,
        message: str,
        document_id: str | None = None,
        cause: BaseException | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize processing error.

        Args:
            message: Error message
            document_id: ID of the document that failed
            cause: Underlying exception
            details: Additional context
        """
        details = details or {}
        if document_id:
            details["document_id"] = document_id
        self.cause = cause
        super().__init__(message, details)


class SearchFailedError(KnowledgeBaseException):
    """Raised when the store rejects or cannot run a search query."""

    def __init__(
        self,
        message: str,
        query: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize search error.

        Args:
            message: Error message
            query: Query text that failed
            details: Additional context
        """
        details = details or {}
        if query is not None:
            details["query"] = query
        self.query = query
        super().__init__(message, details)


class GenerationError(KnowledgeBaseException):
    """Raised when the text-generation collaborator fails."""
