"""
Test suite for upload validation.

System role: Verification of type, size, and content checks
"""

import pytest

from knowledge_base.boundary.db.models import ContentType
from knowledge_base.core.document_processing.tasks import ValidationTask, get_content_type
from knowledge_base.core.exceptions import (
    DocumentValidationError,
    EmptyFileError,
    FileTooLargeError,
    UnsupportedFileTypeError,
)


@pytest.fixture
def validator() -> ValidationTask:
    return ValidationTask()


class TestValidate:
    """Test suite for ValidationTask.validate."""

    @pytest.mark.parametrize("filename", ["notes.txt", "guide.md", "faq.json", "RULES.TXT"])
    def test_accepts_allowed_text_files(self, validator: ValidationTask, filename: str) -> None:
        assert validator.validate(filename, b"hello gargs") == "hello gargs"

    @pytest.mark.parametrize("filename", ["script.exe", "image.png", "README"])
    def test_rejects_disallowed_extension(self, validator: ValidationTask, filename: str) -> None:
        with pytest.raises(UnsupportedFileTypeError):
            validator.validate(filename, b"content")

    def test_rejects_oversized_content(self, validator: ValidationTask) -> None:
        """Test 12 MiB exceeds the 10 MiB default."""
        with pytest.raises(FileTooLargeError) as exc_info:
            validator.validate("big.txt", b"a" * (12 * 1024 * 1024))

        assert "10MB" in exc_info.value.message

    def test_accepts_content_at_exact_limit(self) -> None:
        validator = ValidationTask(max_file_size=16)

        assert validator.validate("edge.txt", b"x" * 16) == "x" * 16

    def test_rejects_empty_content(self, validator: ValidationTask) -> None:
        with pytest.raises(EmptyFileError):
            validator.validate("empty.txt", b"")

    @pytest.mark.parametrize("content", [b"abc\x00def", b"\xff\xfe\xfa binary"])
    def test_rejects_binary_content(self, validator: ValidationTask, content: bytes) -> None:
        with pytest.raises(UnsupportedFileTypeError, match="Binary files"):
            validator.validate("notes.txt", content)

    def test_errors_share_validation_base(self, validator: ValidationTask) -> None:
        """Test callers can catch every validation failure with one type."""
        with pytest.raises(DocumentValidationError) as exc_info:
            validator.validate("empty.md", b"")

        assert exc_info.value.details["filename"] == "empty.md"


class TestGetContentType:
    """Test suite for extension to content type mapping."""

    @pytest.mark.parametrize(
        ("filename", "expected"),
        [
            ("a.txt", ContentType.TEXT),
            ("a.md", ContentType.MARKDOWN),
            ("a.PDF", ContentType.PDF),
            ("a.docx", ContentType.DOCX),
            ("a.json", ContentType.TEXT),
        ],
    )
    def test_maps_extension(self, filename: str, expected: ContentType) -> None:
        assert get_content_type(filename) == expected
