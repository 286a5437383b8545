"""
Upload metadata supplied alongside a document.

Dependencies: pydantic
System role: Input contract for DocumentPipeline.add_document()
"""

from pydantic import BaseModel, Field, field_validator

from knowledge_base.boundary.db.models import DocumentCategory


class UploadMetadata(BaseModel):
    """Optional descriptive fields and uploader identity for a new document."""

    title: str | None = Field(default=None, max_length=255, description="Defaults to the filename stem")
    description: str = Field(default="", description="Free-text description")
    category: DocumentCategory = Field(default=DocumentCategory.GENERAL)
    tags: list[str] = Field(default_factory=list)
    uploaded_by_id: str | None = Field(default=None, description="Uploader's user id")
    uploaded_by_name: str | None = Field(default=None, description="Uploader's display name")

    @field_validator("tags", mode="before")
    @classmethod
    def normalize_tags(cls, value):
        # Accept "a, b" as well as ["a", "b"]
        if value is None:
            return []
        if isinstance(value, str):
            value = value.split(",")
        tags: list[str] = []
        for tag in value:
            tag = str(tag).strip().lower()
            if tag and tag not in tags:
                tags.append(tag)
        return tags
