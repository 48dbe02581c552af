"""Models for object-storage records and background jobs."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import Field

from .base import BaseModel


class ObjectMetadata(BaseModel):
    """Metadata committed for a stored object."""

    kind: str | None = None
    size: int | None = None
    file_name: str | None = None
    content_type: str | None = None


class ObjectStorageItem(BaseModel):
    """A row of the ``object_storage`` resource."""

    id: str = Field(..., description="Object ID")
    org_id: str | None = None
    created_at: datetime | None = None
    metadata: ObjectMetadata = Field(default_factory=ObjectMetadata)

    def to_row(self, columns: list[str]) -> dict[str, Any]:
        """Flatten metadata fields into the row."""
        data = {**self.metadata.to_dict(), **self.to_dict()}
        data.pop("metadata", None)
        return {col: data.get(col, "") for col in columns}


class JobContent(BaseModel):
    """What a job operates on."""

    object_id: str | None = None
    type: str | None = None


class JobItem(BaseModel):
    """A row of the ``jobs`` resource."""

    id: str = Field(..., description="Job ID")
    org_id: str | None = None
    status: str | None = None
    created_at: datetime | None = None
    content: JobContent = Field(default_factory=JobContent)

    def to_row(self, columns: list[str]) -> dict[str, Any]:
        """Flatten content fields into the row."""
        data = {**self.content.to_dict(), **self.to_dict()}
        data.pop("content", None)
        return {col: data.get(col, "") for col in columns}
