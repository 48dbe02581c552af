"""Job-status records streamed back by a metadata commit.

Each NDJSON line of the commit response is one record, either
``{"data": {"type", "object_id", "job_id"?}}`` or ``{"error": {"message"}}``.
"""

from __future__ import annotations

from enum import Enum

from pydantic import model_validator

from .base import BaseModel


class JobEventType(str, Enum):
    """Lifecycle events emitted while a stored object is processed."""

    METADATA_UPDATED = "metadata_updated"
    INDEXING_STARTED = "indexing_started"
    INDEXING_COMPLETED = "indexing_completed"
    INDEXING_FAILED = "indexing_failed"
    TRANSCRIPTION = "transcription"


class JobStatusData(BaseModel):
    """Success arm of a job-status record."""

    # Kept as a plain string so newer server event types still validate.
    type: str
    object_id: str
    job_id: str | None = None

    @property
    def event(self) -> JobEventType | None:
        """Known event type, or None for types this client does not handle."""
        try:
            return JobEventType(self.type)
        except ValueError:
            return None


class RecordError(BaseModel):
    """Error arm of a job-status record."""

    message: str = "Unknown error"


class JobStatusRecord(BaseModel):
    """One decoded line of the commit response stream."""

    data: JobStatusData | None = None
    error: RecordError | None = None

    @model_validator(mode="after")
    def _one_arm(self) -> "JobStatusRecord":
        if self.data is None and self.error is None:
            raise ValueError("record carries neither data nor error")
        return self
