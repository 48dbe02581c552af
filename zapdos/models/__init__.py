"""Data models for zapdos.

Provides Pydantic models for API payloads and dataclasses for upload tracking.
"""

from __future__ import annotations

from .base import BaseModel
from .jobs import JobEventType, JobStatusData, JobStatusRecord, RecordError
from .storage import JobContent, JobItem, ObjectMetadata, ObjectStorageItem
from .upload import (
    DEFAULT_CONTENT_TYPE,
    ByteSource,
    ParsedSignedTarget,
    PipelineState,
    TransportResult,
    UploadFailure,
    UploadItem,
    UploadOutcome,
    UploadSuccess,
)

__all__ = [
    # Base
    "BaseModel",
    # Storage
    "ObjectMetadata",
    "ObjectStorageItem",
    "JobContent",
    "JobItem",
    # Job status
    "JobEventType",
    "JobStatusData",
    "JobStatusRecord",
    "RecordError",
    # Upload
    "DEFAULT_CONTENT_TYPE",
    "ByteSource",
    "ParsedSignedTarget",
    "PipelineState",
    "TransportResult",
    "UploadFailure",
    "UploadItem",
    "UploadOutcome",
    "UploadSuccess",
]
