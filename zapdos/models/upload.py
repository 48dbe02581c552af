"""Upload pipeline models.

Provides dataclasses for upload items, signed targets, per-file pipeline
state and per-file outcomes.
"""

from __future__ import annotations

import os
from collections.abc import AsyncIterable
from dataclasses import dataclass
from enum import Enum
from typing import BinaryIO, Optional, Union

# Anything the transport can read bytes from.
ByteSource = Union[bytes, bytearray, "os.PathLike[str]", BinaryIO, AsyncIterable[bytes]]

DEFAULT_CONTENT_TYPE = "application/octet-stream"


class PipelineState(Enum):
    """Per-file pipeline states."""

    PENDING = "pending"
    TRANSPORTING = "transporting"
    STORED = "stored"
    COMMITTING = "committing"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        """Check if no further transition can happen."""
        return self in (PipelineState.COMPLETED, PipelineState.FAILED)


@dataclass
class UploadItem:
    """One file to upload, paired with its signed URL."""

    name: str
    size: Optional[int]
    source: ByteSource
    url: str
    content_type: str = DEFAULT_CONTENT_TYPE


@dataclass(frozen=True)
class ParsedSignedTarget:
    """Token and object id extracted from a signed URL.

    ``token`` and ``object_id`` are either both set or both None.
    """

    token: Optional[str]
    object_id: Optional[str]
    cleaned_url: str

    @property
    def is_valid(self) -> bool:
        """Check if both reserved parameters were present."""
        return bool(self.token and self.object_id)


@dataclass(frozen=True)
class TransportResult:
    """Outcome of moving one file's bytes."""

    success: bool
    status_code: Optional[int] = None
    bytes_sent: int = 0
    error: str = ""


@dataclass(frozen=True)
class UploadSuccess:
    """Success arm of an upload outcome."""

    object_id: str
    file_index: int


@dataclass(frozen=True)
class UploadFailure:
    """Failure arm of an upload outcome."""

    message: str
    file_index: int


@dataclass(frozen=True)
class UploadOutcome:
    """Per-file batch result; exactly one of ``data`` and ``error`` is set."""

    data: Optional[UploadSuccess] = None
    error: Optional[UploadFailure] = None

    def __post_init__(self) -> None:
        if (self.data is None) == (self.error is None):
            raise ValueError("UploadOutcome needs exactly one of data or error")

    @classmethod
    def success(cls, object_id: str, file_index: int) -> UploadOutcome:
        return cls(data=UploadSuccess(object_id=object_id, file_index=file_index))

    @classmethod
    def failure(cls, message: str, file_index: int) -> UploadOutcome:
        return cls(error=UploadFailure(message=message, file_index=file_index))

    @property
    def ok(self) -> bool:
        return self.data is not None

    @property
    def file_index(self) -> int:
        if self.data is not None:
            return self.data.file_index
        if self.error is not None:
            return self.error.file_index
        raise ValueError("UploadOutcome has neither data nor error")

    def to_dict(self) -> dict[str, dict[str, object]]:
        """Convert to the ``{"data": ...}`` / ``{"error": ...}`` wire shape."""
        if self.data is not None:
            return {"data": {"object_id": self.data.object_id, "file_index": self.data.file_index}}
        if self.error is None:
            raise ValueError("UploadOutcome has neither data nor error")
        return {"error": {"message": self.error.message, "file_index": self.error.file_index}}
