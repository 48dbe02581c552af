"""zapdos - Python client for the Zapdos object-storage and indexing API.

This package provides:
- Signed-URL uploads of many files at once, with per-file progress and
  background job events (indexing, transcription)
- A query builder for stored objects and jobs
- A command-line interface (``zapdos``)
"""

__version__ = "0.1.0"

from zapdos.core.client import ZapdosClient
from zapdos.core.config import Config, Profile
from zapdos.core.exceptions import (
    AuthenticationError,
    ConfigurationError,
    MalformedSignedUrlError,
    NetworkError,
    TransportError,
    ValidationError,
    ZapdosError,
)
from zapdos.models.upload import UploadItem, UploadOutcome
from zapdos.services.storage import StorageService
from zapdos.uploads.callbacks import JobCallbacks, UploadCallbacks
from zapdos.uploads.coordinator import upload_batch

__all__ = [
    "__version__",
    "ZapdosClient",
    "Config",
    "Profile",
    "StorageService",
    "UploadItem",
    "UploadOutcome",
    "UploadCallbacks",
    "JobCallbacks",
    "upload_batch",
    "ZapdosError",
    "AuthenticationError",
    "ConfigurationError",
    "MalformedSignedUrlError",
    "NetworkError",
    "TransportError",
    "ValidationError",
]
