"""Core modules for zapdos."""

from zapdos.core.client import ZapdosClient
from zapdos.core.config import CONFIG_DIR, CONFIG_FILE, DEFAULT_BASE_URL, Config, Profile
from zapdos.core.exceptions import (
    APIError,
    AuthenticationError,
    ConfigurationError,
    ConnectionError,
    InvalidURLError,
    MalformedSignedUrlError,
    MetadataCommitError,
    NetworkError,
    OperationError,
    ProfileNotFoundError,
    RecordDecodeError,
    ResourceNotFoundError,
    ServerUnreachableError,
    TransportError,
    ValidationError,
    ZapdosError,
)
from zapdos.core.logging import LogContext, setup_logging
from zapdos.core.validation import (
    validate_quantity,
    validate_server_url,
    validate_sort_order,
    validate_timeout,
    validate_upload_method,
)

__all__ = [
    # Exceptions
    "ZapdosError",
    "ConfigurationError",
    "ProfileNotFoundError",
    "ValidationError",
    "InvalidURLError",
    "MalformedSignedUrlError",
    "ConnectionError",
    "NetworkError",
    "ServerUnreachableError",
    "AuthenticationError",
    "APIError",
    "ResourceNotFoundError",
    "OperationError",
    "TransportError",
    "MetadataCommitError",
    "RecordDecodeError",
    # Validation
    "validate_server_url",
    "validate_upload_method",
    "validate_timeout",
    "validate_quantity",
    "validate_sort_order",
    # Config
    "Config",
    "Profile",
    "CONFIG_DIR",
    "CONFIG_FILE",
    "DEFAULT_BASE_URL",
    # Client
    "ZapdosClient",
    # Logging
    "setup_logging",
    "LogContext",
]
