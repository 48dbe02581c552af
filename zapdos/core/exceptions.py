"""Exception hierarchy for zapdos.

Provides typed exceptions for different failure modes with clear error messages.
"""

from __future__ import annotations

from typing import Any


class ZapdosError(Exception):
    """Base exception for all zapdos errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({detail_str})"
        return self.message


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(ZapdosError):
    """Error in configuration (missing, invalid, or malformed)."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any = None,
    ):
        details = {}
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = repr(value)
        super().__init__(message, details)
        self.field = field
        self.value = value


class ProfileNotFoundError(ConfigurationError):
    """Requested profile does not exist."""

    def __init__(self, profile: str):
        super().__init__(f"Profile not found: {profile}", field="profile", value=profile)
        self.profile = profile


# =============================================================================
# Validation Errors
# =============================================================================


class ValidationError(ZapdosError):
    """Input validation failed."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any = None,
    ):
        details = {}
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = repr(value)
        super().__init__(message, details)
        self.field = field
        self.value = value


class InvalidURLError(ValidationError):
    """Invalid URL format."""

    def __init__(self, url: str, reason: str = ""):
        msg = f"Invalid URL: {url}"
        if reason:
            msg = f"{msg} - {reason}"
        super().__init__(msg, field="url", value=url)
        self.url = url
        self.reason = reason


class MalformedSignedUrlError(ValidationError):
    """Signed URL is missing its object id or access token."""

    def __init__(self, url: str):
        super().__init__("Malformed signed url")
        self.url = url


# =============================================================================
# Connection Errors
# =============================================================================


class ConnectionError(ZapdosError):
    """Base class for connection-related errors."""

    def __init__(self, message: str, url: str | None = None):
        details = {"url": url} if url else {}
        super().__init__(message, details)
        self.url = url


class NetworkError(ConnectionError):
    """Network-level error (DNS, TCP, TLS, timeouts)."""

    def __init__(self, url: str, cause: str | None = None):
        msg = f"Network error connecting to {url}"
        if cause:
            msg = f"{msg}: {cause}"
        super().__init__(msg, url)
        self.cause = cause


class ServerUnreachableError(ConnectionError):
    """Server is not reachable."""

    def __init__(self, url: str):
        super().__init__(f"Server unreachable: {url}", url)


# =============================================================================
# Authentication Errors
# =============================================================================


class AuthenticationError(ZapdosError):
    """Authentication failed or no credentials were configured."""

    def __init__(self, url: str | None = None, reason: str = ""):
        msg = "Authentication failed"
        if url:
            msg = f"{msg} for {url}"
        if reason:
            msg = f"{msg}: {reason}"
        details = {"url": url} if url else {}
        super().__init__(msg, details)
        self.url = url
        self.reason = reason


# =============================================================================
# API Errors
# =============================================================================


class APIError(ZapdosError):
    """Server answered with a non-success status."""

    def __init__(
        self,
        status_code: int,
        message: str,
        path: str | None = None,
        body: Any = None,
    ):
        details: dict[str, Any] = {"status_code": status_code}
        if path:
            details["path"] = path
        super().__init__(message, details)
        self.status_code = status_code
        self.path = path
        self.body = body


class ResourceNotFoundError(APIError):
    """Requested resource does not exist."""

    def __init__(self, resource_type: str, resource_id: str):
        super().__init__(404, f"{resource_type} not found: {resource_id}", resource_id)
        self.resource_type = resource_type
        self.resource_id = resource_id


# =============================================================================
# Operation Errors
# =============================================================================


class OperationError(ZapdosError):
    """Error during an operation."""

    def __init__(
        self,
        operation: str,
        message: str,
        details: dict[str, Any] | None = None,
    ):
        full_details = {"operation": operation}
        if details:
            full_details.update(details)
        super().__init__(message, full_details)
        self.operation = operation


class TransportError(OperationError):
    """Moving a file's bytes to its signed URL failed."""

    def __init__(
        self,
        message: str,
        file_name: str | None = None,
        status_code: int | None = None,
    ):
        details: dict[str, Any] = {}
        if file_name:
            details["file"] = file_name
        if status_code is not None:
            details["status_code"] = status_code
        super().__init__("upload", message, details)
        self.file_name = file_name
        self.status_code = status_code


class MetadataCommitError(OperationError):
    """Metadata commit did not produce a usable job-status stream."""

    def __init__(self, object_id: str, reason: str):
        super().__init__(
            "commit",
            f"Metadata commit degraded for {object_id}: {reason}",
            {"object_id": object_id},
        )
        self.object_id = object_id
        self.reason = reason


class RecordDecodeError(ZapdosError):
    """A single NDJSON line could not be decoded."""

    def __init__(self, line: str, reason: str = ""):
        msg = "Failed to parse NDJSON line"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg, {"line": line[:200]})
        self.line = line
        self.reason = reason
