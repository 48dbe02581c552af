"""Input validation helpers for zapdos."""

from __future__ import annotations

from urllib.parse import urlsplit

from zapdos.core.exceptions import InvalidURLError, ValidationError

VALID_SCHEMES = ("http", "https")
VALID_UPLOAD_METHODS = ("PUT", "POST")
VALID_SORT_ORDERS = ("asc", "desc")


def validate_server_url(url: str) -> str:
    """Validate and normalize an API base URL.

    Args:
        url: Base URL such as ``https://api.zapdoslabs.com/``.

    Returns:
        URL without trailing slashes.

    Raises:
        InvalidURLError: If the URL is empty or not http(s).
    """
    if not url or not url.strip():
        raise InvalidURLError(url or "", "URL cannot be empty")

    url = url.strip().rstrip("/")
    parts = urlsplit(url)
    if parts.scheme not in VALID_SCHEMES:
        raise InvalidURLError(url, "baseUrl must start with https:// or http://")
    if not parts.netloc:
        raise InvalidURLError(url, "missing host")
    return url


def validate_upload_method(method: str) -> str:
    """Validate the HTTP verb used against signed upload URLs."""
    normalized = method.upper()
    if normalized not in VALID_UPLOAD_METHODS:
        raise ValidationError(
            f"Upload method must be one of {', '.join(VALID_UPLOAD_METHODS)}",
            field="method",
            value=method,
        )
    return normalized


def validate_timeout(timeout: int) -> int:
    if timeout <= 0:
        raise ValidationError("Timeout must be positive", field="timeout", value=timeout)
    return timeout


def validate_quantity(quantity: int) -> int:
    if quantity < 1:
        raise ValidationError("Quantity must be at least 1", field="quantity", value=quantity)
    return quantity


def validate_sort_order(sort: str) -> str:
    if sort not in VALID_SORT_ORDERS:
        raise ValidationError("Sort must be 'asc' or 'desc'", field="sort", value=sort)
    return sort
