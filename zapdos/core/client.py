"""HTTP client for the Zapdos REST API.

Provides bearer authentication, typed error mapping and the async client
factory used by the upload pipeline. Requests are one-shot; nothing is
retried.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import httpx

from zapdos.core.config import DEFAULT_BASE_URL, DEFAULT_TIMEOUT
from zapdos.core.exceptions import (
    APIError,
    AuthenticationError,
    NetworkError,
    ResourceNotFoundError,
    ServerUnreachableError,
)
from zapdos.core.validation import validate_quantity, validate_server_url

# =============================================================================
# Constants
# =============================================================================

SIGNED_URL_PATH = "/v1/signed-url/put"
QUERY_PATH = "/v1/query"
STORAGE_PATH = "/v1/storage"


def error_message_from_body(body: Any) -> str | None:
    """Pull a human-readable message out of a structured error body.

    Understands ``{"error": {"message": ...}}``, ``{"error": "..."}`` and
    ``{"message": ...}``.
    """
    if not isinstance(body, dict):
        return None
    error = body.get("error")
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    if isinstance(error, str) and error:
        return error
    if body.get("message"):
        return str(body["message"])
    return None


def _json_or_none(resp: httpx.Response) -> Any:
    try:
        return resp.json()
    except ValueError:
        return None


# =============================================================================
# ZapdosClient
# =============================================================================


@dataclass
class ZapdosClient:
    """HTTP client for the Zapdos REST API.

    Authenticates with a static ``api_key`` (backend use) or with a
    ``token_provider`` callable returning a short-lived signed token.
    """

    base_url: str = DEFAULT_BASE_URL
    api_key: str | None = None
    token_provider: Callable[[], str] | None = None
    timeout: int = DEFAULT_TIMEOUT
    verify_ssl: bool = True
    transport: httpx.BaseTransport | None = field(default=None, repr=False)
    async_transport: httpx.AsyncBaseTransport | None = field(default=None, repr=False)
    _client: httpx.Client | None = field(init=False, default=None, repr=False)

    def __post_init__(self) -> None:
        """Validate and normalize URL."""
        self.base_url = validate_server_url(self.base_url)

    # =========================================================================
    # Client Management
    # =========================================================================

    def _get_client(self) -> httpx.Client:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.Client(
                base_url=self.base_url,
                timeout=self.timeout,
                verify=self.verify_ssl,
                follow_redirects=True,
                transport=self.transport,
            )
        return self._client

    def async_client(self) -> httpx.AsyncClient:
        """Create an async HTTP client configured like this one.

        The caller owns the returned client and must close it.
        """
        return httpx.AsyncClient(
            timeout=self.timeout,
            verify=self.verify_ssl,
            follow_redirects=True,
            transport=self.async_transport,
        )

    def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self) -> ZapdosClient:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    # =========================================================================
    # Authentication
    # =========================================================================

    @property
    def is_authenticated(self) -> bool:
        """Check if client has any credential source."""
        return bool(self.api_key) or self.token_provider is not None

    def get_auth_header(self) -> dict[str, str]:
        """Return the Authorization header for API requests.

        Raises:
            AuthenticationError: If no API key or token provider is configured,
                or the provider returns an empty token.
        """
        if self.api_key:
            return {"Authorization": f"Bearer {self.api_key}"}
        if self.token_provider is not None:
            token = self.token_provider()
            if not token:
                raise AuthenticationError(self.base_url, "Token provider returned no token")
            return {"Authorization": f"Bearer {token}"}
        raise AuthenticationError(self.base_url, "Missing API key")

    # =========================================================================
    # HTTP Methods
    # =========================================================================

    def _raise_for_status(self, resp: httpx.Response, path: str) -> None:
        """Map error statuses to typed exceptions."""
        if resp.is_success:
            return

        body = _json_or_none(resp)
        if resp.status_code in (401, 403):
            raise AuthenticationError(
                self.base_url,
                error_message_from_body(body) or "Invalid API key or permission denied",
            )
        if resp.status_code == 404:
            raise ResourceNotFoundError("resource", path)

        message = error_message_from_body(body) or f"HTTP {resp.status_code}"
        raise APIError(resp.status_code, message, path, body)

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any | None = None,
        headers: dict[str, str] | None = None,
        timeout: int | None = None,
    ) -> httpx.Response:
        """Execute a single authenticated HTTP request.

        Args:
            method: HTTP method.
            path: API path.
            params: Query parameters.
            json: JSON body.
            headers: Additional headers.
            timeout: Request timeout override.

        Returns:
            HTTP response.

        Raises:
            AuthenticationError: If credentials are missing or rejected.
            ResourceNotFoundError: On HTTP 404.
            APIError: On any other non-success status.
            NetworkError: On timeouts and transport failures.
        """
        client = self._get_client()
        request_headers = {**self.get_auth_header(), **(headers or {})}
        request_timeout = timeout or self.timeout

        try:
            resp = client.request(
                method,
                path,
                params=params,
                json=json,
                headers=request_headers,
                timeout=request_timeout,
            )
        except httpx.ConnectError as e:
            raise ServerUnreachableError(self.base_url) from e
        except httpx.TimeoutException as e:
            raise NetworkError(self.base_url, f"Timeout after {request_timeout}s") from e
        except httpx.TransportError as e:
            raise NetworkError(self.base_url, str(e)) from e

        self._raise_for_status(resp, path)
        return resp

    def get(
        self,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        timeout: int | None = None,
    ) -> httpx.Response:
        """GET request."""
        return self._request("GET", path, params=params, headers=headers, timeout=timeout)

    def post(
        self,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any | None = None,
        headers: dict[str, str] | None = None,
        timeout: int | None = None,
    ) -> httpx.Response:
        """POST request."""
        return self._request(
            "POST",
            path,
            params=params,
            json=json,
            headers=headers,
            timeout=timeout,
        )

    # =========================================================================
    # Convenience Methods
    # =========================================================================

    def get_upload_urls(self, quantity: int = 1) -> list[str]:
        """Request fresh signed upload URLs.

        Args:
            quantity: Number of URLs to mint.

        Returns:
            Signed URLs, each carrying its object id and access token.

        Raises:
            APIError: If the server answers with an error body.
        """
        validate_quantity(quantity)
        resp = self.get(SIGNED_URL_PATH, params={"quantity": quantity})
        body = resp.json()

        message = error_message_from_body(body)
        if message:
            raise APIError(resp.status_code, message, SIGNED_URL_PATH, body)

        urls = body.get("data") if isinstance(body, dict) else body
        if not isinstance(urls, list):
            raise APIError(resp.status_code, "Unexpected signed URL response", SIGNED_URL_PATH, body)
        return [str(u) for u in urls]
