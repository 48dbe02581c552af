"""Single-file transport to a signed storage URL.

This is an internal implementation detail. Use ``upload_batch`` from
``zapdos.uploads.coordinator`` or ``StorageService`` as the public API.
"""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import AsyncIterator
from typing import BinaryIO, Optional

import httpx

from zapdos.core.client import error_message_from_body
from zapdos.core.exceptions import TransportError
from zapdos.models.upload import DEFAULT_CONTENT_TYPE, ByteSource, TransportResult
from zapdos.uploads.callbacks import UploadCallbacks, emit
from zapdos.uploads.constants import (
    DEFAULT_CHUNK_SIZE,
    DEFAULT_UPLOAD_METHOD,
    FALLBACK_UPLOAD_ERROR,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Byte Sources
# =============================================================================


async def _read_file(f: BinaryIO, chunk_size: int) -> AsyncIterator[bytes]:
    while chunk := await asyncio.to_thread(f.read, chunk_size):
        yield chunk


async def iter_source(source: ByteSource, chunk_size: int = DEFAULT_CHUNK_SIZE) -> AsyncIterator[bytes]:
    """Yield a byte source in chunks without loading files or streams whole.

    Opening and reading paths and file objects run in a worker thread so a
    slow disk or stream never blocks the event loop.

    Args:
        source: Bytes, a filesystem path, a binary file object, or an async
            iterable of byte chunks.
        chunk_size: Bytes per chunk for sources read here.

    Raises:
        TypeError: If the source type is not supported.
    """
    if isinstance(source, (bytes, bytearray)):
        for start in range(0, len(source), chunk_size):
            yield bytes(source[start : start + chunk_size])
    elif isinstance(source, (str, os.PathLike)):
        f = await asyncio.to_thread(open, source, "rb")
        try:
            async for chunk in _read_file(f, chunk_size):
                yield chunk
        finally:
            f.close()
    elif hasattr(source, "__aiter__"):
        async for chunk in source:  # type: ignore[union-attr]
            yield chunk
    elif hasattr(source, "read"):
        async for chunk in _read_file(source, chunk_size):  # type: ignore[arg-type]
            yield chunk
    else:
        raise TypeError(f"Unsupported byte source: {type(source).__name__}")


def is_supported_source(source: object) -> bool:
    """Check if ``iter_source`` can read from this source."""
    return (
        isinstance(source, (bytes, bytearray, str, os.PathLike))
        or hasattr(source, "__aiter__")
        or hasattr(source, "read")
    )


def progress_percent(loaded: int, total: Optional[int]) -> int:
    """Whole-number percentage of ``loaded`` over ``total``; 0 if total is unknown."""
    if not total:
        return 0
    # Round half up, capped in case the source outgrows its declared size.
    return min(100, int(loaded * 100 / total + 0.5))


async def _track_progress(
    chunks: AsyncIterator[bytes],
    total: Optional[int],
    callbacks: Optional[UploadCallbacks],
    sent: list[int],
) -> AsyncIterator[bytes]:
    on_progress = callbacks.on_progress if callbacks else None
    async for chunk in chunks:
        yield chunk
        sent[0] += len(chunk)
        emit(on_progress, value=progress_percent(sent[0], total))


# =============================================================================
# Upload
# =============================================================================


async def _failure_message(resp: httpx.Response) -> str:
    """Best-effort message for a non-2xx storage response."""
    await resp.aread()
    try:
        body = resp.json()
    except ValueError:
        body = None
    return error_message_from_body(body) or f"Request failed with status code {resp.status_code}"


async def _send(
    client: httpx.AsyncClient,
    url: str,
    body: AsyncIterator[bytes],
    *,
    method: str,
    headers: dict[str, str],
) -> httpx.Response:
    """Send one request body.

    Raises:
        TransportError: On network failure or a non-2xx response.
    """
    try:
        resp = await client.request(method, url, content=body, headers=headers)
    except (httpx.HTTPError, httpx.InvalidURL, OSError) as e:
        raise TransportError(str(e) or FALLBACK_UPLOAD_ERROR) from e

    if not resp.is_success:
        raise TransportError(await _failure_message(resp), status_code=resp.status_code)
    return resp


async def upload_file(
    client: httpx.AsyncClient,
    url: str,
    source: ByteSource,
    *,
    method: str = DEFAULT_UPLOAD_METHOD,
    size: Optional[int] = None,
    content_type: Optional[str] = None,
    headers: Optional[dict[str, str]] = None,
    callbacks: Optional[UploadCallbacks] = None,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> TransportResult:
    """Upload one byte source to one URL.

    Reports progress through ``on_progress`` while streaming, then calls
    ``on_stored`` on success or ``on_failed`` with a readable message on
    failure. Never retries and never raises for transport failures.

    Args:
        client: Async HTTP client.
        url: Upload URL, already stripped of reserved signed-URL parameters.
        source: Bytes to send.
        method: ``PUT`` or ``POST``.
        size: Total size in bytes, if known.
        content_type: Content type; defaults to ``application/octet-stream``.
        headers: Extra request headers.
        callbacks: Per-file callbacks without file index.
        chunk_size: Bytes per body chunk.

    Returns:
        TransportResult describing the attempt.
    """
    request_headers = {**(headers or {}), "Content-Type": content_type or DEFAULT_CONTENT_TYPE}
    if size is not None and size >= 0:
        request_headers["Content-Length"] = str(size)

    sent = [0]
    body = _track_progress(iter_source(source, chunk_size), size, callbacks, sent)

    try:
        resp = await _send(client, url, body, method=method, headers=request_headers)
    except TransportError as e:
        logger.warning("Upload failed: %s", e.message)
        if callbacks:
            emit(callbacks.on_failed, message=e.message)
        return TransportResult(
            success=False,
            status_code=e.status_code,
            bytes_sent=sent[0],
            error=e.message,
        )

    logger.debug("Stored %d bytes (HTTP %d)", sent[0], resp.status_code)
    if callbacks:
        emit(callbacks.on_stored)
    return TransportResult(success=True, status_code=resp.status_code, bytes_sent=sent[0])
