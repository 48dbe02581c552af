"""Metadata commit and job-status relay.

Once a file's bytes are stored, its metadata is committed with a PATCH that
also asks the service to start an indexing job. The response body is an
NDJSON stream of lifecycle events which is relayed to the file's callbacks
as it arrives. Nothing here is fatal to the file: a degraded commit is
logged and the upload still counts as stored.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterable, AsyncIterator
from contextlib import aclosing
from typing import Any, Optional

import httpx
from pydantic import ValidationError as PydanticValidationError

from zapdos.core.client import STORAGE_PATH, error_message_from_body
from zapdos.core.exceptions import MalformedSignedUrlError, MetadataCommitError
from zapdos.models.jobs import JobEventType, JobStatusData, JobStatusRecord
from zapdos.models.upload import ParsedSignedTarget, UploadItem
from zapdos.uploads.callbacks import UploadCallbacks, emit
from zapdos.uploads.constants import CREATE_INDEXING_JOB, DEFAULT_OBJECT_KIND, TOKEN_HEADER
from zapdos.uploads.ndjson import aiter_ndjson

logger = logging.getLogger(__name__)

_JOB_HANDLERS = {
    JobEventType.INDEXING_STARTED: "on_indexing_started",
    JobEventType.INDEXING_COMPLETED: "on_indexing_completed",
    JobEventType.INDEXING_FAILED: "on_indexing_failed",
    JobEventType.TRANSCRIPTION: "on_transcription",
}


def build_metadata(item: UploadItem, kind: str = DEFAULT_OBJECT_KIND) -> dict[str, Any]:
    """Metadata committed for an uploaded file."""
    return {
        "file_name": item.name,
        "size": item.size,
        "content_type": item.content_type,
        "kind": kind,
    }


async def commit_metadata(
    client: httpx.AsyncClient,
    base_url: str,
    target: ParsedSignedTarget,
    metadata: dict[str, Any],
) -> AsyncIterator[Any]:
    """Commit metadata for a stored object and yield the streamed records.

    Args:
        client: Async HTTP client.
        base_url: API base URL.
        target: Signed target of the stored object.
        metadata: Metadata fields to merge into the object's record.

    Yields:
        Decoded NDJSON records, unvalidated.

    Raises:
        MalformedSignedUrlError: If the target has no object id or token.
        MetadataCommitError: If the request fails or is rejected.
    """
    if target.object_id is None or target.token is None:
        raise MalformedSignedUrlError(target.cleaned_url)
    url = f"{base_url}{STORAGE_PATH}/{target.object_id}"
    headers = {TOKEN_HEADER: target.token, "Content-Type": "application/json"}
    payload = {"metadata": metadata, "create_indexing_job": CREATE_INDEXING_JOB}

    try:
        async with client.stream("PATCH", url, json=payload, headers=headers) as resp:
            if not resp.is_success:
                await resp.aread()
                try:
                    body = resp.json()
                except ValueError:
                    body = None
                reason = error_message_from_body(body) or f"HTTP {resp.status_code}"
                raise MetadataCommitError(target.object_id, reason)

            async with aclosing(aiter_ndjson(resp.aiter_bytes())) as records:
                async for record in records:
                    yield record
    except httpx.HTTPError as e:
        raise MetadataCommitError(target.object_id, str(e) or type(e).__name__) from e


def dispatch_event(data: JobStatusData, callbacks: Optional[UploadCallbacks]) -> bool:
    """Route one job-status event to its callback.

    Returns:
        True if the event type is known.
    """
    event = data.event
    if event is None:
        logger.debug("Ignoring unknown job-status event %r for %s", data.type, data.object_id)
        return False

    logger.debug("Job-status event %s for %s", event.value, data.object_id)
    if callbacks is None:
        return True

    if event is JobEventType.METADATA_UPDATED:
        emit(callbacks.on_completed, object_id=data.object_id)
    elif callbacks.job is not None:
        handler = getattr(callbacks.job, _JOB_HANDLERS[event])
        emit(handler, object_id=data.object_id, job_id=data.job_id)
    return True


async def relay_job_status(
    records: AsyncIterable[Any],
    callbacks: Optional[UploadCallbacks],
) -> int:
    """Validate streamed records and dispatch them to callbacks.

    Error records and records that fail validation are logged and skipped.

    Returns:
        Number of events dispatched.
    """
    dispatched = 0
    async for raw in records:
        try:
            record = JobStatusRecord.model_validate(raw)
        except PydanticValidationError as e:
            logger.warning("Skipping malformed job-status record: %s", e.errors()[0]["msg"])
            continue

        if record.error is not None:
            logger.warning("Error in metadata update stream: %s", record.error.message)
            continue

        if record.data is not None and dispatch_event(record.data, callbacks):
            dispatched += 1
    return dispatched


async def commit_and_relay(
    client: httpx.AsyncClient,
    base_url: str,
    target: ParsedSignedTarget,
    item: UploadItem,
    callbacks: Optional[UploadCallbacks],
) -> int:
    """Commit a stored file's metadata and relay its job events.

    Degraded commits are logged, never raised.

    Returns:
        Number of events dispatched.
    """
    stream = commit_metadata(client, base_url, target, build_metadata(item))
    try:
        async with aclosing(stream) as records:
            dispatched = await relay_job_status(records, callbacks)
    except MetadataCommitError as e:
        logger.warning("%s", e)
        return 0

    if dispatched == 0:
        logger.debug("Metadata commit for %s returned no job-status events", target.object_id)
    return dispatched
