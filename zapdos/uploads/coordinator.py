"""Batch upload coordinator.

Runs one pipeline per file, all concurrently on the event loop:

    pending -> transporting -> failed
                            -> stored -> committing -> completed

A pipeline's outcome is decided by its transport phase. The commit phase
only feeds callbacks and logs; its failures never reach the outcome list.
The batch call itself does not raise for per-file trouble, and outcomes are
returned sorted by file index whatever order the files finished in.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass, replace
from typing import Optional

import httpx

from zapdos.core.logging import LogContext
from zapdos.core.validation import validate_server_url, validate_upload_method
from zapdos.models.upload import (
    ParsedSignedTarget,
    PipelineState,
    UploadItem,
    UploadOutcome,
)
from zapdos.uploads.callbacks import UploadCallbacks, emit, extend_callbacks
from zapdos.uploads.constants import DEFAULT_CHUNK_SIZE, DEFAULT_UPLOAD_METHOD
from zapdos.uploads.metadata import commit_and_relay
from zapdos.uploads.signed_url import resolve_signed_target
from zapdos.uploads.transport import is_supported_source, upload_file

logger = logging.getLogger(__name__)

MALFORMED_SIGNED_URL_MESSAGE = "Malformed signed url"


# =============================================================================
# Pipeline Context
# =============================================================================


@dataclass
class PipelineContext:
    """Everything one file's pipeline owns, passed explicitly between stages."""

    file_index: int
    item: UploadItem
    target: ParsedSignedTarget
    callbacks: Optional[UploadCallbacks]
    state: PipelineState = PipelineState.PENDING
    failure_reported: bool = False

    def advance(self, state: PipelineState) -> None:
        """Move to the next state."""
        if self.state.is_terminal:
            raise RuntimeError(f"File {self.file_index} already {self.state.value}")
        logger.debug("File %d: %s -> %s", self.file_index, self.state.value, state.value)
        self.state = state

    def report_failure(self, message: str) -> None:
        """Call ``on_failed`` at most once for this file."""
        if self.failure_reported or self.callbacks is None:
            return
        self.failure_reported = True
        emit(self.callbacks.on_failed, message=message)

    def fail(self, message: str) -> UploadOutcome:
        self.advance(PipelineState.FAILED)
        return UploadOutcome.failure(message, self.file_index)


def build_context(
    file_index: int,
    item: UploadItem,
    callbacks: Optional[UploadCallbacks],
) -> PipelineContext:
    """Resolve a file's signed target and tag its callbacks with its index."""
    return PipelineContext(
        file_index=file_index,
        item=item,
        target=resolve_signed_target(item.url),
        callbacks=extend_callbacks(callbacks, {"file_index": file_index}),
    )


# =============================================================================
# Per-file Pipeline
# =============================================================================


def _abort(ctx: PipelineContext, message: str) -> UploadOutcome:
    """Fail the file, telling ``on_failed`` unless it already heard."""
    try:
        ctx.report_failure(message)
    except Exception:
        logger.exception("File %d (%s): on_failed handler raised", ctx.file_index, ctx.item.name)
    return ctx.fail(message)


async def _transport(
    ctx: PipelineContext,
    client: httpx.AsyncClient,
    *,
    method: str,
    headers: Optional[dict[str, str]],
    chunk_size: int,
) -> Optional[UploadOutcome]:
    """Run the transport stage; return an outcome only if the file failed."""
    if not is_supported_source(ctx.item.source):
        return _abort(ctx, f"Unsupported byte source: {type(ctx.item.source).__name__}")

    callbacks = ctx.callbacks
    if callbacks is not None:
        callbacks = replace(callbacks, on_failed=ctx.report_failure)

    ctx.advance(PipelineState.TRANSPORTING)
    result = await upload_file(
        client,
        ctx.target.cleaned_url,
        ctx.item.source,
        method=method,
        size=ctx.item.size,
        content_type=ctx.item.content_type,
        headers=headers,
        callbacks=callbacks,
        chunk_size=chunk_size,
    )
    if not result.success:
        return ctx.fail(result.error)

    ctx.advance(PipelineState.STORED)
    return None


async def _commit(ctx: PipelineContext, client: httpx.AsyncClient, base_url: str) -> None:
    """Run the commit stage; failures here are logged only."""
    ctx.advance(PipelineState.COMMITTING)
    try:
        await commit_and_relay(client, base_url, ctx.target, ctx.item, ctx.callbacks)
    except Exception:
        logger.exception("File %d (%s): job-status relay aborted", ctx.file_index, ctx.item.name)
    ctx.advance(PipelineState.COMPLETED)


async def run_pipeline(
    ctx: PipelineContext,
    client: httpx.AsyncClient,
    *,
    base_url: str,
    method: str = DEFAULT_UPLOAD_METHOD,
    headers: Optional[dict[str, str]] = None,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> UploadOutcome:
    """Drive one file from pending to a terminal state.

    Returns:
        The file's outcome. Never raises.
    """
    object_id = ctx.target.object_id
    if object_id is None or not ctx.target.is_valid:
        logger.warning("File %d (%s): malformed signed url", ctx.file_index, ctx.item.name)
        return _abort(ctx, MALFORMED_SIGNED_URL_MESSAGE)

    try:
        failed = await _transport(
            ctx, client, method=method, headers=headers, chunk_size=chunk_size
        )
    except Exception as e:
        logger.exception("File %d (%s): upload aborted", ctx.file_index, ctx.item.name)
        return _abort(ctx, str(e) or type(e).__name__)

    if failed is not None:
        return failed

    await _commit(ctx, client, base_url)
    return UploadOutcome.success(object_id, ctx.file_index)


# =============================================================================
# Batch Upload
# =============================================================================


async def upload_batch(
    items: Sequence[UploadItem],
    callbacks: Optional[UploadCallbacks] = None,
    *,
    base_url: str,
    client: Optional[httpx.AsyncClient] = None,
    method: str = DEFAULT_UPLOAD_METHOD,
    headers: Optional[dict[str, str]] = None,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> list[UploadOutcome]:
    """Upload a batch of files concurrently.

    Every handler in ``callbacks`` is called with an extra ``file_index``
    keyword naming the file it concerns.

    Args:
        items: Files to upload, each with its signed URL.
        callbacks: Optional callback tree shared by all files.
        base_url: API base URL for metadata commits.
        client: Async HTTP client; one is created and closed if omitted.
        method: ``PUT`` or ``POST`` for the byte upload.
        headers: Extra headers for the byte upload.
        chunk_size: Bytes per body chunk.

    Returns:
        One outcome per item, sorted by file index.
    """
    base_url = validate_server_url(base_url)
    method = validate_upload_method(method)
    contexts = [build_context(i, item, callbacks) for i, item in enumerate(items)]
    if not contexts:
        return []

    owns_client = client is None
    http = client or httpx.AsyncClient(follow_redirects=True)

    try:
        with LogContext("batch upload", logger, files=len(contexts)) as log:
            outcomes = await asyncio.gather(
                *(
                    run_pipeline(
                        ctx,
                        http,
                        base_url=base_url,
                        method=method,
                        headers=headers,
                        chunk_size=chunk_size,
                    )
                    for ctx in contexts
                )
            )
            failed = sum(1 for outcome in outcomes if not outcome.ok)
            if failed:
                log.warning("%d of %d files failed", failed, len(outcomes))
    finally:
        if owns_client:
            await http.aclose()

    return sorted(outcomes, key=lambda outcome: outcome.file_index)
