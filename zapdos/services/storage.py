"""Storage service: signed URLs, uploads and object/job listings."""

from __future__ import annotations

import asyncio
import mimetypes
import os
from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Optional, Union

from zapdos.core.exceptions import ValidationError
from zapdos.core.validation import validate_upload_method
from zapdos.models.storage import JobItem, ObjectStorageItem
from zapdos.models.upload import DEFAULT_CONTENT_TYPE, UploadItem, UploadOutcome
from zapdos.uploads.callbacks import UploadCallbacks
from zapdos.uploads.constants import DEFAULT_CHUNK_SIZE, DEFAULT_UPLOAD_METHOD
from zapdos.uploads.coordinator import upload_batch

from .base import BaseService
from .query import QueryBuilder, QueryService

if TYPE_CHECKING:
    from zapdos.core.client import ZapdosClient

UploadSource = Union[UploadItem, str, "os.PathLike[str]"]

OBJECT_STORAGE_RESOURCE = "object_storage"
JOBS_RESOURCE = "jobs"
CONTENT_TYPE_FIELD = "metadata->>'content_type'"

# Content-type patterns for listing shortcuts
KIND_PATTERNS = {
    "video": "^video/",
    "image": "^image/",
}


def guess_content_type(name: str) -> str:
    """Guess a file's content type from its name."""
    content_type, _ = mimetypes.guess_type(name)
    return content_type or DEFAULT_CONTENT_TYPE


class StorageService(BaseService):
    """Upload files and list stored objects and jobs."""

    def __init__(self, client: "ZapdosClient", upload_method: str = DEFAULT_UPLOAD_METHOD) -> None:
        super().__init__(client)
        self.upload_method = validate_upload_method(upload_method)
        self.queries = QueryService(client)

    # =========================================================================
    # Signed URLs
    # =========================================================================

    def get_upload_urls(self, quantity: int = 1) -> list[str]:
        """Request fresh signed upload URLs."""
        return self.client.get_upload_urls(quantity)

    def build_items(
        self,
        paths: Sequence[Union[str, "os.PathLike[str]"]],
        signed_urls: Sequence[str],
    ) -> list[UploadItem]:
        """Pair local files with signed URLs.

        Raises:
            ValidationError: If counts differ or a path is not a file.
        """
        if len(paths) != len(signed_urls):
            raise ValidationError(
                f"Got {len(paths)} files but {len(signed_urls)} signed URLs",
                field="signed_urls",
            )

        items: list[UploadItem] = []
        for raw_path, url in zip(paths, signed_urls, strict=True):
            path = Path(raw_path)
            if not path.is_file():
                raise ValidationError(f"Not a file: {path}", field="path", value=str(path))
            items.append(
                UploadItem(
                    name=path.name,
                    size=path.stat().st_size,
                    content_type=guess_content_type(path.name),
                    source=path,
                    url=url,
                )
            )
        return items

    # =========================================================================
    # Uploads
    # =========================================================================

    def _resolve_items(
        self,
        sources: Sequence[UploadSource],
        signed_urls: Optional[Sequence[str]],
    ) -> list[UploadItem]:
        items = [s for s in sources if isinstance(s, UploadItem)]
        if len(items) == len(sources):
            return items
        if items:
            raise ValidationError("Pass either UploadItems or paths, not both", field="sources")

        paths = list(sources)  # type: ignore[arg-type]
        urls = list(signed_urls) if signed_urls is not None else self.get_upload_urls(len(paths))
        return self.build_items(paths, urls)

    async def aupload(
        self,
        sources: Sequence[UploadSource],
        callbacks: Optional[UploadCallbacks] = None,
        *,
        signed_urls: Optional[Sequence[str]] = None,
        method: Optional[str] = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> list[UploadOutcome]:
        """Upload files concurrently.

        Args:
            sources: Ready-made UploadItems, or local paths.
            callbacks: Callback tree; every handler also receives ``file_index``.
            signed_urls: URLs for the paths; fetched from the API if omitted.
            method: Upload verb override (``PUT``/``POST``).
            chunk_size: Bytes per body chunk.

        Returns:
            One outcome per file, in submission order.
        """
        if not sources:
            return []
        items = self._resolve_items(sources, signed_urls)

        async with self.client.async_client() as http:
            return await upload_batch(
                items,
                callbacks,
                base_url=self.client.base_url,
                client=http,
                method=method or self.upload_method,
                chunk_size=chunk_size,
            )

    def upload(
        self,
        sources: Sequence[UploadSource],
        callbacks: Optional[UploadCallbacks] = None,
        *,
        signed_urls: Optional[Sequence[str]] = None,
        method: Optional[str] = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> list[UploadOutcome]:
        """Blocking form of :meth:`aupload` for code without an event loop."""
        return asyncio.run(
            self.aupload(
                sources,
                callbacks,
                signed_urls=signed_urls,
                method=method,
                chunk_size=chunk_size,
            )
        )

    # =========================================================================
    # Listings
    # =========================================================================

    def objects(self, kind: Optional[str] = None) -> QueryBuilder:
        """Query stored objects, optionally filtered to ``video`` or ``image``."""
        builder = self.queries.from_(OBJECT_STORAGE_RESOURCE).select()
        if kind is None:
            return builder
        if kind not in KIND_PATTERNS:
            raise ValidationError(
                f"Unknown object kind: {kind}", field="kind", value=kind
            )
        return builder.where(CONTENT_TYPE_FIELD, "~", KIND_PATTERNS[kind])

    def videos(self) -> QueryBuilder:
        return self.objects("video")

    def images(self) -> QueryBuilder:
        return self.objects("image")

    def jobs(self) -> QueryBuilder:
        return self.queries.from_(JOBS_RESOURCE).select()

    def list_objects(
        self,
        kind: Optional[str] = None,
        *,
        limit: Optional[int] = None,
    ) -> list[ObjectStorageItem]:
        """List stored objects as models."""
        builder = self.objects(kind)
        if limit:
            builder.limit(limit)
        return self.queries.fetch_models(builder, ObjectStorageItem)

    def list_jobs(self, *, limit: Optional[int] = None) -> list[JobItem]:
        """List background jobs as models."""
        builder = self.jobs()
        if limit:
            builder.limit(limit)
        return self.queries.fetch_models(builder, JobItem)
