"""Signed-URL upload pipeline for zapdos.

- Signed URL parsing (token and object id extraction)
- NDJSON decoding of streamed job-status responses
- Callback trees with per-file index injection
- Single-file transport, metadata commit and the batch coordinator

``StorageService`` in ``zapdos.services.storage`` wraps this pipeline for
everyday use; ``upload_batch`` is the lower-level async entry point.
"""

from zapdos.uploads.callbacks import (
    JobCallbacks,
    UploadCallbacks,
    extend_callbacks,
    unextend_callbacks,
)
from zapdos.uploads.constants import (
    DEFAULT_CHUNK_SIZE,
    DEFAULT_OBJECT_KIND,
    DEFAULT_UPLOAD_METHOD,
    OBJECT_ID_PARAM,
    TOKEN_PARAM,
)
from zapdos.uploads.coordinator import PipelineContext, run_pipeline, upload_batch
from zapdos.uploads.metadata import build_metadata, commit_and_relay, relay_job_status
from zapdos.uploads.ndjson import NDJSONDecoder, aiter_ndjson, iter_ndjson
from zapdos.uploads.signed_url import (
    extract_custom_params,
    parse_signed_url,
    resolve_signed_target,
)
from zapdos.uploads.transport import upload_file

__all__ = [
    # Constants
    "DEFAULT_CHUNK_SIZE",
    "DEFAULT_OBJECT_KIND",
    "DEFAULT_UPLOAD_METHOD",
    "OBJECT_ID_PARAM",
    "TOKEN_PARAM",
    # Callbacks
    "JobCallbacks",
    "UploadCallbacks",
    "extend_callbacks",
    "unextend_callbacks",
    # Signed URLs
    "extract_custom_params",
    "parse_signed_url",
    "resolve_signed_target",
    # NDJSON
    "NDJSONDecoder",
    "aiter_ndjson",
    "iter_ndjson",
    # Pipeline
    "upload_file",
    "build_metadata",
    "commit_and_relay",
    "relay_job_status",
    "PipelineContext",
    "run_pipeline",
    "upload_batch",
]
