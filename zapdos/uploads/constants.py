"""Shared constants for the upload pipeline."""

# =============================================================================
# Signed URL
# =============================================================================

# Reserved query parameters carried by signed URLs. They are stripped before
# bytes are sent to the storage endpoint.
OBJECT_ID_PARAM = "X-Zapdos-Obj-Id"
TOKEN_PARAM = "X-Zapdos-Token"

# Header carrying the per-object token on the metadata commit
TOKEN_HEADER = "X-Zapdos-Token"

# =============================================================================
# Transport
# =============================================================================

DEFAULT_UPLOAD_METHOD = "PUT"

# Bytes read from the source per request-body chunk
DEFAULT_CHUNK_SIZE = 1024 * 1024

FALLBACK_UPLOAD_ERROR = "Upload failed"

# =============================================================================
# Metadata Commit
# =============================================================================

# Kind tag committed with every uploaded file
DEFAULT_OBJECT_KIND = "file"

# The server always creates the indexing job on commit today.
# TODO: expose create_indexing_job once the backend decouples indexing from the commit route.
CREATE_INDEXING_JOB = True
