"""Upload callback trees and file-index injection.

Callers hand the batch API one callback tree whose handlers expect a
``file_index`` keyword. Each per-file pipeline works with handlers that
know nothing about indexes. ``extend_callbacks`` bridges the two: it wraps
every handler so the pipeline's calls arrive with the file's context merged
in. ``unextend_callbacks`` is the inverse.

Both transforms walk the fixed tree schema (top-level handlers plus the
``job`` branch) and only wrap; no handler runs until it is called.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, fields
from typing import Any, Optional

from zapdos.core.exceptions import ValidationError

Handler = Callable[..., Any]


@dataclass(frozen=True)
class JobCallbacks:
    """Handlers for background job events, all called with object_id and job_id."""

    on_indexing_started: Optional[Handler] = None
    on_indexing_completed: Optional[Handler] = None
    on_indexing_failed: Optional[Handler] = None
    on_transcription: Optional[Handler] = None


@dataclass(frozen=True)
class UploadCallbacks:
    """Handlers for one file's upload lifecycle.

    Keyword arguments per handler:

    - ``on_progress(value)``: whole-number percentage, 0 when size is unknown
    - ``on_stored()``: bytes landed in storage
    - ``on_completed(object_id)``: metadata committed
    - ``on_failed(message)``: transport failed, the file is done
    - ``job``: nested :class:`JobCallbacks`
    """

    on_progress: Optional[Handler] = None
    on_stored: Optional[Handler] = None
    on_completed: Optional[Handler] = None
    on_failed: Optional[Handler] = None
    job: Optional[JobCallbacks] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> UploadCallbacks:
        """Build a tree from a nested mapping of handler names.

        Raises:
            ValidationError: On keys outside the callback schema.
        """
        top_names = {f.name for f in fields(cls)}
        unknown = set(data) - top_names
        if unknown:
            raise ValidationError(
                f"Unknown callback(s): {', '.join(sorted(unknown))}",
                field="callbacks",
            )

        job = data.get("job")
        if isinstance(job, Mapping):
            job_names = {f.name for f in fields(JobCallbacks)}
            unknown = set(job) - job_names
            if unknown:
                raise ValidationError(
                    f"Unknown job callback(s): {', '.join(sorted(unknown))}",
                    field="callbacks.job",
                )
            job = JobCallbacks(**job)

        return cls(**{**data, "job": job})


def emit(handler: Optional[Handler], **kwargs: Any) -> None:
    """Call a handler if one is set."""
    if handler is not None:
        handler(**kwargs)


# =============================================================================
# Structural maps
# =============================================================================


def _map_job(job: Optional[JobCallbacks], wrap: Callable[[Any], Any]) -> Optional[JobCallbacks]:
    if job is None:
        return None
    return JobCallbacks(
        on_indexing_started=wrap(job.on_indexing_started),
        on_indexing_completed=wrap(job.on_indexing_completed),
        on_indexing_failed=wrap(job.on_indexing_failed),
        on_transcription=wrap(job.on_transcription),
    )


def _map_tree(
    callbacks: Optional[UploadCallbacks],
    wrap: Callable[[Any], Any],
) -> Optional[UploadCallbacks]:
    if callbacks is None:
        return None
    return UploadCallbacks(
        on_progress=wrap(callbacks.on_progress),
        on_stored=wrap(callbacks.on_stored),
        on_completed=wrap(callbacks.on_completed),
        on_failed=wrap(callbacks.on_failed),
        job=_map_job(callbacks.job, wrap),
    )


def extend_callbacks(
    callbacks: Optional[UploadCallbacks],
    extension: Mapping[str, Any],
) -> Optional[UploadCallbacks]:
    """Wrap every handler so its keyword arguments gain ``extension``.

    Calling a wrapped handler with ``A`` calls the original with ``A``
    merged with ``extension`` (extension keys win).
    """
    extra = dict(extension)

    def wrap(handler: Any) -> Any:
        if not callable(handler):
            return handler

        def extended(**kwargs: Any) -> Any:
            return handler(**{**kwargs, **extra})

        return extended

    return _map_tree(callbacks, wrap)


def unextend_callbacks(
    callbacks: Optional[UploadCallbacks],
    extension: Mapping[str, Any],
) -> Optional[UploadCallbacks]:
    """Wrap every handler so the keys of ``extension`` are stripped from its calls."""
    stripped = frozenset(extension)

    def wrap(handler: Any) -> Any:
        if not callable(handler):
            return handler

        def unextended(**kwargs: Any) -> Any:
            return handler(**{k: v for k, v in kwargs.items() if k not in stripped})

        return unextended

    return _map_tree(callbacks, wrap)
