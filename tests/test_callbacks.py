"""Tests for zapdos.uploads.callbacks module."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from zapdos.core.exceptions import ValidationError
from zapdos.uploads.callbacks import (
    JobCallbacks,
    UploadCallbacks,
    emit,
    extend_callbacks,
    unextend_callbacks,
)


def _tree() -> tuple[UploadCallbacks, dict[str, MagicMock]]:
    mocks = {
        name: MagicMock(name=name)
        for name in (
            "on_progress",
            "on_stored",
            "on_completed",
            "on_failed",
            "on_indexing_started",
            "on_indexing_completed",
            "on_indexing_failed",
            "on_transcription",
        )
    }
    tree = UploadCallbacks(
        on_progress=mocks["on_progress"],
        on_stored=mocks["on_stored"],
        on_completed=mocks["on_completed"],
        on_failed=mocks["on_failed"],
        job=JobCallbacks(
            on_indexing_started=mocks["on_indexing_started"],
            on_indexing_completed=mocks["on_indexing_completed"],
            on_indexing_failed=mocks["on_indexing_failed"],
            on_transcription=mocks["on_transcription"],
        ),
    )
    return tree, mocks


# =============================================================================
# extend_callbacks Tests
# =============================================================================


class TestExtendCallbacks:
    """Tests for extend_callbacks function."""

    def test_merges_extension_into_every_handler(self):
        tree, mocks = _tree()

        extended = extend_callbacks(tree, {"file_index": 3})
        assert extended is not None
        assert extended.job is not None
        extended.on_progress(value=40)
        extended.on_stored()
        extended.on_completed(object_id="o1")
        extended.on_failed(message="boom")
        extended.job.on_indexing_started(object_id="o1", job_id="j1")
        extended.job.on_transcription(object_id="o1", job_id="j2")

        mocks["on_progress"].assert_called_once_with(value=40, file_index=3)
        mocks["on_stored"].assert_called_once_with(file_index=3)
        mocks["on_completed"].assert_called_once_with(object_id="o1", file_index=3)
        mocks["on_failed"].assert_called_once_with(message="boom", file_index=3)
        mocks["on_indexing_started"].assert_called_once_with(
            object_id="o1", job_id="j1", file_index=3
        )
        mocks["on_transcription"].assert_called_once_with(
            object_id="o1", job_id="j2", file_index=3
        )

    def test_extension_keys_win(self):
        handler = MagicMock()

        extended = extend_callbacks(UploadCallbacks(on_stored=handler), {"file_index": 1})
        assert extended is not None
        extended.on_stored(file_index=99)

        handler.assert_called_once_with(file_index=1)

    def test_does_not_invoke_handlers(self):
        tree, mocks = _tree()

        extend_callbacks(tree, {"file_index": 0})
        unextend_callbacks(tree, {"file_index": 0})

        for mock in mocks.values():
            mock.assert_not_called()

    def test_none_tree_stays_none(self):
        assert extend_callbacks(None, {"file_index": 0}) is None
        assert unextend_callbacks(None, {"file_index": 0}) is None

    def test_missing_handlers_stay_missing(self):
        extended = extend_callbacks(UploadCallbacks(), {"file_index": 0})

        assert extended == UploadCallbacks()

    def test_missing_job_branch_stays_missing(self):
        extended = extend_callbacks(UploadCallbacks(on_stored=MagicMock()), {"file_index": 0})

        assert extended is not None
        assert extended.job is None

    def test_returns_new_tree(self):
        tree, _ = _tree()

        extended = extend_callbacks(tree, {"file_index": 0})

        assert extended is not tree
        assert extended is not None
        assert extended.on_stored is not tree.on_stored

    def test_returns_handler_result(self):
        extended = extend_callbacks(
            UploadCallbacks(on_completed=lambda **kw: kw["file_index"] * 10),
            {"file_index": 4},
        )

        assert extended is not None
        assert extended.on_completed(object_id="o") == 40


# =============================================================================
# unextend_callbacks Tests
# =============================================================================


class TestUnextendCallbacks:
    """Tests for unextend_callbacks function."""

    def test_strips_extension_keys(self):
        tree, mocks = _tree()

        stripped = unextend_callbacks(tree, {"file_index": 0})
        assert stripped is not None
        assert stripped.job is not None
        stripped.on_completed(object_id="o1", file_index=5)
        stripped.job.on_indexing_failed(object_id="o1", job_id="j1", file_index=5)

        mocks["on_completed"].assert_called_once_with(object_id="o1")
        mocks["on_indexing_failed"].assert_called_once_with(object_id="o1", job_id="j1")

    def test_extend_after_unextend_is_identity(self):
        handler = MagicMock()
        ext = {"file_index": 2}

        round_trip = extend_callbacks(unextend_callbacks(UploadCallbacks(on_progress=handler), ext), ext)
        assert round_trip is not None
        round_trip.on_progress(value=10)

        handler.assert_called_once_with(value=10)

    def test_unextend_after_extend_is_identity(self):
        handler = MagicMock()
        ext = {"file_index": 2}

        round_trip = unextend_callbacks(extend_callbacks(UploadCallbacks(on_progress=handler), ext), ext)
        assert round_trip is not None
        round_trip.on_progress(value=10, file_index=2)

        handler.assert_called_once_with(value=10, file_index=2)


# =============================================================================
# UploadCallbacks / emit Tests
# =============================================================================


class TestUploadCallbacks:
    """Tests for UploadCallbacks construction helpers."""

    def test_from_dict_builds_nested_tree(self):
        started = MagicMock()

        tree = UploadCallbacks.from_dict({"on_stored": print, "job": {"on_indexing_started": started}})

        assert tree.on_stored is print
        assert isinstance(tree.job, JobCallbacks)
        assert tree.job.on_indexing_started is started

    def test_from_dict_rejects_unknown_keys(self):
        with pytest.raises(ValidationError):
            UploadCallbacks.from_dict({"on_progres": print})

    def test_from_dict_rejects_unknown_job_keys(self):
        with pytest.raises(ValidationError):
            UploadCallbacks.from_dict({"job": {"on_done": print}})

    def test_emit_skips_missing_handler(self):
        emit(None, value=1)

    def test_emit_passes_keywords(self):
        handler = MagicMock()

        emit(handler, value=1)

        handler.assert_called_once_with(value=1)
