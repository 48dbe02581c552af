"""Tests for zapdos.core.logging module."""

from __future__ import annotations

import logging

import pytest

from zapdos.core.logging import LogContext, setup_logging


class TestLogContext:
    """Tests for LogContext."""

    def test_logs_start_and_completion(self, caplog: pytest.LogCaptureFixture):
        logger = logging.getLogger("zapdos.test")

        with caplog.at_level(logging.INFO, logger="zapdos.test"):
            with LogContext("batch upload", logger, files=3) as ctx:
                ctx.warning("%d failed", 1)

        messages = [r.getMessage() for r in caplog.records]
        assert messages[0] == "Starting batch upload (files=3)"
        assert messages[1] == "[batch upload] 1 failed (files=3)"
        assert messages[2].startswith("batch upload completed in")
        assert ctx.elapsed >= 0

    def test_logs_failure(self, caplog: pytest.LogCaptureFixture):
        logger = logging.getLogger("zapdos.test")

        with caplog.at_level(logging.INFO, logger="zapdos.test"):
            with pytest.raises(RuntimeError):
                with LogContext("commit", logger):
                    raise RuntimeError("boom")

        assert caplog.records[-1].levelno == logging.ERROR
        assert "boom" in caplog.records[-1].getMessage()

    def test_elapsed_before_enter(self):
        assert LogContext("idle", logging.getLogger("zapdos.test")).elapsed == 0.0


class TestSetupLogging:
    """Tests for setup_logging function."""

    def test_quiets_http_libraries(self):
        setup_logging(verbose=True)

        assert logging.getLogger("httpx").level == logging.WARNING
        assert logging.getLogger("httpcore").level == logging.WARNING
