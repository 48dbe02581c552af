"""Logging utilities for zapdos.

Provides stderr logging setup and a timing context for batch operations.
"""

from __future__ import annotations

import logging
import sys
import time
from typing import Any, Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(*, quiet: bool = False, verbose: bool = False) -> None:
    """Configure stderr logging for the CLI.

    Args:
        quiet: If True, only show errors.
        verbose: If True, show debug messages.
    """
    level = logging.ERROR if quiet else logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt=LOG_DATE_FORMAT, stream=sys.stderr)

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


class LogContext:
    """Logs the start, duration and failure of one operation.

    Messages logged through the context carry the operation name and its
    ``key=value`` fields.
    """

    def __init__(self, operation: str, logger: logging.Logger, **fields: Any):
        self.operation = operation
        self.logger = logger
        self.fields = ", ".join(f"{k}={v}" for k, v in fields.items())
        self._started: Optional[float] = None

    @property
    def elapsed(self) -> float:
        """Seconds since the context was entered."""
        if self._started is None:
            return 0.0
        return time.monotonic() - self._started

    def __enter__(self) -> LogContext:
        self._started = time.monotonic()
        self.logger.info("Starting %s (%s)", self.operation, self.fields)
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if exc_type:
            self.logger.error("%s failed after %.2fs: %s", self.operation, self.elapsed, exc_val)
        else:
            self.logger.info("%s completed in %.2fs", self.operation, self.elapsed)

    def warning(self, message: str, *args: Any) -> None:
        self.logger.warning("[%s] " + message + " (%s)", self.operation, *args, self.fields)
