"""Pytest configuration and fixtures for zapdos tests."""

from __future__ import annotations

import json
import tempfile
from collections.abc import Callable
from pathlib import Path
from typing import Any, Generator

import httpx
import pytest


def _ndjson(*records: dict[str, Any]) -> bytes:
    """Encode records as an NDJSON body."""
    return b"".join(json.dumps(r).encode() + b"\n" for r in records)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's environment out of tests."""
    for name in (
        "ZAPDOS_URL",
        "ZAPDOS_API_KEY",
        "ZAPDOS_PROFILE",
        "ZAPDOS_VERIFY_SSL",
        "ZAPDOS_TIMEOUT",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def sample_config_yaml() -> str:
    """Sample config YAML content."""
    return """
default_profile: test
output_format: table

profiles:
  test:
    url: https://api-test.example.com
    verify_ssl: false
    timeout: 30
    upload_method: POST

  production:
    url: https://api.example.com
    verify_ssl: true
    timeout: 60
"""


@pytest.fixture
def storage_app() -> Callable[[httpx.Request], httpx.Response]:
    """Fake storage + API backend.

    Uploads to storage.example.com succeed; PATCH /v1/storage/{id} answers
    with metadata_updated and indexing_started records. Requests are kept
    on ``handler.requests``.
    """
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        if request.url.host == "storage.example.com":
            return httpx.Response(200)
        if request.method == "PATCH":
            object_id = request.url.path.rsplit("/", 1)[-1]
            return httpx.Response(
                200,
                content=_ndjson(
                    {"data": {"type": "metadata_updated", "object_id": object_id}},
                    {
                        "data": {
                            "type": "indexing_started",
                            "object_id": object_id,
                            "job_id": f"job-{object_id}",
                        }
                    },
                ),
            )
        return httpx.Response(404)

    handler.requests = requests  # type: ignore[attr-defined]
    return handler
