"""Tests for the zapdos CLI."""

from __future__ import annotations

import json
from collections.abc import Generator
from pathlib import Path
from typing import Any
from unittest.mock import patch

import httpx
import pytest
from click.testing import CliRunner

from zapdos import __version__
from zapdos.cli.main import cli
from zapdos.core.client import ZapdosClient
from zapdos.core.config import Config


def _signed(object_id: str) -> str:
    return (
        f"https://storage.example.com/bucket/{object_id}"
        f"?X-Zapdos-Obj-Id={object_id}&X-Zapdos-Token=tok-{object_id}"
    )


@pytest.fixture
def runner() -> CliRunner:
    """Create a CLI test runner."""
    return CliRunner()


@pytest.fixture
def config_file(tmp_path: Path) -> Generator[Path, None, None]:
    """Point config loading and saving at a temporary file."""
    path = tmp_path / "config.yaml"
    with patch("zapdos.core.config.CONFIG_FILE", path), patch(
        "zapdos.cli.config_cmd.CONFIG_FILE", path
    ):
        yield path


@pytest.fixture
def backend(monkeypatch: pytest.MonkeyPatch, config_file: Path) -> list[httpx.Request]:
    """Serve the API and storage from a mock transport; returns seen requests."""
    requests: list[httpx.Request] = []
    counter = iter(range(100))

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        path = request.url.path
        if path == "/v1/signed-url/put":
            quantity = int(request.url.params["quantity"])
            return httpx.Response(200, json={"data": [_signed(f"o{next(counter)}") for _ in range(quantity)]})
        if request.url.host == "storage.example.com":
            if path.endswith("/bad"):
                return httpx.Response(403, json={"error": {"message": "Signature expired"}})
            return httpx.Response(200)
        if request.method == "PATCH":
            return httpx.Response(200)
        if path == "/v1/query":
            body = json.loads(request.content)
            if body["from"] == "jobs":
                rows: list[dict[str, Any]] = [
                    {"id": "j1", "status": "done", "content": {"object_id": "o1", "type": "indexing"}}
                ]
            else:
                rows = [{"id": "o1", "metadata": {"file_name": "a.mp4", "content_type": "video/mp4"}}]
            return httpx.Response(200, json={"data": rows})
        return httpx.Response(404)

    transport = httpx.MockTransport(handler)
    monkeypatch.setenv("ZAPDOS_API_KEY", "sk-test")
    monkeypatch.setattr(
        "zapdos.cli.common.ZapdosClient",
        lambda **kwargs: ZapdosClient(transport=transport, async_transport=transport, **kwargs),
    )
    return requests


# =============================================================================
# Main Group Tests
# =============================================================================


class TestMain:
    """Tests for the top-level group."""

    def test_version(self, runner: CliRunner):
        result = runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_help_lists_commands(self, runner: CliRunner):
        result = runner.invoke(cli, ["--help"])

        for name in ("config", "upload", "urls", "objects", "jobs"):
            assert name in result.output


# =============================================================================
# Config Command Tests
# =============================================================================


class TestConfigCommands:
    """Tests for config init/show/use-context."""

    def test_init_writes_profile(self, runner: CliRunner, config_file: Path):
        result = runner.invoke(
            cli,
            ["config", "init", "--url", "https://api.example.com/", "--upload-method", "post"],
        )

        assert result.exit_code == 0, result.output
        profile = Config.load(config_file).get_profile()
        assert profile.url == "https://api.example.com"
        assert profile.upload_method == "POST"

    def test_init_existing_profile_needs_force(self, runner: CliRunner, config_file: Path):
        runner.invoke(cli, ["config", "init"])

        result = runner.invoke(cli, ["config", "init"])
        assert result.exit_code == 1

        result = runner.invoke(cli, ["config", "init", "--force", "--timeout", "9"])
        assert result.exit_code == 0
        assert Config.load(config_file).get_profile().timeout == 9

    def test_init_rejects_bad_url(self, runner: CliRunner, config_file: Path):
        result = runner.invoke(cli, ["config", "init", "--url", "api.example.com"])

        assert result.exit_code == 1
        assert not config_file.exists()

    def test_show_without_config(self, runner: CliRunner, config_file: Path):
        result = runner.invoke(cli, ["config", "show"])

        assert result.exit_code == 1

    def test_show(self, runner: CliRunner, config_file: Path):
        runner.invoke(cli, ["config", "init", "--url", "https://api.example.com"])

        result = runner.invoke(cli, ["config", "show"])

        assert result.exit_code == 0
        assert "https://api.example.com" in result.output

    def test_use_context(self, runner: CliRunner, config_file: Path):
        runner.invoke(cli, ["config", "init"])
        runner.invoke(cli, ["config", "init", "--profile", "staging", "--url", "https://s.example.com"])

        result = runner.invoke(cli, ["config", "use-context", "staging"])

        assert result.exit_code == 0
        assert Config.load(config_file).default_profile == "staging"

    def test_use_context_unknown(self, runner: CliRunner, config_file: Path):
        runner.invoke(cli, ["config", "init"])

        result = runner.invoke(cli, ["config", "use-context", "nope"])

        assert result.exit_code == 1


# =============================================================================
# Upload Command Tests
# =============================================================================


class TestUploadCommand:
    """Tests for upload and urls commands."""

    def test_upload_prints_object_ids(
        self, runner: CliRunner, backend: list[httpx.Request], tmp_path: Path
    ):
        a = tmp_path / "a.mp4"
        b = tmp_path / "b.png"
        a.write_bytes(b"aaa")
        b.write_bytes(b"bb")

        result = runner.invoke(cli, ["upload", "-q", str(a), str(b)])

        assert result.exit_code == 0, result.output
        assert result.output.split() == ["o0", "o1"]
        assert backend[0].url.params["quantity"] == "2"

    def test_upload_failure_exits_nonzero(
        self, runner: CliRunner, backend: list[httpx.Request], tmp_path: Path
    ):
        a = tmp_path / "a.mp4"
        a.write_bytes(b"aaa")
        b = tmp_path / "b.mp4"
        b.write_bytes(b"bbb")

        result = runner.invoke(
            cli,
            ["upload", str(a), str(b), "--url", _signed("good"), "--url", _signed("bad")],
        )

        assert result.exit_code == 1
        assert "Signature expired" in result.output
        assert all(r.url.path != "/v1/signed-url/put" for r in backend)

    def test_upload_method_override(
        self, runner: CliRunner, backend: list[httpx.Request], tmp_path: Path
    ):
        a = tmp_path / "a.bin"
        a.write_bytes(b"x")

        result = runner.invoke(cli, ["upload", "-q", str(a), "--method", "post"])

        assert result.exit_code == 0, result.output
        uploads = [r for r in backend if r.url.host == "storage.example.com"]
        assert uploads[0].method == "POST"

    def test_upload_missing_api_key(
        self,
        runner: CliRunner,
        backend: list[httpx.Request],
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
    ):
        monkeypatch.delenv("ZAPDOS_API_KEY")
        a = tmp_path / "a.bin"
        a.write_bytes(b"x")

        result = runner.invoke(cli, ["upload", str(a)])

        assert result.exit_code == 1
        assert "ZAPDOS_API_KEY" in result.output
        assert backend == []

    def test_upload_unknown_profile(
        self, runner: CliRunner, backend: list[httpx.Request], tmp_path: Path
    ):
        a = tmp_path / "a.bin"
        a.write_bytes(b"x")

        result = runner.invoke(cli, ["upload", "-p", "nope", str(a)])

        assert result.exit_code == 1
        assert "nope" in result.output
        assert backend == []

    def test_urls(self, runner: CliRunner, backend: list[httpx.Request]):
        result = runner.invoke(cli, ["urls", "--quantity", "2"])

        assert result.exit_code == 0, result.output
        assert result.output.split() == [_signed("o0"), _signed("o1")]

    def test_urls_rejects_zero(self, runner: CliRunner, backend: list[httpx.Request]):
        result = runner.invoke(cli, ["urls", "-n", "0"])

        assert result.exit_code == 1
        assert backend == []


# =============================================================================
# Listing Command Tests
# =============================================================================


class TestListingCommands:
    """Tests for objects and jobs commands."""

    def test_objects_quiet(self, runner: CliRunner, backend: list[httpx.Request]):
        result = runner.invoke(cli, ["objects", "-q", "--kind", "video", "--limit", "3"])

        assert result.exit_code == 0, result.output
        assert result.output.split() == ["o1"]
        body = json.loads(backend[0].content)
        assert body["where"] == [["metadata->>'content_type'", "~", "^video/"]]
        assert body["limit"] == 3

    def test_objects_table(self, runner: CliRunner, backend: list[httpx.Request]):
        result = runner.invoke(cli, ["objects"])

        assert result.exit_code == 0, result.output
        assert "a.mp4" in result.output

    def test_jobs(self, runner: CliRunner, backend: list[httpx.Request]):
        result = runner.invoke(cli, ["jobs", "-q"])

        assert result.exit_code == 0, result.output
        assert result.output.split() == ["j1"]
        assert json.loads(backend[0].content)["from"] == "jobs"
