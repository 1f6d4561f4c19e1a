"""Tests for the GitHub fetcher and ZIP extractor (no network)."""

import json
import tempfile
import zipfile
from pathlib import Path

import pytest
import requests
from plugman import ExtractionError
from plugman import FetchError
from plugman import GitHubSourceFetcher
from plugman import ZipArchiveExtractor


def _response(status: int, body: bytes | dict = b"") -> requests.Response:
    response = requests.Response()
    response.status_code = status
    response._content = json.dumps(body).encode() if isinstance(body, dict) else body
    return response


class FakeSession:
    """Stands in for requests.Session, serving canned responses by URL."""

    def __init__(self, responses: dict):
        self.responses = responses
        self.headers: dict[str, str] = {}
        self.calls: list[tuple[str, dict]] = []

    def get(self, url, headers=None, timeout=None):
        self.calls.append((url, headers or {}))
        result = self.responses[url]
        if isinstance(result, Exception):
            raise result
        return result


LATEST = "https://api.github.com/repos/acme/widget/releases/latest"


def test_fetch_returns_body():
    """Successful download returns the raw bytes."""
    session = FakeSession({"https://example.com/a.vst3": _response(200, b"binary")})

    data = GitHubSourceFetcher(token="", session=session).fetch("https://example.com/a.vst3")

    assert data == b"binary"
    assert session.headers["User-Agent"] == "plugman"


def test_fetch_http_error():
    """Non-2xx responses become FetchError."""
    session = FakeSession({"https://example.com/a.vst3": _response(500)})

    with pytest.raises(FetchError, match="HTTP 500"):
        GitHubSourceFetcher(token="", session=session).fetch("https://example.com/a.vst3")


def test_fetch_network_error():
    """Connection failures become FetchError."""
    session = FakeSession({"https://example.com/a.vst3": requests.ConnectionError("refused")})

    with pytest.raises(FetchError, match="refused"):
        GitHubSourceFetcher(token="", session=session).fetch("https://example.com/a.vst3")


def test_fetch_latest_release_parses_assets():
    """Release tag and assets are mapped to the Release model."""
    body = {
        "tag_name": "v1.2.0",
        "assets": [
            {"name": "Widget.vst3", "browser_download_url": "https://dl/Widget.vst3"},
            {"name": "Widget-win64.zip", "browser_download_url": "https://dl/Widget-win64.zip"},
        ],
    }
    session = FakeSession({LATEST: _response(200, body)})

    release = GitHubSourceFetcher(token="", session=session).fetch_latest_release("acme", "widget")

    assert release.tag == "v1.2.0"
    assert [asset.name for asset in release.assets] == ["Widget.vst3", "Widget-win64.zip"]
    assert release.assets[0].download_url == "https://dl/Widget.vst3"


def test_fetch_latest_release_sends_token():
    """GITHUB_TOKEN is sent as a bearer token to the API."""
    session = FakeSession({LATEST: _response(200, {"tag_name": "v1", "assets": []})})

    GitHubSourceFetcher(token="secret", session=session).fetch_latest_release("acme", "widget")

    _, headers = session.calls[0]
    assert headers["Authorization"] == "Bearer secret"


def test_fetch_latest_release_reads_token_from_environment(monkeypatch):
    """Without an explicit token the environment is consulted."""
    monkeypatch.setenv("GITHUB_TOKEN", "from-env")

    assert GitHubSourceFetcher(session=FakeSession({})).token == "from-env"


def test_fetch_latest_release_not_found():
    """404 means missing repository or no releases."""
    session = FakeSession({LATEST: _response(404, {"message": "Not Found"})})

    with pytest.raises(FetchError, match="not found or has no releases"):
        GitHubSourceFetcher(token="", session=session).fetch_latest_release("acme", "widget")


def test_fetch_latest_release_rate_limited():
    """Rate limiting is reported with a hint."""
    session = FakeSession({LATEST: _response(403, {"message": "API rate limit exceeded for 1.2.3.4"})})

    with pytest.raises(FetchError, match="rate limit"):
        GitHubSourceFetcher(token="", session=session).fetch_latest_release("acme", "widget")


def test_fetch_latest_release_malformed_body():
    """Unexpected JSON shape becomes FetchError."""
    session = FakeSession({LATEST: _response(200, {"tag_name": "v1", "assets": [{"name": "x"}]})})

    with pytest.raises(FetchError, match="Unexpected release data"):
        GitHubSourceFetcher(token="", session=session).fetch_latest_release("acme", "widget")


def test_zip_extractor_extracts_tree():
    """Archive members land under the target directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        base = Path(tmpdir)
        archive = base / "bundle.zip"
        with zipfile.ZipFile(archive, "w") as zf:
            zf.writestr("Synth/Synth.clap", b"clap")
            zf.writestr("Presets/Pad.bwpreset", b"preset")

        ZipArchiveExtractor().extract(archive, base / "out")

        assert (base / "out" / "Synth" / "Synth.clap").read_bytes() == b"clap"
        assert (base / "out" / "Presets" / "Pad.bwpreset").read_bytes() == b"preset"


def test_zip_extractor_corrupt_archive():
    """Corrupt archives raise ExtractionError."""
    with tempfile.TemporaryDirectory() as tmpdir:
        archive = Path(tmpdir) / "broken.zip"
        archive.write_bytes(b"definitely not a zip")

        with pytest.raises(ExtractionError, match="broken.zip"):
            ZipArchiveExtractor().extract(archive, Path(tmpdir) / "out")
