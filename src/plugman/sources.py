"""Concrete collaborators: GitHub/HTTP fetching and ZIP extraction."""

import logging
import os
import zipfile
from collections.abc import Mapping
from pathlib import Path

import requests

from .exceptions import ExtractionError
from .exceptions import FetchError
from .schema import Release
from .schema import ReleaseAsset

logger = logging.getLogger(__name__)

GITHUB_API_URL = "https://api.github.com"
DEFAULT_TIMEOUT = 30
USER_AGENT = "plugman"


class GitHubSourceFetcher:
    """Fetch files over HTTP and release metadata from the GitHub REST API.

    A token from ``GITHUB_TOKEN`` (or passed explicitly) is sent to the API
    only, never to asset download hosts.
    """

    def __init__(
        self,
        token: str | None = None,
        timeout: int = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
        api_url: str = GITHUB_API_URL,
    ):
        self.token = token if token is not None else os.environ.get("GITHUB_TOKEN")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.setdefault("User-Agent", USER_AGENT)
        self.api_url = api_url.rstrip("/")

    def _get(self, url: str, headers: Mapping[str, str] | None = None) -> requests.Response:
        try:
            response = self.session.get(url, headers=dict(headers or {}), timeout=self.timeout)
        except requests.RequestException as e:
            raise FetchError(f"Request to {url} failed: {e}", context={"url": url}) from e
        return response

    def fetch(self, url: str) -> bytes:
        logger.info(f"Downloading {url}")
        response = self._get(url)
        if not response.ok:
            raise FetchError(
                f"Download of {url} failed: HTTP {response.status_code}",
                context={"url": url, "status": response.status_code},
            )
        logger.info(f"Downloaded {len(response.content)} bytes from {url}")
        return response.content

    def fetch_latest_release(self, owner: str, repo: str) -> Release:
        url = f"{self.api_url}/repos/{owner}/{repo}/releases/latest"
        headers = {"Accept": "application/vnd.github+json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"

        logger.info(f"Fetching latest release of {owner}/{repo}")
        response = self._get(url, headers=headers)

        if response.status_code == 404:
            raise FetchError(
                f"Repository {owner}/{repo} not found or has no releases",
                context={"url": url, "status": 404},
            )
        if response.status_code == 403 and "rate limit" in response.text.lower():
            raise FetchError(
                "GitHub API rate limit exceeded (set GITHUB_TOKEN to raise it)",
                context={"url": url, "status": 403},
            )
        if not response.ok:
            raise FetchError(
                f"Release lookup for {owner}/{repo} failed: HTTP {response.status_code}",
                context={"url": url, "status": response.status_code},
            )

        try:
            data = response.json()
            release = Release(
                tag=data.get("tag_name") or "",
                assets=[
                    ReleaseAsset(name=asset["name"], download_url=asset["browser_download_url"])
                    for asset in data.get("assets", [])
                ],
            )
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            raise FetchError(f"Unexpected release data for {owner}/{repo}: {e}", context={"url": url}) from e

        logger.info(f"Latest release of {owner}/{repo}: {release.tag} ({len(release.assets)} assets)")
        return release


class ZipArchiveExtractor:
    """Extract ZIP archives with the standard library."""

    def extract(self, archive_path: Path, target_dir: Path) -> None:
        logger.info(f"Extracting {archive_path.name}")
        try:
            target_dir.mkdir(parents=True, exist_ok=True)
            with zipfile.ZipFile(archive_path) as archive:
                archive.extractall(target_dir)
        except (zipfile.BadZipFile, OSError, RuntimeError) as e:
            raise ExtractionError(
                f"Cannot extract {archive_path.name}: {e}", context={"archive": str(archive_path)}
            ) from e
        logger.debug(f"Extracted {archive_path.name} to {target_dir}")
