"""Protocols for the collaborators plugman depends on.

The library only requires these interfaces. The CLI wires the concrete
implementations (GitHubSourceFetcher, ZipArchiveExtractor, TerminalDecisionProvider);
tests inject in-memory ones.
"""

from enum import Enum
from pathlib import Path
from typing import Protocol

from .schema import Release


class OverwriteChoice(str, Enum):
    """Answer to "destination exists, overwrite?"."""

    YES = "yes"
    NO = "no"
    ALL = "all"


class SourceFetcherProtocol(Protocol):
    """Protocol for network access.

    Example implementations:
    - GitHubSourceFetcher: requests-based HTTP + GitHub REST API
    - In-memory fetchers for tests
    """

    def fetch(self, url: str) -> bytes:
        """Download ``url`` and return its body.

        Raises:
            FetchError: On network failure or non-2xx response
        """
        ...

    def fetch_latest_release(self, owner: str, repo: str) -> Release:
        """Look up the latest published release of ``owner/repo``.

        Raises:
            FetchError: If the repository doesn't exist, has no releases,
                or the request failed
        """
        ...


class ArchiveExtractorProtocol(Protocol):
    """Protocol for unpacking downloaded archives."""

    def extract(self, archive_path: Path, target_dir: Path) -> None:
        """Extract ``archive_path`` into ``target_dir`` (created if needed).

        Raises:
            ExtractionError: If the archive is corrupt or unreadable
        """
        ...


class DecisionProviderProtocol(Protocol):
    """Protocol for answering overwrite conflicts.

    Implementations decide how an answer is obtained: a terminal prompt,
    a scripted sequence, or a fixed headless policy.
    """

    def choose(self, destination: Path) -> OverwriteChoice:
        """Decide what to do with an existing ``destination``.

        Raises:
            PromptUnavailableError: If no answer can be obtained
        """
        ...
