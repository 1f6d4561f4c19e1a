"""URL classification - direct file vs. GitHub repository reference.

Classification is purely syntactic: nothing here touches the network.
"""

import logging
import re
from pathlib import PurePosixPath
from urllib.parse import unquote
from urllib.parse import urlsplit

from .exceptions import ClassificationError
from .schema import DIRECT_KINDS
from .schema import DirectFile
from .schema import Repository
from .schema import SourceReference

logger = logging.getLogger(__name__)

# Extension at the very end of the URL path, optionally followed by a query string or fragment
_DIRECT_FILE_RE = re.compile(
    r"\.(?P<kind>" + "|".join(re.escape(kind) for kind in DIRECT_KINDS) + r")(?:[?#].*)?$",
    re.IGNORECASE,
)

# Anything after owner/repo (e.g. /releases/latest) is ignored
_REPOSITORY_RE = re.compile(r"github\.com[/:](?P<owner>[^/\s?#]+)/(?P<repo>[^/\s?#]+)(?:[/?#]\S*)?$")


def classify(url: str) -> SourceReference:
    """
    Classify an input string as a direct file or a repository reference.

    Extension match wins over repository match.

    Args:
        url: Raw input string from the command line or config file

    Returns:
        DirectFile with lower-cased ``kind``, or Repository with any
        trailing ``.git`` removed from ``repo``

    Raises:
        ClassificationError: If the input matches neither pattern

    Example:
        >>> classify("https://example.com/a.VST3")
        DirectFile(url='https://example.com/a.VST3', kind='vst3')
        >>> classify("https://github.com/acme/widget.git")
        Repository(owner='acme', repo='widget')
    """
    candidate = url.strip()

    direct = _DIRECT_FILE_RE.search(candidate)
    if direct:
        return DirectFile(url=candidate, kind=direct.group("kind").lower())

    repository = _REPOSITORY_RE.search(candidate)
    if repository:
        repo = repository.group("repo")
        if repo.endswith(".git"):
            repo = repo[: -len(".git")]
        if repo:
            return Repository(owner=repository.group("owner"), repo=repo)

    raise ClassificationError(
        f"Invalid URL format: {url!r}. Expected a direct .zip/.vst3/.clap/.bwpreset link "
        "or a GitHub repository URL (https://github.com/<owner>/<repo>)",
        context={"url": url},
    )


def is_safe_filename(name: str) -> bool:
    """True if ``name`` is a single plain path component.

    Rejects separators of either platform, parent references and NUL.
    """
    return bool(name) and name not in (".", "..") and not any(bad in name for bad in ("/", "\\", "..", "\x00"))


def filename_from_url(url: str, kind: str) -> str:
    """Filename to install a directly downloaded file under.

    Uses the last segment of the percent-decoded URL path; falls back to
    ``download.<kind>`` when the URL has no usable or safe name.
    """
    name = PurePosixPath(unquote(urlsplit(url).path)).name
    if is_safe_filename(name) and name.lower().endswith(f".{kind}") and len(name) > len(kind) + 1:
        return name
    logger.debug(f"No usable filename in {url}, using download.{kind}")
    return f"download.{kind}"
