"""Batch orchestration - process each URL in order, never aborting the batch.

For every URL:
1. Classify it (direct file or GitHub repository)
2. Download into a fresh working area (extracting archives)
3. Install every recognized file through the overwrite engine
4. Remove the working area

Failures are contained at the smallest unit (file, asset, URL) and recorded
in the returned UrlOutcome list.
"""

import logging
from collections.abc import Iterable
from pathlib import Path

from .classifier import classify
from .classifier import filename_from_url
from .classifier import is_safe_filename
from .discovery import find_plugins
from .exceptions import FetchError
from .exceptions import InstallError
from .exceptions import PlugmanError
from .installer import InstallOutcome
from .installer import RunContext
from .installer import install_plugin
from .protocols import ArchiveExtractorProtocol
from .protocols import SourceFetcherProtocol
from .schema import ARCHIVE_KIND
from .schema import DirectFile
from .schema import InstallTarget
from .schema import PathConfig
from .schema import ReleaseAsset
from .schema import Repository
from .schema import UrlOutcome
from .workspace import working_area

logger = logging.getLogger(__name__)

# Literal, case-sensitive marker for Windows builds in archive names
WINDOWS_ARCHIVE_MARKER = "win"


def select_plugin_assets(assets: Iterable[ReleaseAsset]) -> list[tuple[InstallTarget, ReleaseAsset]]:
    """Release assets that are plugin files themselves (case-sensitive suffix).

    Names that are not a single plain path component are ignored.
    """
    selected = []
    for asset in assets:
        if not is_safe_filename(asset.name):
            logger.warning(f"Ignoring asset with unsafe name: {asset.name!r}")
            continue
        for target in InstallTarget:
            if asset.name.endswith(target.extension):
                selected.append((target, asset))
                break
    return selected


def select_archive_assets(assets: Iterable[ReleaseAsset]) -> list[ReleaseAsset]:
    """ZIP assets built for Windows: ``*.zip`` with a literal "win" in the name."""
    return [
        asset
        for asset in assets
        if is_safe_filename(asset.name)
        and asset.name.endswith(f".{ARCHIVE_KIND}")
        and WINDOWS_ARCHIVE_MARKER in asset.name
    ]


class Orchestrator:
    """
    Process a list of URLs sequentially against a fixed PathConfig.

    Collaborators are injected; the orchestrator never talks to the network,
    terminal or environment directly.

    Example:
        >>> orchestrator = Orchestrator(
        ...     path_config=path_config,
        ...     fetcher=GitHubSourceFetcher(),
        ...     extractor=ZipArchiveExtractor(),
        ...     context=RunContext(decisions=TerminalDecisionProvider()),
        ... )
        >>> for outcome in orchestrator.run(["https://github.com/acme/widget"]):
        ...     print(outcome.summary())
    """

    def __init__(
        self,
        path_config: PathConfig,
        fetcher: SourceFetcherProtocol,
        extractor: ArchiveExtractorProtocol,
        context: RunContext,
        work_root: Path | None = None,
    ):
        self.path_config = path_config
        self.fetcher = fetcher
        self.extractor = extractor
        self.context = context
        self.work_root = work_root

    def run(self, urls: Iterable[str]) -> list[UrlOutcome]:
        """Process every URL in input order and log a summary line for each."""
        outcomes = []
        for url in urls:
            outcome = self.process_url(url)
            if outcome.success:
                logger.info(outcome.summary())
            else:
                logger.error(outcome.summary())
            outcomes.append(outcome)
        return outcomes

    def process_url(self, url: str) -> UrlOutcome:
        """Process one URL; errors are recorded on the outcome, not raised."""
        outcome = UrlOutcome(url=url)
        logger.info(f"Processing {url}")

        try:
            reference = classify(url)
            with working_area(self.work_root) as work:
                if isinstance(reference, DirectFile):
                    self._process_direct_file(reference, work, outcome)
                else:
                    self._process_repository(reference, work, outcome)
        except PlugmanError as e:
            logger.warning(f"{url}: {e.message}")
            outcome.error = e.message

        outcome.success = bool(outcome.destinations)
        if not outcome.success and outcome.error is None:
            outcome.error = "no plugin files were installed"
        return outcome

    def _process_direct_file(self, reference: DirectFile, work: Path, outcome: UrlOutcome) -> None:
        filename = filename_from_url(reference.url, reference.kind)
        downloaded = self._download(reference.url, work / filename)

        if reference.is_archive:
            self._install_archive(downloaded, work / "extracted", outcome)
            return

        target = InstallTarget.from_kind(reference.kind)
        if target is None:
            raise FetchError(f"Unsupported file kind: {reference.kind}", context={"url": reference.url})
        self._install(downloaded, target, filename, outcome)

    def _process_repository(self, reference: Repository, work: Path, outcome: UrlOutcome) -> None:
        release = self.fetcher.fetch_latest_release(reference.owner, reference.repo)

        plugin_assets = select_plugin_assets(release.assets)
        if plugin_assets:
            for target, asset in plugin_assets:
                try:
                    downloaded = self._download(asset.download_url, work / asset.name)
                except PlugmanError as e:
                    logger.warning(f"Skipping asset {asset.name}: {e.message}")
                    outcome.error = e.message
                    continue
                self._install(downloaded, target, asset.name, outcome)
            return

        archive_assets = select_archive_assets(release.assets)
        if not archive_assets:
            raise FetchError(
                f"No installable assets in release {release.tag or '(untagged)'} of {reference.slug}",
                context={"repository": reference.slug, "tag": release.tag},
            )

        for index, asset in enumerate(archive_assets):
            try:
                downloaded = self._download(asset.download_url, work / asset.name)
                self._install_archive(downloaded, work / f"extracted-{index}", outcome)
            except PlugmanError as e:
                logger.warning(f"Skipping asset {asset.name}: {e.message}")
                outcome.error = e.message

    def _download(self, url: str, destination: Path) -> Path:
        data = self.fetcher.fetch(url)
        try:
            destination.write_bytes(data)
        except (OSError, ValueError) as e:
            raise FetchError(f"Cannot save download to {destination}: {e}", context={"url": url}) from e
        return destination

    def _install_archive(self, archive: Path, extract_dir: Path, outcome: UrlOutcome) -> None:
        self.extractor.extract(archive, extract_dir)
        found = find_plugins(extract_dir)
        if not found.has_plugins():
            logger.warning(f"No plugin files found in {archive.name}")
            return
        for target, path in found.items():
            self._install(path, target, path.name, outcome)

    def _install(self, source: Path, target: InstallTarget, name: str, outcome: UrlOutcome) -> None:
        target_dir = self.path_config.for_target(target)
        try:
            result = install_plugin(source, target_dir / name, self.context)
        except InstallError as e:
            logger.error(e.message)
            outcome.error = e.message
            return
        # Skipped counts as handled: the target directory still holds the plugin
        outcome.destinations[target] = target_dir
        if result is InstallOutcome.SKIPPED:
            logger.debug(f"{name} left unchanged in {target_dir}")
