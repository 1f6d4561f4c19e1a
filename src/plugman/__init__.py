"""plugman - Install audio plugins and presets from GitHub releases or direct URLs.

Public API exports. The library is mechanism; the CLI injects policy
(environment, terminal, default config location).
"""

from .classifier import classify
from .classifier import filename_from_url
from .config import default_config_path
from .config import load_config
from .config import select_sources
from .discovery import DiscoveredPlugins
from .discovery import find_plugins
from .exceptions import ClassificationError
from .exceptions import ConfigurationError
from .exceptions import ExtractionError
from .exceptions import FetchError
from .exceptions import InstallError
from .exceptions import PlugmanError
from .exceptions import PromptUnavailableError
from .installer import InstallOutcome
from .installer import RunContext
from .installer import install_plugin
from .orchestrator import Orchestrator
from .prompts import HeadlessDecisionProvider
from .prompts import ScriptedDecisionProvider
from .prompts import TerminalDecisionProvider
from .prompts import parse_choice
from .protocols import ArchiveExtractorProtocol
from .protocols import DecisionProviderProtocol
from .protocols import OverwriteChoice
from .protocols import SourceFetcherProtocol
from .resolver import default_paths
from .resolver import ensure_directories
from .resolver import resolve_path
from .resolver import resolve_paths
from .schema import DirectFile
from .schema import InstallTarget
from .schema import PathConfig
from .schema import PlugmanConfig
from .schema import Release
from .schema import ReleaseAsset
from .schema import Repository
from .schema import UrlOutcome
from .sources import GitHubSourceFetcher
from .sources import ZipArchiveExtractor
from .workspace import working_area

__all__ = [
    # Data model
    "InstallTarget",
    "PathConfig",
    "PlugmanConfig",
    "DirectFile",
    "Repository",
    "Release",
    "ReleaseAsset",
    "UrlOutcome",
    # Classification
    "classify",
    "filename_from_url",
    # Configuration and paths
    "default_config_path",
    "load_config",
    "select_sources",
    "default_paths",
    "ensure_directories",
    "resolve_path",
    "resolve_paths",
    # Discovery
    "DiscoveredPlugins",
    "find_plugins",
    # Installation
    "InstallOutcome",
    "RunContext",
    "install_plugin",
    "OverwriteChoice",
    "HeadlessDecisionProvider",
    "ScriptedDecisionProvider",
    "TerminalDecisionProvider",
    "parse_choice",
    # Orchestration
    "Orchestrator",
    "working_area",
    # Collaborators
    "ArchiveExtractorProtocol",
    "DecisionProviderProtocol",
    "SourceFetcherProtocol",
    "GitHubSourceFetcher",
    "ZipArchiveExtractor",
    # Exceptions
    "PlugmanError",
    "ConfigurationError",
    "ClassificationError",
    "FetchError",
    "ExtractionError",
    "InstallError",
    "PromptUnavailableError",
]
