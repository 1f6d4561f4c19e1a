"""Plugman data model - install targets, config file, release metadata.

Everything here is immutable once built. PathConfig is computed once at
startup; source references and release assets live for one URL.
"""

import json
from enum import Enum
from pathlib import Path

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import field_validator


class InstallTarget(str, Enum):
    """Supported plugin/preset categories.

    The value doubles as the lower-case file extension without the dot.
    Adding a member is all it takes to support a new file type: extension,
    environment variable and config key are derived from the value.
    """

    VST3 = "vst3"
    CLAP = "clap"
    BWPRESET = "bwpreset"

    @property
    def extension(self) -> str:
        """Dot-prefixed file suffix identifying this target (e.g. ".vst3")."""
        return f".{self.value}"

    @property
    def env_var(self) -> str:
        """Environment variable holding a path override (e.g. "VST3_PATH")."""
        return f"{self.value.upper()}_PATH"

    @property
    def config_key(self) -> str:
        """Key in the config file's ``config`` section (e.g. "vst3_path")."""
        return f"{self.value}_path"

    @property
    def label(self) -> str:
        return {"vst3": "VST3", "clap": "CLAP", "bwpreset": "BWPreset"}.get(self.value, self.value.upper())

    @classmethod
    def from_kind(cls, kind: str) -> "InstallTarget | None":
        """Map a file kind (extension without dot, any case) to a target."""
        try:
            return cls(kind.lower())
        except ValueError:
            return None


ARCHIVE_KIND = "zip"

# Kinds accepted in a direct file URL, archive first
DIRECT_KINDS: tuple[str, ...] = (ARCHIVE_KIND, *(target.value for target in InstallTarget))


class PlugmanConfig(BaseModel):
    """Batch configuration file.

    Format (JSON):
    {
      "urls": ["https://github.com/owner/repo", "https://example.com/a.vst3"],
      "config": {"vst3_path": "D:/VST3", "clap_path": "D:/CLAP"}
    }
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    urls: list[str] = Field(min_length=1)
    config: dict[str, str] = Field(default_factory=dict)

    @field_validator("urls")
    @classmethod
    def _strip_urls(cls, value: list[str]) -> list[str]:
        urls = [url.strip() for url in value]
        if any(not url for url in urls):
            raise ValueError("urls must not contain empty entries")
        return urls

    @classmethod
    def from_json(cls, config_path: Path) -> "PlugmanConfig":
        """
        Load batch configuration from a JSON file.

        Args:
            config_path: Path to config.json

        Returns:
            PlugmanConfig instance

        Raises:
            FileNotFoundError: If the file doesn't exist
            json.JSONDecodeError: If the file is not valid JSON
            pydantic.ValidationError: If ``urls`` is missing or empty
        """
        with open(config_path, encoding="utf-8") as f:
            data = json.load(f)
        return cls.model_validate(data)

    def path_for(self, target: InstallTarget) -> str | None:
        """Path configured for ``target`` in the ``config`` section, if any."""
        return self.config.get(target.config_key) or None


class PathConfig(BaseModel):
    """Effective installation directory per target (immutable after startup)."""

    model_config = ConfigDict(frozen=True)

    paths: dict[InstallTarget, Path]

    def for_target(self, target: InstallTarget) -> Path:
        return self.paths[target]


class DirectFile(BaseModel):
    """URL naming a single downloadable file by its extension."""

    model_config = ConfigDict(frozen=True)

    url: str
    kind: str

    @property
    def is_archive(self) -> bool:
        return self.kind == ARCHIVE_KIND


class Repository(BaseModel):
    """GitHub repository whose latest release is installed."""

    model_config = ConfigDict(frozen=True)

    owner: str
    repo: str

    @property
    def slug(self) -> str:
        return f"{self.owner}/{self.repo}"


SourceReference = DirectFile | Repository


class ReleaseAsset(BaseModel):
    """Downloadable file attached to a release."""

    model_config = ConfigDict(frozen=True)

    name: str
    download_url: str


class Release(BaseModel):
    """Latest published release of a repository."""

    model_config = ConfigDict(frozen=True)

    tag: str
    assets: list[ReleaseAsset] = Field(default_factory=list)


class UrlOutcome(BaseModel):
    """Result of processing one input URL."""

    url: str
    success: bool = False
    destinations: dict[InstallTarget, Path] = Field(default_factory=dict)
    error: str | None = None

    def summary(self) -> str:
        """One-line summary naming the directories that received files."""
        if not self.success:
            return f"FAILED: {self.url}: {self.error or 'nothing installed'}"
        targets = ", ".join(f"{target.label}: {path}" for target, path in self.destinations.items())
        return f"SUCCESS: {self.url} -> {targets}"
