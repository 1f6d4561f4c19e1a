"""Configuration loading and run-source selection."""

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from pydantic import ValidationError

from .exceptions import ConfigurationError
from .schema import PlugmanConfig

logger = logging.getLogger(__name__)

USAGE_HINT = (
    "Usage: plugman --url <url> | --config-file <path> "
    "(or create ~/.config/plugman/config.json with a non-empty \"urls\" list)"
)


def default_config_path(home: Path | None = None) -> Path:
    """Per-user default config location: ``<home>/.config/plugman/config.json``."""
    return (home or Path.home()) / ".config" / "plugman" / "config.json"


def _field_name(error: dict) -> str:
    return ".".join(str(part) for part in error.get("loc", ())) or "(root)"


def _describe_error(error: dict) -> str:
    """One validation error as "<field>: <message>", e.g. "config.vst3_path: Input should be a valid string"."""
    return f"{_field_name(error)}: {error.get('msg', 'invalid value')}"


def load_config(config_path: Path) -> PlugmanConfig:
    """
    Load and validate a batch config file.

    Raises:
        ConfigurationError: If the file is missing, not JSON, or has no urls
    """
    try:
        config = PlugmanConfig.from_json(config_path)
    except FileNotFoundError as e:
        raise ConfigurationError(
            f"Config file not found: {config_path}", context={"config_file": str(config_path)}
        ) from e
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(
            f"Cannot read config file {config_path}: {e}", context={"config_file": str(config_path)}
        ) from e
    except ValidationError as e:
        problems = "; ".join(_describe_error(error) for error in e.errors())
        raise ConfigurationError(
            f"Invalid config file {config_path}: {problems}",
            context={"config_file": str(config_path), "fields": [_field_name(error) for error in e.errors()]},
        ) from e

    logger.info(f"Loaded {len(config.urls)} URL(s) from {config_path}")
    return config


def load_path_settings(config_path: Path) -> dict[str, str]:
    """Read only the ``config`` section of a config file.

    Used in single-URL mode to recover path overrides from the default
    config file. The file may lack ``urls``; a missing or unreadable file
    yields an empty mapping.
    """
    if not config_path.exists():
        return {}

    try:
        with open(config_path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.warning(f"Ignoring unreadable config file {config_path}: {e}")
        return {}

    section = data.get("config") if isinstance(data, dict) else None
    if not isinstance(section, dict):
        return {}

    logger.debug(f"Using path settings from {config_path}")
    return {key: value for key, value in section.items() if isinstance(value, str)}


@dataclass(frozen=True)
class RunSources:
    """What to process and where path settings come from."""

    urls: list[str]
    path_settings: dict[str, str]
    config_file: Path | None = None


def select_sources(
    url: str | None,
    config_file: Path | None,
    home: Path | None = None,
) -> RunSources:
    """
    Decide the URL list and config section for this run.

    - ``url`` and ``config_file`` together: error
    - ``url`` only: that URL; paths from the default config file if present
    - ``config_file`` only: that file
    - neither: the default config file, which must exist

    Raises:
        ConfigurationError: On conflicting parameters or unusable config
    """
    if url and config_file:
        raise ConfigurationError("--url and --config-file cannot be used together")

    default_path = default_config_path(home)

    if url:
        return RunSources(urls=[url.strip()], path_settings=load_path_settings(default_path))

    if config_file is None:
        if not default_path.exists():
            raise ConfigurationError(
                f"No source found: pass --url or --config-file, or create {default_path}",
                context={"config_file": str(default_path)},
            )
        logger.info(f"Using default config file {default_path}")
        config_file = default_path

    config = load_config(config_file)
    return RunSources(urls=list(config.urls), path_settings=dict(config.config), config_file=config_file)
