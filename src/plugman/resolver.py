"""Path resolution - one effective install directory per target.

Four sources per target, first match wins:
1. Command-line override
2. Environment variable (e.g. VST3_PATH)
3. ``config`` section of the loaded config file
4. Built-in platform default

The resolution itself is pure: callers pass the environment and defaults in.
Only ensure_directories() touches the filesystem.
"""

import logging
import os
import sys
from collections.abc import Mapping
from pathlib import Path

from .exceptions import ConfigurationError
from .schema import InstallTarget
from .schema import PathConfig

logger = logging.getLogger(__name__)


def resolve_path(
    override: str | None,
    env_value: str | None,
    config_value: str | None,
    default: str | Path,
) -> str:
    """Pick the highest-priority path that was actually supplied.

    Empty strings count as not supplied.

    Example:
        >>> resolve_path("D:/X", "D:/Y", "D:/Z", "C:/default")
        'D:/X'
        >>> resolve_path(None, "", "D:/Z", "C:/default")
        'D:/Z'
    """
    for candidate in (override, env_value, config_value):
        if candidate and candidate.strip():
            return candidate.strip()
    return str(default)


def _absolute(path: str) -> Path:
    resolved = Path(path).expanduser()
    if not resolved.is_absolute():
        resolved = Path.cwd() / resolved
    return resolved


def resolve_paths(
    cli_overrides: Mapping[InstallTarget, str | None],
    environ: Mapping[str, str],
    config_section: Mapping[str, str] | None,
    defaults: Mapping[InstallTarget, Path],
) -> PathConfig:
    """
    Resolve every install target to one absolute directory.

    Args:
        cli_overrides: Per-target command-line overrides (missing or None = not given)
        environ: Environment to read ``<TARGET>_PATH`` variables from
        config_section: ``config`` section of the active config file, if any
        defaults: Built-in platform defaults (see default_paths())

    Returns:
        PathConfig covering every InstallTarget

    Example:
        >>> config = resolve_paths(
        ...     cli_overrides={InstallTarget.VST3: "/x"},
        ...     environ={"VST3_PATH": "/y"},
        ...     config_section={"vst3_path": "/z"},
        ...     defaults=default_paths(),
        ... )
        >>> config.for_target(InstallTarget.VST3)
        PosixPath('/x')
    """
    section = config_section or {}
    paths: dict[InstallTarget, Path] = {}

    for target in InstallTarget:
        chosen = resolve_path(
            cli_overrides.get(target),
            environ.get(target.env_var),
            section.get(target.config_key),
            defaults[target],
        )
        paths[target] = _absolute(chosen)
        logger.debug(f"{target.label} path: {paths[target]}")

    return PathConfig(paths=paths)


def default_paths(
    platform: str | None = None,
    home: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> dict[InstallTarget, Path]:
    """Built-in per-platform default directories.

    Args:
        platform: ``sys.platform`` style identifier (defaults to the running platform)
        home: User home directory (defaults to Path.home())
        environ: Environment for Windows' COMMONPROGRAMFILES (defaults to os.environ)
    """
    platform = platform or sys.platform
    home = home or Path.home()
    environ = os.environ if environ is None else environ

    if platform.startswith("win"):
        common = Path(environ.get("COMMONPROGRAMFILES") or r"C:\Program Files\Common Files")
        return {
            InstallTarget.VST3: common / "VST3",
            InstallTarget.CLAP: common / "CLAP",
            InstallTarget.BWPRESET: home / "Documents" / "Bitwig Studio" / "Library" / "Presets",
        }

    if platform == "darwin":
        plugins = home / "Library" / "Audio" / "Plug-Ins"
        return {
            InstallTarget.VST3: plugins / "VST3",
            InstallTarget.CLAP: plugins / "CLAP",
            InstallTarget.BWPRESET: home / "Documents" / "Bitwig Studio" / "Library" / "Presets",
        }

    return {
        InstallTarget.VST3: home / ".vst3",
        InstallTarget.CLAP: home / ".clap",
        InstallTarget.BWPRESET: home / "Bitwig Studio" / "Library" / "Presets",
    }


def ensure_directories(path_config: PathConfig) -> None:
    """Create every resolved directory before anything is installed.

    Raises:
        ConfigurationError: If any directory can't be created
    """
    for target, path in path_config.paths.items():
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ConfigurationError(
                f"Cannot create {target.label} directory {path}: {e}",
                context={"target": target.value, "path": str(path)},
            ) from e
        logger.info(f"{target.label} path: {path}")
