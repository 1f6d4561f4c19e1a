"""Plugin discovery - bucket extracted files by install target.

Suffix matching is case-sensitive: "a.vst3" matches, "b.CLAP" does not.
Directories named like a plugin (Foo.vst3/ bundles) count as one candidate
and are not descended into.
"""

import os
from pathlib import Path

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field

from .schema import InstallTarget


class DiscoveredPlugins(BaseModel):
    """Recognized files per target (immutable data structure)."""

    model_config = ConfigDict(frozen=True)

    by_target: dict[InstallTarget, list[Path]] = Field(default_factory=dict)

    def for_target(self, target: InstallTarget) -> list[Path]:
        return self.by_target.get(target, [])

    def has_plugins(self) -> bool:
        """Check if anything installable was found."""
        return any(self.by_target.values())

    def items(self) -> list[tuple[InstallTarget, Path]]:
        """All (target, path) pairs, grouped by target in enum order."""
        return [(target, path) for target in InstallTarget for path in self.for_target(target)]


def _match_target(name: str) -> InstallTarget | None:
    for target in InstallTarget:
        if name.endswith(target.extension) and len(name) > len(target.extension):
            return target
    return None


def find_plugins(root_dir: Path) -> DiscoveredPlugins:
    """
    Recursively scan ``root_dir`` for recognized plugin files.

    Order follows filesystem traversal order; every match appears exactly once.

    Args:
        root_dir: Extraction root to scan

    Returns:
        DiscoveredPlugins with one (possibly empty) list per target

    Example:
        >>> found = find_plugins(Path("/tmp/plugman-extract"))
        >>> [p.name for p in found.for_target(InstallTarget.VST3)]
        ['Synth.vst3']
    """
    by_target: dict[InstallTarget, list[Path]] = {target: [] for target in InstallTarget}

    for dirpath, dirnames, filenames in os.walk(root_dir):
        current = Path(dirpath)

        # Bundles are taken whole; prune them from the walk
        for dirname in list(dirnames):
            target = _match_target(dirname)
            if target is not None:
                by_target[target].append((current / dirname).absolute())
                dirnames.remove(dirname)

        for filename in filenames:
            target = _match_target(filename)
            if target is not None:
                by_target[target].append((current / filename).absolute())

    return DiscoveredPlugins(by_target=by_target)
