"""Plugin installation with overwrite confirmation.

Per candidate file:
- destination missing: copy
- destination exists and force/force_all set: replace
- destination exists otherwise: ask the decision provider
  (yes: replace, no: keep, all: set force_all and replace)

The run-scoped force_all flag lives on RunContext, threaded through every
call, so the installer holds no state of its own.
"""

import logging
import shutil
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from .exceptions import InstallError
from .protocols import DecisionProviderProtocol
from .protocols import OverwriteChoice

logger = logging.getLogger(__name__)


class InstallOutcome(str, Enum):
    INSTALLED = "installed"
    SKIPPED = "skipped"


@dataclass
class RunContext:
    """State shared by every install in one run.

    Attributes:
        decisions: Answers overwrite conflicts
        force: Overwrite without asking (--force)
        force_all: Set once the user answers "all"; never reset within a run
    """

    decisions: DecisionProviderProtocol
    force: bool = False
    force_all: bool = False

    @property
    def overwrite_without_asking(self) -> bool:
        return self.force or self.force_all


def _exists(path: Path) -> bool:
    return path.exists() or path.is_symlink()


def _remove(path: Path) -> None:
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    else:
        path.unlink()


def _copy(source: Path, destination: Path) -> None:
    destination.parent.mkdir(parents=True, exist_ok=True)
    if source.is_dir():
        shutil.copytree(source, destination)
    else:
        shutil.copy2(source, destination)


def install_plugin(source: Path, destination: Path, context: RunContext) -> InstallOutcome:
    """
    Place ``source`` at ``destination``, resolving conflicts with existing files.

    Directories (plugin bundles) are copied recursively.

    Args:
        source: Staged file or bundle in the working area
        destination: Full destination path (target directory / file name)
        context: Run-scoped force flags and decision provider

    Returns:
        InstallOutcome.INSTALLED or InstallOutcome.SKIPPED

    Raises:
        InstallError: If removing or copying fails, or no overwrite answer
            could be obtained (PromptUnavailableError)

    Example:
        >>> context = RunContext(decisions=ScriptedDecisionProvider(["a"]))
        >>> install_plugin(Path("work/Synth.vst3"), Path("/vst3/Synth.vst3"), context)
        <InstallOutcome.INSTALLED: 'installed'>
    """
    try:
        if _exists(destination):
            if context.overwrite_without_asking:
                logger.debug(f"Overwriting {destination} without asking")
            else:
                choice = context.decisions.choose(destination)
                if choice is OverwriteChoice.NO:
                    logger.info(f"Skipped {source.name}: keeping existing {destination}")
                    return InstallOutcome.SKIPPED
                if choice is OverwriteChoice.ALL:
                    context.force_all = True
                    logger.info("Overwriting all existing files for the rest of this run")

            _remove(destination)
            logger.info(f"Removed existing {destination}")

        _copy(source, destination)
        logger.info(f"Installed {source.name} -> {destination}")
        return InstallOutcome.INSTALLED

    except Exception as e:
        if isinstance(e, InstallError):
            raise
        raise InstallError(
            f"Failed to install {source.name} to {destination}: {e}",
            context={"source": str(source), "destination": str(destination)},
        ) from e
