"""Overwrite decision providers.

- TerminalDecisionProvider: asks on the terminal via a rich Console
- ScriptedDecisionProvider: replays a fixed list of answers
- HeadlessDecisionProvider: never asks; skips or fails every conflict
"""

import logging
from collections.abc import Iterable
from pathlib import Path

from rich.console import Console

from .exceptions import PromptUnavailableError
from .protocols import OverwriteChoice

logger = logging.getLogger(__name__)

_ANSWERS = {
    "": OverwriteChoice.NO,
    "y": OverwriteChoice.YES,
    "yes": OverwriteChoice.YES,
    "n": OverwriteChoice.NO,
    "no": OverwriteChoice.NO,
    "a": OverwriteChoice.ALL,
    "all": OverwriteChoice.ALL,
}


def parse_choice(answer: str) -> OverwriteChoice | None:
    """Interpret a typed answer; None means unrecognized (ask again).

    Case-insensitive; empty input means "no".
    """
    return _ANSWERS.get(answer.strip().lower())


def _question(destination: Path) -> str:
    return f"'{destination}' already exists. Overwrite? [y]es / [n]o / [a]ll (default: no): "


class TerminalDecisionProvider:
    """Prompt on the terminal until a recognized answer is typed."""

    def __init__(self, console: Console | None = None):
        self.console = console or Console()

    def choose(self, destination: Path) -> OverwriteChoice:
        while True:
            try:
                # Brackets in the question are literal, not rich markup
                answer = self.console.input(_question(destination), markup=False)
            except EOFError as e:
                raise PromptUnavailableError(
                    f"No answer for existing {destination}: input closed", context={"path": str(destination)}
                ) from e

            choice = parse_choice(answer)
            if choice is not None:
                return choice
            self.console.print("[yellow]Please answer y (yes), n (no) or a (all).[/yellow]")


class ScriptedDecisionProvider:
    """Replay answers in order, skipping unrecognized ones like a re-prompt would."""

    def __init__(self, answers: Iterable[str]):
        self._answers = iter(answers)
        self.asked: list[Path] = []

    def choose(self, destination: Path) -> OverwriteChoice:
        self.asked.append(destination)
        for answer in self._answers:
            choice = parse_choice(answer)
            if choice is not None:
                return choice
            logger.debug(f"Unrecognized answer {answer!r}, asking again")
        raise PromptUnavailableError(
            f"No scripted answer left for existing {destination}", context={"path": str(destination)}
        )


class HeadlessDecisionProvider:
    """Answer conflicts without asking.

    Args:
        policy: "skip" answers no to every conflict; "fail" raises
            PromptUnavailableError so the file is reported as an error
    """

    POLICIES = ("skip", "fail")

    def __init__(self, policy: str = "fail"):
        if policy not in self.POLICIES:
            raise ValueError(f"Unknown headless policy: {policy!r}")
        self.policy = policy

    def choose(self, destination: Path) -> OverwriteChoice:
        if self.policy == "skip":
            logger.info(f"Keeping existing {destination} (non-interactive)")
            return OverwriteChoice.NO
        raise PromptUnavailableError(
            f"{destination} already exists and no prompt is available (use --force to overwrite)",
            context={"path": str(destination)},
        )
