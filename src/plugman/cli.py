"""Typer-based CLI for plugman."""

import logging
import os
import sys
from enum import Enum
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from .config import USAGE_HINT
from .config import select_sources
from .exceptions import ConfigurationError
from .installer import RunContext
from .orchestrator import Orchestrator
from .prompts import HeadlessDecisionProvider
from .prompts import TerminalDecisionProvider
from .protocols import DecisionProviderProtocol
from .resolver import default_paths
from .resolver import ensure_directories
from .resolver import resolve_paths
from .schema import InstallTarget
from .sources import GitHubSourceFetcher
from .sources import ZipArchiveExtractor

app = typer.Typer(help="Install VST3, CLAP and Bitwig preset files from GitHub releases or direct URLs.")
console = Console()

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"

EXIT_CONFIG_ERROR = 1
EXIT_PARTIAL_FAILURE = 2


class ConflictPolicy(str, Enum):
    prompt = "prompt"
    skip = "skip"
    fail = "fail"


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


def _configure_logging(level: str, log_file: Path | None) -> None:
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
    root.setLevel(level)

    formatter = logging.Formatter(LOG_FORMAT)
    stream = logging.StreamHandler(sys.stderr)
    stream.setFormatter(formatter)
    root.addHandler(stream)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)


def _decision_provider(policy: ConflictPolicy) -> DecisionProviderProtocol:
    if policy is ConflictPolicy.prompt:
        if sys.stdin.isatty():
            return TerminalDecisionProvider(console)
        logging.getLogger(__name__).warning(
            "stdin is not a terminal: existing files will be reported as errors (use --force or --on-conflict skip)"
        )
        return HeadlessDecisionProvider("fail")
    return HeadlessDecisionProvider(policy.value)


@app.command()
def main(
    url: Optional[str] = typer.Option(None, "--url", help="Process a single GitHub repository or file URL"),
    config_file: Optional[Path] = typer.Option(None, "--config-file", help="JSON config file with a list of URLs"),
    vst3_path: Optional[str] = typer.Option(None, "--vst3-path", help="VST3 install directory"),
    clap_path: Optional[str] = typer.Option(None, "--clap-path", help="CLAP install directory"),
    bwpreset_path: Optional[str] = typer.Option(None, "--bwpreset-path", help="Bitwig preset directory"),
    force: bool = typer.Option(False, "--force", help="Overwrite existing files without asking"),
    on_conflict: ConflictPolicy = typer.Option(
        ConflictPolicy.prompt, "--on-conflict", help="What to do with existing files when not forcing"
    ),
    strict: bool = typer.Option(False, "--strict/--no-strict", help="Exit with code 2 if any URL failed"),
    log_level: LogLevel = typer.Option(LogLevel.INFO, "--log-level", case_sensitive=False, help="Logging level"),
    log_file: Optional[Path] = typer.Option(None, "--log-file", help="Also write the log to this file"),
) -> None:
    """Download the latest release assets and install recognized plugin files."""

    _configure_logging(log_level.value, log_file)

    try:
        sources = select_sources(url, config_file)
        path_config = resolve_paths(
            cli_overrides={
                InstallTarget.VST3: vst3_path,
                InstallTarget.CLAP: clap_path,
                InstallTarget.BWPRESET: bwpreset_path,
            },
            environ=os.environ,
            config_section=sources.path_settings,
            defaults=default_paths(),
        )
        ensure_directories(path_config)
    except ConfigurationError as exc:
        console.print(f"[red]Configuration error:[/red] {exc}")
        console.print(USAGE_HINT)
        raise typer.Exit(code=EXIT_CONFIG_ERROR)

    orchestrator = Orchestrator(
        path_config=path_config,
        fetcher=GitHubSourceFetcher(),
        extractor=ZipArchiveExtractor(),
        context=RunContext(decisions=_decision_provider(on_conflict), force=force),
    )
    outcomes = orchestrator.run(sources.urls)

    failed = [outcome for outcome in outcomes if not outcome.success]
    if failed:
        console.print(f"[yellow]{len(failed)} of {len(outcomes)} URL(s) failed.[/yellow]")
        if strict:
            raise typer.Exit(code=EXIT_PARTIAL_FAILURE)
    else:
        console.print(f"[green]Processed {len(outcomes)} URL(s).[/green]")


if __name__ == "__main__":
    app()
