"""Shared CLI plumbing: settings, site configuration and error reporting."""

from __future__ import annotations

import logging
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler

from mummy.config import MummySettings
from mummy.core.registry import UnresolvableMummifierError
from mummy.models.config import SiteConfig
from mummy.mummify.base import MummifyError, PlanError

console = Console()

# Errors reported to the user as a failed build rather than a crash.
BUILD_ERRORS: tuple[type[BaseException], ...] = (
    PlanError,
    MummifyError,
    UnresolvableMummifierError,
    ValidationError,
    OSError,
    ValueError,
)


def setup_logging(level: str) -> None:
    """Route the package's log records to the Rich console at *level*."""
    package_logger = logging.getLogger("mummy")
    package_logger.setLevel(level.upper())
    if not any(isinstance(h, RichHandler) for h in package_logger.handlers):
        handler = RichHandler(console=console, show_path=False, log_time_format="[%X]")
        handler.setFormatter(logging.Formatter("%(message)s"))
        package_logger.addHandler(handler)


def load_site_config(config_file: Path | None, settings: MummySettings) -> SiteConfig:
    """Load an explicit configuration file, or discover one in the working directory."""
    if config_file is not None:
        return SiteConfig.load(config_file)
    return SiteConfig.discover(Path.cwd(), settings.config_file)


def fail(exc: BaseException) -> typer.Exit:
    """Print a build error and return the exit to raise."""
    console.print(f"[bold red]Build failed:[/bold red] {exc}", highlight=False)
    cause = exc.__cause__
    while cause is not None:
        console.print(f"  [red]caused by:[/red] {type(cause).__name__}: {cause}", highlight=False)
        cause = cause.__cause__
    return typer.Exit(code=1)
