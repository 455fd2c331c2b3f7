"""``mummy plan``: show the artifact graph of a site without writing anything."""

from __future__ import annotations

from pathlib import Path

import typer

from mummy.cli.render import plan_tree
from mummy.cli.support import BUILD_ERRORS, console, fail, load_site_config
from mummy.config import MummySettings
from mummy.core.orchestrator import Mummy


def plan_cmd(
    source: Path = typer.Argument(
        ..., exists=True, file_okay=False, help="Site source directory."
    ),
    target: Path = typer.Option(
        Path("build"), "--target", "-t", help="Site target directory."
    ),
    config_file: Path = typer.Option(
        None, "--config", "-c", exists=True, dir_okay=False, help="Site configuration file."
    ),
) -> None:
    """Plan the site and print its artifact tree."""
    settings = MummySettings()
    try:
        mummy = Mummy(configuration=load_site_config(config_file, settings))
        plan = mummy.plan(source, target)
    except BUILD_ERRORS as exc:
        raise fail(exc) from exc

    console.print(plan_tree(plan))
    console.print(f"[bold]{len(plan)}[/bold] artifacts planned.")
