"""``mummify``: plan the site and write it to the target directory.

Optionally writes a build manifest and publishes the result to a local
directory.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.panel import Panel

from mummy.cli.support import BUILD_ERRORS, console, fail, load_site_config
from mummy.config import MummySettings
from mummy.core.orchestrator import Mummy
from mummy.deploy import DirectoryDeployTarget


def mummify_cmd(
    source: Path = typer.Argument(
        ..., exists=True, file_okay=False, help="Site source directory."
    ),
    target: Path = typer.Option(
        Path("build"), "--target", "-t", help="Site target directory."
    ),
    config_file: Path = typer.Option(
        None, "--config", "-c", exists=True, dir_okay=False, help="Site configuration file."
    ),
    workers: int = typer.Option(
        None, "--workers", "-w", min=1, help="Concurrent leaf writes [default: MUMMY_WORKERS or 1]."
    ),
    manifest: Path = typer.Option(
        None, "--manifest", "-m", help="Write a build manifest to this path."
    ),
    deploy_dir: Path = typer.Option(
        None, "--deploy-dir", help="Publish the built site into this directory."
    ),
) -> None:
    """Mummify the site: plan it, then write every artifact."""
    settings = MummySettings()
    deploy_targets = [DirectoryDeployTarget(deploy_dir)] if deploy_dir is not None else []
    try:
        mummy = Mummy(
            configuration=load_site_config(config_file, settings),
            workers=workers or settings.workers,
            manifest_path=manifest or settings.manifest_path,
            deploy_targets=deploy_targets,
        )
        plan = mummy.mummify(source, target)
        urls = mummy.deploy(plan) if deploy_targets else []
    except BUILD_ERRORS as exc:
        raise fail(exc) from exc

    lines = [
        "[bold green]Site mummified![/bold green]",
        "",
        f"[bold]Source:[/bold]     {plan.root.source_path}",
        f"[bold]Target:[/bold]     {plan.root.target_path}",
        f"[bold]Artifacts:[/bold]  {len(plan)}",
    ]
    if mummy.manifest is not None:
        lines.append(f"[bold]Manifest:[/bold]   {mummy.manifest.manifest_hash}")
    for url in urls:
        lines.append(f"[bold]Deployed:[/bold]   {url}")
    console.print(Panel("\n".join(lines), title="[bold]Mummy[/bold]", border_style="green"))
