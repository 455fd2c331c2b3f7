"""Main Typer application: imports and registers all CLI commands.

Entry point: ``mummy`` (configured via pyproject.toml console_scripts).
"""

from __future__ import annotations

import typer

from mummy.cli.commands.mummify import mummify_cmd
from mummy.cli.commands.plan import plan_cmd
from mummy.cli.support import setup_logging
from mummy.config import MummySettings

app = typer.Typer(
    name="mummy",
    help="Mummy: plan and mummify static sites.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)

# Register subcommands
app.command(name="plan", help="Show the planned artifact tree of a site.")(plan_cmd)
app.command(name="mummify", help="Plan and write a site to its target directory.")(mummify_cmd)


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every artifact."),
) -> None:
    """Configure logging from MUMMY_LOG_LEVEL, or DEBUG when verbose."""
    setup_logging("DEBUG" if verbose else MummySettings().log_level)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
