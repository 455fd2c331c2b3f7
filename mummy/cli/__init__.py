"""Mummy CLI: Typer-based command-line interface.

Provides the ``mummy`` command with ``plan`` and ``mummify`` subcommands.
All output uses Rich for formatted terminal display.
"""
