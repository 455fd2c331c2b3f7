"""CLI subcommands, registered on the app in :mod:`mummy.cli.app`."""
