"""Root CLI group for mediachunk."""

from __future__ import annotations

import click

from mediachunk import __version__


@click.group()
@click.version_option(version=__version__, prog_name="mediachunk")
def cli() -> None:
    """mediachunk: split recordings into speech chunks and transcribe them."""


# Import and register subcommands
from mediachunk.cli.analyze_cmd import analyze_cmd  # noqa: E402
from mediachunk.cli.defaults_cmd import defaults_cmd  # noqa: E402
from mediachunk.cli.zip_cmd import zip_cmd  # noqa: E402

cli.add_command(analyze_cmd, "analyze")
cli.add_command(defaults_cmd, "defaults")
cli.add_command(zip_cmd, "zip")
