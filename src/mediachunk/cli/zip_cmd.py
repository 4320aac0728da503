"""mediachunk zip: archive an exported chunks directory."""

from __future__ import annotations

import click

from mediachunk.utils.archive import zip_directory
from mediachunk.utils.progress import log_error, log_success


@click.command()
@click.argument("directory", type=click.Path(exists=True, file_okay=False))
@click.option(
    "--output", "-o",
    default=None,
    type=click.Path(dir_okay=False),
    help="Zip file to write (defaults to <directory>.zip)",
)
def zip_cmd(directory: str, output: str | None) -> None:
    """Zip a chunks directory for sharing."""
    try:
        archive_path = zip_directory(directory, output)
    except OSError as e:
        log_error(f"Could not create archive: {e}")
        raise SystemExit(1)
    log_success(f"Archive written: {archive_path}")
