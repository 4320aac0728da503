"""mediachunk defaults: print the default options as YAML."""

from __future__ import annotations

import click

from mediachunk.models.config import AnalysisOptions, TranscriptionOptions
from mediachunk.utils.io import dump_yaml


@click.command()
def defaults_cmd() -> None:
    """Print default analysis and transcription options (usable with --config)."""
    data = {
        "options": AnalysisOptions().model_dump(mode="json"),
        "transcription": TranscriptionOptions().model_dump(mode="json"),
    }
    click.echo(dump_yaml(data), nl=False)
