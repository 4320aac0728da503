"""mediachunk analyze: chunk a recording on silences and optionally transcribe."""

from __future__ import annotations

import time
from pathlib import Path
from typing import Any

import click
from rich.console import Console
from rich.table import Table

from mediachunk.models.config import AnalysisOptions, TranscriptionOptions, to_field_names
from mediachunk.models.media import AnalysisResponse
from mediachunk.transcription.text import format_timestamp
from mediachunk.utils.io import read_yaml, write_json
from mediachunk.utils.progress import log_error, log_success, log_warning, show_stage_summary

console = Console()


def _load_config(config_path: str | None) -> tuple[dict[str, Any], dict[str, Any]]:
    if not config_path:
        return {}, {}
    data = read_yaml(config_path)
    return (
        to_field_names(AnalysisOptions, dict(data.get("options") or {})),
        to_field_names(TranscriptionOptions, dict(data.get("transcription") or {})),
    )


def _merge(base: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    merged.update({k: v for k, v in overrides.items() if v is not None})
    return merged


def _fmt_ms(ms: int) -> str:
    return f"{ms / 1000:.2f}s"


def _print_chunks(response: AnalysisResponse) -> None:
    texts = {t.chunk_id: t for t in response.transcriptions}

    table = Table(title=f"Chunks ({len(response.chunks)})", show_lines=False)
    table.add_column("Chunk", style="bold")
    table.add_column("Start", justify="right")
    table.add_column("End", justify="right")
    table.add_column("Duration", justify="right")
    if texts:
        table.add_column("Text")

    for chunk in response.chunks:
        row = [
            chunk.id,
            format_timestamp(chunk.start_ms / 1000),
            format_timestamp(chunk.end_ms / 1000),
            _fmt_ms(chunk.duration_ms),
        ]
        if texts:
            result = texts.get(chunk.id)
            if result is None:
                row.append("")
            elif not result.ok:
                row.append(f"[red]{result.error}[/red]")
            else:
                row.append(result.text)
        table.add_row(*row)

    console.print(table)


@click.command()
@click.argument("input_path", type=click.Path())
@click.option("--output-dir", "-o", default=None, type=click.Path(file_okay=False),
              help="Directory for previews and chunks (default: ./media-previews)")
@click.option("--config", "-c", "config_path", default=None, type=click.Path(exists=True),
              help="YAML file with 'options' and 'transcription' sections")
@click.option("--silence-threshold-db", type=float, default=None,
              help="Silence threshold in dB (default -40)")
@click.option("--min-silence-ms", type=int, default=None,
              help="Minimum silence duration to cut on (default 1000)")
@click.option("--padding-before-ms", type=int, default=None, help="Padding before speech (default 200)")
@click.option("--padding-after-ms", type=int, default=None, help="Padding after speech (default 300)")
@click.option("--min-chunk-ms", type=int, default=None, help="Minimum chunk duration (default 500)")
@click.option("--max-chunk-ms", type=int, default=None, help="Maximum chunk duration (default 600000)")
@click.option("--transcribe/--no-transcribe", default=None, help="Transcribe each chunk")
@click.option("--engine", type=click.Choice(["whisper", "vosk"]), default=None,
              help="Speech recognition engine")
@click.option("--model-path", default=None, type=click.Path(), help="Local model path")
@click.option("--model-name", default=None, help="Whisper model name (tiny, base, small, medium...)")
@click.option("--language", default=None, help="Language code, or 'auto'")
@click.option("--device", default=None, help="Whisper device (cpu, cuda)")
@click.option("--no-words", is_flag=True, default=False, help="Skip word-level timings")
@click.option("--json-out", default=None, type=click.Path(dir_okay=False),
              help="Write the full analysis result as JSON")
def analyze_cmd(
    input_path: str,
    output_dir: str | None,
    config_path: str | None,
    silence_threshold_db: float | None,
    min_silence_ms: int | None,
    padding_before_ms: int | None,
    padding_after_ms: int | None,
    min_chunk_ms: int | None,
    max_chunk_ms: int | None,
    transcribe: bool | None,
    engine: str | None,
    model_path: str | None,
    model_name: str | None,
    language: str | None,
    device: str | None,
    no_words: bool,
    json_out: str | None,
) -> None:
    """Split INPUT_PATH into speech chunks on silences."""
    from mediachunk.pipeline.analyzer import MediaAnalyzer

    try:
        file_options, file_transcription = _load_config(config_path)
    except (OSError, ValueError) as e:
        log_error(f"Could not read config: {e}")
        raise SystemExit(1)

    options = _merge(file_options, {
        "silence_threshold_db": silence_threshold_db,
        "min_silence_duration_ms": min_silence_ms,
        "padding_before_ms": padding_before_ms,
        "padding_after_ms": padding_after_ms,
        "min_chunk_duration_ms": min_chunk_ms,
        "max_chunk_duration_ms": max_chunk_ms,
    })
    transcription = _merge(file_transcription, {
        "enabled": transcribe,
        "engine": engine,
        "model_path": model_path,
        "model_name": model_name,
        "language": language,
        "device": device,
        "enable_words": False if no_words else None,
    })

    start = time.time()
    try:
        response = MediaAnalyzer().analyze(
            input_path,
            output_dir=output_dir,
            options=options,
            transcription=transcription,
        )
    except Exception as e:
        log_error(f"Analysis failed: {e}")
        raise SystemExit(1)

    _print_chunks(response)
    if response.full_text:
        console.print(f"\n[bold]Transcript[/bold]\n{response.full_text}")
    for warning in response.warnings:
        log_warning(warning)

    if json_out:
        write_json(Path(json_out), response.model_dump(mode="json"))
        log_success(f"Result written: {json_out}")

    show_stage_summary(
        "Analysis Complete",
        time.time() - start,
        {
            "Source": Path(response.source_path).name,
            "Duration": _fmt_ms(response.duration_ms),
            "Chunks": len(response.chunks),
            "Chunks dir": response.chunk_exports_dir_path or "-",
            "Transcribed": sum(1 for t in response.transcriptions if t.ok),
            "Warnings": len(response.warnings),
        },
    )
