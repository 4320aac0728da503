"""Sequential media analysis: probe, detect, segment, export, transcribe."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from mediachunk.analysis.constraints import enforce_duration_constraints
from mediachunk.analysis.interval import round_ms
from mediachunk.analysis.segments import build_speech_segments
from mediachunk.analysis.silence import detect_silences
from mediachunk.export.render import OutputLayout, render_chunk_exports, render_previews
from mediachunk.models.config import (
    AnalysisOptions,
    TranscriptionOptions,
    normalize_options,
    normalize_transcription_options,
)
from mediachunk.models.media import AnalysisResponse, Chunk, ChunkTranscription
from mediachunk.transcription.base import TranscriptionEngine
from mediachunk.transcription.orchestrator import transcribe_chunks
from mediachunk.utils.ffmpeg import MediaTools
from mediachunk.utils.ffprobe import probe_duration_ms
from mediachunk.utils.progress import log, log_success, log_warning

DEFAULT_OUTPUT_DIRNAME = "media-previews"


class SourceNotFoundError(FileNotFoundError):
    """Raised when the input media file does not exist."""


def ensure_source_exists(input_path: Path) -> None:
    if not input_path.exists():
        raise SourceNotFoundError(f"Source file not found: {input_path}")
    if not input_path.is_file():
        raise ValueError(f"Path {input_path} is not a file.")


def resolve_output_dir(output_dir: Path | str | None) -> Path:
    if output_dir is not None and str(output_dir).strip():
        resolved = Path(output_dir).expanduser().resolve()
    else:
        resolved = Path.cwd() / DEFAULT_OUTPUT_DIRNAME
    resolved.mkdir(parents=True, exist_ok=True)
    return resolved


class MediaAnalyzer:
    """Runs one analysis request end to end.

    Steps:
    1. Normalize options and check the source file
    2. Probe duration (falls back to 0, never fatal)
    3. Detect silences with ffmpeg silencedetect
    4. Build padded/merged speech segments, then apply min/max durations
    5. Render original and trimmed previews (failures become warnings)
    6. Export one mono 16 kHz WAV per chunk
    7. Optionally transcribe each chunk
    """

    def __init__(
        self,
        tools: MediaTools | None = None,
        *,
        engine: TranscriptionEngine | None = None,
    ):
        self.tools = tools or MediaTools.discover()
        self.engine = engine

    def analyze(
        self,
        input_path: Path | str,
        *,
        output_dir: Path | str | None = None,
        options: AnalysisOptions | dict[str, Any] | None = None,
        transcription: TranscriptionOptions | dict[str, Any] | None = None,
    ) -> AnalysisResponse:
        resolved_options = normalize_options(options)
        resolved_transcription = normalize_transcription_options(transcription)
        source_path = Path(input_path).expanduser().resolve()
        ensure_source_exists(source_path)

        log(f"[bold]Analyzing[/bold] {source_path.name}")

        duration_ms = probe_duration_ms(source_path, self.tools)
        silences = detect_silences(source_path, resolved_options, self.tools)
        segments = build_speech_segments(duration_ms, silences, resolved_options)
        segments = enforce_duration_constraints(segments, resolved_options, duration_ms)

        chunks = [
            Chunk(
                id=f"chunk-{index + 1}",
                start_ms=round_ms(segment.start_ms),
                end_ms=round_ms(segment.end_ms),
                duration_ms=max(0, round_ms(segment.end_ms - segment.start_ms)),
            )
            for index, segment in enumerate(segments)
        ]

        warnings: list[str] = []
        if not chunks:
            message = (
                "No speech segment detected. Try adjusting the silence threshold "
                "or check the recording."
            )
            log_warning(message)
            warnings.append(message)

        layout = OutputLayout.for_source(source_path, resolve_output_dir(output_dir))
        previews = render_previews(source_path, layout, segments, self.tools, warnings)
        bundle = render_chunk_exports(source_path, layout, segments, self.tools)

        transcriptions: list[ChunkTranscription] = []
        if resolved_transcription.enabled:
            if not bundle.exports:
                message = (
                    "Transcription requested but no chunk was exported. "
                    "Adjust the parameters and run again."
                )
                log_warning(message)
                warnings.append(message)
            else:
                try:
                    transcriptions = transcribe_chunks(
                        bundle.exports,
                        resolved_transcription,
                        engine=self.engine,
                    )
                except Exception as e:
                    message = f"{resolved_transcription.engine} transcription failed: {e}"
                    log_warning(message)
                    warnings.append(message)

        has_exports = bool(bundle.exports)
        log_success(
            f"Analysis complete: {len(chunks)} chunks, {len(warnings)} warning(s)"
        )

        return AnalysisResponse(
            source_path=str(source_path),
            source_url=source_path.as_uri(),
            duration_ms=duration_ms,
            chunks=chunks,
            options=resolved_options,
            previews=previews,
            chunk_exports=bundle.exports,
            chunk_exports_dir_path=bundle.directory_path if has_exports else None,
            chunk_exports_dir_url=bundle.directory_url if has_exports else None,
            transcriptions=transcriptions,
            transcription=resolved_transcription,
            output_dir=str(layout.output_dir),
            warnings=warnings,
        )
