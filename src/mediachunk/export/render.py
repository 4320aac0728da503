"""Render the full-length previews and one WAV file per chunk."""

from __future__ import annotations

import re
import uuid
from dataclasses import dataclass
from pathlib import Path

from mediachunk.analysis.interval import Interval, round_ms
from mediachunk.export.filters import (
    FilterGraphError,
    build_single_trim_filter,
    build_trim_filter_complex,
)
from mediachunk.models.media import ChunkExport, ChunkExportBundle, MediaPreview, Previews
from mediachunk.utils.ffmpeg import MediaTools, ProcessError
from mediachunk.utils.progress import log_step, log_warning

PREVIEW_FORMAT = "mp3"
CHUNK_SAMPLE_RATE = 16000


def build_output_stem(source_path: Path | str) -> str:
    """Filesystem-safe, lower-cased stem of the source file name."""
    sanitized = re.sub(r"[^a-zA-Z0-9_-]+", "_", Path(source_path).stem).lower()
    return sanitized or "media"


@dataclass(frozen=True)
class OutputLayout:
    """File naming for one analysis run inside the output directory."""

    output_dir: Path
    stem: str
    suffix: str

    @classmethod
    def for_source(cls, source_path: Path, output_dir: Path) -> OutputLayout:
        return cls(
            output_dir=output_dir,
            stem=build_output_stem(source_path),
            suffix=uuid.uuid4().hex[:8],
        )

    @property
    def prefix(self) -> str:
        return f"{self.stem}-{self.suffix}"

    @property
    def original_preview(self) -> Path:
        return self.output_dir / f"{self.prefix}-original.{PREVIEW_FORMAT}"

    @property
    def trimmed_preview(self) -> Path:
        return self.output_dir / f"{self.prefix}-trimmed.{PREVIEW_FORMAT}"

    @property
    def chunks_dir(self) -> Path:
        return self.output_dir / f"{self.prefix}-chunks"

    def chunk_wav(self, chunk_id: str) -> Path:
        return self.chunks_dir / f"{self.prefix}-{chunk_id}.wav"


def render_original_preview(
    source_path: Path, target_path: Path, tools: MediaTools
) -> MediaPreview:
    """Re-encode the first audio stream of the source, untouched, to MP3."""
    tools.run_ffmpeg([
        "-y",
        "-i", str(source_path),
        "-vn",
        "-map", "0:a:0?",
        "-acodec", "libmp3lame",
        "-q:a", "3",
        str(target_path),
    ])
    return MediaPreview(
        label="original",
        format=PREVIEW_FORMAT,
        path=str(target_path),
        file_url=target_path.resolve().as_uri(),
    )


def render_trimmed_preview(
    source_path: Path,
    target_path: Path,
    segments: list[Interval],
    tools: MediaTools,
) -> MediaPreview:
    """Render only the speech segments, concatenated with the gaps removed."""
    tools.run_ffmpeg([
        "-y",
        "-i", str(source_path),
        "-vn",
        "-filter_complex", build_trim_filter_complex(segments),
        "-map", "[aout]",
        "-acodec", "libmp3lame",
        "-q:a", "3",
        str(target_path),
    ])
    return MediaPreview(
        label="trimmed",
        format=PREVIEW_FORMAT,
        path=str(target_path),
        file_url=target_path.resolve().as_uri(),
    )


def render_previews(
    source_path: Path,
    layout: OutputLayout,
    segments: list[Interval],
    tools: MediaTools,
    warnings: list[str],
) -> Previews:
    """Render both previews. Failures become warnings, not errors."""
    previews = Previews()

    try:
        previews.original = render_original_preview(
            source_path, layout.original_preview, tools
        )
    except (ProcessError, FilterGraphError) as e:
        message = f"Could not render the original preview: {e}"
        log_warning(message)
        warnings.append(message)

    if segments:
        try:
            previews.trimmed = render_trimmed_preview(
                source_path, layout.trimmed_preview, segments, tools
            )
        except (ProcessError, FilterGraphError) as e:
            message = f"Could not render the version without silences: {e}"
            log_warning(message)
            warnings.append(message)

    rendered = [p.label for p in (previews.original, previews.trimmed) if p]
    log_step("Preview", f"Rendered previews: {', '.join(rendered) or 'none'}")
    return previews


def render_chunk_exports(
    source_path: Path,
    layout: OutputLayout,
    segments: list[Interval],
    tools: MediaTools,
) -> ChunkExportBundle:
    """Export each segment as a mono 16 kHz PCM WAV file.

    Any ffmpeg failure propagates: transcription indexes chunks by position.
    """
    if not segments:
        return ChunkExportBundle()

    chunks_dir = layout.chunks_dir
    chunks_dir.mkdir(parents=True, exist_ok=True)
    log_step("Export", f"Exporting {len(segments)} chunks to {chunks_dir}")

    exports: list[ChunkExport] = []
    for index, segment in enumerate(segments):
        if segment.is_empty:
            continue

        chunk_id = f"chunk-{index + 1}"
        wav_path = layout.chunk_wav(chunk_id)
        tools.run_ffmpeg([
            "-y",
            "-i", str(source_path),
            "-vn",
            "-filter_complex", build_single_trim_filter(segment),
            "-map", "[aout]",
            "-acodec", "pcm_s16le",
            "-ar", str(CHUNK_SAMPLE_RATE),
            "-ac", "1",
            str(wav_path),
        ])

        exports.append(ChunkExport(
            id=chunk_id,
            start_ms=round_ms(segment.start_ms),
            end_ms=round_ms(segment.end_ms),
            duration_ms=max(0, round_ms(segment.end_ms - segment.start_ms)),
            wav_path=str(wav_path),
            wav_url=wav_path.resolve().as_uri(),
        ))

    log_step("Export", f"Exported {len(exports)} chunks")
    return ChunkExportBundle(
        exports=exports,
        directory_path=str(chunks_dir),
        directory_url=chunks_dir.resolve().as_uri(),
    )
