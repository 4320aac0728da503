"""Analysis result models."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

from mediachunk.models.config import AnalysisOptions, TranscriptionOptions


class Chunk(BaseModel):
    """A finalized speech segment with a stable 1-based id."""

    id: str
    start_ms: int
    end_ms: int
    duration_ms: int


class MediaPreview(BaseModel):
    """A full-length audio preview rendered next to the chunks."""

    label: Literal["original", "trimmed"]
    format: str = "mp3"
    path: str
    file_url: str


class Previews(BaseModel):
    original: MediaPreview | None = None
    trimmed: MediaPreview | None = None


class ChunkExport(BaseModel):
    """A chunk plus the mono 16 kHz WAV file rendered for it."""

    id: str
    start_ms: int
    end_ms: int
    duration_ms: int
    wav_path: str
    wav_url: str


class ChunkExportBundle(BaseModel):
    exports: list[ChunkExport] = Field(default_factory=list)
    directory_path: str | None = None
    directory_url: str | None = None


class TranscriptionWord(BaseModel):
    """A recognized word with timing relative to its chunk."""

    word: str
    start_sec: float
    end_sec: float
    confidence: float | None = None


class ChunkTranscription(BaseModel):
    """Recognition result for one chunk. Failure sets ``error``, never raises."""

    chunk_id: str
    text: str = ""
    confidence: float | None = None
    words: list[TranscriptionWord] = Field(default_factory=list)
    raw_result: dict[str, Any] | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class AnalysisResponse(BaseModel):
    """Everything produced by one analysis request."""

    source_path: str
    source_url: str
    duration_ms: int
    chunks: list[Chunk] = Field(default_factory=list)
    options: AnalysisOptions
    previews: Previews = Field(default_factory=Previews)
    chunk_exports: list[ChunkExport] = Field(default_factory=list)
    chunk_exports_dir_path: str | None = None
    chunk_exports_dir_url: str | None = None
    transcriptions: list[ChunkTranscription] = Field(default_factory=list)
    transcription: TranscriptionOptions
    output_dir: str
    warnings: list[str] = Field(default_factory=list)

    @property
    def full_text(self) -> str:
        return " ".join(t.text for t in self.transcriptions if t.text).strip()
