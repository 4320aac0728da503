"""Engine protocol and errors shared by the transcription backends."""

from __future__ import annotations

from typing import Protocol

from mediachunk.models.media import ChunkExport, ChunkTranscription


class TranscriptionError(Exception):
    """An engine cannot run at all (missing model, missing module)."""


class WavFormatError(ValueError):
    """A chunk's audio does not match what the engine accepts."""


class TranscriptionEngine(Protocol):
    """A speech recognition backend driven one chunk at a time."""

    name: str

    def load(self) -> None: ...
    def transcribe(self, chunk: ChunkExport) -> ChunkTranscription: ...
    def close(self) -> None: ...
