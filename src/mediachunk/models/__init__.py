"""Pydantic data models for mediachunk."""

from mediachunk.models.config import (
    AnalysisOptions,
    TranscriptionOptions,
    normalize_options,
    normalize_transcription_options,
)
from mediachunk.models.media import (
    AnalysisResponse,
    Chunk,
    ChunkExport,
    ChunkExportBundle,
    ChunkTranscription,
    MediaPreview,
    Previews,
    TranscriptionWord,
)

__all__ = [
    "AnalysisOptions",
    "TranscriptionOptions",
    "normalize_options",
    "normalize_transcription_options",
    "AnalysisResponse",
    "Chunk",
    "ChunkExport",
    "ChunkExportBundle",
    "ChunkTranscription",
    "MediaPreview",
    "Previews",
    "TranscriptionWord",
]
