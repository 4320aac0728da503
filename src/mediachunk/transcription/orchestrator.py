"""Per-chunk transcription with failure isolation."""

from __future__ import annotations

import time

from mediachunk.models.config import TranscriptionOptions
from mediachunk.models.media import ChunkExport, ChunkTranscription
from mediachunk.transcription.base import TranscriptionEngine
from mediachunk.utils.progress import log_step, log_warning


def create_engine(options: TranscriptionOptions) -> TranscriptionEngine:
    """Pick the engine named in the options."""
    if options.engine == "whisper":
        from mediachunk.transcription.whisper import WhisperEngine
        return WhisperEngine(options)
    elif options.engine == "vosk":
        from mediachunk.transcription.vosk import VoskEngine
        return VoskEngine(options)
    else:
        raise ValueError(f"Unknown transcription engine: {options.engine}")


def failed_transcription(chunk_id: str, error: BaseException) -> ChunkTranscription:
    return ChunkTranscription(
        chunk_id=chunk_id,
        text="",
        confidence=None,
        words=[],
        raw_result=None,
        error=str(error) or type(error).__name__,
    )


def transcribe_chunks(
    exports: list[ChunkExport],
    options: TranscriptionOptions,
    *,
    engine: TranscriptionEngine | None = None,
) -> list[ChunkTranscription]:
    """Transcribe chunks one at a time, in order.

    Engine setup failures propagate to the caller. A failure on a single
    chunk becomes that chunk's ``error`` and the rest still run.
    """
    engine = engine or create_engine(options)
    log_step("Transcribe", f"Transcribing {len(exports)} chunks with {engine.name}")
    engine.load()

    results: list[ChunkTranscription] = []
    start_time = time.time()
    try:
        for chunk in exports:
            try:
                result = engine.transcribe(chunk)
            except Exception as e:
                log_warning(f"{engine.name} failed on {chunk.id}: {e}")
                result = failed_transcription(chunk.id, e)
            results.append(result)
    finally:
        engine.close()

    failed = sum(1 for r in results if r.error)
    elapsed = time.time() - start_time
    log_step(
        "Transcribe",
        f"{len(results) - failed}/{len(results)} chunks transcribed in {elapsed:.1f}s",
    )
    return results
