"""Whisper transcription via faster-whisper."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from mediachunk.models.config import TranscriptionOptions
from mediachunk.models.media import ChunkExport, ChunkTranscription, TranscriptionWord
from mediachunk.transcription.base import TranscriptionError
from mediachunk.transcription.text import (
    average_confidence,
    clean_transcript_text,
    spread_words,
    strip_markers,
)
from mediachunk.utils.progress import log_step
from mediachunk.utils.retry import retry_download

# Sizes published with an English-only ".en" variant.
_ENGLISH_VARIANTS = {"tiny", "base", "small", "medium"}


def resolve_model_id(options: TranscriptionOptions) -> str:
    """Model path if given, else the model name (``.en`` variant for English)."""
    if options.model_path:
        return options.model_path
    name = options.model_name
    if options.language == "en" and name in _ENGLISH_VARIANTS:
        return f"{name}.en"
    return name


class WhisperEngine:
    """Engine A: produces timestamped fragments, combined into one result per chunk."""

    name = "whisper"

    def __init__(self, options: TranscriptionOptions, model: Any = None):
        self.options = options
        self._model = model

    def load(self) -> None:
        if self._model is not None:
            return

        try:
            from faster_whisper import WhisperModel
        except ImportError:
            raise TranscriptionError(
                "faster-whisper is required for whisper transcription. "
                "Install with: pip install mediachunk[whisper]"
            )

        model_id = resolve_model_id(self.options)
        compute_type = self.options.resolved_compute_type
        log_step(
            "Transcribe",
            f"Loading whisper model: {model_id} ({self.options.device}, {compute_type})",
        )

        @retry_download()
        def _load():
            return WhisperModel(
                model_id, device=self.options.device, compute_type=compute_type
            )

        self._model = _load()

    def close(self) -> None:
        self._model = None

    def transcribe(self, chunk: ChunkExport) -> ChunkTranscription:
        if self._model is None:
            raise TranscriptionError("Whisper model is not loaded")

        wav_path = Path(chunk.wav_path)
        if not wav_path.exists():
            raise FileNotFoundError(f"Audio file not found: {wav_path}")

        language = None if self.options.language in ("", "auto") else self.options.language
        segments_gen, info = self._model.transcribe(
            str(wav_path),
            beam_size=5,
            language=language,
            word_timestamps=self.options.enable_words,
        )

        fragments: list[dict[str, Any]] = []
        words: list[TranscriptionWord] = []

        for seg in segments_gen:
            text = strip_markers(seg.text or "")
            if not text:
                continue
            fragments.append({"start": seg.start, "end": seg.end, "text": text})

            if not self.options.enable_words:
                continue
            seg_words = getattr(seg, "words", None) or []
            if seg_words:
                for w in seg_words:
                    word = strip_markers(w.word or "")
                    if not word:
                        continue
                    words.append(TranscriptionWord(
                        word=word,
                        start_sec=w.start,
                        end_sec=w.end,
                        confidence=getattr(w, "probability", None),
                    ))
            else:
                words.extend(spread_words(text, seg.start, seg.end))

        if not fragments:
            return ChunkTranscription(
                chunk_id=chunk.id,
                raw_result={
                    "segments": [],
                    "language": getattr(info, "language", None),
                },
            )

        text = clean_transcript_text(" ".join(f["text"] for f in fragments))
        return ChunkTranscription(
            chunk_id=chunk.id,
            text=text,
            confidence=average_confidence(words),
            words=words,
            raw_result={
                "start": fragments[0]["start"],
                "end": fragments[-1]["end"],
                "segments": fragments,
                "language": getattr(info, "language", None),
                "language_probability": getattr(info, "language_probability", None),
            },
        )
