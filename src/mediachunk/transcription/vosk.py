"""Vosk (Kaldi) transcription over validated 16-bit mono PCM chunks."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from mediachunk.models.config import TranscriptionOptions
from mediachunk.models.media import ChunkExport, ChunkTranscription, TranscriptionWord
from mediachunk.transcription.base import TranscriptionError, WavFormatError
from mediachunk.transcription.text import average_confidence, to_number
from mediachunk.utils.progress import log_step

FRAME_BYTES = 4096


def validate_pcm_wav(path: Path) -> int:
    """Check a chunk is mono 16-bit PCM and return its sample rate."""
    import soundfile as sf

    try:
        info = sf.info(str(path))
    except RuntimeError as e:
        raise WavFormatError(f"Unreadable WAV file {path.name}: {e}") from e

    if not info.subtype.startswith("PCM"):
        raise WavFormatError(f"Non-PCM WAV format detected ({info.subtype})")
    if info.channels != 1:
        raise WavFormatError(
            f"Chunk must be mono for Vosk transcription (got {info.channels} channels)"
        )
    if info.subtype != "PCM_16":
        raise WavFormatError(f"Chunk must be 16-bit PCM (got {info.subtype})")
    return int(info.samplerate)


def iter_pcm_frames(path: Path):
    """Yield raw little-endian int16 frames of about FRAME_BYTES bytes."""
    import soundfile as sf

    with sf.SoundFile(str(path)) as f:
        for block in f.blocks(blocksize=FRAME_BYTES // 2, dtype="int16"):
            yield block.tobytes()


def parse_vosk_result(raw: str) -> tuple[str, list[TranscriptionWord], dict | None]:
    """Parse a recognizer's final JSON into text, words and the raw dict.

    Unparsable output keeps the trimmed raw text with no words.
    """
    if not raw:
        return "", [], None

    try:
        parsed = json.loads(raw)
    except ValueError:
        return raw.strip(), [], None
    if not isinstance(parsed, dict):
        return raw.strip(), [], None

    best: dict[str, Any] = parsed
    alternatives = parsed.get("alternatives")
    if isinstance(alternatives, list) and alternatives and isinstance(alternatives[0], dict):
        best = alternatives[0]

    text = best.get("text") if isinstance(best.get("text"), str) else ""
    words: list[TranscriptionWord] = []
    entries = best.get("result")
    if isinstance(entries, list):
        for entry in entries:
            if not isinstance(entry, dict):
                continue
            word = entry.get("word")
            if not isinstance(word, str) or not word.strip():
                continue
            start = to_number(entry.get("start"))
            end = to_number(entry.get("end"))
            words.append(TranscriptionWord(
                word=word,
                start_sec=start if start is not None else 0.0,
                end_sec=end if end is not None else (start if start is not None else 0.0),
                confidence=to_number(entry.get("conf")),
            ))

    return text.strip(), words, parsed


class VoskEngine:
    """Engine B: feeds raw PCM frames to a Kaldi recognizer."""

    name = "vosk"

    def __init__(self, options: TranscriptionOptions, vosk_module: Any = None):
        self.options = options
        self._vosk = vosk_module
        self._model = None

    def load(self) -> None:
        if not self.options.model_path:
            raise TranscriptionError("Vosk model path is not set.")
        model_path = Path(self.options.model_path)
        if not model_path.exists():
            raise TranscriptionError(f"Vosk model not found at {model_path}.")

        if self._vosk is None:
            try:
                import vosk
            except ImportError:
                raise TranscriptionError(
                    "The vosk module is not installed. "
                    "Install with: pip install mediachunk[vosk]"
                )
            self._vosk = vosk

        self._vosk.SetLogLevel(-1)
        log_step("Transcribe", f"Loading vosk model: {model_path}")
        self._model = self._vosk.Model(str(model_path))

    def close(self) -> None:
        self._model = None

    def transcribe(self, chunk: ChunkExport) -> ChunkTranscription:
        if self._model is None:
            raise TranscriptionError("Vosk model is not loaded")

        wav_path = Path(chunk.wav_path)
        sample_rate = validate_pcm_wav(wav_path)

        recognizer = self._vosk.KaldiRecognizer(self._model, sample_rate)
        recognizer.SetMaxAlternatives(self.options.max_alternatives)
        recognizer.SetWords(self.options.enable_words)

        for frame in iter_pcm_frames(wav_path):
            recognizer.AcceptWaveform(frame)

        text, words, raw = parse_vosk_result(recognizer.FinalResult())
        return ChunkTranscription(
            chunk_id=chunk.id,
            text=text,
            confidence=average_confidence(words),
            words=words,
            raw_result=raw,
        )
