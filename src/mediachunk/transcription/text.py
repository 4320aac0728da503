"""Transcript text cleanup, timestamp helpers and confidence averaging."""

from __future__ import annotations

import math
import re

from mediachunk.models.media import TranscriptionWord

# Non-speech annotations emitted by whisper-family engines:
# [BLANK_AUDIO], [MUSIC], (noise), [_TT_150], [_BEG_], <|en|>, *laughs*
_MARKER_PATTERNS = [
    re.compile(r"\[[^\]]*\]"),
    re.compile(r"\((?:blank[_ ]audio|music|noise|silence|applause|laughter|"
               r"inaudible|no speech|speaking in foreign language)[^)]*\)", re.IGNORECASE),
    re.compile(r"<\|[^|>]*\|>"),
    re.compile(r"\*[^*\n]{1,40}\*"),
    re.compile(r"♪+"),
]

_TIMESTAMP_RE = re.compile(r"^(\d{1,2}):(\d{2}):(\d{2}(?:\.\d+)?)$")


def strip_markers(text: str) -> str:
    """Remove non-speech marker tokens from a transcript fragment."""
    for pattern in _MARKER_PATTERNS:
        text = pattern.sub(" ", text)
    return text.strip()


def clean_transcript_text(raw: str) -> str:
    """Collapse whitespace and normalize spacing around punctuation."""
    text = re.sub(r"\s+", " ", raw)
    text = re.sub(r"\s+([.,!?;:])", r"\1", text)
    # Digits and repeated punctuation stay glued: "3.5", "...".
    text = re.sub(r"([.,!?;:])(?=[^\s\d.,!?;:])", r"\1 ", text)
    return text.strip()


def parse_timestamp(timestamp: str) -> float:
    """Parse ``HH:MM:SS.mmm`` (or plain seconds) into seconds; 0.0 if invalid."""
    timestamp = timestamp.strip()
    if ":" not in timestamp:
        try:
            value = float(timestamp)
        except ValueError:
            return 0.0
        return value if math.isfinite(value) else 0.0

    m = _TIMESTAMP_RE.match(timestamp)
    if not m:
        return 0.0
    return int(m.group(1)) * 3600 + int(m.group(2)) * 60 + float(m.group(3))


def format_timestamp(seconds: float) -> str:
    """Format seconds as ``HH:MM:SS.mmm``."""
    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)
    secs = seconds % 60
    return f"{hours:02d}:{minutes:02d}:{secs:06.3f}"


def to_number(value: object) -> float | None:
    """Coerce engine JSON values to a finite float, else None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else None
    if isinstance(value, str):
        if ":" in value:
            return parse_timestamp(value) if _TIMESTAMP_RE.match(value.strip()) else None
        try:
            parsed = float(value)
        except ValueError:
            return None
        return parsed if math.isfinite(parsed) else None
    return None


def average_confidence(words: list[TranscriptionWord]) -> float | None:
    """Mean of the non-null word confidences, or None when there are none."""
    values = [
        w.confidence for w in words
        if w.confidence is not None and math.isfinite(w.confidence)
    ]
    if not values:
        return None
    return sum(values) / len(values)


def spread_words(text: str, start_sec: float, end_sec: float) -> list[TranscriptionWord]:
    """Distribute a fragment's words evenly over its time span."""
    tokens = text.split()
    if not tokens:
        return []
    step = (end_sec - start_sec) / len(tokens)
    return [
        TranscriptionWord(
            word=token,
            start_sec=start_sec + i * step,
            end_sec=start_sec + (i + 1) * step,
            confidence=None,
        )
        for i, token in enumerate(tokens)
    ]
