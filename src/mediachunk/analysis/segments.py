"""Speech segment construction from silence intervals."""

from __future__ import annotations

from mediachunk.analysis.interval import Interval
from mediachunk.models.config import AnalysisOptions
from mediachunk.utils.progress import log_step


def invert_silences(duration_ms: float, silences: list[Interval]) -> list[Interval]:
    """Return the speech gaps between silences within ``[0, duration_ms]``.

    An ``open_ended`` silence runs to the end of the file. Other empty
    silences cut nothing.
    """
    duration_ms = max(0.0, duration_ms)
    speech: list[Interval] = []
    cursor = 0.0

    for silence in sorted(silences, key=lambda s: s.start_ms):
        if silence.is_empty and not silence.open_ended:
            continue
        clamped = silence.clamped(duration_ms)
        end = duration_ms if silence.open_ended else clamped.end_ms
        if clamped.start_ms > cursor:
            speech.append(Interval(cursor, clamped.start_ms))
        cursor = max(cursor, end)

    if cursor < duration_ms:
        speech.append(Interval(cursor, duration_ms))

    return speech


def pad_segments(
    segments: list[Interval],
    duration_ms: float,
    *,
    padding_before_ms: float,
    padding_after_ms: float,
) -> list[Interval]:
    """Widen each segment by the configured padding, clamped to the media."""
    padded: list[Interval] = []
    for segment in segments:
        start = max(0.0, segment.start_ms - padding_before_ms)
        end = min(duration_ms, segment.end_ms + padding_after_ms)
        candidate = Interval(min(start, end), max(start, end))
        if not candidate.is_empty:
            padded.append(candidate)
    return padded


def merge_overlapping(segments: list[Interval]) -> list[Interval]:
    """Merge segments that touch or overlap, keeping ascending order."""
    merged: list[Interval] = []
    for segment in sorted(segments, key=lambda s: s.start_ms):
        if merged and segment.start_ms <= merged[-1].end_ms:
            merged[-1].end_ms = max(merged[-1].end_ms, segment.end_ms)
        else:
            merged.append(Interval(segment.start_ms, segment.end_ms))
    return merged


def build_speech_segments(
    duration_ms: float,
    silences: list[Interval],
    options: AnalysisOptions,
) -> list[Interval]:
    """Invert silences into speech, pad, then merge collisions.

    Padding runs before merging: padded neighbours frequently collide and
    must not produce overlapping chunk exports.
    """
    duration_ms = max(0.0, duration_ms)
    speech = invert_silences(duration_ms, silences)
    padded = pad_segments(
        speech,
        duration_ms,
        padding_before_ms=options.padding_before_ms,
        padding_after_ms=options.padding_after_ms,
    )
    merged = merge_overlapping(padded)

    log_step(
        "Segments",
        f"{len(speech)} speech segments, {len(merged)} after padding/merge",
    )
    return merged
