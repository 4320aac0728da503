"""Minimum/maximum chunk duration enforcement."""

from __future__ import annotations

from mediachunk.analysis.interval import Interval
from mediachunk.models.config import AnalysisOptions
from mediachunk.utils.progress import log_step


def _extend_to_minimum(
    segment: Interval, min_ms: float, duration_ms: float
) -> Interval:
    """Grow a short segment symmetrically, then on the free side if clamped."""
    deficit = min_ms - segment.duration_ms
    half = deficit / 2
    start = max(0.0, segment.start_ms - half)
    end = min(duration_ms, segment.end_ms + half)

    if end - start < min_ms:
        if start == 0:
            end = min(duration_ms, start + min_ms)
        elif end == duration_ms:
            start = max(0.0, end - min_ms)

    return Interval(start, end)


def apply_minimum_duration(
    segments: list[Interval], min_ms: float, duration_ms: float
) -> list[Interval]:
    """Extend sub-minimum segments; fold any that reach the previous one into it."""
    normalized: list[Interval] = []

    for segment in segments:
        if segment.is_empty:
            continue

        adjusted = Interval(segment.start_ms, segment.end_ms)
        if adjusted.duration_ms < min_ms:
            adjusted = _extend_to_minimum(adjusted, min_ms, duration_ms)
            if adjusted.is_empty:
                continue

        if normalized and adjusted.start_ms <= normalized[-1].end_ms:
            normalized[-1].end_ms = max(normalized[-1].end_ms, adjusted.end_ms)
            continue

        normalized.append(adjusted.clamped(duration_ms))

    return normalized


def apply_maximum_duration(
    segments: list[Interval], max_ms: float, min_ms: float, duration_ms: float
) -> list[Interval]:
    """Split long segments into ``max_ms`` windows plus a remainder.

    A sub-minimum remainder is folded into the last window of the same
    segment instead of becoming its own chunk, so that window may exceed
    ``max_ms`` by less than ``min_ms``.
    """
    bounded: list[Interval] = []

    for segment in segments:
        cursor = segment.start_ms
        windows: list[Interval] = []

        while segment.end_ms - cursor > max_ms:
            windows.append(Interval(cursor, cursor + max_ms))
            cursor += max_ms

        remainder = segment.end_ms - cursor
        if windows and remainder < min_ms:
            windows[-1].end_ms = min(duration_ms, segment.end_ms)
        elif remainder > 0 or not windows:
            windows.append(Interval(cursor, segment.end_ms))

        bounded.extend(windows)

    return bounded


def enforce_duration_constraints(
    segments: list[Interval],
    options: AnalysisOptions,
    duration_ms: float,
) -> list[Interval]:
    """Normalize segments to the configured min/max chunk durations.

    The minimum pass (extend, else merge into the previous segment) always
    runs before the maximum pass (split, else merge the remainder into the
    last split window). Segments touching 0 or ``duration_ms`` may stay
    below the minimum when they cannot be extended further.
    """
    if not segments:
        return []

    min_ms = options.min_chunk_duration_ms
    max_ms = options.max_chunk_duration_ms

    normalized = apply_minimum_duration(segments, min_ms, duration_ms)
    bounded = apply_maximum_duration(normalized, max_ms, min_ms, duration_ms)
    final = [
        Interval(max(0.0, s.start_ms), min(duration_ms, s.end_ms)) for s in bounded
    ]

    log_step(
        "Constraints",
        f"{len(segments)} segments → {len(final)} chunks "
        f"(min {min_ms}ms, max {max_ms}ms)",
    )
    return final
