"""FFmpeg filter graph builders for trimming and concatenating segments."""

from __future__ import annotations

from mediachunk.analysis.interval import Interval


class FilterGraphError(ValueError):
    """Raised when no valid segment is available to build a trim filter."""


def _seconds(ms: float) -> str:
    return f"{ms / 1000:.3f}"


def trim_chain(segment: Interval, label: str) -> str:
    """Slice one segment out of the first audio input, resetting its PTS."""
    return (
        f"[0:a]atrim=start={_seconds(segment.start_ms)}:end={_seconds(segment.end_ms)},"
        f"asetpts=PTS-STARTPTS[{label}]"
    )


def build_single_trim_filter(segment: Interval) -> str:
    if segment.is_empty:
        raise FilterGraphError(
            f"Empty segment {segment.start_ms:.0f}-{segment.end_ms:.0f}ms cannot be trimmed"
        )
    return trim_chain(segment, "aout")


def build_trim_filter_complex(segments: list[Interval]) -> str:
    """Trim every segment and concatenate the slices in order into ``[aout]``."""
    valid = [s for s in segments if not s.is_empty]
    if not valid:
        raise FilterGraphError("No valid audio segment to build the trimmed version")

    if len(valid) == 1:
        return build_single_trim_filter(valid[0])

    chains = [trim_chain(segment, f"a{i}") for i, segment in enumerate(valid)]
    inputs = "".join(f"[a{i}]" for i in range(len(valid)))
    return f"{';'.join(chains)};{inputs}concat=n={len(valid)}:v=0:a=1[aout]"
