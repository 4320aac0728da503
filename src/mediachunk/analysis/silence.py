"""Silence detection via FFmpeg's silencedetect filter."""

from __future__ import annotations

import re
from pathlib import Path

from mediachunk.analysis.interval import Interval
from mediachunk.models.config import AnalysisOptions
from mediachunk.utils.ffmpeg import MediaTools
from mediachunk.utils.progress import log_step

_START_RE = re.compile(r"silence_start:\s*(-?[0-9.]+)")
_END_RE = re.compile(
    r"silence_end:\s*(-?[0-9.]+)\s*\|\s*silence_duration:\s*(-?[0-9.]+)"
)


def _to_ms(seconds: str) -> float:
    return round(float(seconds) * 1000, 3)


def silencedetect_filter(options: AnalysisOptions) -> str:
    """Build the silencedetect expression for the configured threshold."""
    threshold = f"{options.silence_threshold_db:g}"
    min_duration = f"{options.min_silence_duration_ms / 1000:g}"
    return f"silencedetect=noise={threshold}dB:d={min_duration}"


def parse_silence_log(stderr: str) -> list[Interval]:
    """Parse silencedetect events into silence intervals sorted by start.

    - ``silence_start`` is remembered until the matching ``silence_end``
    - An end without a logged start uses ``end - duration``
    - A start still open at the end of the log becomes a zero-length
      ``open_ended`` interval, meaning silence runs to the end of the file
    """
    intervals: list[Interval] = []
    pending_start: float | None = None

    for raw_line in stderr.splitlines():
        line = raw_line.strip()
        if not line:
            continue

        m = _START_RE.search(line)
        if m:
            pending_start = _to_ms(m.group(1))
            continue

        m = _END_RE.search(line)
        if m:
            end = _to_ms(m.group(1))
            duration = _to_ms(m.group(2))
            start = pending_start if pending_start is not None else max(0.0, end - duration)
            start = max(0.0, start)
            intervals.append(Interval(start_ms=start, end_ms=max(start, end)))
            pending_start = None

    if pending_start is not None:
        start = max(0.0, pending_start)
        intervals.append(Interval(start_ms=start, end_ms=start, open_ended=True))

    intervals.sort(key=lambda iv: iv.start_ms)
    return intervals


def detect_silences(
    input_path: Path | str,
    options: AnalysisOptions,
    tools: MediaTools,
) -> list[Interval]:
    """Run silencedetect over the whole file and return silence intervals."""
    input_path = Path(input_path)
    result = tools.run_ffmpeg([
        "-hide_banner",
        "-nostats",
        "-i", str(input_path),
        "-af", silencedetect_filter(options),
        "-f", "null",
        "-",
    ])

    silences = parse_silence_log(result.stderr)
    total_ms = sum(s.duration_ms for s in silences)
    log_step(
        "Silence",
        f"Found {len(silences)} silences ({total_ms / 1000:.1f}s total) "
        f"at {options.silence_threshold_db:g}dB",
    )
    return silences
