"""Media duration probing with ffprobe, falling back to a full ffmpeg decode."""

from __future__ import annotations

import json
import math
import re
from pathlib import Path

from mediachunk.utils.ffmpeg import MediaTools, ProcessError
from mediachunk.utils.progress import log_step, log_warning

_DECODE_TIME_RE = re.compile(r"time=(\d{2,}):(\d{2}):(\d{2}(?:\.\d+)?)")


def _seconds_to_ms(value: object) -> int | None:
    """Convert a probed seconds value to ms, rejecting non-finite/non-positive."""
    if value is None:
        return None
    try:
        seconds = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(seconds) or seconds <= 0:
        return None
    return round(seconds * 1000)


def _probe_format_duration(path: Path, tools: MediaTools) -> int | None:
    result = tools.run_ffprobe([
        "-v", "error",
        "-show_entries", "format=duration",
        "-of", "json",
        str(path),
    ])
    data = json.loads(result.stdout or "{}")
    return _seconds_to_ms((data.get("format") or {}).get("duration"))


def _probe_stream_duration(path: Path, tools: MediaTools) -> int | None:
    result = tools.run_ffprobe([
        "-v", "error",
        "-show_entries", "stream=duration",
        "-of", "json",
        str(path),
    ])
    data = json.loads(result.stdout or "{}")
    streams = data.get("streams") or []
    if not streams:
        return None
    return _seconds_to_ms(streams[0].get("duration"))


def parse_decode_duration(stderr: str) -> int | None:
    """Parse the last ``time=HH:MM:SS.xx`` progress stamp from ffmpeg output."""
    matches = _DECODE_TIME_RE.findall(stderr)
    if not matches:
        return None
    hours, minutes, seconds = matches[-1]
    total = int(hours) * 3600 + int(minutes) * 60 + float(seconds)
    return _seconds_to_ms(total)


def _decode_duration(path: Path, tools: MediaTools) -> int | None:
    result = tools.run_ffmpeg(["-i", str(path), "-f", "null", "-"])
    return parse_decode_duration(result.stderr)


def probe_duration_ms(path: Path | str, tools: MediaTools) -> int:
    """Return the media duration in milliseconds, or 0 if undeterminable.

    Strategies, cheapest first:
    1. Container (format-level) duration metadata
    2. First-stream duration metadata (some streamed containers lack 1)
    3. Full decode, reading the last playback timestamp ffmpeg reports
    """
    path = Path(path)
    strategies = [
        ("format metadata", _probe_format_duration),
        ("stream metadata", _probe_stream_duration),
        ("full decode", _decode_duration),
    ]

    for label, strategy in strategies:
        if label == "full decode":
            log_warning(
                f"No duration metadata for {path.name}, decoding file with ffmpeg..."
            )
        try:
            duration_ms = strategy(path, tools)
        except (ProcessError, ValueError, TypeError, AttributeError) as e:
            log_warning(f"Duration probe via {label} failed: {e}")
            continue
        if duration_ms:
            log_step("Probe", f"{path.name}: {duration_ms / 1000:.2f}s (from {label})")
            return duration_ms

    log_warning(f"Could not determine duration of {path.name}, using 0")
    return 0
