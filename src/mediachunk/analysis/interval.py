"""Millisecond time ranges shared by the analysis steps."""

from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass
class Interval:
    """A half-open ``[start_ms, end_ms)`` range in source-media milliseconds.

    ``open_ended`` marks a silence whose end was never logged: it runs to
    the end of the media regardless of ``end_ms``.
    """

    start_ms: float
    end_ms: float
    open_ended: bool = False

    @property
    def duration_ms(self) -> float:
        return self.end_ms - self.start_ms

    @property
    def is_empty(self) -> bool:
        return self.end_ms <= self.start_ms

    def clamped(self, duration_ms: float) -> Interval:
        return Interval(
            start_ms=min(max(0.0, self.start_ms), duration_ms),
            end_ms=min(max(0.0, self.end_ms), duration_ms),
        )

    def as_tuple(self) -> tuple[float, float]:
        return (self.start_ms, self.end_ms)


def round_ms(value: float) -> int:
    """Round to whole milliseconds, halves away from zero for positive times."""
    return math.floor(value + 0.5)
