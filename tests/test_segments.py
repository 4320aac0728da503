import pytest

from mediachunk.analysis.constraints import enforce_duration_constraints
from mediachunk.analysis.interval import Interval
from mediachunk.analysis.segments import (
    build_speech_segments,
    invert_silences,
    merge_overlapping,
    pad_segments,
)
from mediachunk.models.config import AnalysisOptions

NO_PADDING = AnalysisOptions(padding_before_ms=0, padding_after_ms=0)


def _tuples(intervals):
    return [iv.as_tuple() for iv in intervals]


def test_no_silence_gives_single_full_segment():
    assert _tuples(build_speech_segments(5000, [], NO_PADDING)) == [(0, 5000)]


def test_no_silence_is_split_by_max_duration():
    options = AnalysisOptions(
        padding_before_ms=0, padding_after_ms=0,
        min_chunk_duration_ms=500, max_chunk_duration_ms=2000,
    )
    segments = build_speech_segments(5000, [], options)
    final = enforce_duration_constraints(segments, options, 5000)
    assert _tuples(final) == [(0, 2000), (2000, 4000), (4000, 5000)]


def test_basic_split_around_one_silence():
    segments = build_speech_segments(10000, [Interval(2000, 3000)], NO_PADDING)
    assert _tuples(segments) == [(0, 2000), (3000, 10000)]


def test_padding_causes_merge():
    options = AnalysisOptions(padding_before_ms=200, padding_after_ms=200)
    silences = [Interval(1000, 1100)]
    segments = build_speech_segments(2000, silences, options)
    assert _tuples(segments) == [(0, 2000)]


def test_padding_is_clamped_to_media_bounds():
    options = AnalysisOptions(padding_before_ms=500, padding_after_ms=500)
    silences = [Interval(1000, 4000)]
    segments = build_speech_segments(5000, silences, options)
    assert _tuples(segments) == [(0, 1500), (3500, 5000)]


def test_leading_silence_is_skipped():
    segments = build_speech_segments(6000, [Interval(0, 1500)], NO_PADDING)
    assert _tuples(segments) == [(1500, 6000)]


def test_open_trailing_silence_runs_to_end_of_file():
    silences = [Interval(2000, 3000), Interval(8000, 8000, open_ended=True)]
    segments = build_speech_segments(10000, silences, NO_PADDING)
    assert _tuples(segments) == [(0, 2000), (3000, 8000)]


def test_empty_closed_silence_cuts_nothing():
    silences = [Interval(4000, 4000)]
    assert _tuples(invert_silences(10000, silences)) == [(0, 10000)]
    segments = build_speech_segments(10000, silences, NO_PADDING)
    assert _tuples(segments) == [(0, 10000)]


def test_empty_silence_mid_file_keeps_later_speech():
    silences = [Interval(2000, 3000), Interval(5000, 5000), Interval(7000, 7000, open_ended=True)]
    segments = build_speech_segments(10000, silences, NO_PADDING)
    assert _tuples(segments) == [(0, 2000), (3000, 7000)]


def test_silence_beyond_duration_is_clamped():
    segments = build_speech_segments(4000, [Interval(3000, 9000)], NO_PADDING)
    assert _tuples(segments) == [(0, 3000)]


def test_overlapping_silences_do_not_produce_segments_inside_them():
    silences = [Interval(1000, 4000), Interval(2000, 3000)]
    assert _tuples(invert_silences(6000, silences)) == [(0, 1000), (4000, 6000)]


def test_zero_duration_gives_no_segments():
    assert build_speech_segments(0, [Interval(100, 200)], NO_PADDING) == []


def test_pad_drops_empty_results():
    padded = pad_segments(
        [Interval(0, 0), Interval(100, 200)],
        1000,
        padding_before_ms=0,
        padding_after_ms=0,
    )
    assert _tuples(padded) == [(100, 200)]


def test_merge_joins_touching_segments():
    merged = merge_overlapping([Interval(0, 100), Interval(100, 200), Interval(300, 400)])
    assert _tuples(merged) == [(0, 200), (300, 400)]


def test_segment_construction_is_idempotent():
    silences = [Interval(1200, 2500), Interval(4000, 4100), Interval(7000, 9000)]
    options = AnalysisOptions()
    first = build_speech_segments(12000, silences, options)
    second = build_speech_segments(12000, silences, options)
    assert _tuples(first) == _tuples(second)


@pytest.mark.parametrize("padding", [0, 150, 600])
def test_segments_cover_media_without_overlap(padding):
    duration = 20000
    silences = [Interval(1000, 2500), Interval(5000, 6200), Interval(9000, 12000), Interval(18000, 18000, open_ended=True)]
    options = AnalysisOptions(padding_before_ms=padding, padding_after_ms=padding)
    segments = build_speech_segments(duration, silences, options)

    for previous, current in zip(segments, segments[1:]):
        assert previous.end_ms < current.start_ms
    for segment in segments:
        assert 0 <= segment.start_ms < segment.end_ms <= duration

    speech = sum(s.duration_ms for s in segments)
    gaps = segments[0].start_ms + (duration - segments[-1].end_ms) + sum(
        b.start_ms - a.end_ms for a, b in zip(segments, segments[1:])
    )
    assert speech + gaps == duration
