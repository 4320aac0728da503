from mediachunk.analysis.constraints import (
    apply_maximum_duration,
    apply_minimum_duration,
    enforce_duration_constraints,
)
from mediachunk.analysis.interval import Interval
from mediachunk.models.config import AnalysisOptions


def _tuples(intervals):
    return [iv.as_tuple() for iv in intervals]


def _options(min_ms=500, max_ms=600000):
    return AnalysisOptions(min_chunk_duration_ms=min_ms, max_chunk_duration_ms=max_ms)


def test_long_segment_is_split_into_max_windows():
    result = enforce_duration_constraints([Interval(0, 25000)], _options(1000, 10000), 25000)
    assert _tuples(result) == [(0, 10000), (10000, 20000), (20000, 25000)]


def test_short_remainder_merges_into_last_window():
    result = enforce_duration_constraints([Interval(0, 20500)], _options(1000, 10000), 30000)
    assert _tuples(result) == [(0, 10000), (10000, 20500)]


def test_exact_multiple_of_max_has_no_remainder_chunk():
    result = enforce_duration_constraints([Interval(0, 20000)], _options(1000, 10000), 20000)
    assert _tuples(result) == [(0, 10000), (10000, 20000)]


def test_short_segment_grows_symmetrically():
    result = enforce_duration_constraints([Interval(4000, 4200)], _options(1000), 10000)
    assert _tuples(result) == [(3600, 4600)]


def test_short_segment_at_start_extends_forward():
    result = enforce_duration_constraints([Interval(0, 200)], _options(1000), 10000)
    assert _tuples(result) == [(0, 1000)]


def test_short_segment_at_end_extends_backward():
    result = enforce_duration_constraints([Interval(9900, 10000)], _options(1000), 10000)
    assert _tuples(result) == [(9000, 10000)]


def test_media_shorter_than_minimum_keeps_whole_file():
    result = enforce_duration_constraints([Interval(100, 200)], _options(1000), 300)
    assert _tuples(result) == [(0, 300)]


def test_grown_segment_merges_into_previous():
    segments = [Interval(0, 3000), Interval(3200, 3300)]
    result = enforce_duration_constraints(segments, _options(1000), 10000)
    assert _tuples(result) == [(0, 3750)]


def test_separated_segments_stay_apart():
    segments = [Interval(0, 3000), Interval(5000, 5200)]
    result = enforce_duration_constraints(segments, _options(1000), 10000)
    assert _tuples(result) == [(0, 3000), (4600, 5600)]


def test_minimum_pass_runs_before_split():
    # Growing the short segment joins it to a long neighbour, and the merged
    # span is what gets split.
    segments = [Interval(0, 9800), Interval(10000, 10100)]
    result = enforce_duration_constraints(segments, _options(1000, 5000), 20000)
    assert _tuples(result) == [(0, 5000), (5000, 10550)]


def test_remainder_only_merges_within_its_own_segment():
    bounded = apply_maximum_duration(
        [Interval(0, 4000), Interval(6000, 6300)], 5000, 1000, 10000
    )
    assert _tuples(bounded) == [(0, 4000), (6000, 6300)]


def test_empty_segments_are_dropped():
    assert apply_minimum_duration([Interval(500, 500)], 1000, 10000) == []


def test_empty_input():
    assert enforce_duration_constraints([], _options(), 10000) == []


def test_final_chunks_are_ordered_and_within_bounds():
    segments = [Interval(0, 300), Interval(2000, 26000), Interval(27000, 27100), Interval(40000, 41000)]
    options = _options(1000, 10000)
    result = enforce_duration_constraints(segments, options, 41000)

    for previous, current in zip(result, result[1:]):
        assert previous.end_ms <= current.start_ms
    for chunk in result:
        assert 0 <= chunk.start_ms < chunk.end_ms <= 41000
        assert chunk.duration_ms < options.max_chunk_duration_ms + options.min_chunk_duration_ms
    interior = [c for c in result if c.start_ms > 0 and c.end_ms < 41000]
    assert all(c.duration_ms >= options.min_chunk_duration_ms for c in interior)
