from mediachunk.analysis.silence import detect_silences, parse_silence_log, silencedetect_filter
from mediachunk.models.config import AnalysisOptions

SILENCE_LOG = """\
Input #0, wav, from 'talk.wav':
  Duration: 00:00:10.00, bitrate: 256 kb/s
[silencedetect @ 0x55d5c8] silence_start: 2
[silencedetect @ 0x55d5c8] silence_end: 3 | silence_duration: 1
[silencedetect @ 0x55d5c8] silence_start: 6.5
[silencedetect @ 0x55d5c8] silence_end: 8.25 | silence_duration: 1.75
size=N/A time=00:00:10.00 bitrate=N/A speed= 500x
"""


def _tuples(intervals):
    return [iv.as_tuple() for iv in intervals]


def test_parses_start_and_end_pairs():
    assert _tuples(parse_silence_log(SILENCE_LOG)) == [(2000, 3000), (6500, 8250)]


def test_end_without_start_uses_duration():
    log = "[silencedetect @ 0x1] silence_end: 1.5 | silence_duration: 1.5\n"
    assert _tuples(parse_silence_log(log)) == [(0, 1500)]


def test_negative_derived_start_is_clamped_to_zero():
    log = "[silencedetect @ 0x1] silence_end: 0.5 | silence_duration: 0.8\n"
    assert _tuples(parse_silence_log(log)) == [(0, 500)]


def test_unmatched_trailing_start_is_zero_length():
    log = (
        "[silencedetect @ 0x1] silence_start: 1\n"
        "[silencedetect @ 0x1] silence_end: 2 | silence_duration: 1\n"
        "[silencedetect @ 0x1] silence_start: 9.2\n"
    )
    silences = parse_silence_log(log)
    assert _tuples(silences) == [(1000, 2000), (9200, 9200)]
    assert [s.open_ended for s in silences] == [False, True]


def test_zero_length_logged_silence_is_closed():
    log = (
        "[silencedetect @ 0x1] silence_start: 4\n"
        "[silencedetect @ 0x1] silence_end: 4 | silence_duration: 0\n"
    )
    silences = parse_silence_log(log)
    assert _tuples(silences) == [(4000, 4000)]
    assert not silences[0].open_ended


def test_no_events_gives_empty_list():
    assert parse_silence_log("Input #0, mp3, from 'x.mp3':\n") == []


def test_results_are_sorted_by_start():
    log = (
        "silence_end: 8 | silence_duration: 1\n"
        "silence_end: 3 | silence_duration: 1\n"
    )
    assert _tuples(parse_silence_log(log)) == [(2000, 3000), (7000, 8000)]


def test_filter_expression_uses_seconds():
    options = AnalysisOptions(silence_threshold_db=-35, min_silence_duration_ms=750)
    assert silencedetect_filter(options) == "silencedetect=noise=-35dB:d=0.75"


def test_detect_silences_runs_ffmpeg_null_output(make_tools, source_file):
    tools, runner = make_tools(silence_log=SILENCE_LOG)
    silences = detect_silences(source_file, AnalysisOptions(), tools)

    assert _tuples(silences) == [(2000, 3000), (6500, 8250)]
    exe, args = runner.calls[-1]
    assert exe == "ffmpeg"
    assert "silencedetect=noise=-40dB:d=1" in args
    assert args[-3:] == ["-f", "null", "-"]
