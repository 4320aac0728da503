import json
import zipfile

from click.testing import CliRunner

from mediachunk.cli.main import cli
from mediachunk.utils.ffmpeg import MediaTools
from mediachunk.utils.io import read_yaml


def _analyze_with_fake_tools(monkeypatch, make_tools, args):
    tools, _ = make_tools(duration_s=10.0)
    monkeypatch.setattr(MediaTools, "discover", staticmethod(lambda runner=None: tools))
    return CliRunner().invoke(cli, ["analyze", *args])


def test_defaults_prints_yaml(tmp_path):
    result = CliRunner().invoke(cli, ["defaults"])
    assert result.exit_code == 0

    config = tmp_path / "options.yaml"
    config.write_text(result.output)
    data = read_yaml(config)
    assert data["options"]["silence_threshold_db"] == -40
    assert data["transcription"]["engine"] == "whisper"


def test_zip_archives_chunk_directory(tmp_path):
    chunks = tmp_path / "talk-abcd1234-chunks"
    chunks.mkdir()
    (chunks / "talk-abcd1234-chunk-1.wav").write_bytes(b"RIFF")
    (chunks / "talk-abcd1234-chunk-2.wav").write_bytes(b"RIFF")

    result = CliRunner().invoke(cli, ["zip", str(chunks)])

    assert result.exit_code == 0
    archive = tmp_path / "talk-abcd1234-chunks.zip"
    with zipfile.ZipFile(archive) as zf:
        assert sorted(zf.namelist()) == [
            "talk-abcd1234-chunk-1.wav",
            "talk-abcd1234-chunk-2.wav",
        ]


def test_analyze_missing_file_exits_nonzero(tmp_path, monkeypatch):
    monkeypatch.setenv("FFMPEG_PATH", "ffmpeg")
    monkeypatch.setenv("FFPROBE_PATH", "ffprobe")
    result = CliRunner().invoke(cli, ["analyze", str(tmp_path / "missing.mp4"), "-o", str(tmp_path)])
    assert result.exit_code == 1


def test_flags_override_config_file_over_defaults(monkeypatch, make_tools, source_file, tmp_path):
    config = tmp_path / "options.yaml"
    config.write_text(
        "options:\n"
        "  minChunkDurationMs: 100\n"
        "  paddingBeforeMs: 50\n"
        "transcription:\n"
        "  modelName: small\n"
        "  language: fr\n"
    )
    result_path = tmp_path / "result.json"

    result = _analyze_with_fake_tools(monkeypatch, make_tools, [
        str(source_file),
        "-o", str(tmp_path / "out"),
        "--config", str(config),
        "--min-chunk-ms", "900",
        "--model-name", "tiny",
        "--json-out", str(result_path),
    ])

    assert result.exit_code == 0, result.output
    data = json.loads(result_path.read_text())
    assert data["options"]["min_chunk_duration_ms"] == 900
    assert data["options"]["padding_before_ms"] == 50
    assert data["options"]["padding_after_ms"] == 300
    assert data["transcription"]["model_name"] == "tiny"
    assert data["transcription"]["language"] == "fr"
    assert data["transcription"]["enabled"] is False
