"""Shared fixtures: a fake command runner standing in for ffmpeg/ffprobe."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from mediachunk.utils.ffmpeg import CommandResult, MediaTools, ProcessError


class FakeRunner:
    """Returns canned ffprobe/ffmpeg output and records every invocation.

    Commands that name an output file get that file created, so exported
    paths exist on disk like they would after a real ffmpeg run.
    """

    def __init__(
        self,
        *,
        duration_s: float | None = 10.0,
        stream_duration_s: float | None = None,
        decode_stderr: str = "",
        silence_log: str = "",
        fail_when: str | None = None,
    ):
        self.duration_s = duration_s
        self.stream_duration_s = stream_duration_s
        self.decode_stderr = decode_stderr
        self.silence_log = silence_log
        self.fail_when = fail_when
        self.calls: list[tuple[str, list[str]]] = []

    def run(self, executable: str, args: list[str]) -> CommandResult:
        self.calls.append((executable, list(args)))
        joined = " ".join(args)

        if self.fail_when and self.fail_when in joined:
            raise ProcessError([executable] + args, 1, f"simulated failure: {self.fail_when}")

        if executable == "ffprobe":
            if "format=duration" in args:
                fmt = {} if self.duration_s is None else {"duration": str(self.duration_s)}
                return CommandResult(stdout=json.dumps({"format": fmt}), stderr="")
            if "stream=duration" in args:
                streams = []
                if self.stream_duration_s is not None:
                    streams.append({"duration": str(self.stream_duration_s)})
                return CommandResult(stdout=json.dumps({"streams": streams}), stderr="")
            return CommandResult(stdout="{}", stderr="")

        if any(a.startswith("silencedetect=") for a in args):
            return CommandResult(stdout="", stderr=self.silence_log)

        if args[-1] == "-":
            return CommandResult(stdout="", stderr=self.decode_stderr)

        output = Path(args[-1])
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_bytes(b"")
        return CommandResult(stdout="", stderr="")

    def ffmpeg_outputs(self) -> list[str]:
        return [
            args[-1] for exe, args in self.calls
            if exe == "ffmpeg" and args[-1] != "-"
        ]


@pytest.fixture
def make_tools():
    def _make(**kwargs) -> tuple[MediaTools, FakeRunner]:
        runner = FakeRunner(**kwargs)
        return MediaTools(ffmpeg="ffmpeg", ffprobe="ffprobe", runner=runner), runner

    return _make


@pytest.fixture
def source_file(tmp_path: Path) -> Path:
    path = tmp_path / "My Interview (take 1).mp4"
    path.write_bytes(b"\x00" * 16)
    return path
