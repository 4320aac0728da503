"""External process runner for the ffmpeg/ffprobe binaries."""

from __future__ import annotations

import os
import shutil
import subprocess
from dataclasses import dataclass
from typing import Protocol


class ProcessError(Exception):
    """Raised when an external command exits with a non-zero status."""

    def __init__(self, cmd: list[str], returncode: int, stderr: str):
        self.cmd = cmd
        self.returncode = returncode
        self.stderr = stderr
        message = f"Command {cmd[0]!r} failed (rc={returncode})"
        if stderr:
            message += f": {stderr[-500:]}"
        super().__init__(message)


class BinaryNotFoundError(FileNotFoundError):
    """Raised when ffmpeg or ffprobe cannot be located or spawned."""


@dataclass
class CommandResult:
    """Captured output of a finished command."""

    stdout: str
    stderr: str
    returncode: int = 0


class CommandRunner(Protocol):
    """Anything that can run an executable and capture its output."""

    def run(self, executable: str, args: list[str]) -> CommandResult: ...


class SubprocessRunner:
    """Runs commands with subprocess and raises on non-zero exit."""

    def run(self, executable: str, args: list[str]) -> CommandResult:
        cmd = [executable] + args
        try:
            result = subprocess.run(
                cmd,
                stdin=subprocess.DEVNULL,
                capture_output=True,
                text=True,
                errors="replace",
            )
        except FileNotFoundError as e:
            raise BinaryNotFoundError(
                f"Binary not found: {executable!r}. Install ffmpeg/ffprobe or set "
                "the FFMPEG_PATH and FFPROBE_PATH environment variables."
            ) from e

        if result.returncode != 0:
            raise ProcessError(cmd, result.returncode, result.stderr)
        return CommandResult(
            stdout=result.stdout,
            stderr=result.stderr,
            returncode=result.returncode,
        )


_ENV_VARS = {"ffmpeg": "FFMPEG_PATH", "ffprobe": "FFPROBE_PATH"}


def resolve_binary(name: str) -> str:
    """Locate a binary: env var override first, then PATH."""
    env_var = _ENV_VARS.get(name, f"{name.upper()}_PATH")
    preferred = os.environ.get(env_var, "").strip()
    if preferred:
        return preferred

    found = shutil.which(name)
    if not found:
        raise BinaryNotFoundError(
            f"No {name} binary available. Install ffmpeg or set {env_var}."
        )
    return found


@dataclass
class MediaTools:
    """Resolved binaries plus the runner used to invoke them."""

    ffmpeg: str
    ffprobe: str
    runner: CommandRunner

    @classmethod
    def discover(cls, runner: CommandRunner | None = None) -> MediaTools:
        return cls(
            ffmpeg=resolve_binary("ffmpeg"),
            ffprobe=resolve_binary("ffprobe"),
            runner=runner or SubprocessRunner(),
        )

    def run_ffmpeg(self, args: list[str]) -> CommandResult:
        return self.runner.run(self.ffmpeg, args)

    def run_ffprobe(self, args: list[str]) -> CommandResult:
        return self.runner.run(self.ffprobe, args)
