"""FFmpeg integration and utilities."""

from __future__ import annotations

import json
import logging
import shutil
import subprocess
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, ClassVar, Protocol

from ..config.constants import (
    DEFAULT_VIDEO_FPS,
    DEFAULT_VIDEO_HEIGHT,
    DEFAULT_VIDEO_WIDTH,
    PROBE_TIMEOUT_SECONDS,
)
from .base import ExportIOError, ProcessingError

LOG = logging.getLogger(__name__)


class CommandRunner(Protocol):
    """Callable that runs an external command and captures its output."""

    def __call__(self, command: list[str], *, timeout: float | None = None) -> subprocess.CompletedProcess[str]: ...


class SubprocessRunner:
    """Runs commands with :func:`subprocess.run`, capturing text output."""

    def __call__(self, command: list[str], *, timeout: float | None = None) -> subprocess.CompletedProcess[str]:
        return subprocess.run(  # noqa: S603
            command,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
            encoding="utf-8",
            errors="replace",
        )


def _parse_frame_rate(frame_rate_str: str) -> float:
    """Safely parse frame rate from fraction string like '30/1' or '29.97'."""
    try:
        if "/" in frame_rate_str:
            numerator, denominator = frame_rate_str.split("/", 1)
            return float(numerator) / float(denominator) if float(denominator) != 0 else 0.0
        return float(frame_rate_str)
    except (ValueError, ZeroDivisionError):
        return 0.0


def _positive_int(value: object, default: int) -> int:
    try:
        number = int(value)  # type: ignore[call-overload]
    except (TypeError, ValueError):
        return default
    return number if number > 0 else default


def _non_negative_float(value: object, default: float) -> float:
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return default
    return number if number >= 0 else default


class FFmpegError(ProcessingError):
    """Error raised around an external FFmpeg tool invocation."""

    def __init__(
        self,
        message: str,
        *,
        command: list[str] | None = None,
        return_code: int | None = None,
        stderr: str | None = None,
        file_path: Path | None = None,
        cause: Exception | None = None,
    ) -> None:
        """Initialize FFmpeg error with detailed context."""
        super().__init__(message, file_path=file_path, cause=cause)
        self.command = command
        self.return_code = return_code
        self.stderr = stderr


class ExecutionError(FFmpegError):
    """The external tool could not be started or did not finish."""


class EncodingError(FFmpegError):
    """The external tool ran and reported failure."""


@dataclass
class VideoInfo:
    """Duration and geometry of a video file."""

    path: Path
    duration_seconds: float = 0.0
    width: int = DEFAULT_VIDEO_WIDTH
    height: int = DEFAULT_VIDEO_HEIGHT
    fps: float = DEFAULT_VIDEO_FPS
    probed: bool = False

    @classmethod
    def fallback(cls, path: Path) -> VideoInfo:
        """Placeholder values used when probing is unavailable."""
        return cls(path=path)


class FFmpegProcessor:
    """FFmpeg command executor with typed error mapping."""

    def __init__(self, timeout: float | None = None, runner: CommandRunner | None = None) -> None:
        """Initialize FFmpeg processor with timeout and command runner."""
        self.timeout = timeout
        self.runner: CommandRunner = runner or SubprocessRunner()

    def run_command(self, command: list[str], file_path: Path | None = None) -> subprocess.CompletedProcess[str]:
        """
        Run an external command and require a zero exit code.

        Raises:
            ExecutionError: The executable is missing, cannot be spawned or timed out
            EncodingError: The command exited non-zero; ``stderr`` holds its diagnostics

        """
        tool = command[0]
        LOG.info("Running command: %s", " ".join(command))
        start_time = time.time()

        try:
            result = self.runner(command, timeout=self.timeout)
        except subprocess.TimeoutExpired as e:
            msg = f"{tool} timed out after {self.timeout}s"
            raise ExecutionError(msg, command=command, file_path=file_path, cause=e) from e
        except OSError as e:
            msg = f"{tool} not found or failed to execute: {e}"
            raise ExecutionError(msg, command=command, file_path=file_path, cause=e) from e

        LOG.debug("%s completed in %.2fs", tool, time.time() - start_time)

        if result.returncode != 0:
            error_msg = f"{tool} failed with return code {result.returncode}"
            if result.stderr:
                error_msg += f": {result.stderr.strip()}"
            raise EncodingError(
                error_msg,
                command=command,
                return_code=result.returncode,
                stderr=result.stderr,
                file_path=file_path,
            )
        return result


class FFmpegProbe:
    """Media inspection through ffprobe with per-file caching."""

    _probe_cache: ClassVar[dict[tuple[Path, float, str], dict[str, Any]]] = {}

    def __init__(
        self,
        executable: str = "ffprobe",
        runner: CommandRunner | None = None,
        timeout: float = PROBE_TIMEOUT_SECONDS,
    ) -> None:
        self.executable = executable
        self.processor = FFmpegProcessor(timeout=timeout, runner=runner)

    @staticmethod
    def check_availability(executables: tuple[str, ...] = ("ffmpeg", "ffprobe")) -> list[str]:
        """Return the executables that cannot be found on PATH."""
        missing = [exe for exe in executables if not shutil.which(exe)]
        if missing:
            LOG.warning("Missing FFmpeg executables: %s", ", ".join(missing))
        return missing

    @classmethod
    def clear_cache(cls) -> None:
        cls._probe_cache.clear()

    @classmethod
    def _get_cache_key(cls, file_path: Path, stream_type: str | None) -> tuple[Path, float, str]:
        """Generate cache key based on file path, modification time, and stream type."""
        try:
            mtime = file_path.stat().st_mtime
        except OSError:
            return (file_path, -1.0, stream_type or "all")
        return (file_path, mtime, stream_type or "all")

    def build_command(self, file_path: Path, stream_type: str | None = None) -> list[str]:
        """Build the ffprobe command requesting JSON output."""
        cmd = [
            self.executable,
            "-v",
            "quiet",
            "-print_format",
            "json",
            "-show_format",
            "-show_streams",
        ]
        if stream_type:
            cmd.extend(["-select_streams", f"{stream_type}:0"])
        cmd.append(str(file_path))
        return cmd

    def probe_media(self, file_path: Path, stream_type: str | None = None) -> dict[str, Any]:
        """Probe media file for metadata with caching."""
        cache_key = self._get_cache_key(file_path, stream_type)
        if cache_key[1] >= 0 and cache_key in self._probe_cache:
            return self._probe_cache[cache_key]

        cmd = self.build_command(file_path, stream_type)
        result = self.processor.run_command(cmd, file_path=file_path)

        try:
            probe_data = json.loads(result.stdout)
        except json.JSONDecodeError as e:
            msg = f"Invalid JSON from {self.executable} for {file_path}: {e}"
            raise FFmpegError(msg, command=cmd, file_path=file_path, cause=e) from e

        if not isinstance(probe_data, dict):
            msg = f"Unexpected output from {self.executable} for {file_path}"
            raise FFmpegError(msg, command=cmd, file_path=file_path)

        if cache_key[1] >= 0:
            self._probe_cache[cache_key] = probe_data
        return probe_data

    def get_video_info(self, file_path: Path) -> VideoInfo:
        """
        Get duration, resolution and frame rate of a video.

        Probing is advisory: a missing tool, a failed run or unparsable output
        returns :meth:`VideoInfo.fallback` instead of raising.

        Raises:
            ExportIOError: If the file itself does not exist

        """
        file_path = Path(file_path)
        if not file_path.exists():
            msg = f"File not found: {file_path}"
            raise ExportIOError(msg, file_path=file_path)

        try:
            data = self.probe_media(file_path, "v")
        except FFmpegError as e:
            LOG.warning("Could not probe %s, using defaults: %s", file_path, e)
            return VideoInfo.fallback(file_path)

        streams = data.get("streams") or []
        stream = streams[0] if isinstance(streams, list) and streams and isinstance(streams[0], dict) else {}
        format_info = data.get("format") if isinstance(data.get("format"), dict) else {}

        duration = _non_negative_float(format_info.get("duration", stream.get("duration")), 0.0)
        fps = _parse_frame_rate(str(stream.get("avg_frame_rate") or "0/1"))
        if fps <= 0:
            fps = _parse_frame_rate(str(stream.get("r_frame_rate") or "0/1"))

        return VideoInfo(
            path=file_path,
            duration_seconds=duration,
            width=_positive_int(stream.get("width"), DEFAULT_VIDEO_WIDTH),
            height=_positive_int(stream.get("height"), DEFAULT_VIDEO_HEIGHT),
            fps=fps if fps > 0 else DEFAULT_VIDEO_FPS,
            probed=True,
        )
