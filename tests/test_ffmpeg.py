"""Tests for the ffmpeg command executor and ffprobe integration."""

from __future__ import annotations

import json
import subprocess

import pytest

from fluxforge.core import EncodingError, ExecutionError, ExportIOError, FFmpegProbe, FFmpegProcessor


@pytest.fixture
def video_file(tmp_path):
    path = tmp_path / "clip.mp4"
    path.write_bytes(b"\x00" * 64)
    return path


def probe_output(**stream):
    return json.dumps({"format": {"duration": "12.5"}, "streams": [stream]})


def test_run_command_success(fake_runner_factory):
    runner = fake_runner_factory(stdout="ok")
    processor = FFmpegProcessor(timeout=5, runner=runner)

    result = processor.run_command(["ffmpeg", "-version"])

    assert result.stdout == "ok"
    assert runner.calls == [["ffmpeg", "-version"]]
    assert runner.timeouts == [5]


def test_run_command_nonzero_exit_keeps_stderr(fake_runner_factory):
    stderr = "Invalid data found when processing input\n"
    processor = FFmpegProcessor(runner=fake_runner_factory(returncode=1, stderr=stderr))

    with pytest.raises(EncodingError) as exc_info:
        processor.run_command(["ffmpeg", "-i", "bad.mp4"])

    error = exc_info.value
    assert error.return_code == 1
    assert error.stderr == stderr
    assert error.command == ["ffmpeg", "-i", "bad.mp4"]
    assert "Invalid data found" in str(error)


def test_run_command_missing_executable(fake_runner_factory):
    processor = FFmpegProcessor(runner=fake_runner_factory(error=FileNotFoundError("ffmpeg")))

    with pytest.raises(ExecutionError, match="not found"):
        processor.run_command(["ffmpeg", "-version"])


def test_run_command_timeout(fake_runner_factory):
    runner = fake_runner_factory(error=subprocess.TimeoutExpired(cmd=["ffmpeg"], timeout=2))
    processor = FFmpegProcessor(timeout=2, runner=runner)

    with pytest.raises(ExecutionError, match="timed out"):
        processor.run_command(["ffmpeg", "-i", "x.mp4"])


def test_get_video_info_parses_probe(video_file, fake_runner_factory):
    runner = fake_runner_factory(stdout=probe_output(width=640, height=360, avg_frame_rate="30000/1001"))
    probe = FFmpegProbe(runner=runner)

    info = probe.get_video_info(video_file)

    assert info.probed
    assert info.duration_seconds == 12.5
    assert (info.width, info.height) == (640, 360)
    assert info.fps == pytest.approx(29.97, abs=0.01)
    assert runner.calls[0][:2] == ["ffprobe", "-v"]
    assert runner.calls[0][-3:] == ["-select_streams", "v:0", str(video_file)]


def test_get_video_info_uses_r_frame_rate_and_stream_duration(video_file, fake_runner_factory):
    output = json.dumps({"streams": [{"width": 320, "height": 240, "avg_frame_rate": "0/0", "r_frame_rate": "25/1", "duration": "3"}]})
    probe = FFmpegProbe(runner=fake_runner_factory(stdout=output))

    info = probe.get_video_info(video_file)

    assert info.fps == 25.0
    assert info.duration_seconds == 3.0


def test_get_video_info_falls_back_when_tool_missing(video_file, fake_runner_factory):
    probe = FFmpegProbe(runner=fake_runner_factory(error=FileNotFoundError("ffprobe")))

    info = probe.get_video_info(video_file)

    assert not info.probed
    assert (info.duration_seconds, info.width, info.height, info.fps) == (0.0, 1920, 1080, 30.0)


@pytest.mark.parametrize("stdout", ["not json", "[1, 2]"])
def test_get_video_info_falls_back_on_bad_output(video_file, fake_runner_factory, stdout):
    info = FFmpegProbe(runner=fake_runner_factory(stdout=stdout)).get_video_info(video_file)

    assert not info.probed
    assert info.width == 1920


def test_get_video_info_falls_back_on_failed_probe(video_file, fake_runner_factory):
    info = FFmpegProbe(runner=fake_runner_factory(returncode=1, stderr="moov atom not found")).get_video_info(video_file)

    assert not info.probed


def test_get_video_info_ignores_invalid_fields(video_file, fake_runner_factory):
    output = probe_output(width=0, height="abc", avg_frame_rate="oops")
    info = FFmpegProbe(runner=fake_runner_factory(stdout=output)).get_video_info(video_file)

    assert info.probed
    assert (info.width, info.height, info.fps) == (1920, 1080, 30.0)


def test_get_video_info_missing_file(tmp_path, fake_runner_factory):
    runner = fake_runner_factory()

    with pytest.raises(ExportIOError):
        FFmpegProbe(runner=runner).get_video_info(tmp_path / "missing.mp4")
    assert runner.calls == []


def test_probe_results_are_cached(video_file, fake_runner_factory):
    runner = fake_runner_factory(stdout=probe_output(width=640, height=360, avg_frame_rate="25/1"))
    probe = FFmpegProbe(runner=runner)

    probe.get_video_info(video_file)
    probe.get_video_info(video_file)

    assert len(runner.calls) == 1


def test_check_availability(monkeypatch):
    monkeypatch.setattr("fluxforge.core.ffmpeg.shutil.which", lambda exe: None if exe == "ffprobe" else f"/usr/bin/{exe}")

    assert FFmpegProbe.check_availability(("ffmpeg", "ffprobe")) == ["ffprobe"]
