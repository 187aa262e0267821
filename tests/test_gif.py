"""Tests for GIF size estimation and GIF conversion."""

from __future__ import annotations

import pytest

from fluxforge.core import EncodingError, ExportIOError, FFmpegProcessor, InvalidRequestError
from fluxforge.video import GifOptions, build_gif_filter, bytes_per_pixel, convert_video_to_gif, estimate_gif_size, gif_ffmpeg_cmd
from fluxforge.video.transcode import format_seconds, gif_filename


@pytest.fixture
def video_file(tmp_path):
    path = tmp_path / "holiday.mp4"
    path.write_bytes(b"\x00" * 64)
    return path


def options(**overrides):
    values = {"start_time": 0.0, "end_time": 10.0, "width": 320, "height": 240, "fps": 10, "quality": 3}
    values.update(overrides)
    return GifOptions(**values)


def test_estimate_example():
    """10 seconds at 10 fps, 320x240, quality 3."""
    estimate = estimate_gif_size(options())

    assert estimate.frame_count == 100
    assert estimate.duration_seconds == 10.0
    assert estimate.estimated_bytes == pytest.approx(921600)
    assert estimate.estimated_size_mb == 0.9


def test_estimate_scales_with_quality():
    sizes = [estimate_gif_size(options(quality=q)).estimated_bytes for q in range(1, 6)]

    assert sizes == sorted(sizes)
    assert len(set(sizes)) == 5


def test_estimate_floors_partial_frames():
    assert estimate_gif_size(options(end_time=1.25, fps=10)).frame_count == 12
    assert estimate_gif_size(options(start_time=0.1, end_time=0.8, fps=10)).frame_count == 7
    assert estimate_gif_size(options(start_time=2.0, end_time=2.3, fps=10)).frame_count == 2


def test_estimate_unknown_quality_uses_default():
    assert bytes_per_pixel(9) == bytes_per_pixel(3)
    assert estimate_gif_size(options(quality=0)).estimated_bytes == estimate_gif_size(options()).estimated_bytes


def test_estimate_negative_duration_is_zero():
    estimate = estimate_gif_size(options(start_time=5.0, end_time=2.0))

    assert estimate.frame_count == 0
    assert estimate.estimated_size_mb == 0.0


@pytest.mark.parametrize(
    "bad",
    [
        {"end_time": 0.0},
        {"start_time": 5.0, "end_time": 4.0},
        {"start_time": -1.0},
        {"width": 0},
        {"height": -10},
        {"fps": 0},
        {"quality": 6},
    ],
)
def test_validate_rejects(bad):
    with pytest.raises(InvalidRequestError):
        options(**bad).validate()


def test_filter_graph():
    graph = build_gif_filter(options(fps=12, width=480, height=270, quality=5))

    assert graph == (
        "[0:v] fps=12,scale=480:270:flags=lanczos[x]; "
        "[x] split [a][b]; "
        "[a] palettegen=max_colors=256:stats_mode=diff [p]; "
        "[b][p] paletteuse=dither=bayer:bayer_scale=5:diff_mode=rectangle"
    )
    assert "max_colors=32" in build_gif_filter(options(quality=1))


def test_ffmpeg_command(tmp_path):
    cmd = gif_ffmpeg_cmd(tmp_path / "in.mp4", tmp_path / "out.gif", options(start_time=1.5, end_time=4.0))

    assert cmd[:6] == ["ffmpeg", "-y", "-ss", "1.5", "-t", "2.5"]
    assert cmd[6:8] == ["-i", str(tmp_path / "in.mp4")]
    assert cmd[8] == "-filter_complex"
    assert cmd[-1] == str(tmp_path / "out.gif")


def test_format_seconds():
    assert format_seconds(0) == "0"
    assert format_seconds(2.0) == "2"
    assert format_seconds(0.25) == "0.25"


def test_gif_filename(tmp_path):
    source = tmp_path / "clip.mp4"
    assert gif_filename("", source) == "clip.gif"
    assert gif_filename("party", source) == "party.gif"
    assert gif_filename("party.GIF", source) == "party.GIF"


def test_convert_runs_ffmpeg(flat_config, export_base, video_file, fake_runner_factory):
    runner = fake_runner_factory()
    processor = FFmpegProcessor(runner=runner)

    result = convert_video_to_gif(flat_config, video_file, options(output_name="party"), processor=processor)

    output = (export_base / "FluxForge" / "GIF" / "party.gif").resolve()
    assert result.success
    assert result.output_files == [output]
    assert result.output_folder == output.parent
    assert len(runner.calls) == 1
    assert runner.calls[0][0] == "ffmpeg"
    assert runner.calls[0][-1] == str(output)


def test_convert_defaults_name_to_source_stem(config, video_file, today_folder, fake_runner_factory):
    processor = FFmpegProcessor(runner=fake_runner_factory())

    result = convert_video_to_gif(config, video_file, options(), processor=processor)

    assert result.output_files[0].name == "holiday.gif"
    assert result.output_files[0].parent.name == today_folder


def test_convert_uses_configured_executable(flat_config, video_file, fake_runner_factory):
    runner = fake_runner_factory()
    config = flat_config.with_overrides(ffmpeg_path="/opt/ffmpeg/bin/ffmpeg")

    convert_video_to_gif(config, video_file, options(), processor=FFmpegProcessor(runner=runner))

    assert runner.calls[0][0] == "/opt/ffmpeg/bin/ffmpeg"


def test_invalid_range_never_starts_ffmpeg(flat_config, export_base, video_file, fake_runner_factory):
    runner = fake_runner_factory()

    with pytest.raises(InvalidRequestError):
        convert_video_to_gif(
            flat_config, video_file, options(start_time=4.0, end_time=4.0), processor=FFmpegProcessor(runner=runner)
        )

    assert runner.calls == []
    assert not (export_base / "FluxForge").exists()


def test_missing_source(flat_config, tmp_path, fake_runner_factory):
    runner = fake_runner_factory()

    with pytest.raises(ExportIOError):
        convert_video_to_gif(flat_config, tmp_path / "gone.mp4", options(), processor=FFmpegProcessor(runner=runner))
    assert runner.calls == []


def test_encoder_failure_carries_stderr(flat_config, export_base, video_file, fake_runner_factory):
    stderr = "[gif @ 0x1] Error while opening encoder\n"
    processor = FFmpegProcessor(runner=fake_runner_factory(returncode=1, stderr=stderr))

    with pytest.raises(EncodingError) as exc_info:
        convert_video_to_gif(flat_config, video_file, options(), processor=processor)

    assert exc_info.value.stderr == stderr
    assert not (export_base / "FluxForge" / "GIF" / "holiday.gif").exists()


def test_output_name_cannot_escape(flat_config, video_file, fake_runner_factory):
    runner = fake_runner_factory()

    with pytest.raises(InvalidRequestError):
        convert_video_to_gif(flat_config, video_file, options(output_name="../../x"), processor=FFmpegProcessor(runner=runner))
    assert runner.calls == []
