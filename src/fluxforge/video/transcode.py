"""Video to GIF conversion through a two-pass palette encode."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from ..core.base import ConvertResult, ExportIOError
from ..core.ffmpeg import FFmpegError, FFmpegProcessor
from ..core.file_manager import remove_partial
from ..core.paths import Category, ensure_within, resolve_output_dir

if TYPE_CHECKING:
    from ..config.settings import ExportConfig
    from .estimate import GifOptions

LOG = logging.getLogger(__name__)

GIF_EXTENSION = ".gif"

# Palette size by quality tier
PALETTE_COLORS = {
    1: 32,
    2: 64,
    3: 128,
    4: 192,
    5: 256,
}


def gif_filename(output_name: str, source: Path) -> str:
    """Output file name, defaulting to the source stem and ending in .gif."""
    name = output_name.strip() or source.stem
    if name.lower().endswith(GIF_EXTENSION):
        return name
    return f"{name}{GIF_EXTENSION}"


def format_seconds(value: float) -> str:
    """Format a time offset for ffmpeg without exponent notation."""
    text = f"{value:.3f}".rstrip("0").rstrip(".")
    return text or "0"


def build_gif_filter(options: GifOptions) -> str:
    """
    Build the filter graph for a palette-based GIF encode.

    The scaled stream is split: one branch generates an adaptive palette
    weighted towards frame-to-frame differences, the other is mapped onto
    that palette with ordered (bayer) dithering.
    """
    max_colors = PALETTE_COLORS.get(options.quality, PALETTE_COLORS[3])
    return (
        f"[0:v] fps={options.fps},scale={options.width}:{options.height}:flags=lanczos[x]; "
        "[x] split [a][b]; "
        f"[a] palettegen=max_colors={max_colors}:stats_mode=diff [p]; "
        "[b][p] paletteuse=dither=bayer:bayer_scale=5:diff_mode=rectangle"
    )


def gif_ffmpeg_cmd(input_path: Path, output_path: Path, options: GifOptions, *, executable: str = "ffmpeg") -> list[str]:
    """
    Generate the FFmpeg command for a GIF conversion.

    Args:
        input_path: Source video file
        output_path: GIF to write (overwritten if present)
        options: Trim window, size, frame rate and quality
        executable: ffmpeg binary to invoke

    Returns:
        FFmpeg command as list of strings

    """
    return [
        executable,
        "-y",
        "-ss",
        format_seconds(options.start_time),
        "-t",
        format_seconds(options.duration),
        "-i",
        str(input_path),
        "-filter_complex",
        build_gif_filter(options),
        str(output_path),
    ]


def convert_video_to_gif(
    config: ExportConfig,
    source_path: str | Path,
    options: GifOptions,
    *,
    processor: FFmpegProcessor | None = None,
) -> ConvertResult:
    """
    Convert a clip of a video to GIF in the GIF output folder.

    The request is validated before any folder is created or process started.

    Raises:
        InvalidRequestError: Invalid options or an output name outside the GIF folder
        ExportIOError: Missing source or output folder failure
        ExecutionError: ffmpeg is missing or could not run
        EncodingError: ffmpeg exited non-zero (``stderr`` carries its output)

    """
    options.validate()
    source = Path(source_path)
    if not source.is_file():
        msg = f"Video not found: {source}"
        raise ExportIOError(msg, file_path=source)

    output_dir = resolve_output_dir(config, Category.GIF)
    output_path = ensure_within(output_dir, output_dir / gif_filename(options.output_name, source))

    processor = processor or FFmpegProcessor(timeout=config.ffmpeg_timeout)
    command = gif_ffmpeg_cmd(source, output_path, options, executable=config.ffmpeg_path)
    try:
        processor.run_command(command, file_path=source)
    except FFmpegError:
        remove_partial(output_path)
        raise

    LOG.info("Created GIF %s from %s", output_path, source)
    return ConvertResult(
        success=True,
        output_files=[output_path],
        output_folder=output_dir,
        message=f"Converted {source.name} to {output_path.name}",
    )
