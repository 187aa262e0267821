"""Video command surface: probing, GIF estimation and GIF conversion."""

from __future__ import annotations

import time
from pathlib import Path
from typing import TYPE_CHECKING

from ..core import FFmpegProbe, FFmpegProcessor, MediaProcessor, ProcessingError, ProcessingResult, ProcessingStatus
from ..video import GifOptions, convert_video_to_gif, estimate_gif_size

if TYPE_CHECKING:
    from ..core import CommandRunner, ConfigManager, ConvertResult, VideoInfo
    from ..video import GifEstimate

VIDEO_EXTENSIONS = {".mp4", ".mkv", ".avi", ".mov", ".wmv", ".flv", ".webm", ".m4v", ".mpg", ".mpeg", ".ts"}


class VideoProcessor(MediaProcessor):
    """GIF conversion processor; external tools run through an injectable runner."""

    media_type = "video"

    def __init__(self, config_manager: ConfigManager, runner: CommandRunner | None = None) -> None:
        """Initialize video processor with config manager and optional command runner."""
        super().__init__("VideoProcessor")
        self.config_manager = config_manager
        self.runner = runner

    def can_process(self, file_path: Path) -> bool:
        """Check if file is a supported video format."""
        return file_path.is_file() and file_path.suffix.lower() in VIDEO_EXTENSIONS

    def get_video_info(self, path: str | Path) -> VideoInfo:
        config = self.config_manager.load()
        probe = FFmpegProbe(executable=config.ffprobe_path, runner=self.runner)
        return probe.get_video_info(Path(path))

    def estimate_gif_size(self, path: str | Path, options: GifOptions) -> GifEstimate:
        """Estimate GIF size for a clip of ``path``; the file itself is not read."""
        estimate = estimate_gif_size(options)
        self.logger.debug("Estimate for %s: %.1f MB", path, estimate.estimated_size_mb)
        return estimate

    def convert_video_to_gif(self, path: str | Path, options: GifOptions) -> ConvertResult:
        config = self.config_manager.load()
        processor = FFmpegProcessor(timeout=config.ffmpeg_timeout, runner=self.runner)
        return convert_video_to_gif(config, path, options, processor=processor)

    def process_file(self, file_path: Path, **kwargs: object) -> ProcessingResult:
        """Convert one video as a batch item; an empty output name falls back to the source stem."""
        start_time = time.time()
        options = kwargs.get("options")
        if not isinstance(options, GifOptions):
            msg = "GIF options are required"
            raise TypeError(msg)

        try:
            result = self.convert_video_to_gif(file_path, options)
        except ProcessingError as e:
            self.logger.error("Failed to convert %s: %s", file_path, e)
            return ProcessingResult(
                source_file=file_path,
                status=ProcessingStatus.ERROR,
                message=str(e),
                processing_time=time.time() - start_time,
                metadata={"error_type": type(e).__name__},
            )

        return ProcessingResult(
            source_file=file_path,
            status=ProcessingStatus.SUCCESS,
            message=result.message,
            result=result,
            processing_time=time.time() - start_time,
        )
