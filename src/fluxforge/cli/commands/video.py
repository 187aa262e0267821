"""Video and GIF CLI commands."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from ...core import BatchConfig, ProcessingError, ProcessingStatus
from ...processors import VideoProcessor
from ...video import GifOptions
from ..failure_table import print_failure_table
from .archive import print_result

if TYPE_CHECKING:
    import argparse

    from ...core import ConfigManager

LOG = logging.getLogger(__name__)


class VideoCommands:
    """Video command handlers."""

    def __init__(self, config_manager: ConfigManager) -> None:
        """Initialize video commands handler."""
        self.config_manager = config_manager

    @staticmethod
    def _add_clip_arguments(parser: argparse.ArgumentParser) -> None:
        parser.add_argument("--start", "-s", type=float, required=True, help="Clip start in seconds")
        parser.add_argument("--end", "-e", type=float, required=True, help="Clip end in seconds")
        parser.add_argument("--width", type=int, help="Output width (default: source width)")
        parser.add_argument("--height", type=int, help="Output height (default: source height)")
        parser.add_argument("--fps", type=int, default=10, help="Output frame rate")
        parser.add_argument("--quality", "-q", type=int, default=3, help="Quality tier 1 (small) to 5 (best)")

    def add_subcommands(self, parser: argparse.ArgumentParser) -> None:
        """Add video subcommands to parser."""
        subparsers = parser.add_subparsers(dest="video_command", help="Video commands")

        info_parser = subparsers.add_parser("info", help="Show duration, size and frame rate")
        info_parser.add_argument("path", type=Path, help="Video file")

        estimate_parser = subparsers.add_parser("estimate", help="Estimate GIF size (rough preview)")
        estimate_parser.add_argument("path", type=Path, help="Video file")
        self._add_clip_arguments(estimate_parser)

        gif_parser = subparsers.add_parser("gif", help="Convert video clips to GIF")
        gif_parser.add_argument("paths", nargs="+", type=Path, help="Video files")
        self._add_clip_arguments(gif_parser)
        gif_parser.add_argument("--output", "-o", default="", help="Output name (single input only)")
        gif_parser.add_argument("--workers", "-w", type=int, help="Maximum parallel conversions")

    def handle_command(self, args: argparse.Namespace) -> int:
        """Handle video command execution."""
        if not hasattr(args, "video_command") or args.video_command is None:
            LOG.error("No video command specified")
            return 1

        if args.video_command == "info":
            return self._handle_info(args)
        if args.video_command == "estimate":
            return self._handle_estimate(args)
        if args.video_command == "gif":
            return self._handle_gif(args)
        LOG.error("Unknown video command: %s", args.video_command)
        return 1

    def _gif_options(self, processor: VideoProcessor, args: argparse.Namespace, source: Path) -> GifOptions:
        """Build GIF options, filling a missing size from the probed source."""
        width, height = args.width, args.height
        if width is None or height is None:
            info = processor.get_video_info(source)
            width = width or info.width
            height = height or info.height
        return GifOptions(
            start_time=args.start,
            end_time=args.end,
            width=width,
            height=height,
            fps=args.fps,
            quality=args.quality,
            output_name=getattr(args, "output", ""),
        )

    def _handle_info(self, args: argparse.Namespace) -> int:
        processor = VideoProcessor(self.config_manager)
        try:
            info = processor.get_video_info(args.path)
        except ProcessingError as e:
            LOG.error("%s", e)
            return 1

        print(f"{info.path.name}: {info.width}x{info.height}, {info.fps:.2f} fps, {info.duration_seconds:.2f}s")
        if not info.probed:
            print("  (ffprobe unavailable or failed; showing default values)")
        return 0

    def _handle_estimate(self, args: argparse.Namespace) -> int:
        processor = VideoProcessor(self.config_manager)
        try:
            options = self._gif_options(processor, args, args.path)
        except ProcessingError as e:
            LOG.error("%s", e)
            return 1

        estimate = processor.estimate_gif_size(args.path, options)
        print(
            f"~{estimate.estimated_size_mb:.1f} MB for {estimate.frame_count} frames "
            f"({estimate.duration_seconds:.2f}s at {options.width}x{options.height}, quality {options.quality})"
        )
        print("  Rough estimate only; the real size depends on the content.")
        return 0

    def _handle_gif(self, args: argparse.Namespace) -> int:
        processor = VideoProcessor(self.config_manager)

        if len(args.paths) == 1:
            source = args.paths[0]
            try:
                result = processor.convert_video_to_gif(source, self._gif_options(processor, args, source))
            except ProcessingError as e:
                LOG.error("%s", e)
                stderr = getattr(e, "stderr", None)
                if stderr:
                    print(stderr)
                return 1
            print_result(result)
            return 0

        if args.output:
            LOG.error("--output can only be used with a single input")
            return 1
        if args.width is None or args.height is None:
            LOG.error("--width and --height are required when converting several files")
            return 1

        options = GifOptions(
            start_time=args.start,
            end_time=args.end,
            width=args.width,
            height=args.height,
            fps=args.fps,
            quality=args.quality,
        )
        try:
            options.validate()
        except ProcessingError as e:
            LOG.error("%s", e)
            return 1

        results = processor.process_paths(
            args.paths,
            BatchConfig(max_workers=args.workers or self.config_manager.load().default_workers),
            options=options,
        )
        for item in results:
            if item.result is not None:
                print_result(item.result)

        failed = [r for r in results if r.status != ProcessingStatus.SUCCESS]
        print_failure_table(failed, "video")
        return 0 if not failed else 1
