"""Main CLI interface for FluxForge."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from ..config.constants import VERBOSE_LOGGING_THRESHOLD
from ..core import ConfigManager, with_config_overrides
from .commands import ArchiveCommands, UtilityCommands, VideoCommands


class FluxForgeCLI:
    """Command line front end for the export layer."""

    def __init__(self, config_path: Path | None = None) -> None:
        self.config_manager = ConfigManager(config_path)
        self.archive_commands = ArchiveCommands(self.config_manager)
        self.video_commands = VideoCommands(self.config_manager)
        self.utility_commands = UtilityCommands(self.config_manager)

    def setup_logging(self, verbosity: int) -> None:
        """Setup logging based on verbosity level, falling back to the configured level."""
        level_map = {
            1: logging.INFO,
            2: logging.DEBUG,
        }

        if verbosity:
            level = level_map.get(verbosity, logging.DEBUG)
        else:
            configured = str(self.config_manager.get_value("log_level", "INFO")).upper()
            level = getattr(logging, configured, logging.INFO)
            if not isinstance(level, int):
                level = logging.INFO

        log_format = (
            "%(levelname)s: %(name)s: %(message)s"
            if verbosity >= VERBOSE_LOGGING_THRESHOLD
            else "%(levelname)s: %(message)s"
        )
        logging.basicConfig(level=level, format=log_format, handlers=[logging.StreamHandler(sys.stderr)])

    def build_parser(self) -> argparse.ArgumentParser:
        """Build the argument parser."""
        parser = argparse.ArgumentParser(
            prog="fluxforge",
            description="Convert and repackage files into a date-organized export tree",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
Examples:
  # Extract archives into <export>/Archives/<date>/<name>
  fluxforge archive extract photos.zip

  # Bundle files into a zip
  fluxforge archive create a.pdf b.pdf --output bundle

  # Preview and convert a clip to GIF
  fluxforge video estimate clip.mp4 --start 2 --end 6 --width 480 --height 270
  fluxforge video gif clip.mp4 --start 2 --end 6 --width 480 --height 270 --fps 12
            """,
        )

        parser.add_argument(
            "-v",
            "--verbose",
            action="count",
            default=0,
            help="Increase verbosity (-v for info, -vv for debug)",
        )
        parser.add_argument("--config", type=Path, help="Path to configuration file")
        parser.add_argument("--export-folder", help="Override the export base folder for this run")
        parser.add_argument(
            "--no-date-folders", action="store_true", help="Do not nest outputs under a YYYY-MM-DD folder"
        )

        subparsers = parser.add_subparsers(dest="command", required=True, help="Available commands")

        archive_parser = subparsers.add_parser("archive", help="Archive commands")
        self.archive_commands.add_subcommands(archive_parser)

        video_parser = subparsers.add_parser("video", help="Video and GIF commands")
        self.video_commands.add_subcommands(video_parser)

        utils_parser = subparsers.add_parser("utils", help="Utility commands")
        self.utility_commands.add_subcommands(utils_parser)

        return parser

    @staticmethod
    def config_overrides(args: argparse.Namespace) -> dict[str, object]:
        """Collect configuration overrides from CLI arguments."""
        overrides: dict[str, object] = {}
        if getattr(args, "export_folder", None):
            overrides["export_folder"] = args.export_folder
        if getattr(args, "no_date_folders", False):
            overrides["auto_create_date_folders"] = False
        return overrides

    def run(self, args: list[str] | None = None) -> int:
        """Run the CLI with given arguments."""
        parser = self.build_parser()
        parsed_args = parser.parse_args(args)

        if getattr(parsed_args, "config", None):
            self.config_manager = ConfigManager(parsed_args.config)
            self.archive_commands.config_manager = self.config_manager
            self.video_commands.config_manager = self.config_manager
            self.utility_commands.config_manager = self.config_manager

        self.setup_logging(parsed_args.verbose)

        try:
            with with_config_overrides(self.config_manager, **self.config_overrides(parsed_args)):
                if parsed_args.command == "archive":
                    return self.archive_commands.handle_command(parsed_args)
                if parsed_args.command == "video":
                    return self.video_commands.handle_command(parsed_args)
                if parsed_args.command == "utils":
                    return self.utility_commands.handle_command(parsed_args)
                parser.error(f"Unknown command: {parsed_args.command}")

        except KeyboardInterrupt:
            logging.getLogger(__name__).info("Operation cancelled by user")
            return 130
        except Exception as e:
            logging.getLogger(__name__).exception("Unexpected error: %s", e)
            return 1

        return 0


def main() -> int:
    """Entry point for the CLI."""
    cli = FluxForgeCLI()
    return cli.run()


if __name__ == "__main__":
    sys.exit(main())
