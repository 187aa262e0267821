"""Utility CLI commands."""

from __future__ import annotations

import logging
import shutil
import sys
from typing import TYPE_CHECKING

import yaml

from ...core import FFmpegProbe, ProcessingError, create_export_folders

if TYPE_CHECKING:
    import argparse

    from ...core import ConfigManager

LOG = logging.getLogger(__name__)


class UtilityCommands:
    """Utility command handlers."""

    def __init__(self, config_manager: ConfigManager) -> None:
        self.config_manager = config_manager

    def add_subcommands(self, parser: argparse.ArgumentParser) -> None:
        """Add utility subcommands to parser."""
        subparsers = parser.add_subparsers(dest="util_command", help="Utility commands")

        subparsers.add_parser("info", help="Show configuration and system info")

        config_parser = subparsers.add_parser("config", help="Show the active configuration")
        config_parser.add_argument(
            "--init", action="store_true", help="Write default config.yaml and export folders if missing"
        )

        subparsers.add_parser("folders", help="Create the export root and category folders")

    def handle_command(self, args: argparse.Namespace) -> int:
        """Handle utility command execution."""
        if not hasattr(args, "util_command") or args.util_command is None:
            LOG.error("No utility command specified")
            return 1

        if args.util_command == "info":
            return self._handle_info()
        if args.util_command == "config":
            return self._handle_config(args)
        if args.util_command == "folders":
            return self._handle_folders()
        LOG.error("Unknown utility command: %s", args.util_command)
        return 1

    def _handle_info(self) -> int:
        """Handle info display."""
        config = self.config_manager.load()

        print("=== FluxForge Configuration ===")
        config_status = "✓ Found" if self.config_manager.config_path.exists() else "✗ Missing (using defaults)"
        print(f"Config file: {config_status}")
        print(f"  Path: {self.config_manager.config_path}")
        print(f"Export folder: {config.export_folder or '(not set)'}")
        print(f"  Root name: {config.export_folder_name}")
        print(f"  Date folders: {'on' if config.auto_create_date_folders else 'off'}")
        print(f"Workers: {config.default_workers or 'auto'}")
        print(f"Log level: {config.log_level}")

        print("\n=== System Information ===")
        executables = (config.ffmpeg_path, config.ffprobe_path)
        missing = FFmpegProbe.check_availability(executables)
        for exe in executables:
            status = "✗ Missing" if exe in missing else "✓ Found"
            print(f"{exe}: {status}")
            if exe not in missing:
                print(f"  Path: {shutil.which(exe)}")
        if missing:
            print("GIF conversion needs FFmpeg; video info falls back to default values.")
        return 0

    def _handle_config(self, args: argparse.Namespace) -> int:
        """Print the active configuration as YAML, optionally bootstrapping it first."""
        try:
            config = self.config_manager.initialize() if args.init else self.config_manager.load()
        except ProcessingError as e:
            LOG.error("%s", e)
            return 1

        if args.init:
            print(f"Configuration ready at {self.config_manager.config_path}")
        yaml.safe_dump(config.model_dump(), sys.stdout, sort_keys=False, allow_unicode=True)
        return 0

    def _handle_folders(self) -> int:
        try:
            root = create_export_folders(self.config_manager.load())
        except ProcessingError as e:
            LOG.error("%s", e)
            return 1

        print(f"Export folders ready under {root}")
        return 0
