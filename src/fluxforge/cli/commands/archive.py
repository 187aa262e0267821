"""Archive CLI commands."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from ...archive import ArchiveFormat, ArchiveOptions
from ...core import BatchConfig, ProcessingError, ProcessingStatus
from ...processors import ArchiveProcessor
from ..failure_table import print_failure_table

if TYPE_CHECKING:
    import argparse

    from ...core import ConfigManager, ConvertResult

LOG = logging.getLogger(__name__)


def print_result(result: ConvertResult) -> None:
    print(result.message)
    for output in result.output_files:
        print(f"  -> {output}")


class ArchiveCommands:
    """Archive command handlers."""

    def __init__(self, config_manager: ConfigManager) -> None:
        """Initialize archive commands handler."""
        self.config_manager = config_manager

    def add_subcommands(self, parser: argparse.ArgumentParser) -> None:
        """Add archive subcommands to parser."""
        subparsers = parser.add_subparsers(dest="archive_command", help="Archive commands")

        extract_parser = subparsers.add_parser("extract", help="Extract archives into the Archives folder")
        extract_parser.add_argument("paths", nargs="+", type=Path, help="Archive files or folders containing them")
        extract_parser.add_argument("--password", help="Password for encrypted zip archives")
        extract_parser.add_argument("--recursive", "-r", action="store_true", help="Search folders recursively")
        extract_parser.add_argument("--workers", "-w", type=int, help="Maximum parallel extractions")

        create_parser = subparsers.add_parser("create", help="Create an archive from files")
        create_parser.add_argument("paths", nargs="+", type=Path, help="Files to add (folders are skipped)")
        create_parser.add_argument("--output", "-o", required=True, help="Archive name (extension optional)")
        create_parser.add_argument(
            "--format",
            "-f",
            default=ArchiveFormat.ZIP.value,
            choices=[f.value for f in ArchiveFormat],
            help="Archive format",
        )
        create_parser.add_argument("--password", help="Requested password (not applied, see output)")

    def handle_command(self, args: argparse.Namespace) -> int:
        """Handle archive command execution."""
        if not hasattr(args, "archive_command") or args.archive_command is None:
            LOG.error("No archive command specified")
            return 1

        if args.archive_command == "extract":
            return self._handle_extract(args)
        if args.archive_command == "create":
            return self._handle_create(args)
        LOG.error("Unknown archive command: %s", args.archive_command)
        return 1

    def _handle_extract(self, args: argparse.Namespace) -> int:
        """Handle archive extraction for one or many inputs."""
        processor = ArchiveProcessor(self.config_manager)

        if len(args.paths) == 1 and not args.paths[0].is_dir():
            try:
                result = processor.extract_archive(args.paths[0], args.password)
            except ProcessingError as e:
                LOG.error("%s", e)
                return 1
            print_result(result)
            return 0

        results = []
        batch_config = BatchConfig(max_workers=args.workers or self.config_manager.load().default_workers)
        files = []
        for path in args.paths:
            if path.is_dir():
                results.extend(
                    processor.process_directory(
                        path, recursive=args.recursive, config=batch_config, password=args.password
                    )
                )
            else:
                files.append(path)
        if files:
            results.extend(processor.process_paths(files, batch_config, password=args.password))

        for item in results:
            if item.result is not None:
                print_result(item.result)

        failed = [r for r in results if r.status != ProcessingStatus.SUCCESS]
        print_failure_table(failed, "archive")
        LOG.info("Extracted %d/%d archives", len(results) - len(failed), len(results))
        return 0 if not failed else 1

    def _handle_create(self, args: argparse.Namespace) -> int:
        """Handle archive creation."""
        processor = ArchiveProcessor(self.config_manager)
        options = ArchiveOptions(format=args.format, password=args.password)

        try:
            result = processor.create_archive(args.paths, args.output, options)
        except ProcessingError as e:
            LOG.error("%s", e)
            return 1

        print_result(result)
        return 0
