"""Archive command surface built on the archive engines."""

from __future__ import annotations

import time
from pathlib import Path
from typing import TYPE_CHECKING

from ..archive import ArchiveOptions, create_archive, extract_archive, is_archive
from ..core import MediaProcessor, ProcessingError, ProcessingResult, ProcessingStatus

if TYPE_CHECKING:
    from ..core import ConfigManager, ConvertResult


class ArchiveProcessor(MediaProcessor):
    """Extracts and creates archives using the configuration loaded for each call."""

    media_type = "archive"

    def __init__(self, config_manager: ConfigManager) -> None:
        """Initialize archive processor with config manager."""
        super().__init__("ArchiveProcessor")
        self.config_manager = config_manager

    def can_process(self, file_path: Path) -> bool:
        """Check if file has a known archive suffix."""
        return file_path.is_file() and is_archive(file_path)

    def extract_archive(self, path: str | Path, password: str | None = None) -> ConvertResult:
        return extract_archive(self.config_manager.load(), path, password)

    def create_archive(
        self, paths: list[str | Path], output_name: str, options: ArchiveOptions | None = None
    ) -> ConvertResult:
        return create_archive(self.config_manager.load(), paths, output_name, options)

    def process_file(self, file_path: Path, **kwargs: object) -> ProcessingResult:
        """Extract one archive as a batch item."""
        start_time = time.time()
        password = kwargs.get("password")

        try:
            result = self.extract_archive(file_path, str(password) if password else None)
        except ProcessingError as e:
            self.logger.error("Failed to extract %s: %s", file_path, e)
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
