"""Base classes, result envelope and error taxonomy for export operations."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .batch import BatchConfig

LOG = logging.getLogger(__name__)


@dataclass
class ConvertResult:
    """Result of a conversion, extraction or archive creation."""

    success: bool
    output_files: list[Path]
    output_folder: Path
    message: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Return dictionary representation of the result."""
        return {
            "success": self.success,
            "output_files": [str(p) for p in self.output_files],
            "output_folder": str(self.output_folder),
            "message": self.message,
        }


class ProcessingStatus(Enum):
    """Status of one item in a batch run."""

    SUCCESS = "success"
    SKIPPED = "skipped"
    ERROR = "error"


@dataclass
class ProcessingResult:
    """Outcome of one item in a batch run."""

    source_file: Path
    status: ProcessingStatus
    message: str = ""
    result: ConvertResult | None = None
    processing_time: float = 0.0
    metadata: dict[str, Any] = field(default_factory=dict)


class ProcessingError(Exception):
    """Base exception for export processing errors."""

    def __init__(
        self,
        message: str,
        file_path: Path | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.file_path = file_path
        self.cause = cause


class ExportIOError(ProcessingError):
    """Filesystem create/read/write failure."""


class UnsupportedFormatError(ProcessingError):
    """Unrecognized container or file extension."""


class UnsupportedOrEncryptedError(ProcessingError):
    """Password-protected content that cannot be read."""


class FormatNotImplementedError(ProcessingError):
    """Format is known but has no working engine yet."""


class InvalidRequestError(ProcessingError):
    """Request parameters were rejected before any work was done."""


class UnsafeArchiveEntryError(ProcessingError):
    """Archive entries would be written outside the extraction root."""

    def __init__(self, message: str, entries: list[str], file_path: Path | None = None) -> None:
        super().__init__(message, file_path=file_path)
        self.entries = entries


class MediaProcessor(ABC):
    """Abstract base class for processors driven by the command surface."""

    media_type = "archive"

    def __init__(self, name: str) -> None:
        self.name = name
        self.logger = logging.getLogger(f"{self.__class__.__module__}.{self.__class__.__name__}")

    @abstractmethod
    def can_process(self, file_path: Path) -> bool:
        """Check if this processor can handle the given file."""

    @abstractmethod
    def process_file(self, file_path: Path, **kwargs: Any) -> ProcessingResult:
        """Process a single file."""

    def process_paths(
        self, paths: list[Path], config: BatchConfig | None = None, **kwargs: Any
    ) -> list[ProcessingResult]:
        """Process several independent inputs."""
        from .batch import process_batch

        return process_batch(self, paths, config, **kwargs)

    def process_directory(self, directory: Path, *, recursive: bool = True, **kwargs: Any) -> list[ProcessingResult]:
        """Process all compatible files in a directory."""
        if not directory.is_dir():
            msg = f"Directory does not exist: {directory}"
            raise ExportIOError(msg, file_path=directory)

        pattern = "**/*" if recursive else "*"
        files = sorted(f for f in directory.glob(pattern) if f.is_file() and self.can_process(f))
        self.logger.info("Found %d files to process in %s", len(files), directory)
        return self.process_paths(files, **kwargs)
