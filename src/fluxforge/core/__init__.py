"""Core abstractions and utilities for the export layer."""

from .base import (
    ConvertResult,
    ExportIOError,
    FormatNotImplementedError,
    InvalidRequestError,
    MediaProcessor,
    ProcessingError,
    ProcessingResult,
    ProcessingStatus,
    UnsafeArchiveEntryError,
    UnsupportedFormatError,
    UnsupportedOrEncryptedError,
)
from .batch import BatchConfig, process_batch
from .config import ConfigManager, with_config_overrides
from .ffmpeg import (
    CommandRunner,
    EncodingError,
    ExecutionError,
    FFmpegError,
    FFmpegProbe,
    FFmpegProcessor,
    SubprocessRunner,
    VideoInfo,
)
from .paths import Category, create_export_folders, ensure_within, is_within, resolve_output_dir

__all__ = [
    "BatchConfig",
    "Category",
    "CommandRunner",
    "ConfigManager",
    "ConvertResult",
    "EncodingError",
    "ExecutionError",
    "ExportIOError",
    "FFmpegError",
    "FFmpegProbe",
    "FFmpegProcessor",
    "FormatNotImplementedError",
    "InvalidRequestError",
    "MediaProcessor",
    "ProcessingError",
    "ProcessingResult",
    "ProcessingStatus",
    "SubprocessRunner",
    "UnsafeArchiveEntryError",
    "UnsupportedFormatError",
    "UnsupportedOrEncryptedError",
    "VideoInfo",
    "create_export_folders",
    "ensure_within",
    "is_within",
    "process_batch",
    "resolve_output_dir",
    "with_config_overrides",
]
