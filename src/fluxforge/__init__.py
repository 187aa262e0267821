"""FluxForge - file conversion and repackaging into a date-organized export tree."""

from __future__ import annotations

__version__ = "0.1.0"
__description__ = "File conversion and repackaging into a date-organized export tree"

# Public API exports
from .archive import ArchiveFormat, ArchiveOptions, create_archive, extract_archive
from .config import ExportConfig, get_config
from .core import (
    Category,
    ConfigManager,
    ConvertResult,
    EncodingError,
    ExecutionError,
    ExportIOError,
    FFmpegError,
    FFmpegProbe,
    FFmpegProcessor,
    FormatNotImplementedError,
    InvalidRequestError,
    ProcessingError,
    ProcessingResult,
    ProcessingStatus,
    UnsafeArchiveEntryError,
    UnsupportedFormatError,
    UnsupportedOrEncryptedError,
    VideoInfo,
    is_within,
    resolve_output_dir,
    with_config_overrides,
)
from .processors import ArchiveProcessor, VideoProcessor
from .video import GifEstimate, GifOptions, convert_video_to_gif, estimate_gif_size

__all__ = [
    # Configuration
    "ExportConfig",
    "get_config",
    "ConfigManager",
    "with_config_overrides",
    # Output folders
    "Category",
    "is_within",
    "resolve_output_dir",
    # Archives
    "ArchiveFormat",
    "ArchiveOptions",
    "create_archive",
    "extract_archive",
    # Video
    "FFmpegProbe",
    "FFmpegProcessor",
    "GifEstimate",
    "GifOptions",
    "VideoInfo",
    "convert_video_to_gif",
    "estimate_gif_size",
    # Processors
    "ArchiveProcessor",
    "VideoProcessor",
    # Results
    "ConvertResult",
    "ProcessingResult",
    "ProcessingStatus",
    # Exceptions
    "ProcessingError",
    "ExportIOError",
    "UnsupportedFormatError",
    "UnsupportedOrEncryptedError",
    "FormatNotImplementedError",
    "InvalidRequestError",
    "UnsafeArchiveEntryError",
    "FFmpegError",
    "ExecutionError",
    "EncodingError",
]
