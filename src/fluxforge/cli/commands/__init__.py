"""CLI command modules."""

from .archive import ArchiveCommands
from .utils import UtilityCommands
from .video import VideoCommands

__all__ = ["ArchiveCommands", "UtilityCommands", "VideoCommands"]
