"""Processors exposing the export command surface."""

from __future__ import annotations

from .archive_processor import ArchiveProcessor
from .video_processor import VideoProcessor

__all__ = ["ArchiveProcessor", "VideoProcessor"]
