"""CLI module for FluxForge."""

from .commands import ArchiveCommands, UtilityCommands, VideoCommands
from .main import FluxForgeCLI

__all__ = [
    "ArchiveCommands",
    "FluxForgeCLI",
    "UtilityCommands",
    "VideoCommands",
]
