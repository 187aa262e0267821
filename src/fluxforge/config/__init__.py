"""Configuration management for FluxForge."""

from __future__ import annotations

from .constants import *  # noqa: F403, F401
from .settings import ExportConfig, default_config_path, documents_dir, get_config

__all__ = [
    "ExportConfig",
    "default_config_path",
    "documents_dir",
    "get_config",
]
