"""Configuration manager with per-operation loading and override contexts."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from ..config.settings import ExportConfig, default_config_path
from .base import ExportIOError
from .paths import create_export_folders

LOG = logging.getLogger(__name__)


class ConfigManager:
    """Loads the persisted configuration and applies temporary overrides."""

    def __init__(self, config_path: Path | None = None) -> None:
        """
        Initialize configuration manager.

        Args:
            config_path: Optional path to config file (defaults to the per-user location)

        """
        self.config_path = config_path or default_config_path()
        self._overrides: dict[str, Any] = {}
        self._context_stack: list[dict[str, Any]] = []

    @property
    def config(self) -> ExportConfig:
        """Load the configuration for one operation."""
        return self.load()

    def load(self) -> ExportConfig:
        """Read the configuration file and apply active overrides."""
        config = ExportConfig.load_from_file(self.config_path)
        if self._overrides:
            config = config.with_overrides(**self._overrides)
        return config

    def save(self, config: ExportConfig) -> None:
        """Persist the configuration and make sure the export folders exist."""
        try:
            config.save_to_file(self.config_path)
        except OSError as e:
            msg = f"Failed to write config {self.config_path}: {e}"
            raise ExportIOError(msg, file_path=self.config_path, cause=e) from e
        create_export_folders(config)

    def initialize(self) -> ExportConfig:
        """Bootstrap defaults and export folders on first run."""
        if self.config_path.exists():
            return self.load()

        config = ExportConfig.defaults()
        LOG.info("Creating default configuration at %s", self.config_path)
        self.save(config)
        return config

    def get_value(self, key: str, default: object = None) -> object:
        """Get configuration value with override support."""
        if key in self._overrides:
            return self._overrides[key]
        return getattr(self.load(), key, default)

    def push_context(self, overrides: dict[str, Any]) -> None:
        """Push a new configuration context."""
        self._context_stack.append(self._overrides.copy())
        self._overrides.update(overrides)

    def pop_context(self) -> None:
        """Pop the current configuration context."""
        if self._context_stack:
            self._overrides = self._context_stack.pop()


class ConfigContext:
    """Context manager for temporary configuration changes."""

    def __init__(self, config_manager: ConfigManager, overrides: dict[str, Any]) -> None:
        self.config_manager = config_manager
        self.overrides = overrides

    def __enter__(self) -> ConfigManager:
        """Enter the configuration context."""
        self.config_manager.push_context(self.overrides)
        return self.config_manager

    def __exit__(self, _exc_type: object, _exc_val: object, _exc_tb: object) -> None:
        """Exit the configuration context."""
        self.config_manager.pop_context()


def with_config_overrides(config_manager: ConfigManager, **overrides: object) -> ConfigContext:
    """Create a context with configuration overrides."""
    return ConfigContext(config_manager, overrides)
