"""Persisted application configuration."""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any

import yaml

from .constants import APP_NAME, CONFIG_ENV_VAR, CONFIG_FILE_NAME, VALID_THEMES

LOG = logging.getLogger(__name__)

# Accepted YAML value types per field; None marks an optional field
_FIELD_TYPES: dict[str, tuple[type, ...]] = {
    "export_folder": (str,),
    "export_folder_name": (str,),
    "theme": (str,),
    "default_pdf_dpi": (int,),
    "auto_create_date_folders": (bool,),
    "cloud_sync_folder": (str, type(None)),
    "ffmpeg_path": (str,),
    "ffprobe_path": (str,),
    "ffmpeg_timeout": (int, float, type(None)),
    "default_workers": (int, type(None)),
    "log_level": (str,),
}
_POSITIVE_FIELDS = ("default_pdf_dpi", "ffmpeg_timeout", "default_workers")
_NON_EMPTY_FIELDS = ("export_folder_name", "ffmpeg_path", "ffprobe_path", "log_level")


def _valid_value(key: str, value: object) -> bool:
    """Check a YAML value against the field type; booleans never count as numbers."""
    accepted = _FIELD_TYPES[key]
    if isinstance(value, bool) and bool not in accepted:
        return False
    if not isinstance(value, accepted):
        return False
    if key in _POSITIVE_FIELDS and value is not None and value <= 0:  # type: ignore[operator]
        return False
    return not (key in _NON_EMPTY_FIELDS and not str(value).strip())


@dataclass(frozen=True)
class ExportConfig:
    """Configuration record read once per operation and never mutated by the core."""

    export_folder: str = ""
    export_folder_name: str = APP_NAME
    theme: str = "dark"
    default_pdf_dpi: int = 150
    auto_create_date_folders: bool = True
    cloud_sync_folder: str | None = None
    ffmpeg_path: str = "ffmpeg"
    ffprobe_path: str = "ffprobe"
    ffmpeg_timeout: float | None = None
    default_workers: int | None = None
    log_level: str = "INFO"

    @classmethod
    def defaults(cls) -> ExportConfig:
        """Return first-run defaults with the export folder set to Documents."""
        return cls(export_folder=str(documents_dir()))

    @classmethod
    def load_from_file(cls, config_path: Path) -> ExportConfig:
        """Load configuration from YAML file, falling back to defaults."""
        if not config_path.exists():
            LOG.debug("No config file at %s, using defaults", config_path)
            return cls.defaults()

        try:
            with config_path.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            LOG.warning("Failed to load config from %s: %s", config_path, e)
            return cls.defaults()

        if not isinstance(data, dict):
            LOG.warning("Ignoring config at %s: expected a mapping, got %s", config_path, type(data).__name__)
            return cls.defaults()

        return cls._from_dict(data)

    def save_to_file(self, config_path: Path) -> None:
        """Write configuration as YAML, creating the parent folder if needed."""
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with config_path.open("w", encoding="utf-8") as f:
            yaml.safe_dump(self.model_dump(), f, sort_keys=False, allow_unicode=True)
        LOG.debug("Saved config to %s", config_path)

    def model_dump(self) -> dict[str, Any]:
        """Return dictionary representation of the configuration."""
        return asdict(self)

    def with_overrides(self, **overrides: Any) -> ExportConfig:
        """Return a copy with the given fields replaced."""
        return replace(self, **overrides)

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> ExportConfig:
        """Create config from dictionary, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(str(key) for key in set(data) - known)
        if unknown:
            LOG.warning("Ignoring unknown config keys: %s", ", ".join(unknown))

        values: dict[str, Any] = {}
        for key, value in data.items():
            if key not in known:
                continue
            if _valid_value(key, value):
                values[key] = value
            else:
                LOG.warning("Invalid value %r for config key '%s', using the default", value, key)

        if not values.get("export_folder"):
            values["export_folder"] = str(documents_dir())

        theme = values.get("theme", "dark")
        if theme not in VALID_THEMES:
            LOG.warning("Invalid theme '%s'. Using 'dark'. Valid options: %s", theme, ", ".join(VALID_THEMES))
            values["theme"] = "dark"

        return cls(**values)


def documents_dir() -> Path:
    """Return the current user's Documents folder."""
    if sys.platform == "win32":
        profile = os.environ.get("USERPROFILE")
        if profile:
            return Path(profile) / "Documents"
    return Path.home() / "Documents"


def default_config_path() -> Path:
    """Return the per-user location of config.yaml."""
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override).expanduser()

    if sys.platform == "win32":
        appdata = os.environ.get("APPDATA")
        base = Path(appdata) if appdata else Path.home() / "AppData" / "Roaming"
        return base / APP_NAME / CONFIG_FILE_NAME
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / APP_NAME / CONFIG_FILE_NAME

    xdg = os.environ.get("XDG_CONFIG_HOME")
    base = Path(xdg) if xdg else Path.home() / ".config"
    return base / APP_NAME.lower() / CONFIG_FILE_NAME


def get_config(config_path: Path | None = None) -> ExportConfig:
    """Load the configuration from ``config_path`` or the per-user default location."""
    return ExportConfig.load_from_file(config_path or default_config_path())
