"""Output folder resolution for the export tree."""

from __future__ import annotations

import datetime
import logging
import os
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

from .base import ExportIOError, InvalidRequestError

if TYPE_CHECKING:
    from ..config.settings import ExportConfig

LOG = logging.getLogger(__name__)

DATE_FOLDER_FORMAT = "%Y-%m-%d"


class Category(Enum):
    """Output domains, each mapped to one fixed subdirectory name."""

    PDF_IMAGES = "PDF_Images"
    PDF_OPERATIONS = "PDF_Operations"
    ARCHIVES = "Archives"
    GIF = "GIF"

    @property
    def folder_name(self) -> str:
        return self.value


def is_within(root: str | os.PathLike[str], candidate: str | os.PathLike[str]) -> bool:
    """
    Return True if ``candidate`` is ``root`` or lies below it.

    Both paths are made absolute and normalized lexically, so ``..`` segments are
    collapsed before comparison. Symlinks are not followed; callers that care
    should pass resolved paths.
    """
    root_path = Path(os.path.normpath(os.path.abspath(root)))
    candidate_path = Path(os.path.normpath(os.path.abspath(candidate)))
    return candidate_path == root_path or root_path in candidate_path.parents


def ensure_within(root: Path, candidate: Path) -> Path:
    """Return ``candidate`` or raise if it escapes ``root``."""
    if not is_within(root.resolve(), candidate.resolve()):
        msg = f"Output path {candidate} is outside of {root}"
        raise InvalidRequestError(msg, file_path=candidate)
    return candidate


def export_root(config: ExportConfig) -> Path:
    """Return the absolute ``<base>/<root>`` folder for a configuration."""
    if not config.export_folder.strip():
        msg = "Export folder is not configured"
        raise ExportIOError(msg)
    base = Path(config.export_folder).expanduser()
    return (base / config.export_folder_name).resolve()


def _make_dirs(path: Path) -> None:
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        msg = f"Failed to create output folder {path}: {e}"
        raise ExportIOError(msg, file_path=path, cause=e) from e


def resolve_output_dir(
    config: ExportConfig,
    category: Category | str,
    *,
    today: datetime.date | None = None,
) -> Path:
    """
    Resolve and create the output folder for a category.

    The folder is ``<base>/<root>/<category>`` with a ``YYYY-MM-DD`` segment
    appended when date folders are enabled. Missing folders are created;
    existing ones are reused.

    Args:
        config: Export configuration for this operation
        category: Output domain
        today: Calendar date for the date folder (defaults to the local date)

    Returns:
        Absolute path of the existing output folder

    Raises:
        ExportIOError: If the folder cannot be created

    """
    if not isinstance(category, Category):
        category = Category(category)

    output_dir = export_root(config) / category.folder_name
    if config.auto_create_date_folders:
        day = today or datetime.date.today()
        output_dir = output_dir / day.strftime(DATE_FOLDER_FORMAT)

    _make_dirs(output_dir)
    LOG.debug("Resolved output folder for %s: %s", category.folder_name, output_dir)
    return output_dir


def create_export_folders(config: ExportConfig) -> Path:
    """Create the export root and every category folder, returning the root."""
    base_path = export_root(config)
    _make_dirs(base_path)
    for category in Category:
        _make_dirs(base_path / category.folder_name)
    LOG.info("Export folders ready under %s", base_path)
    return base_path
