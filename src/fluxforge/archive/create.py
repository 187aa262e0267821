"""Archive creation from a flat list of files."""

from __future__ import annotations

import logging
import zipfile
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from ..core.base import ConvertResult, ExportIOError, InvalidRequestError
from ..core.file_manager import atomic_output
from ..core.paths import Category, ensure_within, resolve_output_dir
from .formats import ArchiveFormat

if TYPE_CHECKING:
    from ..config.settings import ExportConfig

LOG = logging.getLogger(__name__)

PASSWORD_NOT_APPLIED = "Password protection is not supported when creating archives; the archive is not encrypted."


@dataclass
class ArchiveOptions:
    """Options for archive creation."""

    format: str = "zip"
    password: str | None = None


def archive_filename(output_name: str, archive_format: ArchiveFormat) -> str:
    """Append the format's extension unless the name already ends with it."""
    if output_name.lower().endswith(archive_format.extension):
        return output_name
    return f"{output_name}{archive_format.extension}"


def _collect_entries(source_paths: list[Path]) -> tuple[list[tuple[Path, str]], list[str]]:
    """Pick regular files and their flat entry names, noting what was skipped."""
    entries: list[tuple[Path, str]] = []
    skipped: list[str] = []
    seen: set[str] = set()

    for path in source_paths:
        if not path.is_file():
            LOG.warning("Skipping %s: not a regular file", path)
            skipped.append(str(path))
            continue
        if path.name in seen:
            LOG.warning("Skipping %s: an entry named %s was already added", path, path.name)
            skipped.append(str(path))
            continue
        seen.add(path.name)
        entries.append((path, path.name))

    return entries, skipped


def _write_zip(target: Path, entries: list[tuple[Path, str]]) -> None:
    with zipfile.ZipFile(target, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        for path, arcname in entries:
            archive.write(path, arcname=arcname)
            LOG.debug("Added %s as %s", path, arcname)


def create_archive(
    config: ExportConfig,
    source_paths: list[str | Path],
    output_name: str,
    options: ArchiveOptions | None = None,
) -> ConvertResult:
    """
    Create a flat archive of regular files in the Archives folder.

    Each file is stored under its base name. Directories and missing paths
    are skipped without failing the operation, as are later files that
    share a base name with one already added. A requested password is not
    applied; the result message says so.

    Raises:
        UnsupportedFormatError: Unknown or read-only format
        FormatNotImplementedError: Known format without a creation engine
        InvalidRequestError: Empty output name or one that leaves the output folder
        ExportIOError: Filesystem failures

    """
    options = options or ArchiveOptions()
    archive_format = ArchiveFormat.from_name(options.format)
    archive_format.require_create()

    if not output_name.strip():
        msg = "Archive output name must not be empty"
        raise InvalidRequestError(msg)

    output_dir = resolve_output_dir(config, Category.ARCHIVES)
    output_path = ensure_within(output_dir, output_dir / archive_filename(output_name, archive_format))

    entries, skipped = _collect_entries([Path(p) for p in source_paths])
    if not entries:
        LOG.warning("No regular files to add; writing an empty archive to %s", output_path)

    LOG.info("Creating %s with %d files", output_path, len(entries))
    try:
        with atomic_output(output_path) as temp_path:
            _write_zip(temp_path, entries)
    except OSError as e:
        msg = f"Failed to write archive {output_path}: {e}"
        raise ExportIOError(msg, file_path=output_path, cause=e) from e

    message = f"Compressed {len(entries)} files into {output_path.name}"
    if skipped:
        message += f" (skipped {len(skipped)}: {', '.join(skipped)})"
    if options.password and not archive_format.encrypts_on_create:
        LOG.warning("Password ignored for %s: encryption is not supported", output_path)
        message += f". {PASSWORD_NOT_APPLIED}"

    return ConvertResult(
        success=True,
        output_files=[output_path],
        output_folder=output_dir,
        message=message,
    )
