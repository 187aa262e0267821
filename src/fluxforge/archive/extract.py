"""Archive extraction with directory-traversal protection."""

from __future__ import annotations

import logging
import re
import shutil
import zipfile
import zlib
from pathlib import Path
from typing import TYPE_CHECKING

from ..config.constants import COPY_CHUNK_SIZE
from ..core.base import (
    ConvertResult,
    ExportIOError,
    UnsafeArchiveEntryError,
    UnsupportedFormatError,
    UnsupportedOrEncryptedError,
)
from ..core.file_manager import remove_partial
from ..core.paths import Category, is_within, resolve_output_dir
from .formats import ArchiveFormat

if TYPE_CHECKING:
    from ..config.settings import ExportConfig

LOG = logging.getLogger(__name__)

_DRIVE_PREFIX = re.compile(r"^[A-Za-z]:")
_ENCRYPTED_FLAG = 0x1


def entry_parts(name: str) -> tuple[str, ...] | None:
    """
    Split an entry name into safe relative path segments.

    Returns None when the name is absolute, carries a drive prefix, uses
    backslash separators or contains a ``..`` segment. Empty and ``.``
    segments are dropped.
    """
    if not name or "\x00" in name or "\\" in name:
        return None
    if name.startswith("/") or _DRIVE_PREFIX.match(name):
        return None

    parts = [part for part in name.split("/") if part not in ("", ".")]
    if any(part == ".." for part in parts):
        return None
    return tuple(parts)


def extraction_folder_name(source: Path) -> str:
    """Name of the folder an archive is extracted into."""
    stem = source.stem
    return stem if stem not in ("", ".", "..") else "extracted"


def _is_encrypted(info: zipfile.ZipInfo) -> bool:
    return bool(info.flag_bits & _ENCRYPTED_FLAG)


def _plan_entries(source: Path, infos: list[zipfile.ZipInfo]) -> list[tuple[zipfile.ZipInfo, tuple[str, ...]]]:
    """Validate every entry name before anything is written."""
    plan: list[tuple[zipfile.ZipInfo, tuple[str, ...]]] = []
    unsafe: list[str] = []

    for info in infos:
        parts = entry_parts(info.filename)
        if parts is None:
            unsafe.append(info.filename)
        elif parts:
            plan.append((info, parts))

    if unsafe:
        LOG.error("Rejected %d unsafe entries in %s: %s", len(unsafe), source, ", ".join(unsafe))
        msg = f"Archive {source.name} contains entries outside the extraction folder: {', '.join(unsafe)}"
        raise UnsafeArchiveEntryError(msg, entries=unsafe, file_path=source)
    return plan


def _resolve_targets(
    source: Path, root: Path, plan: list[tuple[zipfile.ZipInfo, tuple[str, ...]]]
) -> list[tuple[zipfile.ZipInfo, Path]]:
    """Join entries onto the root and confirm each resolved target stays inside it."""
    resolved_root = root.resolve()
    targets: list[tuple[zipfile.ZipInfo, Path]] = []
    escaping: list[str] = []

    for info, parts in plan:
        target = root.joinpath(*parts)
        if is_within(resolved_root, target.resolve()):
            targets.append((info, target))
        else:
            escaping.append(info.filename)

    if escaping:
        msg = f"Archive {source.name} has entries that resolve outside the extraction folder: {', '.join(escaping)}"
        raise UnsafeArchiveEntryError(msg, entries=escaping, file_path=source)
    return targets


def _write_entry(
    archive: zipfile.ZipFile, info: zipfile.ZipInfo, target: Path, source: Path, pwd: bytes | None
) -> None:
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        msg = f"Failed to create folder {target.parent}: {e}"
        raise ExportIOError(msg, file_path=target.parent, cause=e) from e

    try:
        with archive.open(info, pwd=pwd) as src, target.open("wb") as dst:
            shutil.copyfileobj(src, dst, COPY_CHUNK_SIZE)
    except (RuntimeError, NotImplementedError, EOFError, zipfile.BadZipFile, zlib.error) as e:
        remove_partial(target)
        if _is_encrypted(info):
            msg = f"Cannot decrypt {info.filename} in {source.name}: wrong password or unsupported encryption ({e})"
            raise UnsupportedOrEncryptedError(msg, file_path=source, cause=e) from e
        msg = f"Cannot read {info.filename} in {source.name}: {e}"
        raise UnsupportedFormatError(msg, file_path=source, cause=e) from e
    except OSError as e:
        remove_partial(target)
        msg = f"Failed to write {target}: {e}"
        raise ExportIOError(msg, file_path=target, cause=e) from e


def _extract_zip(source: Path, extract_root: Path, output_dir: Path, password: str | None) -> int:
    """Extract a zip file under ``extract_root``, returning the number of entries written."""
    try:
        archive = zipfile.ZipFile(source)
    except zipfile.BadZipFile as e:
        msg = f"Failed to read zip archive {source}: {e}"
        raise UnsupportedFormatError(msg, file_path=source, cause=e) from e
    except OSError as e:
        msg = f"Failed to open zip file {source}: {e}"
        raise ExportIOError(msg, file_path=source, cause=e) from e

    with archive:
        plan = _plan_entries(source, archive.infolist())

        encrypted = [info.filename for info, _ in plan if _is_encrypted(info)]
        if encrypted and not password:
            msg = f"Archive {source.name} is password protected ({len(encrypted)} encrypted entries); supply a password"
            raise UnsupportedOrEncryptedError(msg, file_path=source)

        if not extract_root.is_dir():
            try:
                extract_root.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                msg = f"Failed to create extract folder {extract_root}: {e}"
                raise ExportIOError(msg, file_path=extract_root, cause=e) from e

        pwd = password.encode("utf-8") if password else None
        for info, target in _resolve_targets(source, extract_root, plan):
            if info.is_dir():
                try:
                    target.mkdir(parents=True, exist_ok=True)
                except OSError as e:
                    msg = f"Failed to create directory {target}: {e}"
                    raise ExportIOError(msg, file_path=target, cause=e) from e
            else:
                _write_entry(archive, info, target, source, pwd)
            LOG.debug("Extracted %s -> %s", info.filename, target.relative_to(output_dir))

        return len(plan)


def extract_archive(config: ExportConfig, source_path: str | Path, password: str | None = None) -> ConvertResult:
    """
    Extract an archive into ``<Archives folder>/<archive stem>``.

    Every entry name is validated before writing; one unsafe entry rejects the
    whole archive. Existing files in the extraction folder are overwritten.

    Args:
        config: Export configuration for this operation
        source_path: Archive to extract
        password: Password for encrypted zip entries (traditional ZipCrypto only)

    Returns:
        Result listing the extraction folder

    Raises:
        UnsupportedFormatError: Unknown suffix or unreadable container
        FormatNotImplementedError: Known format without an extraction engine
        UnsupportedOrEncryptedError: Encrypted entries that cannot be decrypted
        UnsafeArchiveEntryError: Entries that would escape the extraction folder
        ExportIOError: Filesystem failures

    """
    source = Path(source_path)
    archive_format = ArchiveFormat.from_path(source)
    if not source.is_file():
        msg = f"Archive not found: {source}"
        raise ExportIOError(msg, file_path=source)
    archive_format.require_extract(source)

    output_dir = resolve_output_dir(config, Category.ARCHIVES)
    extract_root = output_dir / extraction_folder_name(source)

    LOG.info("Extracting %s to %s", source, extract_root)
    count = _extract_zip(source, extract_root, output_dir, password)

    return ConvertResult(
        success=True,
        output_files=[extract_root],
        output_folder=output_dir,
        message=f"Extracted {count} entries from {source.name}",
    )
