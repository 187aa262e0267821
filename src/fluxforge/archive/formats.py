"""Supported archive container formats."""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from ..core.base import FormatNotImplementedError, UnsupportedFormatError


class ArchiveFormat(Enum):
    """Closed set of container formats and what each can do."""

    ZIP = "zip"
    SEVEN_Z = "7z"
    RAR = "rar"

    @property
    def extension(self) -> str:
        return f".{self.value}"

    @property
    def can_extract(self) -> bool:
        return self is ArchiveFormat.ZIP

    @property
    def can_create(self) -> bool:
        return self is ArchiveFormat.ZIP

    @property
    def creatable(self) -> bool:
        """Whether the format is a creation target at all (RAR is read-only)."""
        return self is not ArchiveFormat.RAR

    @property
    def encrypts_on_create(self) -> bool:
        """Whether a requested password is applied when writing."""
        return False

    @classmethod
    def from_path(cls, path: Path) -> ArchiveFormat:
        """Detect the format from the file suffix."""
        suffix = path.suffix.lower().lstrip(".")
        try:
            return cls(suffix)
        except ValueError:
            msg = f"Unsupported archive format: {suffix or '(none)'}"
            raise UnsupportedFormatError(msg, file_path=path) from None

    @classmethod
    def from_name(cls, name: str) -> ArchiveFormat:
        """Look up a format by its name, e.g. ``"zip"`` or ``".7z"``."""
        try:
            return cls(name.lower().lstrip("."))
        except ValueError:
            msg = f"Unsupported format: {name}"
            raise UnsupportedFormatError(msg) from None

    def require_extract(self, path: Path) -> None:
        if not self.can_extract:
            msg = f"Extracting {self.value} archives is not implemented yet: {path.name}"
            raise FormatNotImplementedError(msg, file_path=path)

    def require_create(self) -> None:
        if not self.creatable:
            msg = f"Creating {self.value} archives is not supported"
            raise UnsupportedFormatError(msg)
        if not self.can_create:
            msg = f"Creating {self.value} archives is not implemented yet"
            raise FormatNotImplementedError(msg)


def is_archive(path: Path) -> bool:
    """Return True if the suffix names a known archive format."""
    return path.suffix.lower().lstrip(".") in {f.value for f in ArchiveFormat}
