"""Archive extraction and creation."""

from .create import ArchiveOptions, create_archive
from .extract import extract_archive
from .formats import ArchiveFormat, is_archive

__all__ = [
    "ArchiveFormat",
    "ArchiveOptions",
    "create_archive",
    "extract_archive",
    "is_archive",
]
