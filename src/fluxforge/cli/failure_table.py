"""Shared result table display for batch CLI commands."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..core import ProcessingResult

# Constants for table formatting
MAX_FILENAME_LENGTH = 37
FILENAME_TRUNCATE_LENGTH = 34
MAX_ERROR_MSG_LENGTH = 60
ERROR_MSG_TRUNCATE_LENGTH = 57


def _truncate(text: str, limit: int, keep: int) -> str:
    return text if len(text) <= limit else text[:keep] + "..."


def print_failure_table(failed_results: list[ProcessingResult], media_type: str = "file") -> None:
    """
    Print a simple table showing failed items.

    Args:
        failed_results: ProcessingResult objects with error status
        media_type: Kind of input ("archive", "video" or "file")

    """
    if not failed_results:
        return

    print("\n" + "=" * 100)
    print(f"{'FAILURES':^100}")
    print("=" * 100)
    print(f"Total failed: {len(failed_results)} files\n")

    print(f"{'FILE':<40} | {'ERROR':<57}")
    print("-" * 100)

    for result in failed_results:
        filename = _truncate(result.source_file.name, MAX_FILENAME_LENGTH, FILENAME_TRUNCATE_LENGTH)
        error_msg = _truncate(result.message or "Unknown error", MAX_ERROR_MSG_LENGTH, ERROR_MSG_TRUNCATE_LENGTH)
        print(f"{filename:<40} | {error_msg:<57}")

    tips = {
        "video": "TIP: Check that ffmpeg is installed and the time range lies inside the video",
        "archive": "TIP: Encrypted archives need --password; only zip archives can be extracted",
        "file": "TIP: Run with -v for details",
    }
    print(f"\n{tips.get(media_type, tips['file'])}\n")
