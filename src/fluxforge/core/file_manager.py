"""File helpers for writing outputs without leaving partial files behind."""

from __future__ import annotations

import logging
import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator

LOG = logging.getLogger(__name__)


def remove_partial(path: Path) -> None:
    """Remove a partially written file, logging instead of raising."""
    try:
        path.unlink(missing_ok=True)
        LOG.debug("Removed partial output: %s", path)
    except OSError as e:
        LOG.warning("Failed to remove partial output %s: %s", path, e)


@contextmanager
def atomic_output(target: Path) -> Iterator[Path]:
    """
    Yield a temporary path next to ``target`` and move it into place on success.

    The temporary file lives in the destination folder so the final rename
    stays on one filesystem. An existing ``target`` is replaced. If the body
    raises, the temporary file is removed and ``target`` is left untouched.
    """
    fd, temp_name = tempfile.mkstemp(prefix=f".{target.name}.", suffix=".part", dir=target.parent)
    os.close(fd)
    temp_path = Path(temp_name)

    try:
        yield temp_path
        os.replace(temp_path, target)
    except BaseException:
        remove_partial(temp_path)
        raise

    LOG.debug("Atomically wrote %s", target)
