"""Worker count heuristics for batch runs, based on current system load."""

from __future__ import annotations

import logging
import time
from typing import Literal

import psutil

LOG = logging.getLogger(__name__)

MediaType = Literal["archive", "video"]

# Temperature thresholds (Celsius)
VIDEO_TEMP_HIGH = 65
VIDEO_TEMP_MODERATE = 55

# Memory usage thresholds (percentage)
VIDEO_MEMORY_THRESHOLD = 75
ARCHIVE_MEMORY_THRESHOLD = 85

# Default worker limits
VIDEO_DEFAULT_WORKERS = 2
ARCHIVE_DEFAULT_WORKERS = 4
VIDEO_FALLBACK_WORKERS = 1
ARCHIVE_FALLBACK_WORKERS = 2

# CPU load above which the worker count is halved
VIDEO_CPU_THRESHOLD = 60
ARCHIVE_CPU_THRESHOLD = 80


def get_thermal_safe_worker_count(configured_workers: int | None, media_type: MediaType = "archive") -> int:
    """
    Get a number of workers that doesn't overwhelm the system.

    Transcoding is CPU bound and each ffmpeg process is already multi-threaded,
    so video runs use few workers. Archive work is mostly I/O bound and gets more.

    Args:
        configured_workers: The configured worker count, or None for auto-detection
        media_type: Kind of work in the batch

    Returns:
        Number of workers to use, at least 1

    """
    limit = _get_system_limit(media_type)

    if configured_workers is not None and configured_workers > 0:
        safe_workers = min(configured_workers, limit)
        if safe_workers < configured_workers:
            LOG.warning(
                "Reducing configured workers from %d to %d due to system load for %s processing",
                configured_workers,
                safe_workers,
                media_type,
            )
        return safe_workers

    try:
        physical_cores = psutil.cpu_count(logical=False) or 1
        cpu_percent = psutil.cpu_percent(interval=0.5)
    except (OSError, AttributeError, ValueError) as e:
        LOG.warning("Failed to detect system specs with psutil: %s. Using 1 worker.", e)
        return 1

    if media_type == "video":
        max_workers = max(1, physical_cores // 3)
        cpu_threshold = VIDEO_CPU_THRESHOLD
    else:
        max_workers = max(1, physical_cores)
        cpu_threshold = ARCHIVE_CPU_THRESHOLD

    if cpu_percent > cpu_threshold:
        max_workers = max(1, max_workers // 2)
        LOG.warning("High CPU load detected (%.1f%%), reducing %s workers to %d", cpu_percent, media_type, max_workers)

    max_workers = min(max_workers, limit)
    LOG.info(
        "%s batch: %d physical cores, CPU load %.1f%%, using %d workers",
        media_type.title(),
        physical_cores,
        cpu_percent,
        max_workers,
    )
    return max_workers


def _get_max_temperature() -> float:
    """Get maximum current temperature from all available sensors."""
    if not hasattr(psutil, "sensors_temperatures"):
        return 0.0

    temps = psutil.sensors_temperatures()
    if not temps:
        return 0.0

    return max((entry.current or 0.0 for entries in temps.values() for entry in entries), default=0.0)


def _get_system_limit(media_type: MediaType) -> int:
    """Upper bound on workers from temperature and memory pressure."""
    fallback = VIDEO_FALLBACK_WORKERS if media_type == "video" else ARCHIVE_FALLBACK_WORKERS
    try:
        if media_type == "video":
            max_temp = _get_max_temperature()
            if max_temp > VIDEO_TEMP_HIGH:
                return 1
            if max_temp > VIDEO_TEMP_MODERATE:
                return 2

        threshold = VIDEO_MEMORY_THRESHOLD if media_type == "video" else ARCHIVE_MEMORY_THRESHOLD
        if psutil.virtual_memory().percent > threshold:
            return fallback
    except (OSError, AttributeError, ValueError):
        return fallback

    return VIDEO_DEFAULT_WORKERS if media_type == "video" else ARCHIVE_DEFAULT_WORKERS


def check_thermal_throttling(media_type: MediaType) -> None:
    """Pause briefly when the CPU is saturated during a video batch."""
    if media_type != "video":
        return
    try:
        cpu_percent = psutil.cpu_percent(interval=0.1)
    except (OSError, AttributeError):
        LOG.debug("Could not check CPU load during %s processing", media_type)
        return

    if cpu_percent > 85:
        LOG.warning("High CPU usage detected during %s processing: %.1f%%", media_type, cpu_percent)
        time.sleep(1.0)
