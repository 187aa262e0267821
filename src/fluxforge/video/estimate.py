"""GIF output size estimation."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from ..core.base import InvalidRequestError

LOG = logging.getLogger(__name__)

MIN_QUALITY = 1
MAX_QUALITY = 5

# Average encoded bytes per output pixel per frame, by quality tier
BYTES_PER_PIXEL = {
    1: 0.05,
    2: 0.08,
    3: 0.12,
    4: 0.18,
    5: 0.25,
}
DEFAULT_BYTES_PER_PIXEL = BYTES_PER_PIXEL[3]

BYTES_PER_MB = 1024 * 1024


@dataclass
class GifOptions:
    """Parameters of a video to GIF conversion."""

    start_time: float
    end_time: float
    width: int
    height: int
    fps: int = 10
    quality: int = 3
    output_name: str = ""

    @property
    def duration(self) -> float:
        return self.end_time - self.start_time

    def validate(self) -> None:
        """Reject requests that cannot produce a GIF."""
        problems = []
        if self.start_time < 0:
            problems.append(f"start time must not be negative (got {self.start_time})")
        if self.end_time <= self.start_time:
            problems.append(f"end time must be after start time (got {self.start_time}..{self.end_time})")
        if self.width <= 0 or self.height <= 0:
            problems.append(f"size must be positive (got {self.width}x{self.height})")
        if self.fps <= 0:
            problems.append(f"frame rate must be positive (got {self.fps})")
        if not MIN_QUALITY <= self.quality <= MAX_QUALITY:
            problems.append(f"quality must be between {MIN_QUALITY} and {MAX_QUALITY} (got {self.quality})")

        if problems:
            msg = "Invalid GIF request: " + "; ".join(problems)
            raise InvalidRequestError(msg)


@dataclass
class GifEstimate:
    """Predicted GIF size. Advisory only."""

    estimated_size_mb: float
    duration_seconds: float
    frame_count: int
    estimated_bytes: float = 0.0


def bytes_per_pixel(quality: int) -> float:
    """Bytes per pixel for a quality tier; unknown tiers use the tier 3 value."""
    return BYTES_PER_PIXEL.get(quality, DEFAULT_BYTES_PER_PIXEL)


def round_half_up(value: float, digits: int = 1) -> float:
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


def estimate_gif_size(options: GifOptions) -> GifEstimate:
    """
    Estimate output size with a coarse per-pixel model.

    ``frames = floor(duration * fps)`` and
    ``bytes = width * height * bytes_per_pixel(quality) * frames``.
    This does not simulate the encoder; treat the number as a rough preview.
    Negative durations count as zero frames.
    """
    duration = max(0.0, options.duration)
    frame_count = max(0, math.floor(duration * options.fps))

    estimated_bytes = options.width * options.height * bytes_per_pixel(options.quality) * frame_count
    estimated_mb = round_half_up(estimated_bytes / BYTES_PER_MB)

    LOG.debug(
        "Estimated %d frames at %dx%d q%d: %.0f bytes",
        frame_count,
        options.width,
        options.height,
        options.quality,
        estimated_bytes,
    )
    return GifEstimate(
        estimated_size_mb=estimated_mb,
        duration_seconds=duration,
        frame_count=frame_count,
        estimated_bytes=estimated_bytes,
    )
