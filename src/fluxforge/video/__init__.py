"""Video probing helpers, GIF estimation and GIF conversion."""

from .estimate import GifEstimate, GifOptions, bytes_per_pixel, estimate_gif_size
from .transcode import build_gif_filter, convert_video_to_gif, gif_ffmpeg_cmd

__all__ = [
    "GifEstimate",
    "GifOptions",
    "build_gif_filter",
    "bytes_per_pixel",
    "convert_video_to_gif",
    "estimate_gif_size",
    "gif_ffmpeg_cmd",
]
