"""
System constants that should never change.

These are technical limits and fixed names, not user preferences.
User-configurable values belong in config.yaml instead.
"""

APP_NAME = "FluxForge"
CONFIG_FILE_NAME = "config.yaml"
CONFIG_ENV_VAR = "FLUXFORGE_CONFIG"

VERBOSE_LOGGING_THRESHOLD = 2  # -vv switches to debug output with logger names

DEFAULT_VIDEO_WIDTH = 1920
DEFAULT_VIDEO_HEIGHT = 1080
DEFAULT_VIDEO_FPS = 30.0

PROBE_TIMEOUT_SECONDS = 30
COPY_CHUNK_SIZE = 1024 * 1024

VALID_THEMES = ("dark", "light")
