"""
File extension constants, shared console/logger accessors and tool probing.
"""

import logging
import shutil
import subprocess
from functools import lru_cache
from typing import Optional

from rich.console import Console

PROGRAM = "sortphotos"

# File extension constants
JPG_EXTENSIONS = (".jpg", ".jpeg", ".jpe")
TIFF_EXTENSIONS = (".tif", ".tiff")
RAW_EXTENSIONS = (
    ".3fr", ".arw", ".cr2", ".cr3", ".crw", ".dcr", ".dng", ".erf", ".heic",
    ".heif", ".kdc", ".mef", ".mos", ".mrw", ".nef", ".nrw", ".orf", ".pef",
    ".png", ".raf", ".raw", ".rw2", ".rwl", ".sr2", ".srf", ".srw", ".x3f",
)
PHOTO_EXTENSIONS = JPG_EXTENSIONS + TIFF_EXTENSIONS + RAW_EXTENSIONS

# Tags read from exiftool, in priority order
CAPTURE_TIME_TAGS = ("DateTimeOriginal", "CreateDate")

EXIFTOOL_TIMEOUT = 60  # seconds

_console: Optional[Console] = None


def get_console() -> Console:
    """Return the process-wide rich console."""
    global _console
    if _console is None:
        _console = Console(highlight=False, soft_wrap=True)
    return _console


def get_logger() -> logging.Logger:
    """Return the program logger."""
    return logging.getLogger(PROGRAM)


def check_tool_availability(cmd: str, version_flag: str = "-h") -> bool:
    """Check whether an external command is installed and runs."""
    if shutil.which(cmd) is None:
        return False
    try:
        subprocess.run([cmd, version_flag], capture_output=True, check=True,
                       timeout=EXIFTOOL_TIMEOUT)
        return True
    except (subprocess.CalledProcessError, subprocess.TimeoutExpired, OSError):
        return False


@lru_cache(maxsize=None)
def exiftool_available() -> bool:
    """Probe for exiftool once per process."""
    return check_tool_availability("exiftool", "-ver")
