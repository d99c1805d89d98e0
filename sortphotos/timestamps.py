"""Capture-time extraction and validation of EXIF date-time strings."""

import json
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Tuple

from .constants import CAPTURE_TIME_TAGS, EXIFTOOL_TIMEOUT, exiftool_available, get_logger

logger = get_logger()

# Characters accepted between the six numeric fields
DATE_SEPARATORS = frozenset("-: ")

# Width of each field: year, month, day, hour, minute, second
FIELD_WIDTHS = (4, 2, 2, 2, 2, 2)


@dataclass(frozen=True)
class CaptureDate:
    """Date and time a photo was captured."""

    year: int
    month: int
    day: int
    hour: int = 0
    minute: int = 0
    second: int = 0

    @property
    def is_valid(self) -> bool:
        return self.year > 0 and self.month > 0 and self.day > 0

    def path_parts(self) -> Tuple[str, str, str]:
        """Year, month and day as destination path segments."""
        return f"{self.year:04d}", f"{self.month:02d}", f"{self.day:02d}"

    def __str__(self) -> str:
        return (f"{self.year:04d}:{self.month:02d}:{self.day:02d} "
                f"{self.hour:02d}:{self.minute:02d}:{self.second:02d}")


def _split_fields(text: str) -> Optional[Tuple[int, ...]]:
    """Read six fixed-width numeric fields separated by one of DATE_SEPARATORS.

    Anything after the seconds field (sub-seconds, offsets) is ignored.
    """
    fields = []
    pos = 0
    for index, width in enumerate(FIELD_WIDTHS):
        if index > 0:
            if pos >= len(text) or text[pos] not in DATE_SEPARATORS:
                return None
            pos += 1

        digits = text[pos:pos + width]
        if len(digits) != width or not all(c in "0123456789" for c in digits):
            return None
        fields.append(int(digits))
        pos += width

    return tuple(fields)


def parse_capture_date(raw: Optional[str]) -> Optional[CaptureDate]:
    """Parse a raw capture timestamp, returning None when it is unsupported.

    Accepts ``YYYY:MM:DD HH:MM:SS`` and ISO-like variants where any of ``-``,
    ``:`` or a space separates the fields. Dates whose year, month or day is
    zero are rejected.
    """
    if not raw:
        return None

    fields = _split_fields(raw.lstrip())
    if fields is None:
        return None

    date = CaptureDate(*fields)
    if not date.is_valid:
        return None
    return date


def canonical_exif_date(tags: Dict[str, str]) -> Optional[str]:
    """Pick the capture time from exiftool tags, original capture first.

    Placeholder values such as ``0000:00:00 00:00:00`` are skipped so a
    valid creation date can still be used.
    """
    for tag in CAPTURE_TIME_TAGS:
        value = tags.get(tag)
        if isinstance(value, str) and parse_capture_date(value) is not None:
            return value.strip()
    return None


def read_capture_time(image_path: Path) -> Optional[str]:
    """Get the raw capture-time string for a file using exiftool."""
    if not exiftool_available():
        return None

    try:
        result = subprocess.run([
            "exiftool",
            "-q",
            "-json",
            *[f"-{tag}" for tag in CAPTURE_TIME_TAGS],
            str(image_path)],
            capture_output=True, text=True, check=True, timeout=EXIFTOOL_TIMEOUT
        )
    except subprocess.CalledProcessError as e:
        logger.debug(f"exiftool failed for {image_path}: {e}")
        return None
    except subprocess.TimeoutExpired:
        logger.warning(f"exiftool timed out reading {image_path}")
        return None

    try:
        tags = json.loads(result.stdout)[0]
    except (json.JSONDecodeError, IndexError) as e:
        logger.debug(f"Unreadable exiftool output for {image_path}: {e}")
        return None

    return canonical_exif_date(tags)
