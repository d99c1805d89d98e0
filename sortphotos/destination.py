"""
Destination paths in the YEAR/MONTH/DAY target tree and photo file names.
"""

from pathlib import Path
from typing import Optional, Tuple

from .constants import PHOTO_EXTENSIONS
from .timestamps import CaptureDate


def resolve_destination(target_root: Path, capture_date: CaptureDate, file_name: str) -> Path:
    """Return target_root/year/month/day/file_name for a valid capture date."""
    if not capture_date.is_valid:
        raise ValueError(f"Invalid capture date: {capture_date}")

    year, month, day = capture_date.path_parts()
    return target_root / year / month / day / file_name


def unsupported_destination(target_root: Path, subtree: str, file_name: str) -> Path:
    """Return the destination for a file routed to the unsupported sub-tree."""
    return target_root / subtree / file_name


def split_photo_name(file_name: str) -> Optional[Tuple[str, str]]:
    """Split a photo file name into (stem, extension) on its last dot.

    Only known photo extensions are recognized; the extension keeps its
    original case and includes the dot. Returns None when the name has no
    stem or an unknown extension.
    """
    stem, dot, ext = file_name.rpartition(".")
    if not dot or not stem:
        return None

    extension = f".{ext}"
    if extension.lower() not in PHOTO_EXTENSIONS:
        return None
    return stem, extension


def numbered_name(stem: str, extension: str, number: int) -> str:
    """Build a collision-free candidate name such as photo-2.jpg."""
    return f"{stem}-{number}{extension}"
