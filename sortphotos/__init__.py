"""
sortphotos - Sort photos into a year/month/day folder structure.

Copies or moves photos from one or more source trees into
TARGET/YYYY/MM/DD based on the date each photo was taken, telling true
duplicates apart from name collisions by content checksum.
"""

__version__ = "0.6.0"


# Public API
from .cli import main
from .config import Config, RunConfig
from .core import PhotoSorter
from .file_operations import DryRunOperations, FileOperations
from .models import DirectoryReport, FileOutcome, TransferMode
from .timestamps import CaptureDate, parse_capture_date

__all__ = [ "main", "Config", "RunConfig", "PhotoSorter", "DryRunOperations", "FileOperations",
            "DirectoryReport", "FileOutcome", "TransferMode", "CaptureDate", "parse_capture_date" ]
