"""
Resolution of occupied destinations: duplicate, rename or conflict.
"""

import enum
from dataclasses import dataclass
from itertools import count
from pathlib import Path
from typing import Optional

from .checksum import are_identical
from .constants import get_logger
from .destination import numbered_name, split_photo_name
from .file_operations import TransferBackend


class Resolution(enum.Enum):
    IDENTICAL = "identical"
    RENAMED = "renamed"
    NAME_CONFLICT = "name-conflict"
    UNPARSEABLE_NAME = "unparseable-name"


@dataclass(frozen=True)
class ConflictResult:
    """How an occupied destination was resolved.

    destination is the existing identical file for IDENTICAL, the free
    suffixed path for RENAMED, and None for the failure states.
    """

    resolution: Resolution
    destination: Optional[Path] = None


class ConflictResolver:
    """Decides between duplicate and collision for an occupied destination.

    Identical content (full checksum) is a duplicate. Differing content is
    either renamed with the smallest free ``-N`` suffix or reported as a
    name conflict when renaming is disabled.
    """

    def __init__(self, backend: TransferBackend, rename_on_conflict: bool = True):
        self.backend = backend
        self.rename_on_conflict = rename_on_conflict
        self.logger = get_logger()

    def is_identical(self, source: Path, existing: Path) -> bool:
        existing_content = self.backend.content_path(existing)
        if not existing_content.exists():
            # Dangling symlink: occupied but holds nothing to compare
            return False
        return are_identical(self.backend.content_path(source), existing_content)

    def resolve(self, source: Path, destination: Path) -> ConflictResult:
        """Resolve a destination that already exists."""
        if self.is_identical(source, destination):
            return ConflictResult(Resolution.IDENTICAL, destination)

        if not self.rename_on_conflict:
            self.logger.debug(f"Name conflict (rename disabled): {source} -> {destination}")
            return ConflictResult(Resolution.NAME_CONFLICT)

        parts = split_photo_name(destination.name)
        if parts is None:
            self.logger.debug(f"Cannot derive a new name for {destination.name}")
            return ConflictResult(Resolution.UNPARSEABLE_NAME)

        stem, extension = parts
        for number in count(1):
            candidate = destination.parent / numbered_name(stem, extension, number)
            if not self.backend.exists(candidate):
                self.logger.debug(f"Renaming {source.name} -> {candidate.name}")
                return ConflictResult(Resolution.RENAMED, candidate)

            # An earlier run may already have renamed this same content
            if self.is_identical(source, candidate):
                return ConflictResult(Resolution.IDENTICAL, candidate)
