"""
Data types passed between the walker, conflict resolver and transfer executor.
"""

import enum
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional


class TransferMode(enum.Enum):
    COPY = "copy"
    MOVE = "move"


class TransferAction(enum.Enum):
    """What the executor is asked to do with one file."""

    COPY = "copy"
    MOVE = "move"
    SKIP_DUPLICATE = "skip-duplicate"
    SKIP_CONFLICT = "skip-conflict"
    RENAME = "rename"  # Transfer with the run's mode to a suffixed name


class FileOutcome(enum.Enum):
    """Final classification of one processed file."""

    COPIED = "copied"
    MOVED = "moved"
    RENAMED = "renamed"
    UNSUPPORTED_ROUTED = "unsupported-routed"
    DUPLICATE_SKIPPED = "duplicate-skipped"
    DUPLICATE_REMOVED = "duplicate-removed"
    UNSUPPORTED = "unsupported"
    NAME_CONFLICT = "name-conflict"
    NAME_UNPARSEABLE = "name-unparseable"
    TRANSFER_FAILED = "transfer-failed"
    ERROR = "error"

    @property
    def is_duplicate(self) -> bool:
        return self in (FileOutcome.DUPLICATE_SKIPPED, FileOutcome.DUPLICATE_REMOVED)

    @property
    def is_success(self) -> bool:
        return self in (FileOutcome.COPIED, FileOutcome.MOVED,
                        FileOutcome.RENAMED, FileOutcome.UNSUPPORTED_ROUTED)

    @property
    def is_failure(self) -> bool:
        return not (self.is_success or self.is_duplicate)


@dataclass(frozen=True)
class SourceEntry:
    """One filesystem entry discovered by the walker."""

    path: Path
    is_directory: bool


@dataclass(frozen=True)
class TransferPlan:
    """Where one file goes and how it gets there."""

    source: Path
    destination: Path
    action: TransferAction


@dataclass(frozen=True)
class FileResult:
    """Outcome of processing a single source file."""

    source: Path
    outcome: FileOutcome
    destination: Optional[Path] = None
    message: str = ""
    size: int = 0


@dataclass
class DirectoryReport:
    """Per-directory success/failure counts, returned by the walker."""

    path: Path
    success_count: int = 0
    failure_count: int = 0
    duplicate_count: int = 0
    bytes_transferred: int = 0
    listing_error: Optional[str] = None
    outcomes: Counter = field(default_factory=Counter)

    @property
    def file_count(self) -> int:
        return self.success_count + self.failure_count + self.duplicate_count

    def record(self, result: FileResult) -> None:
        """Fold one file's outcome into the counts."""
        self.outcomes[result.outcome] += 1
        if result.outcome.is_duplicate:
            self.duplicate_count += 1
        elif result.outcome.is_success:
            self.success_count += 1
            self.bytes_transferred += result.size
        else:
            self.failure_count += 1

    def summary(self, verb: str = "copied") -> str:
        """Format the line shown once a directory is done."""
        line = f"{self.path} : {self.success_count} {verb}, {self.failure_count} failed"
        if self.duplicate_count:
            line += f", {self.duplicate_count} duplicates"
        return line
