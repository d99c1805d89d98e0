"""
Transfer backends: the only code that mutates the filesystem.

FileOperations performs real copies, moves and deletions. DryRunOperations
records the same requests without touching disk, so the rest of the pipeline
never needs to know whether it is running in fake mode.
"""

import abc
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Set

from .constants import get_logger


class TransferBackend(abc.ABC):
    """Filesystem capability used by the conflict resolver and executor."""

    dry_run = False

    def exists(self, path: Path) -> bool:
        """Whether a file is (or would be) present at path.

        A dangling symlink counts as present; writing through it would land
        outside the target tree.
        """
        return path.exists() or path.is_symlink()

    def content_path(self, path: Path) -> Path:
        """Path whose bytes represent the content at path."""
        return path

    @abc.abstractmethod
    def ensure_directory(self, directory: Path) -> None:
        ...

    @abc.abstractmethod
    def copy_file(self, source: Path, dest: Path) -> None:
        ...

    @abc.abstractmethod
    def move_file(self, source: Path, dest: Path) -> None:
        ...

    @abc.abstractmethod
    def delete_file(self, path: Path) -> None:
        ...


class FileOperations(TransferBackend):
    """Real backend: copy, move and delete files on disk."""

    def __init__(self):
        self.logger = get_logger()

    def ensure_directory(self, directory: Path) -> None:
        """Create directory and parents if needed."""
        if not directory.exists():
            directory.mkdir(parents=True, exist_ok=True)

    def copy_file(self, source: Path, dest: Path) -> None:
        """Copy bytes and metadata, leaving the source in place."""
        try:
            shutil.copy2(str(source), str(dest))
        except Exception:
            # Never leave a truncated copy behind
            if dest.exists():
                dest.unlink()
            raise

        if not dest.exists():
            raise FileNotFoundError(f"File not found after copy: {dest}")

    def move_file(self, source: Path, dest: Path) -> None:
        """Relocate a file, across filesystems if necessary."""
        shutil.move(str(source), str(dest))

        # Verify the operation
        if not dest.exists():
            raise FileNotFoundError(f"File not found after move: {dest}")
        if source.exists():
            raise FileExistsError(f"Source file still exists after move: {source}")

    def delete_file(self, path: Path) -> None:
        path.unlink()


@dataclass(frozen=True)
class RecordedAction:
    """A filesystem mutation requested during a dry run."""

    kind: str  # "mkdir", "copy", "move" or "delete"
    source: Path
    dest: Optional[Path] = None


class DryRunOperations(TransferBackend):
    """Fake backend: records intended actions and always succeeds.

    Planned destinations and removed sources are tracked so later files in
    the same run see the tree as it would look after a real run.
    """

    dry_run = True

    def __init__(self):
        self.actions: List[RecordedAction] = []
        self._planned: Dict[Path, Path] = {}
        self._removed: Set[Path] = set()
        self._directories: Set[Path] = set()

    def exists(self, path: Path) -> bool:
        if path in self._planned:
            return True
        if path in self._removed:
            return False
        return super().exists(path)

    def content_path(self, path: Path) -> Path:
        return self._planned.get(path, path)

    def ensure_directory(self, directory: Path) -> None:
        if not directory.exists() and directory not in self._directories:
            self._directories.add(directory)
            self.actions.append(RecordedAction("mkdir", directory))

    def copy_file(self, source: Path, dest: Path) -> None:
        self.actions.append(RecordedAction("copy", source, dest))
        self._planned[dest] = self.content_path(source)

    def move_file(self, source: Path, dest: Path) -> None:
        self.actions.append(RecordedAction("move", source, dest))
        self._planned[dest] = self.content_path(source)
        self._forget(source)

    def delete_file(self, path: Path) -> None:
        self.actions.append(RecordedAction("delete", path))
        self._forget(path)

    def _forget(self, path: Path) -> None:
        self._planned.pop(path, None)
        self._removed.add(path)


def make_backend(fake: bool) -> TransferBackend:
    """Pick the backend for a run."""
    return DryRunOperations() if fake else FileOperations()
