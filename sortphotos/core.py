"""
Core photo sorting functionality: the per-file pipeline and directory walker.
"""

from collections import deque
from pathlib import Path
from typing import Callable, Deque, Iterator, List, Optional, Tuple

from .config import RunConfig
from .conflicts import ConflictResolver, Resolution
from .constants import get_logger
from .destination import resolve_destination, unsupported_destination
from .file_operations import TransferBackend, make_backend
from .models import (DirectoryReport, FileOutcome, FileResult, SourceEntry,
                     TransferAction, TransferMode, TransferPlan)
from .reporter import Reporter
from .timestamps import parse_capture_date, read_capture_time
from .transfer import TransferError, TransferExecutor

CaptureTimeReader = Callable[[Path], Optional[str]]


class PhotoSorter:
    """Sorts photos into target/YYYY/MM/DD by capture date.

    Each directory's files are fully resolved (classified, conflict-checked
    and transferred) before any of its sub-directories is entered, so renamed
    suffixes are assigned in a deterministic order.
    """

    def __init__(self, config: RunConfig, backend: Optional[TransferBackend] = None,
                 reporter: Optional[Reporter] = None,
                 capture_time_reader: Optional[CaptureTimeReader] = None):
        self.config = config
        self.backend = backend or make_backend(config.fake)
        self.reporter = reporter or Reporter()
        self.read_capture_time = capture_time_reader or read_capture_time
        self.resolver = ConflictResolver(self.backend, config.rename_on_conflict)
        self.executor = TransferExecutor(self.backend, config.mode)
        self.logger = get_logger()
        self._target = config.target.resolve()

    def sort(self, source: Path) -> Iterator[DirectoryReport]:
        """Sort a source directory (or a single file), yielding directory reports."""
        if source.is_dir():
            yield from self.walk(source)
            return

        report = DirectoryReport(source)
        result = self.process_file(source)
        report.record(result)
        self.reporter.file_processed(result)
        self.reporter.directory_finished(report)
        yield report

    def walk(self, directory: Path) -> Iterator[DirectoryReport]:
        """Process a directory, then its deferred sub-directories if recursive."""
        report, pending = self.process_directory(directory)
        if report is not None:
            yield report

        if not pending:
            return

        if not self.config.recursive:
            self.logger.debug(f"Not descending into {len(pending)} sub-directories of {directory}")
            return

        while pending:
            yield from self.walk(pending.popleft())

    def list_entries(self, directory: Path) -> List[SourceEntry]:
        """List the immediate entries of a directory, sorted by name."""
        paths = sorted(directory.iterdir(), key=lambda p: p.name)
        return [SourceEntry(path=p, is_directory=p.is_dir()) for p in paths]

    def process_directory(self, directory: Path) -> Tuple[Optional[DirectoryReport], Deque[Path]]:
        """Process every file in one directory and collect its sub-directories.

        Returns the directory's report (None when it is empty) and the queue
        of sub-directories still to visit.
        """
        pending: Deque[Path] = deque()

        try:
            entries = self.list_entries(directory)
        except OSError as e:
            self.logger.info(f"Failed to open {directory}: {e}")
            self.reporter.listing_failed(directory, str(e))
            return DirectoryReport(directory, listing_error=str(e)), pending

        if not entries:
            return None, pending

        self.reporter.directory_started(directory, len(entries))
        report = DirectoryReport(directory)

        for entry in entries:
            if entry.is_directory:
                if entry.path.is_symlink():
                    self.logger.debug(f"Not following symlinked directory {entry.path}")
                elif self._is_target(entry.path):
                    self.logger.debug(f"Skipping target directory {entry.path}")
                else:
                    pending.append(entry.path)
                continue

            result = self.process_file(entry.path)
            report.record(result)
            self.reporter.file_processed(result)

        self.reporter.directory_finished(report)
        return report, pending

    def process_file(self, file_path: Path) -> FileResult:
        """Run one file through the pipeline; errors become a failed outcome."""
        try:
            return self._process_single_file(file_path)
        except TransferError as e:
            return FileResult(file_path, FileOutcome.TRANSFER_FAILED, message=str(e))
        except Exception as e:
            self.logger.info(f"Error processing {file_path}: {e}")
            return FileResult(file_path, FileOutcome.ERROR, message=str(e))

    def _process_single_file(self, file_path: Path) -> FileResult:
        file_size = file_path.stat().st_size

        try:
            raw_date = self.read_capture_time(file_path)
        except Exception as e:
            self.logger.info(f"Could not read capture time of {file_path}: {e}")
            raw_date = None

        capture_date = parse_capture_date(raw_date)
        moving = self.config.mode == TransferMode.MOVE

        if capture_date is not None:
            destination = resolve_destination(self.config.target, capture_date, file_path.name)
            outcome = FileOutcome.MOVED if moving else FileOutcome.COPIED
        elif self.config.unsupported_dir:
            destination = unsupported_destination(self.config.target, self.config.unsupported_dir,
                                                  file_path.name)
            outcome = FileOutcome.UNSUPPORTED_ROUTED
        else:
            self.logger.info(f"Unsupported: {file_path} (raw date: {raw_date!r})")
            return FileResult(file_path, FileOutcome.UNSUPPORTED,
                              message="unsupported file type or missing capture date")

        # A file already sitting at its own destination must never be deleted
        if file_path.resolve() == destination.resolve():
            plan = TransferPlan(file_path, destination, TransferAction.SKIP_DUPLICATE)
            return self._skip(plan, FileOutcome.DUPLICATE_SKIPPED, "already in place")

        action = self.executor.action_for_mode()

        if self.backend.exists(destination):
            conflict = self.resolver.resolve(file_path, destination)

            if conflict.resolution == Resolution.IDENTICAL:
                return self._handle_duplicate(file_path, conflict.destination)

            if conflict.resolution == Resolution.NAME_CONFLICT:
                plan = TransferPlan(file_path, destination, TransferAction.SKIP_CONFLICT)
                return self._skip(plan, FileOutcome.NAME_CONFLICT,
                                  "destination exists with different content")

            if conflict.resolution == Resolution.UNPARSEABLE_NAME:
                plan = TransferPlan(file_path, destination, TransferAction.SKIP_CONFLICT)
                return self._skip(plan, FileOutcome.NAME_UNPARSEABLE,
                                  "cannot derive a new name for a conflicting file")

            destination = conflict.destination
            action = TransferAction.RENAME
            if outcome != FileOutcome.UNSUPPORTED_ROUTED:
                outcome = FileOutcome.RENAMED

        self.executor.execute(TransferPlan(file_path, destination, action))
        return FileResult(file_path, outcome, destination, size=file_size)

    def _handle_duplicate(self, file_path: Path, existing: Path) -> FileResult:
        """Skip a duplicate, or delete the source in move mode."""
        if self.config.mode == TransferMode.MOVE:
            self.executor.remove_duplicate(file_path)
            return FileResult(file_path, FileOutcome.DUPLICATE_REMOVED, existing,
                              message="duplicate removed")

        plan = TransferPlan(file_path, existing, TransferAction.SKIP_DUPLICATE)
        return self._skip(plan, FileOutcome.DUPLICATE_SKIPPED, "duplicate, skipped")

    def _skip(self, plan: TransferPlan, outcome: FileOutcome, message: str) -> FileResult:
        self.logger.info(f"{plan.action.value}: {plan.source} ({message}: {plan.destination})")
        return FileResult(plan.source, outcome, plan.destination, message=message)

    def _is_target(self, directory: Path) -> bool:
        try:
            return directory.resolve() == self._target
        except OSError:
            return False
