"""
Run history: per-run log files and the global runs.log audit trail.
"""

import logging
import re
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from .stats import StatsManager


class HistoryManager:
    """Manages the per-run log folder and the summary line for each run."""

    def __init__(self, target: Path, root_dir: Path, dry_run: bool = False):
        self.target = target
        self.root_dir = root_dir
        self.dry_run = dry_run
        self.history_dir = self.root_dir / "history"
        self.runs_log = self.root_dir / "runs.log"
        self.run_folder: Optional[Path] = None
        self.run_log: Optional[Path] = None
        self._handler: Optional[logging.Handler] = None

        # Fake runs leave no trace on disk
        if not dry_run:
            self._setup_run_folder()

    def _setup_run_folder(self) -> None:
        """Create a dated run folder, adding a counter on collisions."""
        timestamp = datetime.now().strftime("%Y-%m-%d")
        base_name = f"{timestamp}+{self._sanitize_name(self.target)}"

        folder_name = base_name
        folder = self.history_dir / folder_name
        counter = 1
        while folder.exists() and any(folder.iterdir()):
            folder_name = f"{base_name}-{counter:02d}"
            folder = self.history_dir / folder_name
            counter += 1

        folder.mkdir(parents=True, exist_ok=True)
        self.run_folder = folder
        self.run_log = folder / "sort.log"

    @staticmethod
    def _sanitize_name(path: Path) -> str:
        """Convert a path to a safe folder name."""
        sanitized = re.sub(r'[^\w\-_]', '-', path.name)
        sanitized = re.sub(r'-+', '-', sanitized)
        return sanitized.strip('-') or "target"

    def attach_logger(self, logger: logging.Logger) -> None:
        """Send everything the logger emits to this run's log file."""
        if self.run_log is None:
            return

        self._handler = logging.FileHandler(self.run_log, encoding='utf-8')
        self._handler.setLevel(logging.DEBUG)
        self._handler.setFormatter(logging.Formatter(
            '%(asctime)s [%(name)s] %(levelname)s: %(message)s'
        ))
        logger.addHandler(self._handler)
        logger.setLevel(logging.DEBUG)

    def detach_logger(self, logger: logging.Logger) -> None:
        if self._handler is not None:
            logger.removeHandler(self._handler)
            self._handler.close()
            self._handler = None

    def log_run_summary(self, sources: List[Path], stats: StatsManager, mode: str) -> None:
        """Append a one-line summary of the run to runs.log."""
        if self.dry_run:
            return

        self.root_dir.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        status = "PARTIAL" if stats.has_errors() else "SUCCESS"
        source_list = ", ".join(str(s) for s in sources)

        summary = (
            f"{timestamp} | {status} | {mode.upper()} | "
            f"Sources: {source_list} | Target: {self.target} | "
            f"Files: {stats.get_total_files()} | Transferred: {stats.get_successes()} | "
            f"Duplicates: {stats.get_duplicates()} | Failed: {stats.get_failures()} | "
            f"Size: {stats.get_total_size_mb():.1f}MB | History: {self.run_folder.name}\n"
        )

        with open(self.runs_log, 'a', encoding='utf-8') as f:
            f.write(summary)
