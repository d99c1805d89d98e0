"""
Statistics tracking and management for photo sorting operations.
"""

from typing import Dict

from .models import DirectoryReport, FileOutcome


class StatsManager:
    """Aggregates the directory reports of a whole run."""

    def __init__(self):
        self._stats = {outcome: 0 for outcome in FileOutcome}
        self._directories = 0
        self._listing_failures = 0
        self._total_size = 0

    def record_directory(self, report: DirectoryReport) -> None:
        """Add a finished (or unreadable) directory's counts to the totals."""
        if report.listing_error is not None:
            self._listing_failures += 1
            return

        self._directories += 1
        for outcome, count in report.outcomes.items():
            self._stats[outcome] += count
        self._total_size += report.bytes_transferred

    def get_stats(self) -> Dict[str, int]:
        """Get a copy of current statistics keyed by outcome name."""
        return {outcome.value: count for outcome, count in self._stats.items()}

    def get_count(self, outcome: FileOutcome) -> int:
        return self._stats[outcome]

    def get_successes(self) -> int:
        return sum(n for outcome, n in self._stats.items() if outcome.is_success)

    def get_duplicates(self) -> int:
        return sum(n for outcome, n in self._stats.items() if outcome.is_duplicate)

    def get_failures(self) -> int:
        return sum(n for outcome, n in self._stats.items() if outcome.is_failure)

    def get_total_files(self) -> int:
        return sum(self._stats.values())

    def get_directories(self) -> int:
        return self._directories

    def get_listing_failures(self) -> int:
        return self._listing_failures

    def get_total_size_mb(self) -> float:
        """Get total transferred size in megabytes."""
        return self._total_size / (1024 * 1024)

    def has_errors(self) -> bool:
        """Check if any file or directory failed."""
        return self.get_failures() > 0 or self._listing_failures > 0
