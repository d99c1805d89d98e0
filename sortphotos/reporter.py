"""Console status lines for processed files and finished directories."""

from pathlib import Path

from rich.console import Console
from rich.markup import escape

from .models import DirectoryReport, FileOutcome, FileResult, TransferMode

QUIET, NORMAL, VERBOSE = 0, 1, 2

# Markup style for each outcome
OUTCOME_STYLES = {
    FileOutcome.COPIED: "green",
    FileOutcome.MOVED: "green",
    FileOutcome.RENAMED: "cyan",
    FileOutcome.UNSUPPORTED_ROUTED: "cyan",
    FileOutcome.DUPLICATE_SKIPPED: "dim",
    FileOutcome.DUPLICATE_REMOVED: "dim",
}


class Reporter:
    """Receives progress events from the walker; the default ignores them."""

    def directory_started(self, path: Path, entry_count: int) -> None:
        pass

    def file_processed(self, result: FileResult) -> None:
        pass

    def directory_finished(self, report: DirectoryReport) -> None:
        pass

    def listing_failed(self, path: Path, error: str) -> None:
        pass


class ConsoleReporter(Reporter):
    """Prints status lines with rich, according to verbosity.

    Quiet prints nothing, normal prints directory summaries and failed
    files, verbose prints every file.
    """

    def __init__(self, console: Console, verbosity: int = NORMAL,
                 mode: TransferMode = TransferMode.COPY, fake: bool = False):
        self.console = console
        self.verbosity = verbosity
        self.verb = "moved" if mode == TransferMode.MOVE else "copied"
        self.prefix = "[FAKE] " if fake else ""

    def directory_started(self, path: Path, entry_count: int) -> None:
        if self.verbosity >= VERBOSE:
            self.console.print(f"[bold]{escape(str(path))}[/bold] : {entry_count} entries")

    def file_processed(self, result: FileResult) -> None:
        if self.verbosity >= VERBOSE or (self.verbosity >= NORMAL and result.outcome.is_failure):
            self.console.print(self.format_result(result))

    def directory_finished(self, report: DirectoryReport) -> None:
        if self.verbosity >= NORMAL:
            self.console.print(escape(self.prefix + report.summary(self.verb)))

    def listing_failed(self, path: Path, error: str) -> None:
        if self.verbosity >= NORMAL:
            self.console.print(f"[red]Failed to open {escape(str(path))}: {escape(error)}[/red]")

    def format_result(self, result: FileResult) -> str:
        """Render one file's outcome as a markup line."""
        source = escape(self.prefix + str(result.source))
        if result.destination is not None and result.outcome.is_success:
            line = f"{source} --> {escape(str(result.destination))}"
        else:
            line = f"{source} : {escape(result.outcome.value)}"
        if result.message:
            line += f" ({escape(result.message)})"

        style = "red" if result.outcome.is_failure else OUTCOME_STYLES.get(result.outcome)
        if style:
            return f"[{style}]{line}[/{style}]"
        return line
