"""
Command-line interface for sortphotos.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .config import Config, RunConfig
from .constants import PROGRAM, exiftool_available, get_console, get_logger
from .core import PhotoSorter
from .history import HistoryManager
from .models import FileOutcome, TransferMode
from .reporter import NORMAL, QUIET, VERBOSE, ConsoleReporter
from .stats import StatsManager


def create_parser(config: Config) -> argparse.ArgumentParser:
    """Create argument parser with dynamic defaults from config."""
    last_sources = config.get_last_sources()
    last_target = config.get_last_target()

    paths_help = "One or more source directories or files, followed by the target directory"
    if last_sources and last_target:
        paths_help += f" (default: {' '.join(last_sources)} {last_target})"

    mode = config.get_transfer_mode()
    recursive = config.get_recursive()
    rename = config.get_rename()

    parser = argparse.ArgumentParser(
        prog="sort-photos",
        description="Sort photos into a YEAR/MONTH/DAY tree by the date they were taken",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Examples:
  sort-photos ~/Camera ~/Pictures/Sorted
  sort-photos -r --move card1/ card2/ ~/Pictures/Sorted
  sort-photos -r --fake -v ~/Downloads ~/Pictures/Sorted
        """
    )

    parser.add_argument(
        "paths", nargs="*", metavar="PATH",
        help=paths_help
    )
    parser.add_argument(
        "--recursive", "-r", "-R", dest="recursive", action="store_const", const=True,
        help=f"Operate recursively down each source tree (default: {'yes' if recursive else 'no'})"
    )
    parser.add_argument(
        "--no-recursive", dest="recursive", action="store_const", const=False,
        help="Only sort files directly inside each source"
    )
    transfer = parser.add_mutually_exclusive_group()
    transfer.add_argument(
        "--move", "-m", dest="mode", action="store_const", const=TransferMode.MOVE,
        help=f"Move files into the target (default mode: {mode.value})"
    )
    transfer.add_argument(
        "--copy", "-c", dest="mode", action="store_const", const=TransferMode.COPY,
        help="Copy files into the target, leaving sources untouched"
    )
    parser.add_argument(
        "--fake", "-f", "--dry-run", "-n", dest="fake", action="store_true",
        help="Do everything except actually copying, moving or deleting files"
    )
    parser.add_argument(
        "--no-rename", dest="rename", action="store_const", const=False,
        help=f"Report differing files with the same name as failures instead of renaming "
             f"them (default: {'rename' if rename else 'no-rename'})"
    )
    parser.add_argument(
        "--rename", dest="rename", action="store_const", const=True,
        help="Rename differing files with the same name to NAME-N.EXT"
    )
    parser.add_argument(
        "--unsupported", "-u", metavar="NAME",
        help="Copy/move files without a usable capture date into TARGET/NAME"
    )
    parser.add_argument(
        "--verbose", "-v", action="count", default=0,
        help="Show more output (repeat for debug logging)"
    )
    parser.add_argument(
        "--quiet", "-q", action="store_true",
        help="Show less output"
    )
    parser.add_argument(
        "--yes", "-y", action="store_true",
        help="Auto-confirm processing for saved source/target paths"
    )
    parser.add_argument(
        "--version", "-V", action="store_true",
        help=f"Display the version number of {PROGRAM} and exit"
    )

    return parser


def configure_logging(console: Console, verbose: int) -> logging.Logger:
    """Route program log records to the rich console."""
    logger = get_logger()
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    # Per-file failures reach the console through the reporter, not the log
    console_handler = RichHandler(console=console, show_path=False, markup=False)
    console_handler.setLevel(logging.DEBUG if verbose > 1 else logging.WARNING)
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(console_handler)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    return logger


def validate_paths(sources: List[Path], target: Path, console: Console) -> bool:
    """Check that every source and the target exist before anything is touched."""
    for source in sources:
        if not source.exists():
            console.print(f"Error: Source does not exist: {escape(str(source))}")
            return False

    if not target.exists():
        console.print(f"Error: Target directory does not exist: {escape(str(target))}")
        return False

    if not target.is_dir():
        console.print(f"Error: Target is not a directory: {escape(str(target))}")
        return False

    return True


def show_processing_plan(sources: List[Path], run_config: RunConfig, console: Console) -> None:
    """Display the processing plan before execution."""
    mode = "FAKE" if run_config.fake else run_config.mode.value.upper()

    console.print("\n[bold]Processing Plan:[/bold]")
    for source in sources:
        console.print(f"  Source:          [blue]{escape(str(source))}[/blue]")
    console.print(f"  Target:          [blue]{escape(str(run_config.target))}[/blue]")
    console.print(f"  Processing Mode: [cyan]{mode}[/cyan]")
    if run_config.fake:
        console.print(f"  Would:           [cyan]{run_config.mode.value.upper()}[/cyan]")
    console.print(f"  Recursive:       [cyan]{'Yes' if run_config.recursive else 'No'}[/cyan]")
    console.print(f"  On Conflict:     [cyan]{'Rename' if run_config.rename_on_conflict else 'Fail'}[/cyan]")
    if run_config.unsupported_dir:
        console.print(f"  Unsupported To:  [cyan]{escape(run_config.unsupported_dir)}[/cyan]")
    console.print()


def confirm_processing(console: Console) -> bool:
    """Ask for confirmation when using saved configuration."""
    console.print("[yellow]Confirm processing plan with saved configuration.[/yellow]")

    try:
        response = console.input("Continue? [y/N]: ").strip().lower()
        return response in ['y', 'yes']
    except (EOFError, KeyboardInterrupt):
        console.print("\n[red]Operation cancelled[/red]")
        return False


def print_summary(stats: StatsManager, run_config: RunConfig, console: Console) -> None:
    """Print processing summary."""
    table = Table(title="Processing Summary")
    table.add_column("Category", style="cyan")
    table.add_column("Count", style="green")

    verb = "Moved" if run_config.mode == TransferMode.MOVE else "Copied"
    table.add_row("Directories", str(stats.get_directories()))
    table.add_row(verb, str(stats.get_count(FileOutcome.COPIED) + stats.get_count(FileOutcome.MOVED)))
    table.add_row("Renamed", str(stats.get_count(FileOutcome.RENAMED)))
    if run_config.unsupported_dir:
        table.add_row("Unsupported Routed", str(stats.get_count(FileOutcome.UNSUPPORTED_ROUTED)))
    table.add_row("Duplicates", str(stats.get_duplicates()))
    table.add_row("Unsupported", str(stats.get_count(FileOutcome.UNSUPPORTED)))
    table.add_row("Name Conflicts", str(stats.get_count(FileOutcome.NAME_CONFLICT)
                                        + stats.get_count(FileOutcome.NAME_UNPARSEABLE)))
    table.add_row("Transfer Failures", str(stats.get_count(FileOutcome.TRANSFER_FAILED)
                                           + stats.get_count(FileOutcome.ERROR)))
    if stats.get_listing_failures():
        table.add_row("Unreadable Directories", str(stats.get_listing_failures()))

    # Format total size
    size_mb = stats.get_total_size_mb()
    if size_mb > 1024:
        size_str = f"{size_mb/1024:.1f} GB"
    else:
        size_str = f"{size_mb:.1f} MB"
    table.add_row("Total Size", size_str)

    console.print(table)


def main(config_path: Optional[Path] = None) -> int:
    """Main entry point.

    Args:
        config_path: Optional path to config file (for testing)
    """
    config = Config(config_path=config_path)
    parser = create_parser(config)
    args = parser.parse_args()

    if args.version:
        from . import __version__
        print(f"{PROGRAM} {__version__}")
        return 0

    console = get_console()
    logger = configure_logging(console, args.verbose)

    # Determine sources and target, falling back to the saved ones
    using_saved_config = not args.paths
    if args.paths:
        if len(args.paths) < 2:
            parser.error("At least one source and a target path are required")
        source_args, target_arg = args.paths[:-1], args.paths[-1]
    else:
        source_args, target_arg = config.get_last_sources(), config.get_last_target()
        if not source_args or not target_arg:
            parser.error("Source and target paths are required")

    sources = [Path(s).expanduser().resolve() for s in source_args]
    target = Path(target_arg).expanduser().resolve()

    if not validate_paths(sources, target, console):
        return 1

    recursive = args.recursive if args.recursive is not None else config.get_recursive()
    mode = args.mode or config.get_transfer_mode()
    rename = args.rename if args.rename is not None else config.get_rename()

    # Remember paths and explicitly chosen settings
    config.update_paths([str(s) for s in sources], str(target))
    if args.recursive is not None:
        config.update_recursive(args.recursive)
    if args.mode is not None:
        config.update_transfer_mode(args.mode)
    if args.rename is not None:
        config.update_rename(args.rename)

    run_config = RunConfig(
        target=target,
        recursive=recursive,
        mode=mode,
        fake=args.fake,
        rename_on_conflict=rename,
        unsupported_dir=args.unsupported,
    )

    verbosity = QUIET if args.quiet else (VERBOSE if args.verbose else NORMAL)

    if verbosity > QUIET:
        show_processing_plan(sources, run_config, console)

    if using_saved_config and not args.yes:
        if not confirm_processing(console):
            return 0

    if not exiftool_available():
        logger.warning("exiftool not found; files without a readable capture date are unsupported")

    history = HistoryManager(target=target, root_dir=config.program_root, dry_run=args.fake)
    history.attach_logger(logger)
    logger.info(f"Starting run: {', '.join(str(s) for s in sources)} -> {target}")
    logger.info(f"Mode: {'FAKE ' if args.fake else ''}{mode.value.upper()}")

    reporter = ConsoleReporter(console, verbosity=verbosity, mode=mode, fake=args.fake)
    sorter = PhotoSorter(run_config, reporter=reporter)
    stats = StatsManager()

    try:
        for source in sources:
            for report in sorter.sort(source):
                stats.record_directory(report)

        if verbosity > QUIET:
            print_summary(stats, run_config, console)

        history.log_run_summary(sources, stats, mode.value)

        if verbosity == QUIET:
            return 0
        if args.fake:
            console.print("\n[green]✓ Fake run completed, no files were changed.[/green]")
        elif stats.has_errors():
            console.print(f"\n[green]✓ Processing completed.[/green] "
                          f"[yellow]({stats.get_failures()} files failed)[/yellow]")
        else:
            console.print("\n[green]✓ Processing completed successfully![/green]")
        return 0

    except KeyboardInterrupt:
        console.print("\n[red]Operation cancelled by user[/red]")
        return 1
    finally:
        history.detach_logger(logger)


if __name__ == "__main__":
    sys.exit(main())
