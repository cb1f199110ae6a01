"""
CLI commands for relocating files and undoing a journaled run.
"""

import os
import sys
from pathlib import Path
from typing import Optional, Tuple

import click
from rich.console import Console
from rich.markup import escape
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeRemainingColumn,
)
from rich.table import Table

from ..analysis.category import CategoryExtractor
from ..analysis.scanner import glob_filter
from ..config import get_settings
from ..core.errors import RootAccessError
from ..core.types import FileOutcome, OutcomeStatus, RelocationReport
from ..organization import RelocationStrategy, Relocator, TreeFingerprint
from ..shared.fs_utils import setup_logging

console = Console()

EXIT_FAILURES = 1
EXIT_ROOT_ERROR = 2

_STATUS_LABELS = {
    OutcomeStatus.MOVED: "Moved",
    OutcomeStatus.SKIPPED_NO_CATEGORY: "Skipped (no category)",
    OutcomeStatus.SKIPPED_ALREADY_PLACED: "Skipped (already placed)",
    OutcomeStatus.FAILED_CONFLICT: "Failed (conflict)",
    OutcomeStatus.FAILED_IO: "Failed (I/O)",
    OutcomeStatus.FAILED_INVALID_CATEGORY: "Failed (invalid category)",
}


def display_text(text: str) -> str:
    """Printable, markup-safe rendering of text carrying undecodable filename bytes."""
    raw = text.encode("utf-8", errors="surrogateescape")
    return escape(raw.decode("utf-8", errors="backslashreplace"))


def display_path(path) -> str:
    """Printable, markup-safe rendering of a path that may not be valid UTF-8."""
    return display_text(os.fsdecode(path))


@click.command()
@click.argument("roots", nargs=-1, required=True, type=click.Path())
@click.option(
    "-o",
    "--output",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory that receives the category containers [default: CATSORT_OUTPUT_DIR or .]",
)
@click.option(
    "--pattern",
    default=None,
    help="Glob matched against leaf names [default: CATSORT_FILE_PATTERN or *.txt]",
)
@click.option(
    "--join-char",
    default=None,
    help="Character that replaces path separators in new names [default: -]",
)
@click.option(
    "--journal",
    type=click.Path(file_okay=False),
    default=None,
    help="Write a transaction log here so the run can be rolled back",
)
@click.option(
    "--dry-run",
    is_flag=True,
    default=False,
    help="Preview changes without executing (RECOMMENDED FIRST)",
)
@click.option(
    "--no-verify",
    is_flag=True,
    default=False,
    help="Skip checksum verification of cross-device copies",
)
@click.option(
    "--strict",
    is_flag=True,
    default=False,
    help="Exit non-zero if any file failed",
)
@click.option("-y", "--yes", is_flag=True, default=False, help="Do not ask for confirmation")
@click.option("-v", "--verbose", is_flag=True, default=False, help="Verbose output")
@click.option("-q", "--quiet", is_flag=True, default=False, help="Only log warnings")
def relocate(
    roots: Tuple[str, ...],
    output: Optional[str],
    pattern: Optional[str],
    join_char: Optional[str],
    journal: Optional[str],
    dry_run: bool,
    no_verify: bool,
    strict: bool,
    yes: bool,
    verbose: bool,
    quiet: bool,
) -> None:
    """
    Move categorized files found under ROOTS into category directories.

    Every file whose first "category: <value>" line names a category is moved
    to OUTPUT/<value>/<original-directory-joined-by-dashes>-<name>. Files
    without a category line are left where they are.

    \b
    Examples:
        # DRY RUN (preview changes - always do this first!)
        catsort relocate archive notes --dry-run

        # Move files, keeping a journal for rollback
        catsort relocate archive --journal .catsort

        # Only markdown files, into another directory
        catsort relocate archive --pattern '*.md' -o sorted

    \b
    Example:
        archive/2024/file17.txt  (category: cafe)
          → cafe/archive-2024-file17.txt

    \b
    Exit status:
        0  run completed
        1  --strict was given and at least one file failed
        2  a root directory could not be read
    """
    setup_logging(verbose=verbose, quiet=quiet)
    settings = get_settings()

    output_dir = Path(output) if output else settings.output_dir
    file_pattern = pattern or settings.file_pattern
    journal_dir = Path(journal) if journal else settings.journal_dir

    try:
        strategy = RelocationStrategy(
            output_directory=output_dir,
            join_char=join_char or settings.join_char,
        )
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--join-char")

    relocator = Relocator(
        strategy=strategy,
        extractor=CategoryExtractor(settings.metadata_prefix),
        verify_copies=settings.verify_copies and not no_verify,
        journal_dir=journal_dir,
    )

    console.print("\n[cyan]Relocation Configuration:[/cyan]")
    console.print(f"  Roots: {', '.join(display_path(root) for root in roots)}")
    console.print(f"  Output: {display_path(output_dir)}")
    console.print(f"  Pattern: {display_text(file_pattern)}")
    console.print(f"  Dry run: {'YES' if dry_run else 'NO'}")
    console.print(f"  Journal: {display_path(journal_dir) if journal_dir else 'disabled'}")

    try:
        files = relocator.discover(roots, glob_filter(file_pattern))
    except RootAccessError as e:
        console.print(f"\n[red]✗ {display_text(str(e))}[/red]")
        sys.exit(EXIT_ROOT_ERROR)

    console.print(f"  Candidates: {len(files)}")

    if dry_run:
        console.print("\n[yellow]⚠ DRY RUN MODE - No files will be modified[/yellow]")
    elif not yes:
        if not click.confirm(f"\nMove up to {len(files)} files?"):
            console.print("[yellow]Cancelled[/yellow]")
            return

    console.print()

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TextColumn("[progress.percentage]{task.percentage:>3.0f}%"),
        TimeRemainingColumn(),
        console=console,
    ) as progress:
        task = progress.add_task("Relocating files...", total=len(files))

        def _advance(outcome: FileOutcome) -> None:
            progress.advance(task)

        relocator.subscribe(_advance)
        result = relocator.relocate(files, dry_run=dry_run)

    _display_result(result)

    if not dry_run and output_dir.is_dir():
        digest = TreeFingerprint(output_dir).digest()
        console.print(f"\n[cyan]Fingerprint:[/cyan] {digest}")

        if journal_dir and result.transaction_id:
            log_path = journal_dir / f"{result.transaction_id}.json"
            console.print(f"\n[dim]Transaction log: {display_path(log_path)}[/dim]")
            console.print("[dim]You can rollback this run with:[/dim]")
            console.print(f"[dim]  catsort rollback {display_path(log_path)}[/dim]")

    if strict and result.has_failures:
        sys.exit(EXIT_FAILURES)


@click.command()
@click.argument("log_file", type=click.Path(exists=True, dir_okay=False))
@click.option("-v", "--verbose", is_flag=True, default=False, help="Verbose output")
def rollback(log_file: str, verbose: bool) -> None:
    """
    Undo the moves recorded in LOG_FILE.

    Files are moved back in reverse order. Nothing is overwritten: a file whose
    original path has been reoccupied stays where it is.
    """
    setup_logging(verbose=verbose)

    console.print(f"[yellow]Rolling back {display_path(log_file)}...[/yellow]")
    try:
        transaction_log = Relocator().rollback(Path(log_file))
    except (OSError, ValueError) as e:
        console.print(f"[red]✗ Rollback failed: {display_text(str(e))}[/red]")
        sys.exit(EXIT_FAILURES)

    stats = transaction_log.get_statistics()
    console.print(
        f"[green]✓ Rollback complete[/green]: {stats['rolled_back']} restored, "
        f"{stats['completed']} left in place"
    )


def _display_result(result: RelocationReport) -> None:
    """Display relocation result."""
    console.print("\n[green]✓ Relocation complete![/green]\n")

    table = Table(title="Results")
    table.add_column("Outcome", style="cyan")
    table.add_column("Count", style="green", justify="right")

    table.add_row("Total files", str(result.total_files))
    for status, count in result.counts().items():
        table.add_row(_STATUS_LABELS[status], str(count))

    console.print(table)

    if result.dry_run:
        console.print("\n[yellow]This was a DRY RUN - no files were modified[/yellow]")
        console.print("Run without --dry-run to execute the relocation.")

    failures = result.failures
    if failures:
        console.print("\n[red]Failures:[/red]")
        for outcome in failures:
            console.print(
                f"  [red]• {display_path(outcome.source_path)}: "
                f"{display_text(outcome.reason or outcome.status.value)}[/red]"
            )

    skipped = result.with_status(OutcomeStatus.SKIPPED_NO_CATEGORY)
    if skipped:
        console.print("\n[yellow]Skipped (NoCategory):[/yellow]")
        for outcome in skipped[:10]:
            console.print(f"  [yellow]• {display_path(outcome.source_path)}[/yellow]")
        if len(skipped) > 10:
            console.print(f"  [dim]... and {len(skipped) - 10} more[/dim]")
