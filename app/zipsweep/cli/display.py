"""Shared Rich display functions for candidates and results.

Provides table builders, summary printers and the console progress
observer used by the scan and run commands.
"""

from rich.table import Table

from zipsweep.models.candidate import ProjectCandidate
from zipsweep.models.job import CandidateResult, CandidateState
from zipsweep.utils.formatting import console, err_console, format_size, print_success


class ConsoleProgress:
    """Progress observer that prints one status line per notification.

    The pipeline decides when to notify (first item, last item and every
    cadence step), so this class only renders.
    """

    def __init__(self, quiet: bool = False) -> None:
        self._quiet = quiet

    def update(self, stage: str, current: int, total: int, message: str) -> None:
        """Print a muted progress line to stderr."""
        if self._quiet:
            return
        width = len(str(total))
        err_console.print(
            f"[muted]{stage:>8} {current:>{width}}/{total}[/muted] {message}",
            highlight=False,
        )


def create_candidates_table(candidates: list[ProjectCandidate]) -> Table:
    """Create a Rich table listing discovered candidates.

    Args:
        candidates: Candidates in discovery order.

    Returns:
        Rich Table with one row per candidate.
    """
    table = Table(
        title="Discovered Projects",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("#", width=4, justify="right")
    table.add_column("Project", no_wrap=True)
    table.add_column("Path", style="muted")

    for index, candidate in enumerate(candidates, start=1):
        table.add_row(str(index), candidate.name, str(candidate.path))

    return table


def _format_state(result: CandidateResult) -> str:
    if result.dry_run and result.state == CandidateState.SOURCE_DELETED:
        return "[state.dry_run]would archive[/]"
    if result.state == CandidateState.SOURCE_DELETED:
        return "[state.deleted]archived[/]"
    if result.state == CandidateState.SKIPPED:
        return "[state.skipped]skipped[/]"
    return "[state.failed]FAIL[/]"


def create_results_table(results: list[CandidateResult], dry_run: bool = False) -> Table:
    """Create a Rich table displaying per-candidate results.

    Args:
        results: Results in processing order.
        dry_run: Whether this is a dry-run (changes table title).

    Returns:
        Rich Table configured for results display.
    """
    title = "Results (Dry Run)" if dry_run else "Results"

    table = Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Status", width=14, justify="center")
    table.add_column("Project", no_wrap=True)
    table.add_column("Files", justify="right")
    table.add_column("Archive")
    table.add_column("Details")

    for result in results:
        archive = "-"
        if result.archive_bytes is not None and result.archive_path is not None:
            archive = f"{result.archive_path.name} ({format_size(result.archive_bytes)})"
        elif result.dry_run and result.archive_path is not None:
            archive = result.archive_path.name

        table.add_row(
            _format_state(result),
            result.candidate.name,
            str(result.files_staged),
            archive,
            f"[muted]{result.message or ''}[/muted]",
        )

    return table


def print_failure_details(results: list[CandidateResult]) -> None:
    """Print diagnostics for failed candidates.

    Each failure names the candidate, the error category and reason,
    and for archive failures a sample of the staged files.
    """
    for result in results:
        if not result.failed:
            continue
        err_console.print(
            f"\n[error]{result.candidate.name}[/error] [muted]({result.error_kind})[/muted]"
        )
        err_console.print(f"  {result.message}", highlight=False)
        if result.staged_sample:
            err_console.print("  [muted]Staged files (sample):[/muted]")
            for name in result.staged_sample:
                err_console.print(f"    {name}", highlight=False)


def print_results_summary(results: list[CandidateResult]) -> None:
    """Print a summary of the run.

    Shows a success message when nothing failed, or counts of archived,
    skipped and failed candidates otherwise.
    """
    archived = sum(1 for r in results if r.state == CandidateState.SOURCE_DELETED)
    skipped = sum(1 for r in results if r.state == CandidateState.SKIPPED)
    failed = sum(1 for r in results if r.failed)
    verb = "would be archived" if any(r.dry_run for r in results) else "archived"

    if failed == 0:
        print_success(f"{archived} project(s) {verb}, {skipped} skipped.")
    else:
        console.print(
            f"\n[success]{archived} {verb}[/success], [warning]{skipped} skipped[/warning], "
            f"[error]{failed} failed[/error]"
        )
