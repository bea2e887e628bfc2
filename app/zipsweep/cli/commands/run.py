"""Run command implementation.

Discovers projects under a root, archives each into
``<root>/compressed/<name>.zip`` and deletes the source directory once
the archive has been verified.
"""

from typing import Annotated

import typer

from zipsweep.archivers import OverwriteMode
from zipsweep.cli.display import (
    ConsoleProgress,
    create_results_table,
    print_failure_details,
    print_results_summary,
)
from zipsweep.cli.types import ExcludeExtOption, RootArgument, load_run_settings
from zipsweep.core.errors import RootInvalidError
from zipsweep.core.orchestrator import sweep
from zipsweep.utils.formatting import console, print_error, print_info


def _overwrite_mode(force: bool, no_clobber: bool) -> OverwriteMode:
    """Map the overwrite flags to a policy."""
    if force and no_clobber:
        print_error("--force and --no-clobber cannot be used together.")
        raise typer.Exit(code=2)
    if force:
        return OverwriteMode.FORCE
    if no_clobber:
        return OverwriteMode.NO_CLOBBER
    return OverwriteMode.CONFIRM


def _confirm(prompt: str) -> bool:
    """Ask before replacing an existing archive."""
    return typer.confirm(prompt, default=False)


def run_sweep(
    ctx: typer.Context,
    root: RootArgument,
    exclude_ext: ExcludeExtOption = None,
    force: Annotated[
        bool,
        typer.Option("--force", help="Overwrite existing archives without asking."),
    ] = False,
    no_clobber: Annotated[
        bool,
        typer.Option("--no-clobber", help="Fail projects whose archive already exists."),
    ] = False,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Show what would be archived and deleted."),
    ] = False,
) -> None:
    """Archive every project under ROOT, verifying before deleting."""
    quiet = bool(ctx.obj and ctx.obj.get("quiet"))
    overwrite = _overwrite_mode(force, no_clobber)
    settings, config = load_run_settings(exclude_ext)

    try:
        results = sweep(
            root,
            config,
            prefer_command_line=settings.prefer_command_line,
            overwrite=overwrite,
            confirm=_confirm,
            dry_run=dry_run,
            observer=ConsoleProgress(quiet=quiet),
        )
    except RootInvalidError as e:
        print_error(str(e))
        raise typer.Exit(code=2) from e

    if not results:
        print_info("No projects found. Nothing to do.")
        return

    console.print(create_results_table(results, dry_run=dry_run))
    print_failure_details(results)
    print_results_summary(results)

    if any(r.failed for r in results):
        raise typer.Exit(code=1)
