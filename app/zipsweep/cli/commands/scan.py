"""Scan command implementation.

Lists the project directories that a run would process, without
touching the filesystem.
"""

import json
from typing import Annotated

import typer

from zipsweep.cli.display import ConsoleProgress, create_candidates_table
from zipsweep.cli.types import ExcludeExtOption, OutputFormat, RootArgument, load_run_settings
from zipsweep.core.discovery import discover_candidates
from zipsweep.core.errors import EnumerationError, RootInvalidError
from zipsweep.core.orchestrator import validate_root
from zipsweep.utils.formatting import console, print_error, print_info, print_warning


def _report_unreadable(error: EnumerationError) -> None:
    print_warning(f"{error} (treated as empty)")


def scan_projects(
    ctx: typer.Context,
    root: RootArgument,
    exclude_ext: ExcludeExtOption = None,
    output_format: Annotated[
        OutputFormat,
        typer.Option(
            "--format",
            "-f",
            help="Output format.",
            case_sensitive=False,
        ),
    ] = OutputFormat.TABLE,
) -> None:
    """Discover projects under ROOT and list them."""
    quiet = bool(ctx.obj and ctx.obj.get("quiet"))
    _, config = load_run_settings(exclude_ext)

    try:
        resolved = validate_root(root)
        observer = None if output_format == OutputFormat.JSON else ConsoleProgress(quiet=quiet)
        candidates = discover_candidates(resolved, config, observer, _report_unreadable)
    except RootInvalidError as e:
        print_error(str(e))
        raise typer.Exit(code=2) from e
    except OSError as e:
        print_error(f"Cannot list {root}: {e}")
        raise typer.Exit(code=2) from e

    if output_format == OutputFormat.JSON:
        data = [{"name": c.name, "path": str(c.path)} for c in candidates]
        console.print_json(json.dumps(data))
        return

    if not candidates:
        print_info(f"No projects found under {resolved}.")
        return

    console.print(create_candidates_table(candidates))
    console.print(f"\n[dim]Found {len(candidates)} project(s)[/dim]")
