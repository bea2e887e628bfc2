"""Config command implementation.

Shows the effective settings and writes a default settings file.
"""

from typing import Annotated

import typer
from rich.table import Table

from zipsweep.core.config import SettingsError, SweepSettings, load_settings, save_settings
from zipsweep.core.paths import get_settings_path
from zipsweep.utils.formatting import console, print_error, print_info, print_success

app = typer.Typer(
    help="Show or initialize zipsweep settings.",
    no_args_is_help=True,
)


@app.command()
def show() -> None:
    """Show the effective settings."""
    path = get_settings_path()
    try:
        settings = load_settings(path)
    except SettingsError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    source = str(path) if path.exists() else "built-in defaults"

    table = Table(
        title="Settings",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Setting", no_wrap=True)
    table.add_column("Value")

    table.add_row("markers", ", ".join(settings.markers))
    table.add_row("excluded_dirs", ", ".join(settings.excluded_dirs))
    table.add_row("excluded_extensions", ", ".join(settings.excluded_extensions) or "-")
    table.add_row("ignore_marker", settings.ignore_marker)
    table.add_row("prefer_command_line", str(settings.prefer_command_line).lower())

    console.print(table)
    console.print(f"\n[dim]Source: {source}[/dim]")


@app.command()
def init(
    force: Annotated[
        bool,
        typer.Option("--force", help="Overwrite an existing settings file."),
    ] = False,
) -> None:
    """Write the default settings file."""
    path = get_settings_path()
    if path.exists() and not force:
        print_info(f"Settings file already exists: {path} (use --force to overwrite)")
        return

    try:
        saved = save_settings(SweepSettings(), path)
    except SettingsError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    print_success(f"Settings written to {saved}")
