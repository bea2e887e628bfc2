"""Shared types and utilities for CLI commands.

This module provides common option types and helper functions used
across multiple CLI command modules to avoid code duplication.
"""

from enum import Enum
from pathlib import Path
from typing import Annotated

import typer

from zipsweep.core.config import ExclusionConfig, SettingsError, SweepSettings, load_settings
from zipsweep.utils.formatting import print_error


class OutputFormat(str, Enum):
    """Output format options."""

    TABLE = "table"
    JSON = "json"


RootArgument = Annotated[
    Path,
    typer.Argument(help="Directory whose subdirectories are scanned for projects."),
]

ExcludeExtOption = Annotated[
    list[str] | None,
    typer.Option(
        "--exclude-ext",
        "-x",
        help="File extension to leave out of archives (repeatable, e.g. -x log -x .tmp).",
    ),
]


def load_run_settings(exclude_ext: list[str] | None) -> tuple[SweepSettings, ExclusionConfig]:
    """Load user settings and build the run's exclusion configuration.

    Exits with code 1 when the settings file or an extension is invalid.

    Args:
        exclude_ext: Extensions passed on the command line.

    Returns:
        Tuple of (settings, exclusion config).
    """
    try:
        settings = load_settings()
        config = settings.to_exclusion_config(exclude_ext or [])
    except SettingsError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
    except ValueError as e:
        print_error(f"Invalid exclusion: {e}")
        raise typer.Exit(code=1) from e
    return settings, config
