"""CLI package for zipsweep.

This package contains the Typer application and all subcommands.
"""

from zipsweep.cli.main import app

__all__ = ["app"]
