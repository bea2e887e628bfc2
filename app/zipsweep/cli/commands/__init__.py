"""CLI commands for zipsweep.

This package contains all subcommand implementations.
"""

from zipsweep.cli.commands import config, run, scan

__all__ = ["config", "run", "scan"]
