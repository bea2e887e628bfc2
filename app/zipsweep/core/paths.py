"""Path management for zipsweep.

Two kinds of paths live here:
- XDG-compliant locations for the user settings file.
- The per-run layout under the scanned root (destination and staging).

XDG defaults:
- Config: ~/.config/zipsweep/
"""

import os
from dataclasses import dataclass
from pathlib import Path

# Application identifier for directory naming
APP_NAME = "zipsweep"

# Directory names reserved under the scanned root
COMPRESSED_DIR_NAME = "compressed"
STAGING_DIR_NAME = "__staging_pack"

RESERVED_DIR_NAMES: frozenset[str] = frozenset({COMPRESSED_DIR_NAME, STAGING_DIR_NAME})

ARCHIVE_SUFFIX = ".zip"


def _get_xdg_dir(env_var: str, default_subdir: str) -> Path:
    """Get XDG directory respecting environment variable override.

    Args:
        env_var: XDG environment variable name (e.g., "XDG_CONFIG_HOME").
        default_subdir: Default subdirectory under home (e.g., ".config").

    Returns:
        Path to the application-specific directory.
    """
    base = os.environ.get(env_var)
    if base:
        return Path(base) / APP_NAME
    return Path.home() / default_subdir / APP_NAME


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Returns:
        Path to ~/.config/zipsweep/ (or XDG_CONFIG_HOME/zipsweep/).
    """
    return _get_xdg_dir("XDG_CONFIG_HOME", ".config")


def get_settings_path() -> Path:
    """Get the default settings file path.

    Returns:
        Path to ~/.config/zipsweep/config.toml.
    """
    return get_config_dir() / "config.toml"


@dataclass(frozen=True, slots=True)
class RunLayout:
    """Filesystem layout of a single run under the scanned root.

    Attributes:
        root: Absolute path of the scanned root.
        compressed_dir: Directory receiving one archive per candidate.
        staging_root: Transient directory holding one staging tree per candidate.
    """

    root: Path
    compressed_dir: Path
    staging_root: Path

    @classmethod
    def for_root(cls, root: Path) -> "RunLayout":
        """Build the standard layout for a scanned root."""
        root = root.resolve()
        return cls(
            root=root,
            compressed_dir=root / COMPRESSED_DIR_NAME,
            staging_root=root / STAGING_DIR_NAME,
        )

    def archive_path(self, name: str) -> Path:
        """Destination archive path for a candidate name."""
        return self.compressed_dir / f"{name}{ARCHIVE_SUFFIX}"

    def staging_dir(self, name: str) -> Path:
        """Staging directory for a candidate name."""
        return self.staging_root / name
