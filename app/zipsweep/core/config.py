"""Exclusion configuration and persisted user settings.

ExclusionConfig is the immutable value every pipeline component reads:
marker filenames, pruned directory names, excluded file extensions and
the ignore-marker name. It is built once per run and passed explicitly.

SweepSettings is the user-editable layer stored in
~/.config/zipsweep/config.toml. It is validated with Pydantic and
converted into an ExclusionConfig before a run starts.
"""

import logging
import os
import tomllib
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from zipsweep.core.paths import get_settings_path

logger = logging.getLogger(__name__)

# Filenames whose presence anywhere in a tree marks it as a project.
DEFAULT_MARKERS: tuple[str, ...] = (
    "readme.md",
    "package.json",
    "manifest.json",
    "pyproject.toml",
    "setup.py",
    "requirements.txt",
    "cargo.toml",
    "go.mod",
    "pom.xml",
    "build.gradle",
    "cmakelists.txt",
    "makefile",
    "composer.json",
    "gemfile",
)

# Directory names skipped together with their entire subtree.
DEFAULT_EXCLUDED_DIRS: tuple[str, ...] = (
    "node_modules",
    "__pycache__",
    ".venv",
    "venv",
    ".tox",
    ".mypy_cache",
    ".pytest_cache",
    ".ruff_cache",
    "bin",
    "obj",
    "dist",
    "build",
    "target",
    ".next",
    ".gradle",
    ".idea",
    ".vs",
)

DEFAULT_IGNORE_MARKER = ".zipignore"


def normalize_extension(ext: str) -> str:
    """Normalize a file extension to lower case with a single leading dot.

    Examples:
        >>> normalize_extension("LOG")
        '.log'
        >>> normalize_extension(".Tmp")
        '.tmp'

    Raises:
        ValueError: If the extension is empty after stripping dots and whitespace.
    """
    cleaned = ext.strip().lstrip(".").lower()
    if not cleaned:
        msg = f"Invalid file extension: {ext!r}"
        raise ValueError(msg)
    return f".{cleaned}"


@dataclass(frozen=True, slots=True)
class ExclusionConfig:
    """Immutable marker and exclusion sets for one run.

    All names are stored lower-case so lookups are case-insensitive.

    Attributes:
        markers: Marker filenames (OR-matched).
        excluded_dirs: Directory names pruned during traversal.
        excluded_extensions: File extensions dropped from staging, each with a leading dot.
        ignore_marker: Name of the entry that excludes its parent directory.
    """

    markers: frozenset[str]
    excluded_dirs: frozenset[str]
    excluded_extensions: frozenset[str]
    ignore_marker: str = DEFAULT_IGNORE_MARKER

    @classmethod
    def build(
        cls,
        *,
        markers: Iterable[str] = DEFAULT_MARKERS,
        excluded_dirs: Iterable[str] = DEFAULT_EXCLUDED_DIRS,
        excluded_extensions: Iterable[str] = (),
        ignore_marker: str = DEFAULT_IGNORE_MARKER,
    ) -> "ExclusionConfig":
        """Build a normalized configuration from raw name collections."""
        if not ignore_marker.strip():
            msg = "Ignore marker name cannot be empty"
            raise ValueError(msg)
        return cls(
            markers=frozenset(m.lower() for m in markers),
            excluded_dirs=frozenset(d.lower() for d in excluded_dirs),
            excluded_extensions=frozenset(normalize_extension(e) for e in excluded_extensions),
            ignore_marker=ignore_marker.strip().lower(),
        )

    def is_marker(self, filename: str) -> bool:
        """Check if a filename is one of the project markers."""
        return filename.lower() in self.markers

    def is_excluded_dir(self, dirname: str) -> bool:
        """Check if a directory name is pruned from traversal."""
        return dirname.lower() in self.excluded_dirs

    def is_excluded_file(self, filename: str) -> bool:
        """Check if a filename carries an excluded extension."""
        if not self.excluded_extensions:
            return False
        suffix = os.path.splitext(filename)[1].lower()
        return bool(suffix) and suffix in self.excluded_extensions

    def is_ignore_marker(self, name: str) -> bool:
        """Check if an entry name is the ignore marker."""
        return name.lower() == self.ignore_marker


class SweepSettings(BaseModel):
    """User settings for zipsweep.

    Attributes:
        markers: Marker filenames that identify a project.
        excluded_dirs: Directory names pruned from discovery and staging.
        excluded_extensions: File extensions never staged.
        ignore_marker: Entry name that opts a directory out of processing.
        prefer_command_line: Use the zip/unzip tools when available.
    """

    model_config = ConfigDict(extra="forbid")

    markers: Annotated[
        list[str],
        Field(min_length=1, description="Marker filenames (case-insensitive)"),
    ] = list(DEFAULT_MARKERS)
    excluded_dirs: Annotated[
        list[str],
        Field(description="Directory names skipped with their subtree"),
    ] = list(DEFAULT_EXCLUDED_DIRS)
    excluded_extensions: Annotated[
        list[str],
        Field(description="File extensions excluded from archives"),
    ] = []
    ignore_marker: Annotated[
        str,
        Field(min_length=1, description="Entry name that excludes its parent directory"),
    ] = DEFAULT_IGNORE_MARKER
    prefer_command_line: Annotated[
        bool,
        Field(description="Prefer zip/unzip command-line tools over the zipfile module"),
    ] = True

    @field_validator("excluded_extensions")
    @classmethod
    def validate_extensions(cls, v: list[str]) -> list[str]:
        """Normalize extensions and drop duplicates, keeping order."""
        seen: dict[str, None] = {}
        for ext in v:
            seen[normalize_extension(ext)] = None
        return list(seen)

    def to_exclusion_config(self, extra_extensions: Iterable[str] = ()) -> ExclusionConfig:
        """Build the run configuration, merging extra excluded extensions.

        Args:
            extra_extensions: Extensions supplied on the command line.

        Returns:
            Immutable ExclusionConfig for one run.
        """
        return ExclusionConfig.build(
            markers=self.markers,
            excluded_dirs=self.excluded_dirs,
            excluded_extensions=[*self.excluded_extensions, *extra_extensions],
            ignore_marker=self.ignore_marker,
        )


class SettingsError(Exception):
    """Base exception for settings file errors."""


class SettingsParseError(SettingsError):
    """Raised when the settings file cannot be parsed."""


def load_settings(path: Path | None = None) -> SweepSettings:
    """Load settings from a TOML file.

    A missing file is not an error: defaults are returned.

    Args:
        path: Path to the settings file. If None, uses the default settings path.

    Returns:
        Validated SweepSettings object.

    Raises:
        SettingsParseError: If the TOML syntax is invalid.
        SettingsError: If the file cannot be read or the content doesn't match the schema.
    """
    settings_path = path or get_settings_path()

    if not settings_path.exists():
        logger.debug("No settings file at %s, using defaults", settings_path)
        return SweepSettings()

    try:
        with open(settings_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise SettingsParseError(f"Invalid TOML syntax in {settings_path}: {e}") from e
    except OSError as e:
        raise SettingsError(f"Failed to read settings: {e}") from e

    try:
        return SweepSettings.model_validate(data)
    except (ValueError, ValidationError) as e:
        raise SettingsError(f"Invalid settings content in {settings_path}: {e}") from e


def save_settings(settings: SweepSettings, path: Path | None = None) -> Path:
    """Save settings to a TOML file.

    The file is written to a temporary file in the same directory and
    then moved into place with os.replace().

    Args:
        settings: The settings to save.
        path: Path to save to. If None, uses the default settings path.

    Returns:
        Path where the settings were saved.

    Raises:
        SettingsError: If the file cannot be written.
    """
    settings_path = path or get_settings_path()

    tmp_path: Path | None = None
    try:
        settings_path.parent.mkdir(parents=True, exist_ok=True)
        with NamedTemporaryFile(
            mode="wb",
            dir=settings_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(settings.model_dump(), f)
        os.replace(str(tmp_path), str(settings_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise SettingsError(f"Failed to write settings: {e}") from e

    return settings_path
