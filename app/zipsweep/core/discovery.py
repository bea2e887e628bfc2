"""Project discovery under a scan root.

A top-level subdirectory of the root is a candidate when it has no
ignore marker among its immediate children and contains at least one
marker file somewhere in its tree outside pruned directories.
"""

import logging
import os
from pathlib import Path

from zipsweep.core.config import ExclusionConfig
from zipsweep.core.errors import EnumerationError
from zipsweep.core.paths import RESERVED_DIR_NAMES
from zipsweep.core.progress import ProgressObserver, notify_progress
from zipsweep.core.walker import ErrorHandler, iter_files, log_enumeration_error
from zipsweep.models.candidate import ProjectCandidate

logger = logging.getLogger(__name__)


def _child_names(directory: Path, on_error: ErrorHandler | None = None) -> list[str] | None:
    """List the names of a directory's immediate entries.

    Returns None when the directory cannot be listed, after reporting
    the failure to on_error (or the log).
    """
    try:
        with os.scandir(directory) as it:
            return [entry.name for entry in it]
    except OSError as e:
        handler = on_error or log_enumeration_error
        handler(EnumerationError(directory, e))
        return None


def has_ignore_marker(
    directory: Path,
    config: ExclusionConfig,
    on_error: ErrorHandler | None = None,
) -> bool:
    """Check the immediate children of a directory for the ignore marker.

    Files and directories both count; only the name is compared
    (case-insensitive). Deeper levels are never inspected.

    Args:
        directory: Directory to check.
        config: Exclusion configuration holding the marker name.
        on_error: Optional handler if the directory cannot be listed.

    Returns:
        True if the ignore marker is present. An unreadable directory
        returns False.
    """
    names = _child_names(directory, on_error)
    return names is not None and any(config.is_ignore_marker(name) for name in names)


def contains_marker(
    directory: Path,
    config: ExclusionConfig,
    on_error: ErrorHandler | None = None,
) -> bool:
    """Search a directory tree for any marker file.

    Stops at the first match. Pruned directories are never entered, so a
    marker that only exists inside e.g. node_modules does not count.
    """
    for path in iter_files(directory, config, on_error):
        if config.is_marker(path.name):
            logger.debug("Marker %s found in %s", path.name, directory)
            return True
    return False


def is_candidate(
    directory: Path,
    config: ExclusionConfig,
    on_error: ErrorHandler | None = None,
) -> bool:
    """Apply the ignore-marker short-circuit, then the marker search.

    A directory that cannot be listed is reported once and is not a
    candidate.
    """
    names = _child_names(directory, on_error)
    if names is None:
        return False
    if any(config.is_ignore_marker(name) for name in names):
        logger.info("Ignoring %s (%s present)", directory.name, config.ignore_marker)
        return False
    return contains_marker(directory, config, on_error)


def list_top_level_dirs(root: Path) -> list[Path]:
    """List the immediate subdirectories of root, sorted by name.

    The reserved destination and staging directories are left out.
    Symbolic links to directories are not candidates.

    Raises:
        OSError: If root itself cannot be listed.
    """
    with os.scandir(root) as it:
        dirs = [
            Path(entry.path)
            for entry in it
            if entry.is_dir(follow_symlinks=False) and entry.name not in RESERVED_DIR_NAMES
        ]
    return sorted(dirs, key=lambda p: p.name.lower())


def discover_candidates(
    root: Path,
    config: ExclusionConfig,
    observer: ProgressObserver | None = None,
    on_error: ErrorHandler | None = None,
) -> list[ProjectCandidate]:
    """Find all candidate project directories directly under root.

    Args:
        root: Directory whose immediate subdirectories are examined.
        config: Exclusion configuration.
        observer: Optional progress observer.
        on_error: Optional handler for unreadable subdirectories.

    Returns:
        Candidates in discovery order (sorted by directory name).

    Raises:
        OSError: If root itself cannot be listed.
    """
    directories = list_top_level_dirs(root)
    total = len(directories)
    candidates: list[ProjectCandidate] = []

    for index, directory in enumerate(directories, start=1):
        notify_progress(observer, "discover", index, total, directory.name)
        if is_candidate(directory, config, on_error):
            candidates.append(ProjectCandidate.from_path(directory))

    logger.info(
        "Discovered %d candidate(s) in %d directories under %s", len(candidates), total, root
    )
    return candidates
