"""Staging of a filtered copy of a candidate's files.

Staging runs in two passes. The first enumerates every file that
survives the exclusion rules; the second copies them into a tree that
mirrors the source layout. Keeping the passes separate means the total
is known before copying starts.
"""

import logging
import shutil
from pathlib import Path

from zipsweep.core.config import ExclusionConfig
from zipsweep.core.errors import CopyError
from zipsweep.core.progress import ProgressObserver, notify_progress
from zipsweep.core.walker import ErrorHandler, iter_files

logger = logging.getLogger(__name__)


def enumerate_files(
    source: Path,
    config: ExclusionConfig,
    on_error: ErrorHandler | None = None,
) -> list[Path]:
    """List every file under source that should be staged.

    Pruned directories are skipped entirely and files with an excluded
    extension are dropped. Unreadable subdirectories contribute nothing.

    Args:
        source: Candidate directory.
        config: Exclusion configuration.
        on_error: Optional handler for unreadable subdirectories.

    Returns:
        Absolute file paths in traversal order.
    """
    files = [
        path
        for path in iter_files(source, config, on_error)
        if not config.is_excluded_file(path.name)
    ]
    logger.debug("Enumerated %d file(s) under %s", len(files), source)
    return files


def copy_files(
    files: list[Path],
    source: Path,
    destination: Path,
    observer: ProgressObserver | None = None,
) -> int:
    """Copy files into destination, mirroring their path relative to source.

    Existing files at the destination are overwritten.

    Args:
        files: Files to copy, all located under source.
        source: Root the relative paths are computed from.
        destination: Root of the mirrored tree.
        observer: Optional progress observer.

    Returns:
        Number of files copied.

    Raises:
        CopyError: If any single file cannot be copied.
    """
    total = len(files)
    for index, path in enumerate(files, start=1):
        relative = path.relative_to(source)
        target = destination / relative
        notify_progress(observer, "stage", index, total, str(relative))
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(path, target)
        except OSError as e:
            raise CopyError(path, target, e) from e
    return total


def stage_directory(
    source: Path,
    destination: Path,
    config: ExclusionConfig,
    observer: ProgressObserver | None = None,
    on_error: ErrorHandler | None = None,
) -> list[Path]:
    """Enumerate and copy a candidate's files into a staging directory.

    Args:
        source: Candidate directory.
        destination: Staging directory (created on demand).
        config: Exclusion configuration.
        observer: Optional progress observer.
        on_error: Optional handler for unreadable subdirectories.

    Returns:
        The staged file set (source paths). An empty list means there was
        nothing to stage; no destination directory is created in that case.

    Raises:
        CopyError: If a file cannot be copied.
    """
    files = enumerate_files(source, config, on_error)
    if files:
        copy_files(files, source, destination, observer)
    logger.info("Staged %d file(s) from %s", len(files), source.name)
    return files
