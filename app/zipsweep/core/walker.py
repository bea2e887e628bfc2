"""Pruned depth-first traversal with an explicit stack.

Discovery and staging both walk directory trees the same way: pop a
directory, list its immediate entries, push subdirectories that are not
pruned, and hand files to the caller. A directory that cannot be listed
is reported through ``on_error`` and treated as empty.

Symbolic links to directories are never followed, which keeps the walk
finite on trees with link cycles.
"""

import logging
import os
from collections.abc import Callable, Iterator
from pathlib import Path

from zipsweep.core.config import ExclusionConfig
from zipsweep.core.errors import EnumerationError

logger = logging.getLogger(__name__)

ErrorHandler = Callable[[EnumerationError], None]


def log_enumeration_error(error: EnumerationError) -> None:
    """Default error handler: log the unreadable directory and carry on."""
    logger.warning("Skipping unreadable directory %s: %s", error.path, error.cause)


def iter_files(
    root: Path,
    config: ExclusionConfig,
    on_error: ErrorHandler | None = None,
) -> Iterator[Path]:
    """Yield every file under root, skipping pruned directory subtrees.

    Order is depth-first in stack order and follows the filesystem's
    enumeration order within a directory; it is not sorted.

    Args:
        root: Directory to walk.
        config: Exclusion configuration (only ``excluded_dirs`` is used here).
        on_error: Called with an EnumerationError for each directory that
            cannot be listed. Defaults to logging a warning.

    Yields:
        Absolute paths of regular files (and symlinks to files).
    """
    handler = on_error or log_enumeration_error
    stack: list[Path] = [root]

    while stack:
        current = stack.pop()
        try:
            with os.scandir(current) as it:
                entries = list(it)
        except OSError as e:
            handler(EnumerationError(current, e))
            continue

        for entry in entries:
            try:
                if entry.is_dir(follow_symlinks=False):
                    if not config.is_excluded_dir(entry.name):
                        stack.append(Path(entry.path))
                    continue
                if entry.is_file():
                    yield Path(entry.path)
            except OSError as e:
                logger.debug("Cannot stat %s: %s", entry.path, e)
