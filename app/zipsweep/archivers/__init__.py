"""Archive creation and verification.

Two archivers exist: the zip/unzip command-line tools and Python's
zipfile module. One is selected per run by :func:`select_archiver` and
used for every candidate.
"""

import logging

from zipsweep.archivers.base import (
    MIN_ARCHIVE_BYTES,
    Archiver,
    ArchiverKind,
    ConfirmCallback,
    OverwriteMode,
    prepare_destination,
)
from zipsweep.archivers.command import ZipCommandArchiver
from zipsweep.archivers.library import ZipfileArchiver, check_zip_integrity

logger = logging.getLogger(__name__)


def select_archiver(prefer_command_line: bool = True) -> Archiver:
    """Pick the archiver for this run.

    Args:
        prefer_command_line: Try the zip tool first. If False, or zip is
            not on PATH, the zipfile archiver is used.

    Returns:
        The archiver used for every candidate in the run.
    """
    if prefer_command_line:
        command = ZipCommandArchiver.probe()
        if command is not None:
            logger.info(
                "Using %s archiver (verify with %s)",
                command.kind.value,
                "unzip" if command.verifies_with_unzip else "zipfile",
            )
            return command
        logger.info("zip not found on PATH, falling back to zipfile")
    archiver = ZipfileArchiver()
    logger.info("Using %s archiver", archiver.kind.value)
    return archiver


__all__ = [
    "MIN_ARCHIVE_BYTES",
    "Archiver",
    "ArchiverKind",
    "ConfirmCallback",
    "OverwriteMode",
    "ZipCommandArchiver",
    "ZipfileArchiver",
    "check_zip_integrity",
    "prepare_destination",
    "select_archiver",
]
