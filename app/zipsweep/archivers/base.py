"""Abstract base class for archivers and the destination overwrite policy.

This module defines the Archiver interface that both archiving
variants implement, plus the checks shared by all of them: the
existing-destination policy before writing and the size check before
integrity verification.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from enum import Enum
from pathlib import Path

from zipsweep.core.errors import (
    ArchiveMissingError,
    OverwriteConflictError,
    VerificationFailedError,
)

logger = logging.getLogger(__name__)

# Size of an empty zip (end-of-central-directory record only).
MIN_ARCHIVE_BYTES = 22

ConfirmCallback = Callable[[str], bool]


class ArchiverKind(str, Enum):
    """Archiving variant.

    Attributes:
        COMMAND_LINE: External zip/unzip tools.
        LIBRARY: Python's zipfile module.
    """

    COMMAND_LINE = "command-line"
    LIBRARY = "library"


class OverwriteMode(str, Enum):
    """Policy for an archive that already exists at the destination.

    Attributes:
        FORCE: Remove the existing archive unconditionally.
        NO_CLOBBER: Fail the candidate with a conflict.
        CONFIRM: Ask interactively; declining is a conflict.
    """

    FORCE = "force"
    NO_CLOBBER = "no-clobber"
    CONFIRM = "confirm"


def prepare_destination(
    archive_path: Path,
    mode: OverwriteMode,
    confirm: ConfirmCallback | None = None,
) -> None:
    """Apply the overwrite policy to an archive destination.

    Does nothing when no file exists at archive_path.

    Args:
        archive_path: Destination zip path.
        mode: Overwrite policy.
        confirm: Prompt used in CONFIRM mode. Without one, CONFIRM
            behaves like a declined prompt.

    Raises:
        OverwriteConflictError: If the existing archive may not be replaced.
    """
    if not archive_path.exists():
        return

    if mode == OverwriteMode.NO_CLOBBER:
        raise OverwriteConflictError(archive_path)

    if mode == OverwriteMode.CONFIRM:
        prompt = f"Archive {archive_path.name} already exists. Overwrite?"
        if confirm is None or not confirm(prompt):
            raise OverwriteConflictError(archive_path, "overwrite declined")

    logger.info("Removing existing archive %s", archive_path)
    archive_path.unlink()


class Archiver(ABC):
    """Abstract base class for all archivers.

    Archivers turn a staged directory into a zip whose entries are
    relative to the staged root, and verify the result.

    Example:
        >>> archiver = select_archiver()
        >>> archiver.create(Path("/data/__staging_pack/app"), Path("/data/compressed/app.zip"))
        >>> archiver.verify(Path("/data/compressed/app.zip"))
    """

    @property
    @abstractmethod
    def kind(self) -> ArchiverKind:
        """Return the variant this archiver implements."""

    @abstractmethod
    def create(self, staged_dir: Path, archive_path: Path) -> None:
        """Write the archive.

        Args:
            staged_dir: Directory whose contents are archived.
            archive_path: Destination zip path (parent directory exists).

        Raises:
            ArchiveError: If the archive cannot be written.
        """

    @abstractmethod
    def check_integrity(self, archive_path: Path) -> None:
        """Test the archive structure.

        Raises:
            VerificationFailedError: If the archive is corrupt or empty.
        """

    def verify(self, archive_path: Path) -> int:
        """Verify an archive exists, is not near-empty and is intact.

        Args:
            archive_path: Archive to verify.

        Returns:
            Archive size in bytes.

        Raises:
            ArchiveMissingError: If the file does not exist.
            VerificationFailedError: If the file is too small or fails integrity checks.
        """
        if not archive_path.is_file():
            raise ArchiveMissingError(archive_path)

        size = archive_path.stat().st_size
        if size <= MIN_ARCHIVE_BYTES:
            raise VerificationFailedError(archive_path, f"archive is only {size} bytes")

        self.check_integrity(archive_path)
        logger.debug("Verified %s (%d bytes)", archive_path, size)
        return size
