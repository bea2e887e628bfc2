"""Archiver backed by Python's zipfile module.

Used when the zip command-line tool is unavailable, and as the
integrity checker when unzip is missing.
"""

import logging
import zipfile
from pathlib import Path

from zipsweep.archivers.base import Archiver, ArchiverKind
from zipsweep.core.errors import ArchiveError, VerificationFailedError

logger = logging.getLogger(__name__)


def check_zip_integrity(archive_path: Path) -> int:
    """Open an archive with zipfile, test every member and count entries.

    Args:
        archive_path: Archive to test.

    Returns:
        Number of entries in the archive.

    Raises:
        VerificationFailedError: If the archive cannot be read, a member
            fails its CRC check, or there are no entries.
    """
    try:
        with zipfile.ZipFile(archive_path) as zf:
            bad_member = zf.testzip()
            names = zf.namelist()
    except (zipfile.BadZipFile, OSError, EOFError) as e:
        raise VerificationFailedError(archive_path, f"unreadable zip: {e}") from e

    if bad_member is not None:
        raise VerificationFailedError(archive_path, f"corrupt member {bad_member}")
    if not names:
        raise VerificationFailedError(archive_path, "archive has no entries")
    return len(names)


class ZipfileArchiver(Archiver):
    """Write archives with zipfile using deflate at its default level."""

    @property
    def kind(self) -> ArchiverKind:
        """Return ArchiverKind.LIBRARY."""
        return ArchiverKind.LIBRARY

    def create(self, staged_dir: Path, archive_path: Path) -> None:
        """Write every file under staged_dir into archive_path.

        Entry names are POSIX paths relative to staged_dir.
        Files dated before 1980 are stored with a 1980 timestamp. Names
        that cannot be encoded raise ArchiveError like any write failure.
        """
        files = sorted(p for p in staged_dir.rglob("*") if p.is_file())
        logger.debug("Writing %d file(s) to %s with zipfile", len(files), archive_path)
        try:
            with zipfile.ZipFile(
                archive_path, "w", compression=zipfile.ZIP_DEFLATED, strict_timestamps=False
            ) as zf:
                for path in files:
                    zf.write(path, arcname=path.relative_to(staged_dir).as_posix())
        except (OSError, ValueError, zipfile.LargeZipFile) as e:
            msg = f"zipfile failed writing {archive_path}: {e}"
            raise ArchiveError(msg) from e

    def check_integrity(self, archive_path: Path) -> None:
        """Test the archive with zipfile."""
        check_zip_integrity(archive_path)
