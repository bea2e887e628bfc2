"""Archiver backed by the zip and unzip command-line tools.

The archive is produced by running ``zip`` inside the staged directory
so entries are relative to it. Integrity is tested with ``unzip -t``
when unzip is installed, otherwise with the zipfile reader.
"""

import logging
from pathlib import Path

from zipsweep.archivers.base import Archiver, ArchiverKind
from zipsweep.archivers.library import check_zip_integrity
from zipsweep.core.errors import ToolInvocationError, VerificationFailedError
from zipsweep.utils.shell import command_exists, run_command

logger = logging.getLogger(__name__)

# Fast compression level; archives are verified anyway.
ZIP_COMPRESSION_LEVEL = "-1"


class ZipCommandArchiver(Archiver):
    """Archive with ``zip -r`` and verify with ``unzip -t``.

    Args:
        zip_command: Executable used to create archives.
        unzip_command: Executable used to test archives. If None, the
            zipfile reader is used instead.
    """

    def __init__(self, zip_command: str = "zip", unzip_command: str | None = "unzip") -> None:
        self._zip = zip_command
        self._unzip = unzip_command

    @classmethod
    def probe(cls) -> "ZipCommandArchiver | None":
        """Return an archiver if zip is on PATH, None otherwise.

        unzip is probed at the same time; it is optional.
        """
        if not command_exists("zip"):
            return None
        unzip = "unzip" if command_exists("unzip") else None
        return cls(unzip_command=unzip)

    @property
    def kind(self) -> ArchiverKind:
        """Return ArchiverKind.COMMAND_LINE."""
        return ArchiverKind.COMMAND_LINE

    @property
    def verifies_with_unzip(self) -> bool:
        """Check if integrity tests run through the unzip tool."""
        return self._unzip is not None

    def create(self, staged_dir: Path, archive_path: Path) -> None:
        """Run zip in staged_dir, archiving its literal contents.

        Raises:
            ToolInvocationError: If zip cannot be started or exits non-zero.
        """
        args = [self._zip, "-r", ZIP_COMPRESSION_LEVEL, "-q", str(archive_path.resolve()), "."]
        logger.debug("Running %s in %s", " ".join(args), staged_dir)
        try:
            result = run_command(args, cwd=str(staged_dir))
        except OSError as e:
            raise ToolInvocationError(args, -1, "", str(e)) from e

        if not result.success:
            raise ToolInvocationError(args, result.returncode, result.stdout, result.stderr)

    def check_integrity(self, archive_path: Path) -> None:
        """Test the archive with unzip, or zipfile if unzip is unavailable.

        Raises:
            VerificationFailedError: If the test fails.
        """
        if self._unzip is None:
            check_zip_integrity(archive_path)
            return

        args = [self._unzip, "-tqq", str(archive_path)]
        try:
            result = run_command(args)
        except OSError as e:
            raise VerificationFailedError(archive_path, f"cannot run {self._unzip}: {e}") from e

        if not result.success:
            output = (result.stdout + result.stderr).strip()
            reason = f"{self._unzip} exited with status {result.returncode}"
            if output:
                reason = f"{reason}: {output}"
            raise VerificationFailedError(archive_path, reason)
