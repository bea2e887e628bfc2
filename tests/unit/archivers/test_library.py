"""Unit tests for the zipfile-based archiver."""

import os
import sys
import zipfile
from collections.abc import Callable
from pathlib import Path

import pytest
from zipsweep.archivers import ArchiverKind, ZipfileArchiver, check_zip_integrity
from zipsweep.core.errors import ArchiveError, ArchiveMissingError, VerificationFailedError

PAYLOAD = b"zipsweep payload that is easy to find in a stored archive"


@pytest.fixture
def staged(tmp_path: Path, make_tree: Callable[..., Path]) -> Path:
    return make_tree(
        tmp_path / "stage",
        {"README.md": "# demo", "src/pkg/__init__.py": "", "src/pkg/core.py": "x = 1"},
    )


class TestZipfileArchiver:
    """Tests for ZipfileArchiver."""

    def test_kind(self) -> None:
        """The archiver reports the library variant."""
        assert ZipfileArchiver().kind == ArchiverKind.LIBRARY

    def test_entries_relative_to_staged_root(self, tmp_path: Path, staged: Path) -> None:
        """Entry names are POSIX paths relative to the staged directory."""
        archive = tmp_path / "out.zip"

        ZipfileArchiver().create(staged, archive)

        with zipfile.ZipFile(archive) as zf:
            assert sorted(zf.namelist()) == [
                "README.md",
                "src/pkg/__init__.py",
                "src/pkg/core.py",
            ]
            assert zf.getinfo("README.md").compress_type == zipfile.ZIP_DEFLATED
            assert zf.read("src/pkg/core.py") == b"x = 1"

    def test_verify_returns_size(self, tmp_path: Path, staged: Path) -> None:
        """verify() reports the size of a created archive."""
        archive = tmp_path / "out.zip"
        archiver = ZipfileArchiver()

        archiver.create(staged, archive)
        size = archiver.verify(archive)

        assert size == archive.stat().st_size

    def test_missing_destination_dir_raises(self, tmp_path: Path, staged: Path) -> None:
        """A write failure becomes an ArchiveError."""
        with pytest.raises(ArchiveError, match="zipfile failed"):
            ZipfileArchiver().create(staged, tmp_path / "missing" / "out.zip")

    def test_pre_1980_timestamp(self, tmp_path: Path, staged: Path) -> None:
        """Files older than the zip epoch are archived with a clamped date."""
        os.utime(staged / "README.md", (0, 0))
        archive = tmp_path / "out.zip"

        ZipfileArchiver().create(staged, archive)

        with zipfile.ZipFile(archive) as zf:
            assert zf.getinfo("README.md").date_time[0] == 1980
            assert zf.read("README.md") == b"# demo"

    @pytest.mark.skipif(sys.platform != "linux", reason="needs byte-oriented filenames")
    def test_unencodable_name_raises_archive_error(self, tmp_path: Path, staged: Path) -> None:
        """A filename that is not valid UTF-8 fails as an ArchiveError."""
        (staged / os.fsdecode(b"caf\xe9.txt")).write_text("x")

        with pytest.raises(ArchiveError, match="zipfile failed"):
            ZipfileArchiver().create(staged, tmp_path / "out.zip")


class TestCheckZipIntegrity:
    """Tests for check_zip_integrity and verify()."""

    def test_counts_entries(self, tmp_path: Path, staged: Path) -> None:
        """A valid archive reports its entry count."""
        archive = tmp_path / "out.zip"
        ZipfileArchiver().create(staged, archive)

        assert check_zip_integrity(archive) == 3

    def test_not_a_zip(self, tmp_path: Path) -> None:
        """Arbitrary bytes are unreadable."""
        archive = tmp_path / "junk.zip"
        archive.write_bytes(b"this is not a zip file at all, just text" * 4)

        with pytest.raises(VerificationFailedError, match="unreadable zip"):
            check_zip_integrity(archive)

    def test_corrupt_member(self, tmp_path: Path) -> None:
        """A flipped byte in stored data fails the CRC check."""
        archive = tmp_path / "crc.zip"
        with zipfile.ZipFile(archive, "w", compression=zipfile.ZIP_STORED) as zf:
            zf.writestr("data.bin", PAYLOAD)
        data = bytearray(archive.read_bytes())
        offset = data.index(PAYLOAD)
        data[offset] ^= 0xFF
        archive.write_bytes(bytes(data))

        with pytest.raises(VerificationFailedError, match="corrupt member data.bin"):
            check_zip_integrity(archive)

    def test_no_entries(self, tmp_path: Path) -> None:
        """An archive with no entries fails."""
        archive = tmp_path / "empty.zip"
        with zipfile.ZipFile(archive, "w"):
            pass

        with pytest.raises(VerificationFailedError, match="no entries"):
            check_zip_integrity(archive)

    def test_verify_rejects_minimal_archive(self, tmp_path: Path) -> None:
        """An empty zip is only 22 bytes and fails the size check first."""
        archive = tmp_path / "empty.zip"
        with zipfile.ZipFile(archive, "w"):
            pass

        with pytest.raises(VerificationFailedError, match="only 22 bytes"):
            ZipfileArchiver().verify(archive)

    def test_verify_missing(self, tmp_path: Path) -> None:
        """A missing archive is reported as such."""
        with pytest.raises(ArchiveMissingError):
            ZipfileArchiver().verify(tmp_path / "nope.zip")
