"""Unit tests for the staging engine."""

from collections.abc import Callable
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from zipsweep.core.config import ExclusionConfig
from zipsweep.core.errors import CopyError
from zipsweep.core.staging import copy_files, enumerate_files, stage_directory


def _relative_set(files: list[Path], base: Path) -> set[str]:
    return {p.relative_to(base).as_posix() for p in files}


def _snapshot(base: Path) -> dict[Path, bytes]:
    return {p.relative_to(base): p.read_bytes() for p in base.rglob("*") if p.is_file()}


class TestEnumerateFiles:
    """Tests for enumerate_files."""

    def test_prunes_and_filters_extensions(
        self, tmp_path: Path, make_tree: Callable[..., Path]
    ) -> None:
        """Excluded directories and extensions are left out."""
        source = make_tree(
            tmp_path / "proj",
            {
                "README.md": "r",
                "app.LOG": "l",
                "src/main.py": "m",
                "src/cache.tmp": "t",
                "node_modules/dep/index.js": "d",
                "bin/tool.exe": "b",
            },
        )
        config = ExclusionConfig.build(excluded_extensions=["log", ".TMP"])

        files = enumerate_files(source, config)

        assert _relative_set(files, source) == {"README.md", "src/main.py"}

    def test_no_extension_filter_keeps_everything(
        self, tmp_path: Path, config: ExclusionConfig, make_tree: Callable[..., Path]
    ) -> None:
        """Without excluded extensions every non-pruned file is listed."""
        source = make_tree(tmp_path / "proj", {"a.log": "", "Makefile": "", ".env": ""})

        files = enumerate_files(source, config)

        assert _relative_set(files, source) == {"a.log", "Makefile", ".env"}


class TestCopyFiles:
    """Tests for copy_files."""

    def test_mirrors_relative_paths(
        self, tmp_path: Path, config: ExclusionConfig, make_tree: Callable[..., Path]
    ) -> None:
        """Files land at the same relative path under the destination."""
        source = make_tree(tmp_path / "proj", {"a.txt": "A", "x/y/z.txt": "Z"})
        destination = tmp_path / "stage"

        count = copy_files(enumerate_files(source, config), source, destination)

        assert count == 2
        assert (destination / "a.txt").read_text() == "A"
        assert (destination / "x" / "y" / "z.txt").read_text() == "Z"

    def test_overwrites_existing_files(
        self, tmp_path: Path, config: ExclusionConfig, make_tree: Callable[..., Path]
    ) -> None:
        """Re-staging replaces stale content without duplicating files."""
        source = make_tree(tmp_path / "proj", {"a.txt": "new"})
        destination = make_tree(tmp_path / "stage", {"a.txt": "old"})
        files = enumerate_files(source, config)

        copy_files(files, source, destination)
        copy_files(files, source, destination)

        assert (destination / "a.txt").read_text() == "new"
        assert [p.name for p in destination.iterdir()] == ["a.txt"]

    def test_copy_failure_raises_copy_error(
        self, tmp_path: Path, config: ExclusionConfig, make_tree: Callable[..., Path]
    ) -> None:
        """An OSError for one file becomes a CopyError naming that file."""
        source = make_tree(tmp_path / "proj", {"a.txt": "A"})

        with (
            patch("zipsweep.core.staging.shutil.copy2", side_effect=PermissionError("denied")),
            pytest.raises(CopyError) as exc_info,
        ):
            copy_files(enumerate_files(source, config), source, tmp_path / "stage")

        assert exc_info.value.source == source / "a.txt"
        assert "denied" in str(exc_info.value)

    def test_reports_progress(
        self, tmp_path: Path, config: ExclusionConfig, make_tree: Callable[..., Path]
    ) -> None:
        """The observer is told about first and last files."""
        source = make_tree(tmp_path / "proj", {"a.txt": "", "b.txt": "", "c.txt": ""})
        observer = MagicMock()

        copy_files(enumerate_files(source, config), source, tmp_path / "stage", observer)

        currents = [c.args[1] for c in observer.update.call_args_list]
        assert currents == [1, 2, 3]
        assert all(c.args[0] == "stage" for c in observer.update.call_args_list)


class TestStageDirectory:
    """Tests for stage_directory."""

    def test_returns_staged_files(
        self, tmp_path: Path, config: ExclusionConfig, make_tree: Callable[..., Path]
    ) -> None:
        """The staged file set is returned and copied."""
        source = make_tree(tmp_path / "proj", {"README.md": "", "src/a.py": ""})
        destination = tmp_path / "stage"

        staged = stage_directory(source, destination, config)

        assert _relative_set(staged, source) == {"README.md", "src/a.py"}
        assert (destination / "src" / "a.py").is_file()

    def test_zero_files_creates_nothing(
        self, tmp_path: Path, config: ExclusionConfig, make_tree: Callable[..., Path]
    ) -> None:
        """Nothing to stage means no staging directory either."""
        source = make_tree(tmp_path / "proj", {"node_modules/x.js": ""})
        destination = tmp_path / "stage"

        staged = stage_directory(source, destination, config)

        assert staged == []
        assert not destination.exists()

    def test_restaging_is_idempotent(
        self, tmp_path: Path, config: ExclusionConfig, make_tree: Callable[..., Path]
    ) -> None:
        """Staging twice yields the same files and bytes."""
        source = make_tree(tmp_path / "proj", {"README.md": "hello", "d/e.bin": "\x00\x01"})
        destination = tmp_path / "stage"

        stage_directory(source, destination, config)
        first = _snapshot(destination)
        stage_directory(source, destination, config)
        second = _snapshot(destination)

        assert first == second
        assert len(second) == 2
