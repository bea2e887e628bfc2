"""Fixtures shared by CLI tests."""

from collections.abc import Iterator
from unittest.mock import patch

import pytest
from zipsweep.archivers import ZipfileArchiver
from zipsweep.utils.formatting import console, err_console


@pytest.fixture(autouse=True)
def wide_consoles(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep long temporary paths on one line in captured output."""
    monkeypatch.setattr(console, "width", 240)
    monkeypatch.setattr(err_console, "width", 240)


@pytest.fixture
def library_archiver() -> Iterator[ZipfileArchiver]:
    """Force the zipfile archiver regardless of installed tools."""
    archiver = ZipfileArchiver()
    with patch("zipsweep.core.orchestrator.select_archiver", return_value=archiver):
        yield archiver
