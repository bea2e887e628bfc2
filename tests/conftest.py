"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

from collections.abc import Callable
from pathlib import Path

import pytest
from zipsweep.core.config import ExclusionConfig

TreeBuilder = Callable[[Path, dict[str, str]], Path]


@pytest.fixture(autouse=True)
def isolated_config_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point XDG_CONFIG_HOME at a temporary directory.

    Keeps a developer's real ~/.config/zipsweep/config.toml out of tests.
    """
    config_home = tmp_path / "xdg-config"
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))
    return config_home


@pytest.fixture
def config() -> ExclusionConfig:
    """Default exclusion configuration."""
    return ExclusionConfig.build()


@pytest.fixture
def make_tree() -> TreeBuilder:
    """Return a helper that creates files from a {relative_path: content} mapping.

    Paths ending in "/" create empty directories.
    """

    def _make_tree(base: Path, files: dict[str, str]) -> Path:
        base.mkdir(parents=True, exist_ok=True)
        for rel, content in files.items():
            target = base / rel
            if rel.endswith("/"):
                target.mkdir(parents=True, exist_ok=True)
                continue
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content)
        return base

    return _make_tree


@pytest.fixture
def scan_root(tmp_path: Path) -> Path:
    """Empty directory used as the scan root."""
    root = tmp_path / "root"
    root.mkdir()
    return root
