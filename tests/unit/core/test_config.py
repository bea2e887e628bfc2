"""Unit tests for exclusion configuration and settings persistence."""

from pathlib import Path

import pytest
from pydantic import ValidationError
from zipsweep.core.config import (
    DEFAULT_IGNORE_MARKER,
    ExclusionConfig,
    SettingsError,
    SettingsParseError,
    SweepSettings,
    load_settings,
    normalize_extension,
    save_settings,
)
from zipsweep.core.paths import get_settings_path


class TestNormalizeExtension:
    """Tests for normalize_extension."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [("log", ".log"), (".LOG", ".log"), ("  .Tmp ", ".tmp"), ("..bak", ".bak")],
    )
    def test_normalizes(self, raw: str, expected: str) -> None:
        """Extensions get one leading dot and lower case."""
        assert normalize_extension(raw) == expected

    @pytest.mark.parametrize("raw", ["", ".", "  "])
    def test_rejects_empty(self, raw: str) -> None:
        """Empty extensions are rejected."""
        with pytest.raises(ValueError, match="Invalid file extension"):
            normalize_extension(raw)


class TestExclusionConfig:
    """Tests for ExclusionConfig matching."""

    def test_defaults(self) -> None:
        """build() without arguments uses the default sets."""
        config = ExclusionConfig.build()

        assert "readme.md" in config.markers
        assert "node_modules" in config.excluded_dirs
        assert config.excluded_extensions == frozenset()
        assert config.ignore_marker == DEFAULT_IGNORE_MARKER

    def test_marker_match_is_case_insensitive(self) -> None:
        """Marker lookups ignore case."""
        config = ExclusionConfig.build(markers=["README.md"])

        assert config.is_marker("readme.MD") is True
        assert config.is_marker("readme.txt") is False

    def test_excluded_dir_match_is_exact_and_case_insensitive(self) -> None:
        """Directory names match exactly, ignoring case."""
        config = ExclusionConfig.build(excluded_dirs=["node_modules"])

        assert config.is_excluded_dir("Node_Modules") is True
        assert config.is_excluded_dir("node_modules_old") is False

    def test_excluded_extension_uses_last_suffix(self) -> None:
        """Only the final suffix is compared."""
        config = ExclusionConfig.build(excluded_extensions=["GZ", ".log"])

        assert config.is_excluded_file("backup.tar.gz") is True
        assert config.is_excluded_file("DEBUG.LOG") is True
        assert config.is_excluded_file("log") is False
        assert config.is_excluded_file("notes.txt") is False

    def test_ignore_marker_case_insensitive(self) -> None:
        """The ignore marker matches regardless of case."""
        config = ExclusionConfig.build()

        assert config.is_ignore_marker(".ZipIgnore") is True

    def test_empty_ignore_marker_rejected(self) -> None:
        """An empty ignore marker is a configuration error."""
        with pytest.raises(ValueError):
            ExclusionConfig.build(ignore_marker=" ")

    def test_is_immutable(self) -> None:
        """The configuration cannot be changed after construction."""
        config = ExclusionConfig.build()

        with pytest.raises(AttributeError):
            config.ignore_marker = "other"  # type: ignore[misc]


class TestSweepSettings:
    """Tests for the SweepSettings model."""

    def test_default_values(self) -> None:
        """Defaults mirror the built-in configuration."""
        settings = SweepSettings()

        assert settings.prefer_command_line is True
        assert settings.ignore_marker == ".zipignore"
        assert settings.excluded_extensions == []

    def test_extensions_normalized_and_deduplicated(self) -> None:
        """Extensions are normalized and duplicates dropped."""
        settings = SweepSettings(excluded_extensions=["log", ".LOG", "tmp"])

        assert settings.excluded_extensions == [".log", ".tmp"]

    def test_rejects_unknown_fields(self) -> None:
        """Unknown keys are rejected."""
        with pytest.raises(ValidationError):
            SweepSettings(compression="max")  # type: ignore[call-arg]

    def test_rejects_empty_markers(self) -> None:
        """At least one marker is required."""
        with pytest.raises(ValidationError):
            SweepSettings(markers=[])

    def test_to_exclusion_config_merges_extensions(self) -> None:
        """CLI extensions are added to configured ones."""
        settings = SweepSettings(excluded_extensions=[".log"])

        config = settings.to_exclusion_config(["TMP"])

        assert config.excluded_extensions == frozenset({".log", ".tmp"})


class TestLoadSaveSettings:
    """Tests for load_settings and save_settings."""

    def test_missing_file_returns_defaults(self, tmp_path: Path) -> None:
        """A missing settings file is not an error."""
        settings = load_settings(tmp_path / "missing.toml")

        assert settings == SweepSettings()

    def test_roundtrip(self, tmp_path: Path) -> None:
        """Saved settings load back unchanged."""
        path = tmp_path / "nested" / "config.toml"
        original = SweepSettings(excluded_extensions=[".log"], prefer_command_line=False)

        saved = save_settings(original, path)

        assert saved == path
        assert load_settings(path) == original
        assert not list(path.parent.glob("*.tmp"))

    def test_invalid_toml(self, tmp_path: Path) -> None:
        """Broken TOML raises SettingsParseError."""
        path = tmp_path / "config.toml"
        path.write_text("markers = [")

        with pytest.raises(SettingsParseError):
            load_settings(path)

    def test_invalid_content(self, tmp_path: Path) -> None:
        """Schema violations raise SettingsError."""
        path = tmp_path / "config.toml"
        path.write_text('prefer_command_line = "sometimes"\n')

        with pytest.raises(SettingsError):
            load_settings(path)

    def test_default_path_respects_xdg(self, isolated_config_home: Path) -> None:
        """The default settings path lives under XDG_CONFIG_HOME."""
        assert get_settings_path() == isolated_config_home / "zipsweep" / "config.toml"
