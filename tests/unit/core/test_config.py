"""Unit tests for settings file loading."""

from pathlib import Path

import pytest
from permaudit.core.config import (
    AuditSettings,
    ConfigNotFoundError,
    ConfigParseError,
    ConfigValidationError,
    load_settings,
)


class TestAuditSettings:
    """Tests for the AuditSettings Pydantic model."""

    def test_defaults(self) -> None:
        """No filters and all flags off by default."""
        settings = AuditSettings()
        assert settings.file_filter is None
        assert settings.directory_filter is None
        assert settings.ignore_symlinks is False
        assert settings.silent is False

    def test_extra_fields_forbidden(self) -> None:
        """Unknown keys are rejected."""
        with pytest.raises(ValueError):
            AuditSettings(unknown="x")  # type: ignore[call-arg]


class TestLoadSettings:
    """Tests for load_settings."""

    def test_loads_valid_file(self, tmp_path: Path) -> None:
        """Values are read from TOML."""
        config = tmp_path / "config.toml"
        config.write_text(
            'file_filter = "rw-r--r--u1000"\n'
            'directory_filter = "rwx------"\n'
            "ignore_symlinks = true\n"
        )

        settings = load_settings(config)

        assert settings.file_filter == "rw-r--r--u1000"
        assert settings.directory_filter == "rwx------"
        assert settings.ignore_symlinks is True
        assert settings.silent is False

    def test_missing_default_file_gives_defaults(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Without a default settings file, defaults apply."""
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
        assert load_settings() == AuditSettings()

    def test_default_file_used(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """The XDG default path is read when present."""
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
        config_dir = tmp_path / "permaudit"
        config_dir.mkdir()
        (config_dir / "config.toml").write_text("silent = true\n")

        assert load_settings().silent is True

    def test_missing_explicit_file(self, tmp_path: Path) -> None:
        """An explicit path that doesn't exist is an error."""
        with pytest.raises(ConfigNotFoundError, match="not found"):
            load_settings(tmp_path / "nope.toml")

    def test_invalid_toml(self, tmp_path: Path) -> None:
        """Broken TOML raises ConfigParseError."""
        config = tmp_path / "config.toml"
        config.write_text("file_filter = [unclosed\n")
        with pytest.raises(ConfigParseError, match="Invalid TOML"):
            load_settings(config)

    def test_schema_violation(self, tmp_path: Path) -> None:
        """Unknown keys raise ConfigValidationError."""
        config = tmp_path / "config.toml"
        config.write_text('filters = "u0"\n')
        with pytest.raises(ConfigValidationError, match="Invalid settings"):
            load_settings(config)
