"""Tests for RegistrySettings."""

from pathlib import Path

import pytest

from dbregistry.core.utils.paths import DB_CONFIG_FILE_NAME, get_db_config_path
from dbregistry.core.utils.settings import RegistrySettings


class TestRegistrySettings:
    def test_defaults(self):
        settings = RegistrySettings()

        assert settings.watch_config is True
        assert settings.show_system_defined_lists is True
        assert settings.log_level == "INFO"
        assert isinstance(settings.storage_dir, Path)

    def test_log_level_is_normalized(self):
        assert RegistrySettings(log_level="debug").log_level == "DEBUG"
        assert RegistrySettings(log_level="chatty").log_level == "INFO"

    def test_from_env(self, monkeypatch, tmp_path):
        monkeypatch.setenv("DBREGISTRY_STORAGE_DIR", str(tmp_path))
        monkeypatch.setenv("DBREGISTRY_WATCH_CONFIG", "off")
        monkeypatch.setenv("DBREGISTRY_SHOW_SYSTEM_LISTS", "0")
        monkeypatch.setenv("DBREGISTRY_LOG_LEVEL", "warning")

        settings = RegistrySettings.from_env()

        assert settings.storage_dir == tmp_path
        assert settings.watch_config is False
        assert settings.show_system_defined_lists is False
        assert settings.log_level == "WARNING"

    @pytest.mark.parametrize("raw, expected", [("yes", True), ("TRUE", True), ("no", False), ("maybe", True)])
    def test_boolean_parsing(self, monkeypatch, raw, expected):
        monkeypatch.setenv("DBREGISTRY_WATCH_CONFIG", raw)

        assert RegistrySettings.from_env().watch_config is expected

    def test_overrides_win_and_none_is_ignored(self, monkeypatch, tmp_path):
        monkeypatch.setenv("DBREGISTRY_STORAGE_DIR", str(tmp_path / "env"))

        settings = RegistrySettings.from_env(storage_dir=tmp_path / "cli", log_level=None)

        assert settings.storage_dir == tmp_path / "cli"
        assert settings.log_level == "INFO"


def test_config_path(tmp_path):
    assert get_db_config_path(tmp_path) == tmp_path / DB_CONFIG_FILE_NAME
    assert DB_CONFIG_FILE_NAME == "workspace-databases.json"
