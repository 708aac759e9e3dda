"""Tests for Settings models and the settings loader."""

from __future__ import annotations

import os

import pytest
from pydantic import ValidationError

from entitykit.config import SettingsLoader, load_settings
from entitykit.config.models import CacheSettings, Settings
from entitykit.shared.errors import ApplicationError, ErrorCode


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Isolate tests from ENTITYKIT_* variables and config files in the cwd."""
    for name in list(os.environ):
        if name.startswith("ENTITYKIT_"):
            monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)


class TestSettingsDefaults:
    def test_defaults(self) -> None:
        settings = Settings()

        assert settings.cache.enabled is False
        assert settings.cache.expiration == 3600
        assert settings.entity.default_language == "und"

    def test_negative_expiration_rejected(self) -> None:
        with pytest.raises(ValidationError):
            CacheSettings(expiration=-1)

    def test_environment_overrides(self, monkeypatch) -> None:
        monkeypatch.setenv("ENTITYKIT_CACHE__ENABLED", "true")
        monkeypatch.setenv("ENTITYKIT_CACHE__EXPIRATION", "0")

        settings = Settings()

        assert settings.cache.enabled is True
        assert settings.cache.expiration == 0


class TestLoadSettings:
    def test_load_from_toml(self, tmp_path) -> None:
        config_file = tmp_path / "custom.toml"
        config_file.write_text(
            '[cache]\nenabled = true\nexpiration = 120\n\n[entity]\ndefault_language = "en"\n',
            encoding="utf-8",
        )

        settings = load_settings(config_file)

        assert settings.cache.enabled is True
        assert settings.cache.expiration == 120
        assert settings.entity.default_language == "en"

    def test_toml_round_trip(self, tmp_path) -> None:
        original = Settings(cache=CacheSettings(enabled=True, expiration=60))
        config_file = tmp_path / "out" / "entitykit.toml"

        original.to_toml_file(config_file)

        assert load_settings(config_file).cache == original.cache

    def test_default_path_is_discovered(self, tmp_path) -> None:
        (tmp_path / "entitykit.toml").write_text("[cache]\nexpiration = 5\n", encoding="utf-8")

        assert load_settings().cache.expiration == 5

    def test_no_file_returns_defaults(self) -> None:
        assert load_settings() == Settings()

    def test_missing_explicit_file(self, tmp_path) -> None:
        with pytest.raises(ApplicationError) as exc_info:
            load_settings(tmp_path / "absent.toml")

        assert exc_info.value.code == ErrorCode.CONFIG_MISSING

    def test_malformed_toml(self, tmp_path) -> None:
        config_file = tmp_path / "bad.toml"
        config_file.write_text("[cache\nenabled = ", encoding="utf-8")

        with pytest.raises(ApplicationError) as exc_info:
            load_settings(config_file)

        assert exc_info.value.code == ErrorCode.CONFIG_INVALID

    def test_invalid_values(self, tmp_path) -> None:
        config_file = tmp_path / "invalid.toml"
        config_file.write_text("[cache]\nexpiration = -10\n", encoding="utf-8")

        with pytest.raises(ApplicationError) as exc_info:
            load_settings(config_file)

        assert exc_info.value.code == ErrorCode.CONFIG_INVALID


class TestSettingsLoader:
    def test_get_config_is_cached(self) -> None:
        loader = SettingsLoader()

        assert loader.get_config() is loader.get_config()

    def test_reload_picks_up_changes(self, tmp_path) -> None:
        loader = SettingsLoader()
        assert loader.get_config().cache.expiration == 3600

        (tmp_path / "entitykit.toml").write_text("[cache]\nexpiration = 30\n", encoding="utf-8")

        assert loader.reload_config().cache.expiration == 30

    def test_dotenv_file_is_loaded(self, tmp_path, mocker) -> None:
        mocker.patch.dict(os.environ)
        (tmp_path / ".env").write_text("ENTITYKIT_CACHE__ENABLED=true\n", encoding="utf-8")

        settings = SettingsLoader().get_config()

        assert settings.cache.enabled is True