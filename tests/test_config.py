from __future__ import annotations

import json
import logging
from pathlib import Path

import allure
import pytest

from clickup_cli.config import (
    DEFAULT_BASE_URL,
    DEFAULT_CACHE_NAMESPACE,
    CacheSettings,
    ConfigurationError,
    CredentialSettings,
    LoggingSettings,
    Settings,
    parse_credentials,
)

pytestmark = [
    allure.epic("ClickUp CLI"),
    allure.feature("Configuration"),
]

_ENV = (
    "CLICKUP_API_KEY",
    "CLICKUP_TEAM_ID",
    "CLICKUP_CONFIG_PATH",
    "CLICKUP_BASE_URL",
    "CLICKUP_HTTP_TIMEOUT_SECONDS",
    "CLICKUP_CACHE_DIR",
    "CLICKUP_CACHE_ENABLED",
    "CLICKUP_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch) -> None:
    for name in _ENV:
        monkeypatch.delenv(name, raising=False)


def _write(path: Path, payload: object) -> Path:
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_reads_current_config_shape(tmp_path: Path) -> None:
    path = _write(tmp_path / "config.json", {"clickup": {"apiKey": "pk_1", "teamId": "900"}})

    settings = Settings.from_env(config_path=path)

    assert settings.credentials.api_key == "pk_1"
    assert settings.team_id == "900"
    assert settings.http.base_url == DEFAULT_BASE_URL
    assert settings.http.timeout_seconds is None
    assert settings.cache.enabled is True


def test_reads_legacy_config_shape(tmp_path: Path) -> None:
    path = _write(
        tmp_path / "config.json",
        {"mcpServer": {"env": {"CLICKUP_API_KEY": "pk_legacy"}}, "teamId": 123},
    )

    settings = Settings.from_env(config_path=path)

    assert settings.credentials.api_key == "pk_legacy"
    assert settings.team_id == "123"


def test_environment_overrides_file(tmp_path: Path, monkeypatch) -> None:
    path = _write(tmp_path / "config.json", {"clickup": {"apiKey": "pk_file", "teamId": "1"}})
    monkeypatch.setenv("CLICKUP_API_KEY", "pk_env")
    monkeypatch.setenv("CLICKUP_BASE_URL", "http://localhost:8080/api/v2/")
    monkeypatch.setenv("CLICKUP_HTTP_TIMEOUT_SECONDS", "2.5")
    monkeypatch.setenv("CLICKUP_CACHE_DIR", str(tmp_path / "cache"))
    monkeypatch.setenv("CLICKUP_CACHE_ENABLED", "off")

    settings = Settings.from_env(config_path=path)

    assert settings.credentials.api_key == "pk_env"
    assert settings.team_id == "1"
    assert settings.http.base_url == "http://localhost:8080/api/v2"
    assert settings.http.timeout_seconds == 2.5
    assert settings.cache.directory == tmp_path / "cache"
    assert settings.cache.enabled is False


def test_config_path_falls_back_to_environment(tmp_path: Path, monkeypatch) -> None:
    path = _write(tmp_path / "other.json", {"clickup": {"apiKey": "pk_2", "teamId": "2"}})
    monkeypatch.setenv("CLICKUP_CONFIG_PATH", str(path))

    assert Settings.from_env().credentials.api_key == "pk_2"


def test_missing_values_name_the_fields(tmp_path: Path) -> None:
    path = _write(tmp_path / "config.json", {"clickup": {"apiKey": "pk_1"}})

    with pytest.raises(ConfigurationError, match="clickup.teamId") as caught:
        Settings.from_env(config_path=path)

    assert "clickup.apiKey" not in str(caught.value)


def test_absent_file_without_environment_fails(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError, match="Missing required config"):
        Settings.from_env(config_path=tmp_path / "absent.json")


def test_malformed_json_is_reported(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(ConfigurationError, match="Cannot read config file"):
        Settings.from_env(config_path=path)


@pytest.mark.parametrize(
    ("name", "value", "message"),
    [
        ("CLICKUP_HTTP_TIMEOUT_SECONDS", "soon", "Invalid numeric value"),
        ("CLICKUP_HTTP_TIMEOUT_SECONDS", "0", "must be > 0"),
        ("CLICKUP_CACHE_ENABLED", "maybe", "Invalid boolean value"),
    ],
)
def test_invalid_environment_values_are_rejected(
    tmp_path: Path,
    monkeypatch,
    name: str,
    value: str,
    message: str,
) -> None:
    monkeypatch.setenv("CLICKUP_API_KEY", "pk")
    monkeypatch.setenv("CLICKUP_TEAM_ID", "1")
    monkeypatch.setenv(name, value)

    with pytest.raises(ConfigurationError, match=message):
        Settings.from_env(config_path=tmp_path / "absent.json")


def test_cache_settings_default_to_xdg_cache_home(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path))

    assert CacheSettings.from_env().directory == tmp_path / "clickup-cli"


@pytest.mark.parametrize(
    "raw",
    [None, [], {"clickup": "pk"}, {"mcpServer": {"env": None}}, {"other": {}}],
)
def test_unrecognized_shapes_yield_nothing(raw: object) -> None:
    assert parse_credentials(raw) == (None, None)


def test_blank_values_count_as_missing() -> None:
    assert parse_credentials({"clickup": {"apiKey": "  ", "teamId": ""}}) == (None, None)


def _settings(api_key: str, team_id: str) -> Settings:
    return Settings(credentials=CredentialSettings(api_key=api_key, team_id=team_id))


def test_cache_namespace_is_scoped_to_workspace_and_key() -> None:
    base = _settings("pk_1", "T1").cache_namespace

    assert base.startswith(f"{DEFAULT_CACHE_NAMESPACE}/")
    assert base == _settings("pk_1", "T1").cache_namespace
    assert base != _settings("pk_1", "T2").cache_namespace
    assert base != _settings("pk_2", "T1").cache_namespace
    assert "pk_1" not in base


def test_log_level_comes_from_environment(monkeypatch) -> None:
    assert LoggingSettings.from_env().level == logging.WARNING

    monkeypatch.setenv("CLICKUP_LOG_LEVEL", "info")
    assert LoggingSettings.from_env().level == logging.INFO
    assert LoggingSettings.from_env(verbose=True).level == logging.DEBUG

    monkeypatch.setenv("CLICKUP_LOG_LEVEL", "loud")
    with pytest.raises(ConfigurationError, match="Invalid log level"):
        LoggingSettings.from_env()
