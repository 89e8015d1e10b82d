import os
import stat
import pytest
import yaml
from datetime import timedelta
from pathlib import Path

from weathercli.infrastructure.config import settings


@pytest.fixture
def write_config(isolated_config: Path):
    def _write(content: dict) -> Path:
        isolated_config.parent.mkdir(parents=True, exist_ok=True)
        isolated_config.write_text(yaml.safe_dump(content), encoding="utf-8")
        settings.load_configuration(config_file=isolated_config, env_file=isolated_config.parent / "no.env", force=True)
        return isolated_config
    return _write


def test_defaults_without_config():
    assert settings.get_forecast_days() == 3
    assert settings.get_cache_ttl() == timedelta(minutes=30)
    assert settings.get_cache_max_entries() == 100
    assert settings.get_cache_path() is None
    assert settings.get_base_url() == settings.DEFAULT_BASE_URL


def test_nested_yaml_sections(write_config):
    write_config({"cache": {"ttl_minutes": 10, "max_entries": 5}, "weather": {"days": 7}})

    assert settings.get_cache_ttl() == timedelta(minutes=10)
    assert settings.get_cache_max_entries() == 5
    assert settings.get_forecast_days() == 7


def test_environment_overrides_yaml(write_config, monkeypatch):
    write_config({"weather": {"days": 7}})
    monkeypatch.setenv("WEATHER_DAYS", "2")

    assert settings.get_config("weather.days") == 2
    assert settings.get_forecast_days() == 2


def test_test_config_wins():
    settings.set_config_for_testing({"weather.days": 5})
    assert settings.get_forecast_days() == 5


@pytest.mark.parametrize("days, expected", [(0, 1), (30, 14), ("lots", 3)])
def test_forecast_days_clamped(days, expected):
    settings.set_config_for_testing({"weather.days": days})
    assert settings.get_forecast_days() == expected


def test_env_coercion(monkeypatch):
    monkeypatch.setenv("WEATHER_ALERTS", "false")
    monkeypatch.setenv("CACHE_TTL_MINUTES", "12.5")

    assert settings.get_bool("weather.alerts", True) is False
    assert settings.get_cache_ttl() == timedelta(minutes=12.5)


@pytest.mark.parametrize("raw, expected", [("yes", True), ("0", False), ("maybe", True), (None, True)])
def test_get_bool(raw, expected):
    settings.set_config_for_testing({"weather.include_aqi": raw})
    assert settings.get_bool("weather.include_aqi", True) is expected


def test_cache_path_expands_user(monkeypatch, tmp_path):
    monkeypatch.setenv("HOME", str(tmp_path))
    settings.set_config_for_testing({"cache.path": "~/weather/cache.json"})
    assert settings.get_cache_path() == tmp_path / "weather" / "cache.json"


def test_dotenv_file_is_loaded(tmp_path, monkeypatch):
    env_file = tmp_path / ".env"
    env_file.write_text("CACHE_MAX_ENTRIES=42\n", encoding="utf-8")
    monkeypatch.delenv("CACHE_MAX_ENTRIES", raising=False)

    settings.load_configuration(config_file=tmp_path / "missing.yaml", env_file=env_file, force=True)
    try:
        assert settings.get_cache_max_entries() == 42
    finally:
        os.environ.pop("CACHE_MAX_ENTRIES", None)


def test_invalid_yaml_is_ignored(isolated_config):
    isolated_config.parent.mkdir(parents=True, exist_ok=True)
    isolated_config.write_text("cache: [unclosed", encoding="utf-8")

    settings.load_configuration(config_file=isolated_config, env_file=isolated_config.parent / "no.env", force=True)

    assert settings.get_cache_max_entries() == 100


def test_save_user_config_merges_and_is_private(isolated_config, write_config):
    write_config({"weather": {"days": 4}})

    settings.save_user_config({"weather_api_key": "abc"})

    saved = yaml.safe_load(isolated_config.read_text(encoding="utf-8"))
    assert saved == {"weather": {"days": 4}, "weather_api_key": "abc"}
    assert stat.S_IMODE(os.stat(isolated_config).st_mode) == 0o600
    assert settings.get_config("weather_api_key") == "abc"


def test_remove_user_config_key(isolated_config):
    settings.save_user_config({"weather_api_key": "abc", "other": 1})

    assert settings.remove_user_config_key("weather_api_key") is True
    assert settings.remove_user_config_key("weather_api_key") is False
    assert yaml.safe_load(isolated_config.read_text(encoding="utf-8")) == {"other": 1}
    assert settings.get_config("weather_api_key") is None
