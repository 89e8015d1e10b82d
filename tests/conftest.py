import pytest
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typer.testing import CliRunner

from weathercli.infrastructure.config import settings

FORECAST_DATE = datetime(2024, 1, 15)


class FakeClock:
    """Manually advanced UTC clock for TTL tests."""

    def __init__(self, start: datetime = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


def build_record(name: str = "London", country: str = "United Kingdom", date: datetime = FORECAST_DATE) -> dict:
    """A trimmed WeatherAPI.com forecast response with one day of hourly data."""
    hours = [
        {
            "time_epoch": int((date + timedelta(hours=h)).timestamp()),
            "temp_c": 5.0 + h / 2,
            "chance_of_rain": 10 * (h % 5),
            "condition": {"text": "Partly cloudy"},
        }
        for h in range(24)
    ]
    return {
        "location": {"name": name, "country": country, "localtime": "2024-01-15 09:30"},
        "current": {
            "temp_c": 7.2,
            "feelslike_c": 4.9,
            "humidity": 81,
            "wind_mph": 11.9,
            "wind_dir": "SW",
            "condition": {"text": "Light rain"},
            "air_quality": {"pm2_5": 12.4, "pm10": 20.1},
        },
        "forecast": {
            "forecastday": [
                {
                    "date": date.strftime("%Y-%m-%d"),
                    "day": {
                        "maxtemp_c": 9.1,
                        "mintemp_c": 2.3,
                        "daily_chance_of_rain": 80,
                        "condition": {"text": "Moderate rain"},
                    },
                    "astro": {"sunrise": "07:58 AM", "sunset": "04:21 PM"},
                    "hour": hours,
                },
                {
                    "date": (date + timedelta(days=1)).strftime("%Y-%m-%d"),
                    "day": {
                        "maxtemp_c": 6.0,
                        "mintemp_c": -1.5,
                        "daily_chance_of_rain": 0,
                        "condition": {"text": "Sunny"},
                    },
                    "astro": {"sunrise": "07:57 AM", "sunset": "04:23 PM"},
                    "hour": [],
                },
            ]
        },
        "alerts": {"alert": []},
    }


@pytest.fixture(scope="session")
def runner():
    """Provides a Typer CliRunner instance."""
    return CliRunner()


@pytest.fixture
def sample_record():
    return build_record()


@pytest.fixture
def record_factory():
    return build_record


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def cache_path(tmp_path: Path) -> Path:
    """Cache file inside a directory that does not exist yet."""
    return tmp_path / "cache-dir" / "weather-cli" / "cache.json"


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch):
    """Points configuration at a throwaway YAML file and hides real credentials."""
    monkeypatch.delenv("WEATHER_API_KEY", raising=False)
    config_file = tmp_path / "home" / ".weathercli" / "config.yaml"
    settings.load_configuration(config_file=config_file, env_file=tmp_path / "no.env", force=True)
    yield config_file
    settings.clear_test_config()
