"""Domain models for weather lookups.

Includes the `WeatherQuery` sent to the provider and a typed view
(`Forecast`) over the raw provider payload used for rendering. The cache
never sees these types; it stores the raw `WeatherRecord`.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from weathercli.domain.models.common import LocationQuery, WeatherRecord, AUTO_IP_LOCATION

DEFAULT_FORECAST_DAYS = 3


@dataclass
class WeatherQuery:
    """Parameters for a single forecast request."""
    location: LocationQuery = AUTO_IP_LOCATION
    days: int = DEFAULT_FORECAST_DAYS
    include_aqi: bool = True
    alerts: bool = True

    @property
    def is_local(self) -> bool:
        """True when the location is resolved from the caller's IP."""
        return self.location == AUTO_IP_LOCATION


def _num(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


@dataclass
class AirQuality:
    pm2_5: float = 0.0
    pm10: float = 0.0

    @classmethod
    def from_dict(cls, raw: Optional[Dict[str, Any]]) -> "AirQuality":
        raw = raw or {}
        return cls(pm2_5=_num(raw.get("pm2_5")), pm10=_num(raw.get("pm10")))


@dataclass
class Location:
    name: str = ""
    country: str = ""
    local_time: str = ""

    @property
    def is_empty(self) -> bool:
        return not (self.name or self.country or self.local_time)


@dataclass
class Current:
    temp_c: float = 0.0
    feels_like_c: float = 0.0
    humidity: float = 0.0
    wind_mph: float = 0.0
    wind_dir: str = ""
    condition: str = ""
    air_quality: AirQuality = field(default_factory=AirQuality)


@dataclass
class Hour:
    time_epoch: int
    temp_c: float
    condition: str
    chance_of_rain: float


@dataclass
class Day:
    max_temp_c: float = 0.0
    min_temp_c: float = 0.0
    avg_temp_c: float = 0.0
    max_wind_mph: float = 0.0
    total_precip_mm: float = 0.0
    avg_humidity: float = 0.0
    chance_of_rain: int = 0
    chance_of_snow: int = 0
    condition: str = ""
    uv: float = 0.0


@dataclass
class ForecastDay:
    date: str
    day: Day
    hours: List[Hour] = field(default_factory=list)
    sunrise: str = ""
    sunset: str = ""


@dataclass
class Alert:
    event: str
    description: str = ""


@dataclass
class Forecast:
    """Typed view over a WeatherAPI.com forecast response."""
    location: Location
    current: Optional[Current]
    days: List[ForecastDay]
    alerts: List[Alert]

    @classmethod
    def from_record(cls, record: WeatherRecord) -> "Forecast":
        """Builds a Forecast from the raw provider payload.

        Unknown or missing fields fall back to empty values; the renderer
        decides what to show for them.
        """
        raw_location = record.get("location") or {}
        location = Location(
            name=str(raw_location.get("name", "")),
            country=str(raw_location.get("country", "")),
            local_time=str(raw_location.get("localtime", "")),
        )

        current = None
        raw_current = record.get("current")
        if raw_current:
            current = Current(
                temp_c=_num(raw_current.get("temp_c")),
                feels_like_c=_num(raw_current.get("feelslike_c")),
                humidity=_num(raw_current.get("humidity")),
                wind_mph=_num(raw_current.get("wind_mph")),
                wind_dir=str(raw_current.get("wind_dir", "")),
                condition=str((raw_current.get("condition") or {}).get("text", "")),
                air_quality=AirQuality.from_dict(raw_current.get("air_quality")),
            )

        days = []
        for raw_day in (record.get("forecast") or {}).get("forecastday") or []:
            summary = raw_day.get("day") or {}
            astro = raw_day.get("astro") or {}
            hours = [
                Hour(
                    time_epoch=int(_num(h.get("time_epoch"))),
                    temp_c=_num(h.get("temp_c")),
                    condition=str((h.get("condition") or {}).get("text", "")),
                    chance_of_rain=_num(h.get("chance_of_rain")),
                )
                for h in raw_day.get("hour") or []
            ]
            days.append(ForecastDay(
                date=str(raw_day.get("date", "")),
                day=Day(
                    max_temp_c=_num(summary.get("maxtemp_c")),
                    min_temp_c=_num(summary.get("mintemp_c")),
                    avg_temp_c=_num(summary.get("avgtemp_c")),
                    max_wind_mph=_num(summary.get("maxwind_mph")),
                    total_precip_mm=_num(summary.get("totalprecip_mm")),
                    avg_humidity=_num(summary.get("avghumidity")),
                    chance_of_rain=int(_num(summary.get("daily_chance_of_rain"))),
                    chance_of_snow=int(_num(summary.get("daily_chance_of_snow"))),
                    condition=str((summary.get("condition") or {}).get("text", "")),
                    uv=_num(summary.get("uv")),
                ),
                hours=hours,
                sunrise=str(astro.get("sunrise", "")),
                sunset=str(astro.get("sunset", "")),
            ))

        alerts = [
            Alert(event=str(a.get("event", "")), description=str(a.get("desc", "")))
            for a in (record.get("alerts") or {}).get("alert") or []
        ]

        return cls(location=location, current=current, days=days, alerts=alerts)
