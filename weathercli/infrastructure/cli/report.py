"""Builds the terminal weather report from a provider record.

Each section is a rich renderable; a section whose data is missing renders
a short "No data available" line instead.
"""

import logging
from datetime import datetime, timedelta
from typing import List, Optional

from rich.console import Group, RenderableType
from rich.table import Table
from rich.text import Text
from rich.box import SIMPLE

from weathercli.domain.models.common import WeatherRecord
from weathercli.domain.models.weather import Forecast
from weathercli.infrastructure.cli.icons import (
    colorize_temp,
    get_aqi_icon,
    get_icon,
    get_weather_icon,
)

logger = logging.getLogger(__name__)

PROVIDER_LOCAL_TIME_FORMAT = "%Y-%m-%d %H:%M"


def _format_time(moment: datetime) -> str:
    # e.g. "Mon, Jan 6 - 14:05"
    return f"{moment:%a, %b} {moment.day} - {moment:%H:%M}"


class WeatherReport:
    """Formatted report sections for one forecast record."""

    def __init__(self, record: WeatherRecord, is_local: bool = True, now: Optional[datetime] = None):
        """
        Args:
            record: Raw provider response.
            is_local: The location came from IP auto-detection; suppresses the
                "(Local Time: ...)" suffix.
            now: Local wall-clock time used for the hourly window. Injected by tests.

        Raises:
            ValueError: If the record is missing or has no forecast days.
        """
        if record is None:
            raise ValueError("weather data is empty")
        self.forecast = Forecast.from_record(record)
        if not self.forecast.days:
            raise ValueError("no forecast data available")
        self.is_local = is_local
        self.now = now or datetime.now()

    def heading(self) -> Text:
        location = self.forecast.location
        title = f"Weather Forecast for {location.name}, {location.country}"
        return Text(f"{title}\n{'-' * len(title)}", style="bold")

    def time(self) -> Text:
        output = Text(f"Time: {_format_time(self.now)}")
        local_time = self.forecast.location.local_time
        if not self.is_local and local_time:
            try:
                parsed = datetime.strptime(local_time, PROVIDER_LOCAL_TIME_FORMAT)
                output.append(f" (Local Time: {_format_time(parsed)})")
            except ValueError:
                logger.debug(f"Unparseable provider local time: {local_time!r}")
        return output

    def current_conditions(self) -> Text:
        current = self.forecast.current
        if current is None:
            return Text("Current Conditions: No data available")

        output = Text("Current Conditions: ")
        output.append(f"{get_weather_icon(current.condition)} {current.condition}, ")
        output.append_text(colorize_temp(current.temp_c))
        output.append(" (Feels like ")
        output.append_text(colorize_temp(current.feels_like_c))
        output.append(")\n")
        output.append(f"Wind: {get_icon('wind')} {current.wind_dir} {current.wind_mph:.0f} mph | ")
        output.append(f"Humidity: {get_icon('humidity')} {current.humidity:.0f}% | ")
        pm2_5 = current.air_quality.pm2_5
        output.append(f"AQI: {get_aqi_icon(pm2_5)} {pm2_5:.0f} (PM2.5)")
        return output

    def hourly_forecast(self) -> RenderableType:
        """Remaining hours of today, from the current hour onward."""
        hours = self.forecast.days[0].hours
        if not hours:
            return Text("Hourly Forecast: No hourly data available")

        start_of_next_day = datetime(self.now.year, self.now.month, self.now.day) + timedelta(days=1)
        table = Table(title="Hourly Forecast", title_justify="left", box=SIMPLE, padding=(0, 1))
        table.add_column("Time")
        table.add_column("Temp", justify="right")
        table.add_column("Rain", justify="right")
        table.add_column("Condition")

        for hour in hours:
            moment = datetime.fromtimestamp(hour.time_epoch)
            if moment < self.now.replace(minute=0, second=0, microsecond=0):
                continue
            if moment >= start_of_next_day:
                break
            table.add_row(
                moment.strftime("%H:%M"),
                colorize_temp(hour.temp_c),
                f"{hour.chance_of_rain:.0f}%",
                f"{hour.condition} {get_weather_icon(hour.condition)}",
            )

        if not table.row_count:
            return Text("Hourly Forecast: No remaining hours today")
        return table

    def daily_forecast(self) -> RenderableType:
        table = Table(title="Daily Forecast", title_justify="left", box=SIMPLE, padding=(0, 1))
        table.add_column("Date")
        table.add_column("Low", justify="right")
        table.add_column("High", justify="right")
        table.add_column("Rain", justify="right")
        table.add_column("Condition")

        for forecast_day in self.forecast.days:
            day = forecast_day.day
            try:
                label = datetime.strptime(forecast_day.date, "%Y-%m-%d").strftime("%a %d %b")
            except ValueError:
                label = forecast_day.date
            table.add_row(
                label,
                colorize_temp(day.min_temp_c),
                colorize_temp(day.max_temp_c),
                f"{day.chance_of_rain}%",
                f"{get_weather_icon(day.condition)} {day.condition}",
            )
        return table

    def twilight(self) -> Text:
        today = self.forecast.days[0]
        if not today.sunrise or not today.sunset:
            return Text("Twilight: No sunrise or sunset data available")
        return Text(
            f"Sunrise: {get_icon('sunrise')} {today.sunrise} | "
            f"Sunset: {get_icon('sunset')} {today.sunset}"
        )

    def warnings(self) -> Text:
        if not self.forecast.alerts:
            return Text("Weather Warnings: None")
        output = Text("Weather Warnings: ", style="bold")
        output.append("\n".join(alert.event for alert in self.forecast.alerts), style="bold red")
        return output

    def sections(self) -> List[RenderableType]:
        return [
            self.heading(),
            self.time(),
            self.current_conditions(),
            self.hourly_forecast(),
            self.daily_forecast(),
            self.twilight(),
            self.warnings(),
        ]

    def render(self) -> Group:
        """All sections separated by blank lines."""
        parts: List[RenderableType] = []
        for section in self.sections():
            if parts:
                parts.append(Text(""))
            parts.append(section)
        return Group(*parts)
