"""Core service for weather lookups.

Serves forecasts from the local response cache when a fresh entry exists
and falls back to the provider otherwise, storing the fresh response for
the next lookup.
"""

import logging
from typing import Optional

# Domain Layer Imports
from weathercli.domain.interfaces.cache import WeatherCache
from weathercli.domain.interfaces.user_interface import UserInterface
from weathercli.domain.interfaces.weather_provider import WeatherProvider
from weathercli.domain.models.common import WeatherRecord
from weathercli.domain.models.errors import CacheError
from weathercli.domain.models.weather import WeatherQuery

logger = logging.getLogger(__name__)


def satisfies_query(record: WeatherRecord, query: WeatherQuery) -> bool:
    """True if a cached record holds everything the query asks for.

    Entries are keyed by location only, so a record fetched with fewer days
    or without air quality or alerts must not answer a broader query.
    """
    forecast_days = (record.get("forecast") or {}).get("forecastday") or []
    if len(forecast_days) < query.days:
        return False
    if query.include_aqi and "air_quality" not in (record.get("current") or {}):
        return False
    if query.alerts and "alerts" not in record:
        return False
    return True


class WeatherService:
    """Orchestrates cache-then-fetch weather lookups."""

    def __init__(
        self,
        provider: WeatherProvider,
        ui: UserInterface,
        cache: Optional[WeatherCache] = None,
    ):
        """Initializes the WeatherService with its dependencies.

        Args:
            provider: Remote forecast source.
            ui: Used to surface cache warnings.
            cache: Response cache; None disables caching entirely.
        """
        self.provider = provider
        self.ui = ui
        self.cache = cache

    def get_weather(self, query: WeatherQuery, use_cache: bool = True) -> WeatherRecord:
        """Returns the forecast record for a query.

        Raises:
            WeatherApiError: If there was no cached record and the fetch failed.
        """
        cache = self.cache if use_cache else None

        if cache is not None:
            cached = cache.get(query.location)
            if cached is not None and satisfies_query(cached, query):
                logger.info(f"Cache hit for {query.location!r}")
                return cached
            if cached is not None:
                logger.info(f"Cached record for {query.location!r} does not cover the query, refetching")
            else:
                logger.debug(f"Cache miss for {query.location!r}")

        record = self.provider.fetch(query)

        if cache is not None:
            try:
                cache.set(query.location, record)
            except CacheError as e:
                logger.warning(f"Failed to cache weather data for {query.location!r}: {e}")
                self.ui.display_warning(f"Failed to cache weather data: {e}")

        return record
