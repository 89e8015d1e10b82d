"""Command Handler: Orchestrates CLI command execution.

Receives commands from the main entry point (main.py) and delegates the
work to the WeatherService, the response cache and the credential store.
Every handler reports failures through the UserInterface and returns a
process exit code instead of raising.
"""

import logging
from typing import Callable, Optional

# Core Services Imports
from weathercli.core.services.weather_service import WeatherService

# Domain Layer Imports
from weathercli.domain.interfaces.cache import WeatherCache
from weathercli.domain.interfaces.user_interface import UserInterface
from weathercli.domain.interfaces.weather_provider import WeatherProvider
from weathercli.domain.models.common import AUTO_IP_LOCATION, LocationQuery
from weathercli.domain.models.errors import (
    CacheError,
    ConfigurationError,
    MissingApiKeyError,
    WeatherApiError,
)
from weathercli.domain.models.weather import DEFAULT_FORECAST_DAYS, WeatherQuery

# Infrastructure Layer Imports
from weathercli.infrastructure import credentials
from weathercli.infrastructure.cli.report import WeatherReport

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1

ProviderFactory = Callable[[str], WeatherProvider]


class CommandHandler:
    """Handles incoming commands and delegates to appropriate services."""

    def __init__(
        self,
        ui: UserInterface,
        provider_factory: ProviderFactory,
        cache: Optional[WeatherCache] = None,
    ):
        """Initializes the CommandHandler.

        Args:
            ui: Output and prompt surface.
            provider_factory: Builds a WeatherProvider for an API key.
            cache: Response cache, or None when it could not be created.
        """
        self.ui = ui
        self.provider_factory = provider_factory
        self.cache = cache

    def handle_weather(
        self,
        location: Optional[str] = None,
        days: int = DEFAULT_FORECAST_DAYS,
        use_cache: bool = True,
        include_aqi: bool = True,
        alerts: bool = True,
    ) -> int:
        """Looks up and displays the forecast for a location (or the caller's IP)."""
        query = WeatherQuery(
            location=LocationQuery(location.strip()) if location and location.strip() else AUTO_IP_LOCATION,
            days=days,
            include_aqi=include_aqi,
            alerts=alerts,
        )
        logger.info(f"Handling weather lookup for {query.location!r} ({query.days} day(s), cache={use_cache})")

        try:
            api_key = self._resolve_api_key()
            service = WeatherService(provider=self.provider_factory(api_key), ui=self.ui, cache=self.cache)
            record = service.get_weather(query, use_cache=use_cache)
            report = WeatherReport(record, is_local=query.is_local)
        except ConfigurationError as e:
            logger.error(f"Configuration error: {e}")
            self.ui.display_error(f"Configuration error: {e}")
            return EXIT_ERROR
        except WeatherApiError as e:
            logger.error(f"Weather lookup failed: {e}")
            self.ui.display_error(f"Error fetching weather data: {e}")
            return EXIT_ERROR
        except ValueError as e:
            logger.error(f"Unusable weather data: {e}")
            self.ui.display_error(f"Error formatting weather data: {e}")
            return EXIT_ERROR

        self.ui.display_output(report.render())
        return EXIT_OK

    def _resolve_api_key(self) -> str:
        """Returns the API key, running the setup prompt once if none is configured."""
        try:
            return credentials.get_api_key()
        except MissingApiKeyError:
            logger.info("No API key configured, starting setup.")

        self.ui.display_warning("No Weather API key configured. Let's set one up.")
        self._prompt_and_store_key()
        return credentials.get_api_key()

    def _prompt_and_store_key(self) -> None:
        try:
            key = credentials.prompt_for_api_key(self.ui)
        except EOFError as e:
            raise ConfigurationError("No API key entered") from e
        credentials.set_api_key(key)

    def handle_setup(self) -> int:
        """Prompts for an API key and stores it in the user configuration."""
        logger.info("Handling API key setup.")
        try:
            self._prompt_and_store_key()
        except ConfigurationError as e:
            logger.error(f"API key setup failed: {e}")
            self.ui.display_error(f"Failed to save API key: {e}")
            return EXIT_ERROR
        self.ui.display_info("API key saved successfully.")
        return EXIT_OK

    def handle_delete_key(self) -> int:
        logger.info("Handling API key deletion.")
        try:
            removed = credentials.delete_api_key()
        except ConfigurationError as e:
            logger.error(f"API key deletion failed: {e}")
            self.ui.display_error(f"Failed to delete API key: {e}")
            return EXIT_ERROR
        if removed:
            self.ui.display_info("API key deleted.")
        else:
            self.ui.display_info("No stored API key to delete.")
        return EXIT_OK

    def handle_clear_cache(self) -> int:
        """Handles the '--clear-cache' command."""
        if self.cache is None:
            self.ui.display_error("Cache is not available.")
            return EXIT_ERROR
        try:
            self.cache.clear()
        except CacheError as e:
            logger.error(f"Failed to clear cache: {e}")
            self.ui.display_error(f"Failed to clear cache: {e}")
            return EXIT_ERROR
        self.ui.display_info(f"Cache cleared: {self.cache.path}")
        return EXIT_OK

    def handle_cache_info(self) -> int:
        if self.cache is None:
            self.ui.display_error("Cache is not available.")
            return EXIT_ERROR
        stats = self.cache.stats()
        self.ui.display_info(
            f"Cache file: {self.cache.path}\n"
            f"Entries: {stats.total} (valid: {stats.valid}, expired: {stats.expired})"
        )
        return EXIT_OK
