"""Interface for weather data providers.

Defines the contract for fetching a forecast from a remote service
(e.g., WeatherAPI.com).
"""

import abc

from ..models.common import WeatherRecord
from ..models.weather import WeatherQuery


class WeatherProvider(abc.ABC):
    """Abstract Base Class for weather provider interactions."""

    @abc.abstractmethod
    def fetch(self, query: WeatherQuery) -> WeatherRecord:
        """Fetches a forecast for the given query.

        Args:
            query: Location, number of days and optional extras to request.

        Returns:
            The decoded provider response.

        Raises:
            WeatherApiError: If the request fails or the response is unusable.
        """
        pass
