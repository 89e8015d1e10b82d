"""WeatherAPI.com forecast client.

Implements the WeatherProvider interface with `requests`. One GET per
lookup, no retries.
"""

import json
import logging
import time
from typing import Any, Dict, Optional

import requests

from weathercli.domain.interfaces.weather_provider import WeatherProvider
from weathercli.domain.models.common import WeatherRecord
from weathercli.domain.models.errors import WeatherApiError
from weathercli.domain.models.weather import WeatherQuery

logger = logging.getLogger(__name__)


class WeatherApiClient(WeatherProvider):
    """Client for the WeatherAPI.com forecast endpoint."""

    DEFAULT_BASE_URL = "https://api.weatherapi.com/v1/forecast.json"
    DEFAULT_TIMEOUT = 30  # seconds
    MAX_RESPONSE_BYTES = 10 * 1024 * 1024

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        """Initializes the client.

        Args:
            api_key: WeatherAPI.com key.
            base_url: Forecast endpoint URL.
            timeout: Per-request timeout in seconds.
            session: Optional pre-configured session (tests inject a mock).

        Raises:
            ValueError: If no API key is provided.
        """
        if not api_key:
            raise ValueError("Weather API key not provided.")
        self.api_key = api_key
        self.base_url = base_url
        self.timeout = timeout
        self.session = session or requests.Session()
        logger.debug(f"WeatherApiClient initialized for {self.base_url}")

    def build_params(self, query: WeatherQuery) -> Dict[str, Any]:
        """Query parameters for a forecast request; requests handles the URL encoding."""
        params: Dict[str, Any] = {
            "key": self.api_key,
            "q": query.location,
            "days": query.days,
        }
        if query.include_aqi:
            params["aqi"] = "yes"
        if query.alerts:
            params["alerts"] = "yes"
        return params

    def fetch(self, query: WeatherQuery) -> WeatherRecord:
        params = self.build_params(query)
        logger.info(f"Requesting forecast for {query.location!r} ({query.days} day(s))")

        start = time.monotonic()
        try:
            response = self.session.get(self.base_url, params=params, timeout=self.timeout, stream=True)
        except requests.exceptions.Timeout as e:
            logger.error("Weather API timeout")
            raise WeatherApiError(f"Weather API request timed out after {self.timeout}s") from e
        except requests.exceptions.RequestException as e:
            logger.error(f"Weather API request failed: {e}")
            raise WeatherApiError(f"Weather API request failed: {e}") from e

        try:
            duration = time.monotonic() - start
            logger.debug(f"Weather API responded with {response.status_code} in {duration:.2f}s")

            if response.status_code != 200:
                raise WeatherApiError(
                    f"Weather API returned status {response.status_code}{self._error_detail(response)}",
                    status_code=response.status_code,
                )

            body = self._read_limited(response)
        finally:
            response.close()

        try:
            data = json.loads(body)
        except ValueError as e:
            raise WeatherApiError(f"Failed to parse weather API response: {e}") from e
        if not isinstance(data, dict):
            raise WeatherApiError("Weather API response is not a JSON object")

        return WeatherRecord(data)

    def _read_limited(self, response: requests.Response) -> bytes:
        chunks = []
        size = 0
        try:
            for chunk in response.iter_content(chunk_size=64 * 1024):
                size += len(chunk)
                if size > self.MAX_RESPONSE_BYTES:
                    raise WeatherApiError(f"Response too large (exceeded {self.MAX_RESPONSE_BYTES} bytes)")
                chunks.append(chunk)
        except requests.exceptions.RequestException as e:
            raise WeatherApiError(f"Failed to read response body: {e}") from e
        return b"".join(chunks)

    @staticmethod
    def _error_detail(response: requests.Response) -> str:
        """Provider error message, if the body carries one ({"error": {"message": ...}})."""
        try:
            message = response.json().get("error", {}).get("message")
        except (ValueError, AttributeError):
            return ""
        return f": {message}" if message else ""
