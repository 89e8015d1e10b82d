"""Error types shared across the application.

Cache errors are ordinary exceptions: callers catch them and decide whether
to warn and continue (the usual case) or abort. None of them should ever
stop the application from falling back to a live fetch.
"""

from typing import Optional


class CacheError(Exception):
    """Base class for everything the response cache can raise."""


class InvalidInputError(CacheError, ValueError):
    """Empty location, missing data or data that cannot be serialized."""


class CachePersistenceError(CacheError):
    """The cache file or its directory could not be read or written.

    Raised after the in-memory mutation has been kept, so the entry remains
    cached for the lifetime of the process.
    """


class CorruptCacheError(CacheError):
    """The cache file exists but its content cannot be deserialized."""


class CacheFileNotFoundError(CacheError):
    """No cache file has been written yet."""


class WeatherApiError(Exception):
    """The weather provider request failed."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ConfigurationError(Exception):
    """Configuration is missing or invalid."""


class MissingApiKeyError(ConfigurationError):
    """No weather API key was found in the environment or the user config."""
