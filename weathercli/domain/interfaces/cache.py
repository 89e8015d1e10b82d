"""Interface for the weather response cache.

Defines the contract for storing, retrieving, and managing cached provider
responses keyed by location.
"""

import abc
from pathlib import Path
from typing import Optional

# Import relevant domain models
from ..models.common import CacheStats, WeatherRecord


class WeatherCache(abc.ABC):
    """Abstract Base Class for caching operations."""

    @abc.abstractmethod
    def get(self, location: str) -> Optional[WeatherRecord]:
        """Retrieves a cached record for a location.

        Args:
            location: Free-form location string; case and surrounding
                whitespace are ignored.

        Returns:
            The cached record if present and not expired, otherwise None.
        """
        pass

    @abc.abstractmethod
    def set(self, location: str, data: WeatherRecord) -> None:
        """Stores a record for a location and persists the cache.

        Args:
            location: Free-form location string.
            data: The record to store.

        Raises:
            InvalidInputError: If the location is blank or data is missing.
            CachePersistenceError: If the record was cached in memory but
                could not be written to disk.
        """
        pass

    @abc.abstractmethod
    def clear(self) -> None:
        """Removes every entry and persists the empty cache.

        Raises:
            CachePersistenceError: If the empty cache could not be written.
        """
        pass

    @abc.abstractmethod
    def stats(self) -> CacheStats:
        """Returns total, valid and expired entry counts without mutating the cache."""
        pass

    @property
    @abc.abstractmethod
    def path(self) -> Path:
        """Location of the persisted cache file."""
        pass
