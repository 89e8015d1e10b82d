"""Concrete implementation of the weather response Caching Service.

Keeps provider responses in memory keyed by normalized location, expires
them after a TTL, bounds the number of entries, and writes the full store
to a single JSON file after every mutation.
"""

import copy
import json
import logging
from datetime import datetime, timedelta
from pathlib import Path
from typing import Callable, Optional

from platformdirs import user_cache_dir

# Domain Layer Imports
from weathercli.domain.interfaces.cache import WeatherCache
from weathercli.domain.models.common import CacheStats, WeatherRecord
from weathercli.domain.models.errors import (
    CacheError,
    CacheFileNotFoundError,
    InvalidInputError,
)
from weathercli.infrastructure.cache.entry_store import (
    DEFAULT_MAX_ENTRIES,
    CacheEntry,
    EntryStore,
    is_valid,
    utc_now,
)
from weathercli.infrastructure.cache.keys import normalize_key
from weathercli.infrastructure.cache.persistence import CacheFile
from weathercli.infrastructure.cache.rw_lock import ReadWriteLock

logger = logging.getLogger(__name__)

DEFAULT_TTL = timedelta(minutes=30)
CACHE_APP_DIR = "weather-cli"
CACHE_FILE_NAME = "cache.json"


def default_cache_path() -> Path:
    """Platform user cache directory joined with the app subdirectory and file name."""
    return Path(user_cache_dir(CACHE_APP_DIR, appauthor=False)) / CACHE_FILE_NAME


class CachingService(WeatherCache):
    """TTL-bounded, size-bounded, disk-persisted cache of weather responses.

    Safe to share between threads: reads take a shared lock, writes take an
    exclusive lock that is held through the disk write.
    """

    def __init__(
        self,
        ttl: Optional[timedelta] = None,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        cache_path: Optional[Path] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """Initializes the cache and loads any persisted state.

        Args:
            ttl: Entry lifetime. None or zero selects DEFAULT_TTL.
            max_entries: Maximum number of entries kept.
            cache_path: Cache file location; defaults to the user cache directory.
            clock: Returns the current UTC time. Injected by tests.
        """
        self._ttl = ttl if ttl else DEFAULT_TTL
        self._clock = clock or utc_now
        self._store = EntryStore(max_entries=max_entries)
        self._file = CacheFile(Path(cache_path) if cache_path is not None else default_cache_path())
        self._lock = ReadWriteLock()
        self._load()

        logger.info(
            f"CachingService initialized. path={self._file.path}, ttl={self._ttl}, "
            f"max_entries={max_entries}, loaded={len(self._store)}"
        )

    def _load(self) -> None:
        """Loads persisted entries. Any failure leaves the store empty."""
        try:
            entries = self._file.load()
        except CacheFileNotFoundError:
            logger.debug(f"No cache file at {self._file.path}, starting empty.")
            return
        except CacheError as e:
            # Rewritten on the next successful Set or Clear
            logger.warning(f"Ignoring unreadable cache file: {e}")
            return

        self._store.replace_all(entries)
        evicted = self._store.trim_to_capacity()
        if evicted:
            logger.info(f"Dropped {evicted} oldest entries to fit max_entries={self._store.max_entries}")

    @property
    def path(self) -> Path:
        return self._file.path

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    @property
    def max_entries(self) -> int:
        return self._store.max_entries

    # --- WeatherCache Interface Implementation ---

    def get(self, location: str) -> Optional[WeatherRecord]:
        """Returns a copy of the cached record, or None if missing or expired.

        Expired entries are left in place; the next set() purges them.
        """
        if not isinstance(location, str):
            logger.debug(f"Cache lookup with non-string location: {location!r}")
            return None
        key = normalize_key(location)
        with self._lock.read_locked():
            entry = self._store.get(key)
            if entry is None:
                logger.debug(f"Cache miss for location: {location!r}")
                return None
            if not is_valid(entry, self._ttl, self._clock()):
                logger.debug(f"Cache entry expired for location: {location!r}")
                return None
            logger.debug(f"Cache hit for location: {location!r}")
            return copy.deepcopy(entry.data)

    def set(self, location: str, data: WeatherRecord) -> None:
        """Stores a record and persists the whole cache.

        Raises:
            InvalidInputError: Blank or non-string location, None data, or data that is not
                JSON-serializable. Nothing is stored.
            CachePersistenceError: The entry is cached in memory but the file
                could not be written.
        """
        if data is None:
            raise InvalidInputError("Cannot cache empty weather data")
        if not isinstance(location, str):
            raise InvalidInputError(f"Location must be a string, got {type(location).__name__}")
        if not location.strip():
            raise InvalidInputError("Cannot cache weather data for an empty location")
        try:
            # Stored as its own serialized round trip, detached from the caller's object
            stored = json.loads(json.dumps(data))
        except (TypeError, ValueError) as e:
            raise InvalidInputError(f"Weather data is not serializable: {e}") from e

        key = normalize_key(location)
        with self._lock.write_locked():
            now = self._clock()
            self._store.make_room(key, self._ttl, now)
            self._store.put(key, CacheEntry(location=location, data=stored, cached_at=now))
            logger.debug(f"Stored cache entry for {location!r} (key={key!r}, size={len(self._store)})")
            self._file.save(self._store.snapshot())

    def clear(self) -> None:
        """Empties the cache and persists the empty state."""
        with self._lock.write_locked():
            self._store.clear()
            logger.info("Cleared weather cache.")
            self._file.save(self._store.snapshot())

    def stats(self) -> CacheStats:
        with self._lock.read_locked():
            total = len(self._store)
            valid = self._store.count_valid(self._ttl, self._clock())
        return CacheStats(total=total, valid=valid, expired=total - valid)
