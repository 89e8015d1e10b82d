"""In-memory entry store with TTL validity and oldest-first eviction.

The store is not synchronized; CachingService guards every call with its
reader/writer lock.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Iterator, Optional, Tuple

from weathercli.domain.models.common import CacheKey, WeatherRecord

logger = logging.getLogger(__name__)

DEFAULT_MAX_ENTRIES = 100


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def _parse_timestamp(value: str) -> datetime:
    # Accept RFC 3339 "Z" suffixes on interpreters whose fromisoformat rejects them
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


@dataclass(frozen=True)
class CacheEntry:
    """One cached (location, record, timestamp) tuple. Never mutated."""
    location: str
    data: WeatherRecord
    cached_at: datetime

    def to_dict(self) -> Dict[str, Any]:
        return {
            "location": self.location,
            "data": self.data,
            "cached_at": self.cached_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "CacheEntry":
        """Rebuilds an entry from its serialized form.

        Raises:
            KeyError, TypeError, ValueError: If a field is missing or malformed.
        """
        if not isinstance(raw, dict):
            raise TypeError(f"entry must be an object, got {type(raw).__name__}")
        location = raw["location"]
        if not isinstance(location, str):
            raise TypeError("entry location must be a string")
        data = raw["data"]
        if data is None:
            raise ValueError("entry data is null")
        return cls(location=location, data=data, cached_at=_parse_timestamp(raw["cached_at"]))


def is_valid(entry: CacheEntry, ttl: timedelta, now: Optional[datetime] = None) -> bool:
    """True iff the entry is younger than the TTL. An entry exactly at the TTL is expired."""
    now = now or utc_now()
    return now - entry.cached_at < ttl


class EntryStore:
    """Mapping of normalized key to CacheEntry, bounded by max_entries."""

    def __init__(self, max_entries: int = DEFAULT_MAX_ENTRIES):
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.max_entries = max_entries
        self._entries: Dict[CacheKey, CacheEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def get(self, key: CacheKey) -> Optional[CacheEntry]:
        return self._entries.get(key)

    def put(self, key: CacheKey, entry: CacheEntry) -> None:
        """Inserts or replaces an entry. Capacity is the caller's concern (see make_room)."""
        self._entries[key] = entry

    def items(self) -> Iterator[Tuple[CacheKey, CacheEntry]]:
        return iter(list(self._entries.items()))

    def snapshot(self) -> Dict[CacheKey, CacheEntry]:
        return dict(self._entries)

    def replace_all(self, entries: Dict[CacheKey, CacheEntry]) -> None:
        self._entries = dict(entries)

    def clear(self) -> None:
        self._entries.clear()

    def cleanup_expired(self, ttl: timedelta, now: Optional[datetime] = None) -> int:
        """Removes every entry that is no longer valid. Returns how many were removed."""
        now = now or utc_now()
        expired = [k for k, v in self._entries.items() if not is_valid(v, ttl, now)]
        for key in expired:
            del self._entries[key]
        if expired:
            logger.debug(f"Purged {len(expired)} expired cache entries")
        return len(expired)

    def remove_oldest(self) -> Optional[CacheKey]:
        """Deletes the entry with the smallest cached_at, ties going to the smallest key.

        Linear scan; fine at the default capacity.
        """
        if not self._entries:
            return None
        oldest_key = min(self._entries, key=lambda k: (self._entries[k].cached_at, k))
        del self._entries[oldest_key]
        logger.debug(f"Evicted oldest cache entry: {oldest_key!r}")
        return oldest_key

    def make_room(self, key: CacheKey, ttl: timedelta, now: Optional[datetime] = None) -> None:
        """Prepares the store for inserting `key`: purge expired, then evict one if full.

        Replacing a key that is still present does not grow the store, so
        nothing is evicted for it.
        """
        self.cleanup_expired(ttl, now)
        if key not in self._entries and len(self._entries) >= self.max_entries:
            self.remove_oldest()

    def trim_to_capacity(self) -> int:
        """Evicts oldest entries until the store fits max_entries. Returns how many were evicted."""
        evicted = 0
        while len(self._entries) > self.max_entries:
            self.remove_oldest()
            evicted += 1
        return evicted

    def count_valid(self, ttl: timedelta, now: Optional[datetime] = None) -> int:
        now = now or utc_now()
        return sum(1 for entry in self._entries.values() if is_valid(entry, ttl, now))
