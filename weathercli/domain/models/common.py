"""Defines common Value Objects used across different domain contexts.

These objects represent simple values like locations, cache keys and raw
provider payloads, ensuring consistency across the layers.
"""

from typing import NewType, Dict, Any, NamedTuple

# === Location Context ===
LocationQuery = NewType("LocationQuery", str)   # Free-form location: city, zip, "lat,lon" or "auto:ip"

# === Provider Context ===
# Raw decoded JSON body returned by the weather provider. Treated as opaque
# by the cache and only interpreted by the report renderer.
WeatherRecord = NewType("WeatherRecord", Dict[str, Any])

# === Caching Context ===
CacheKey = NewType("CacheKey", str)             # Normalized lookup key for a cache entry

AUTO_IP_LOCATION = LocationQuery("auto:ip")


class CacheStats(NamedTuple):
    """Read-only snapshot of cache occupancy."""
    total: int
    valid: int
    expired: int
