"""Cache key normalization."""

from weathercli.domain.models.common import CacheKey


def normalize_key(location: str) -> CacheKey:
    """Maps a free-form location to its cache key.

    "London", " london " and "LONDON" share a key. Distinct places that
    normalize to the same string share a cache slot.
    """
    return CacheKey(location.strip().lower())
