import pytest
from datetime import datetime, timedelta, timezone

from weathercli.domain.models.common import CacheKey
from weathercli.infrastructure.cache.entry_store import CacheEntry, EntryStore, is_valid
from weathercli.infrastructure.cache.keys import normalize_key

TTL = timedelta(minutes=30)
T0 = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)


def make_entry(location: str, cached_at: datetime = T0) -> CacheEntry:
    return CacheEntry(location=location, data={"location": {"name": location}}, cached_at=cached_at)


@pytest.mark.parametrize("location", ["London", " london ", "LONDON", "\tLoNdOn\n"])
def test_normalize_key_equivalence(location):
    assert normalize_key(location) == "london"


def test_normalize_key_keeps_inner_whitespace():
    assert normalize_key("  New York ") == "new york"


def test_is_valid_strictly_before_ttl():
    entry = make_entry("London")
    assert is_valid(entry, TTL, T0)
    assert is_valid(entry, TTL, T0 + TTL - timedelta(microseconds=1))
    assert not is_valid(entry, TTL, T0 + TTL)
    assert not is_valid(entry, TTL, T0 + TTL + timedelta(seconds=1))


def test_entry_store_rejects_zero_capacity():
    with pytest.raises(ValueError):
        EntryStore(max_entries=0)


def test_cleanup_expired_removes_only_expired():
    store = EntryStore(max_entries=10)
    store.put(CacheKey("old"), make_entry("old", T0 - timedelta(hours=1)))
    store.put(CacheKey("fresh"), make_entry("fresh", T0))

    removed = store.cleanup_expired(TTL, T0 + timedelta(minutes=1))

    assert removed == 1
    assert "old" not in store
    assert "fresh" in store


def test_remove_oldest_breaks_ties_by_key():
    store = EntryStore(max_entries=10)
    store.put(CacheKey("b"), make_entry("b", T0))
    store.put(CacheKey("a"), make_entry("a", T0))
    store.put(CacheKey("c"), make_entry("c", T0 + timedelta(seconds=1)))

    assert store.remove_oldest() == "a"
    assert store.remove_oldest() == "b"
    assert store.remove_oldest() == "c"
    assert store.remove_oldest() is None


def test_make_room_evicts_one_when_full():
    store = EntryStore(max_entries=2)
    store.put(CacheKey("first"), make_entry("first", T0))
    store.put(CacheKey("second"), make_entry("second", T0 + timedelta(seconds=1)))

    store.make_room(CacheKey("third"), TTL, T0 + timedelta(seconds=2))

    assert len(store) == 1
    assert "first" not in store
    assert "second" in store


def test_make_room_prefers_purging_expired_over_evicting():
    store = EntryStore(max_entries=2)
    store.put(CacheKey("stale"), make_entry("stale", T0 - timedelta(hours=2)))
    store.put(CacheKey("recent"), make_entry("recent", T0))

    store.make_room(CacheKey("new"), TTL, T0 + timedelta(minutes=1))

    assert "stale" not in store
    assert "recent" in store


def test_make_room_does_not_evict_when_replacing_existing_key():
    store = EntryStore(max_entries=2)
    store.put(CacheKey("a"), make_entry("a", T0))
    store.put(CacheKey("b"), make_entry("b", T0 + timedelta(seconds=1)))

    store.make_room(CacheKey("a"), TTL, T0 + timedelta(seconds=2))

    assert len(store) == 2


def test_trim_to_capacity_drops_oldest():
    store = EntryStore(max_entries=3)
    for i in range(5):
        store.put(CacheKey(f"k{i}"), make_entry(f"k{i}", T0 + timedelta(seconds=i)))

    assert store.trim_to_capacity() == 2
    assert sorted(key for key, _ in store.items()) == ["k2", "k3", "k4"]


def test_count_valid():
    store = EntryStore(max_entries=10)
    store.put(CacheKey("old"), make_entry("old", T0 - timedelta(hours=1)))
    store.put(CacheKey("fresh"), make_entry("fresh", T0))

    assert store.count_valid(TTL, T0) == 1


def test_cache_entry_dict_round_trip():
    entry = make_entry("Paris")
    restored = CacheEntry.from_dict(entry.to_dict())
    assert restored == entry


def test_cache_entry_from_dict_accepts_z_suffix():
    entry = CacheEntry.from_dict({"location": "Oslo", "data": {}, "cached_at": "2024-01-15T12:00:00Z"})
    assert entry.cached_at == T0


@pytest.mark.parametrize("raw", [
    {"data": {}, "cached_at": "2024-01-15T12:00:00+00:00"},
    {"location": "Oslo", "cached_at": "2024-01-15T12:00:00+00:00"},
    {"location": "Oslo", "data": None, "cached_at": "2024-01-15T12:00:00+00:00"},
    {"location": "Oslo", "data": {}, "cached_at": "yesterday"},
    {"location": 42, "data": {}, "cached_at": "2024-01-15T12:00:00+00:00"},
])
def test_cache_entry_from_dict_rejects_malformed(raw):
    with pytest.raises((KeyError, TypeError, ValueError)):
        CacheEntry.from_dict(raw)
